from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import os

from super_editor import db
from super_editor.admin import add_query_arg
from super_editor.auth import PROTECTED_ADMIN_PAGES
from super_editor.contracts import (
    AdminMenuResponse,
    AuthorizeRequest,
    AuthorizeResponse,
    CapabilitiesResponse,
)
from super_editor.domain import AccessDenied, AdminMenu, HostContext
from super_editor.pipeline import HookRegistry, authorize, build_registry, effective_actor


CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("SUPER_EDITOR_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
THEME_FEATURES = frozenset(
    feature.strip()
    for feature in os.getenv("SUPER_EDITOR_THEME_FEATURES", "custom-header,custom-background").split(",")
    if feature.strip()
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    db.init_db()
    yield


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def default_admin_menu(request_uri: str) -> AdminMenu:
    customize_url = add_query_arg("customize.php", {"return": request_uri})
    return AdminMenu({
        "index.php": ["index.php"],
        "edit.php": ["edit.php", "post-new.php"],
        "edit.php?post_type=page": ["edit.php?post_type=page", "post-new.php?post_type=page"],
        "themes.php": ["themes.php", customize_url, "widgets.php", "nav-menus.php"],
        "users.php": ["users.php", "user-new.php", "profile.php"],
        "tools.php": ["tools.php", "import.php", "export.php"],
        "options-general.php": ["options-general.php"],
    })


def host_for(actor_id: int, request_uri: str = "/wp-admin/"):
    """Load the actor and wire the capability pipeline for this request."""
    # Baseline only, the request pipeline grants the rest
    actor = db.load_actor(actor_id, HookRegistry())
    if not actor:
        raise HTTPException(status_code=404, detail="actor not found")

    host = HostContext(
        actor=actor,
        role_lookup=db.lookup_role,
        request_uri=request_uri,
        theme_features=THEME_FEATURES,
    )
    registry = build_registry(host)
    host.actor = effective_actor(actor, registry)
    return host, registry


# END points

@app.get("/actors/{actor_id}/capabilities", response_model=CapabilitiesResponse)
def get_capabilities(actor_id: int):
    host, _ = host_for(actor_id)
    actor = host.actor

    return CapabilitiesResponse(
        actor_id=actor.id,
        role=actor.role.value,
        capabilities=dict(actor.capabilities),
    )


@app.post("/authorize", response_model=AuthorizeResponse)
def authorize_action(req: AuthorizeRequest):
    host, registry = host_for(req.actor_id)
    decision = authorize(host.actor, req.capability, req.args, registry)

    if not decision.allowed:
        raise HTTPException(status_code=403, detail=f"actor lacks {req.capability}")

    return AuthorizeResponse(
        actor_id=req.actor_id,
        capability=req.capability,
        allowed=True,
        capabilities=decision.capabilities,
    )


@app.get("/actors/{actor_id}/editable-roles")
def get_editable_roles(actor_id: int):
    host, registry = host_for(actor_id)
    return registry.apply_filters("editable_roles", db.load_roles())


@app.get("/actors/{actor_id}/admin-menu", response_model=AdminMenuResponse)
def get_admin_menu(actor_id: int, request_uri: str = "/wp-admin/"):
    host, registry = host_for(actor_id, request_uri)
    menu = default_admin_menu(request_uri)
    registry.do_action("admin_menu", menu)

    return AdminMenuResponse(actor_id=actor_id, menu=menu.to_dict())


@app.get("/admin/{page}")
def load_admin_page(page: str, actor_id: int):
    host, registry = host_for(actor_id, f"/wp-admin/{page}")

    try:
        registry.do_action(f"load-{page}")
    except AccessDenied as e:
        raise HTTPException(status_code=403, detail=e.message)

    return {
        "page": page,
        "actor_id": actor_id,
        "protected": page in PROTECTED_ADMIN_PAGES,
    }
