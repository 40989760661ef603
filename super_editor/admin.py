import gettext
import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence
from urllib.parse import urlencode

from super_editor.auth import CUSTOMIZE, MANAGE_OPTIONS, MetaCapability, Role
from super_editor.domain import AccessDenied, AdminMenu, HostContext

logger = logging.getLogger(__name__)

_ = gettext.translation("super-editor", fallback=True).gettext

INSUFFICIENT_PERMISSIONS = "You do not have sufficient permissions to access this page."


def filter_editable_roles(
    roles: Mapping[str, Any],
    *,
    current_actor_can: Callable[[str], bool],
) -> Dict[str, Any]:
    """Hide the administrator role from role pickers of non option managers."""
    editable = dict(roles)
    if Role.ADMINISTRATOR.value in editable and not current_actor_can(MANAGE_OPTIONS):
        del editable[Role.ADMINISTRATOR.value]
    return editable


def add_query_arg(url: str, params: Mapping[str, str]) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params)}"


def customize_submenu_slugs(host: HostContext) -> List[str]:
    slugs = ["customize.php"]
    url = add_query_arg("customize.php", {"return": host.request_uri})
    slugs.append(url)

    can_customize = host.current_actor_can(CUSTOMIZE)
    if host.theme_supports("custom-header") and can_customize:
        slugs.append(add_query_arg(url, {"autofocus[control]": "header_image"}))
        slugs.append("custom-header")
    if host.theme_supports("custom-background") and can_customize:
        slugs.append(add_query_arg(url, {"autofocus[control]": "background_image"}))
        slugs.append("custom-background")

    return slugs


def remove_appearance_submenu_pages(menu: AdminMenu, host: HostContext) -> None:
    if not (host.current_actor_can(Role.AUTHOR.value) or host.current_actor_can(Role.EDITOR.value)):
        return

    # Theme selection
    menu.remove_submenu_page("themes.php", "themes.php")

    for slug in customize_submenu_slugs(host):
        menu.remove_submenu_page("themes.php", slug)


# TODO: plugins that add their own pages under tools.php lose them too
def remove_tools_page(menu: AdminMenu, host: HostContext) -> None:
    if not host.current_actor_can(MANAGE_OPTIONS):
        menu.remove_menu_page("tools.php")


def maybe_die(host: HostContext) -> None:
    if not host.current_actor_can(MANAGE_OPTIONS):
        logger.info(f"Blocked admin page {host.request_uri} for actor {host.actor.id}")
        raise AccessDenied(_(INSUFFICIENT_PERMISSIONS))


def map_primitive_caps(requested_cap: str, actor_id: int, args: Sequence[Any] = ()) -> List[str]:
    """Primitive capabilities the host requires before any filter runs."""
    meta = MetaCapability.parse(requested_cap)

    if meta is MetaCapability.EDIT_USER and args and args[0] == actor_id:
        # Own profile
        return []
    if meta is MetaCapability.EDIT_USER or requested_cap == "edit_users":
        return ["edit_users"]
    if meta is MetaCapability.REMOVE_USER:
        return ["remove_users"]
    if meta is MetaCapability.PROMOTE_USER:
        return ["promote_users"]
    if meta in (MetaCapability.DELETE_USER, MetaCapability.DELETE_USERS):
        return ["delete_users"]

    return [requested_cap]
