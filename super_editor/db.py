import sqlite3
import os
from pathlib import Path
from typing import Dict, List, Optional

from super_editor.auth import ROLE_HIERARCHY, Role
from super_editor.capability_resolver import resolve_capabilities
from super_editor.domain import Actor

BASE_DIR = Path(__file__).resolve().parent
DB_PATH = Path(os.getenv("SUPER_EDITOR_DB_PATH", BASE_DIR / "super_editor.db"))

_SUBSCRIBER = ("read", "level_0")
_CONTRIBUTOR = _SUBSCRIBER + ("edit_posts", "delete_posts", "level_1")
_AUTHOR = _CONTRIBUTOR + (
    "upload_files",
    "publish_posts",
    "edit_published_posts",
    "delete_published_posts",
    "level_2",
)
_EDITOR = _AUTHOR + (
    "moderate_comments",
    "manage_categories",
    "manage_links",
    "unfiltered_html",
    "edit_others_posts",
    "edit_pages",
    "edit_others_pages",
    "edit_published_pages",
    "publish_pages",
    "delete_pages",
    "delete_others_pages",
    "delete_published_pages",
    "delete_others_posts",
    "delete_private_posts",
    "edit_private_posts",
    "read_private_posts",
    "delete_private_pages",
    "edit_private_pages",
    "read_private_pages",
    "level_7",
)
_ADMINISTRATOR = _EDITOR + (
    "switch_themes",
    "edit_themes",
    "activate_plugins",
    "edit_plugins",
    "edit_users",
    "edit_files",
    "manage_options",
    "import",
    "export",
    "list_users",
    "create_users",
    "delete_users",
    "promote_users",
    "remove_users",
    "edit_theme_options",
    "customize",
    "install_plugins",
    "update_plugins",
    "delete_plugins",
    "install_themes",
    "update_themes",
    "delete_themes",
    "update_core",
    "level_10",
)

# Baseline capabilities the host assigns to each role
DEFAULT_ROLE_CAPABILITIES = {
    Role.SUBSCRIBER: _SUBSCRIBER,
    Role.CONTRIBUTOR: _CONTRIBUTOR,
    Role.AUTHOR: _AUTHOR,
    Role.EDITOR: _EDITOR,
    Role.ADMINISTRATOR: _ADMINISTRATOR,
}

ROLE_NAMES = {
    Role.SUBSCRIBER: "Subscriber",
    Role.CONTRIBUTOR: "Contributor",
    Role.AUTHOR: "Author",
    Role.EDITOR: "Editor",
    Role.ADMINISTRATOR: "Administrator",
}


# SQLite INTEGER is a signed 64-bit value
MAX_ACTOR_ID = 2 ** 63 - 1
MIN_ACTOR_ID = -(2 ** 63)


def get_connection():
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    conn = get_connection()
    cur = conn.cursor()

    cur.execute("""
        CREATE TABLE IF NOT EXISTS roles (
            role TEXT PRIMARY KEY,
            display_name TEXT NOT NULL,
            rank INTEGER NOT NULL
        )
    """)

    cur.execute("""
        CREATE TABLE IF NOT EXISTS role_capabilities (
            role TEXT NOT NULL,
            capability TEXT NOT NULL,
            UNIQUE(role, capability)
        )
    """)

    cur.execute("""
        CREATE TABLE IF NOT EXISTS actors (
            actor_id INTEGER PRIMARY KEY,
            login TEXT NOT NULL UNIQUE,
            role TEXT NOT NULL
        )
    """)

    # Seed host defaults; existing rows are kept
    for rank, role in enumerate(ROLE_HIERARCHY):
        cur.execute(
            "INSERT OR IGNORE INTO roles (role, display_name, rank) VALUES (?, ?, ?)",
            (role.value, ROLE_NAMES[role], rank),
        )
        cur.executemany(
            "INSERT OR IGNORE INTO role_capabilities (role, capability) VALUES (?, ?)",
            [(role.value, cap) for cap in DEFAULT_ROLE_CAPABILITIES[role]],
        )

    conn.commit()
    conn.close()


def save_actor(actor_id: int, login: str, role: Role):
    conn = get_connection()
    cur = conn.cursor()

    cur.execute("""
        INSERT OR REPLACE INTO actors (actor_id, login, role)
        VALUES (?, ?, ?)
    """, (actor_id, login, role.value))

    conn.commit()
    conn.close()


def lookup_role(actor_id: int) -> Optional[Role]:
    """Role of an actor, or None when the actor does not exist."""
    if not MIN_ACTOR_ID <= actor_id <= MAX_ACTOR_ID:
        return None

    conn = get_connection()
    cur = conn.cursor()

    cur.execute("SELECT role FROM actors WHERE actor_id = ?", (actor_id,))
    row = cur.fetchone()
    conn.close()

    if not row:
        return None

    try:
        return Role(row["role"])
    except ValueError:
        return None


def load_baseline(role: Role) -> List[str]:
    conn = get_connection()
    cur = conn.cursor()

    cur.execute(
        "SELECT capability FROM role_capabilities WHERE role = ? ORDER BY capability",
        (role.value,),
    )
    rows = cur.fetchall()
    conn.close()

    return [row["capability"] for row in rows]


def load_roles() -> Dict[str, Dict[str, object]]:
    """All roles keyed by name, with display name and baseline capabilities."""
    conn = get_connection()
    cur = conn.cursor()

    cur.execute("SELECT role, display_name FROM roles ORDER BY rank")
    rows = cur.fetchall()
    conn.close()

    return {
        row["role"]: {
            "name": row["display_name"],
            "capabilities": {cap: True for cap in load_baseline(Role(row["role"]))},
        }
        for row in rows
    }


def load_actor(actor_id: int, registry=None) -> Optional[Actor]:
    if not MIN_ACTOR_ID <= actor_id <= MAX_ACTOR_ID:
        return None

    conn = get_connection()
    cur = conn.cursor()

    cur.execute("SELECT * FROM actors WHERE actor_id = ?", (actor_id,))
    row = cur.fetchone()
    conn.close()

    if not row:
        return None

    role = Role(row["role"])
    return Actor(
        id=row["actor_id"],
        login=row["login"],
        role=role,
        capabilities=resolve_capabilities(role, load_baseline(role), registry),
    )
