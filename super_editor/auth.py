from enum import Enum
from types import MappingProxyType
from typing import Optional


class Role(str, Enum):
    SUBSCRIBER = "subscriber"
    CONTRIBUTOR = "contributor"
    AUTHOR = "author"
    EDITOR = "editor"
    ADMINISTRATOR = "administrator"


# Lowest to highest
ROLE_HIERARCHY = (
    Role.SUBSCRIBER,
    Role.CONTRIBUTOR,
    Role.AUTHOR,
    Role.EDITOR,
    Role.ADMINISTRATOR,
)


class MetaCapability(str, Enum):
    EDIT_USER = "edit_user"
    REMOVE_USER = "remove_user"
    PROMOTE_USER = "promote_user"
    DELETE_USER = "delete_user"
    DELETE_USERS = "delete_users"

    @classmethod
    def parse(cls, name: str) -> Optional["MetaCapability"]:
        try:
            return cls(name)
        except ValueError:
            return None


# Canonical capability names
MANAGE_OPTIONS = "manage_options"
CUSTOMIZE = "customize"
DO_NOT_ALLOW = "do_not_allow"


# Extra capabilities granted on top of the host baseline, per role
BOOSTED_CAPABILITIES = MappingProxyType({
    Role.EDITOR: (
        "list_users",
        "create_users",
        "edit_users",
        "promote_users",
        "delete_users",
        "remove_users",
        "edit_theme_options",
    ),
    Role.AUTHOR: (
        "edit_pages",
        "edit_others_pages",
        "edit_published_pages",
        "publish_pages",
        "delete_pages",
        "delete_published_pages",
    ),
})

# Guarded actions that need an explicit target
TARGETED_META_CAPABILITIES = frozenset({
    MetaCapability.EDIT_USER,
    MetaCapability.REMOVE_USER,
    MetaCapability.PROMOTE_USER,
})

# Guarded actions where a missing target is left to other layers
DELETE_META_CAPABILITIES = frozenset({
    MetaCapability.DELETE_USER,
    MetaCapability.DELETE_USERS,
})

# Admin screens that only option managers may load
PROTECTED_ADMIN_PAGES = (
    "themes.php",
    "widgets.php",
    "customize.php",
    "tools.php",
)
