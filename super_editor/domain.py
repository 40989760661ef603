from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional

from super_editor.auth import Role


class AccessDenied(Exception):
    """Raised when a request must stop before any further processing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Actor:
    id: int
    login: str
    role: Role
    capabilities: Mapping[str, bool] = field(default_factory=dict)

    def can(self, capability: str) -> bool:
        # Only an explicit True grants
        return self.capabilities.get(capability) is True


RoleLookup = Callable[[int], Optional[Role]]


@dataclass
class HostContext:
    """
    Everything the host hands to the engine for a single request.
    Built per request and discarded afterwards.
    """

    actor: Actor
    role_lookup: RoleLookup
    request_uri: str = "/wp-admin/"
    theme_features: frozenset = frozenset()

    def current_actor_can(self, capability: str) -> bool:
        return self.actor.can(capability)

    def theme_supports(self, feature: str) -> bool:
        return feature in self.theme_features


class AdminMenu:
    def __init__(self, pages: Optional[Dict[str, List[str]]] = None):
        self.pages: Dict[str, List[str]] = {
            parent: list(children) for parent, children in (pages or {}).items()
        }

    def remove_menu_page(self, slug: str) -> bool:
        return self.pages.pop(slug, None) is not None

    def remove_submenu_page(self, parent: str, slug: str) -> bool:
        children = self.pages.get(parent)
        if not children or slug not in children:
            return False
        children.remove(slug)
        return True

    def to_dict(self) -> Dict[str, List[str]]:
        return {parent: list(children) for parent, children in self.pages.items()}
