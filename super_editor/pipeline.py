import logging
from dataclasses import dataclass, replace
from functools import partial
from typing import Any, Callable, Dict, List, Sequence, Tuple

from super_editor.admin import (
    filter_editable_roles,
    map_primitive_caps,
    maybe_die,
    remove_appearance_submenu_pages,
    remove_tools_page,
)
from super_editor.auth import PROTECTED_ADMIN_PAGES
from super_editor.capability_resolver import boost_author, boost_editor
from super_editor.domain import Actor, HostContext
from super_editor.guard import is_denied, map_meta_capability

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


class HookRegistry:
    """
    Ordered filters and actions per event name.

    Callbacks run by ascending priority, then in registration order.
    """

    def __init__(self):
        self._hooks: Dict[str, List[Tuple[int, int, Callable]]] = {}
        self._sequence = 0

    def _add(self, event: str, callback: Callable, priority: int) -> None:
        self._sequence += 1
        hooks = self._hooks.setdefault(event, [])
        hooks.append((priority, self._sequence, callback))
        hooks.sort(key=lambda hook: (hook[0], hook[1]))

    def add_filter(self, event: str, callback: Callable, priority: int = DEFAULT_PRIORITY) -> None:
        self._add(event, callback, priority)

    def add_action(self, event: str, callback: Callable, priority: int = DEFAULT_PRIORITY) -> None:
        self._add(event, callback, priority)

    def has_hook(self, event: str) -> bool:
        return bool(self._hooks.get(event))

    def apply_filters(self, event: str, value: Any, *args: Any) -> Any:
        for _, _, callback in self._hooks.get(event, ()):
            value = callback(value, *args)
        return value

    def do_action(self, event: str, *args: Any) -> None:
        for _, _, callback in self._hooks.get(event, ()):
            callback(*args)


def build_registry(host: HostContext, is_admin: bool = True) -> HookRegistry:
    """Wire the capability overrides for one request."""
    registry = HookRegistry()
    if not is_admin:
        return registry

    # Editors manage users and theme options, authors manage pages
    registry.add_filter("user_has_cap", boost_editor)
    registry.add_filter("user_has_cap", boost_author)

    registry.add_filter(
        "editable_roles",
        partial(filter_editable_roles, current_actor_can=host.current_actor_can),
    )

    registry.add_filter(
        "map_meta_cap",
        partial(
            map_meta_capability,
            role_lookup=host.role_lookup,
            current_actor_can=host.current_actor_can,
        ),
    )

    registry.add_action("admin_menu", partial(remove_appearance_submenu_pages, host=host))
    registry.add_action("admin_menu", partial(remove_tools_page, host=host))

    for page in PROTECTED_ADMIN_PAGES:
        registry.add_action(f"load-{page}", partial(maybe_die, host))

    return registry


def effective_actor(actor: Actor, registry: HookRegistry) -> Actor:
    """The actor with its capabilities run through the ``user_has_cap`` filters."""
    allcaps = registry.apply_filters("user_has_cap", dict(actor.capabilities))
    return replace(actor, capabilities=allcaps)


@dataclass
class Decision:
    allowed: bool
    capabilities: List[str]


def authorize(
    actor: Actor,
    requested_cap: str,
    args: Sequence[Any],
    registry: HookRegistry,
) -> Decision:
    caps = map_primitive_caps(requested_cap, actor.id, args)
    caps = registry.apply_filters("map_meta_cap", caps, requested_cap, actor.id, list(args))

    # The denial marker wins over any grant
    if is_denied(caps):
        return Decision(allowed=False, capabilities=caps)

    allowed = all(actor.can(cap) for cap in caps)
    if not allowed:
        logger.info(f"Actor {actor.id} lacks {requested_cap}")
    return Decision(allowed=allowed, capabilities=caps)
