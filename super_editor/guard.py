import logging
from typing import Any, Callable, List, Optional, Sequence

from super_editor.auth import (
    DELETE_META_CAPABILITIES,
    DO_NOT_ALLOW,
    MANAGE_OPTIONS,
    TARGETED_META_CAPABILITIES,
    MetaCapability,
    Role,
)
from super_editor.domain import RoleLookup

logger = logging.getLogger(__name__)


def absint(value: Any) -> int:
    """Non-negative int for an actor ID; anything unparseable becomes 0."""
    try:
        return abs(int(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _target_of(args: Sequence[Any]) -> Optional[Any]:
    if not args:
        return None
    return args[0]


def _is_protected_target(
    target: Any,
    role_lookup: RoleLookup,
    current_actor_can: Callable[[str], bool],
) -> bool:
    target_id = absint(target)
    role = role_lookup(target_id)

    if role is None:
        # Unresolvable targets are treated as non-administrators (fail open)
        logger.warning(f"Target actor {target!r} could not be resolved, allowing")
        return False

    return role == Role.ADMINISTRATOR and not current_actor_can(MANAGE_OPTIONS)


def map_meta_capability(
    caps: Sequence[str],
    requested_cap: str,
    actor_id: int,
    args: Sequence[Any] = (),
    *,
    role_lookup: RoleLookup,
    current_actor_can: Callable[[str], bool],
) -> List[str]:
    """
    Deny mutations of administrator accounts by actors without ``manage_options``.

    Returns ``caps`` plus at most one ``do_not_allow`` marker. Only the five
    user-management meta capabilities are inspected; everything else passes
    through unchanged.
    """
    mapped = list(caps)
    meta = MetaCapability.parse(requested_cap)
    if meta is None:
        return mapped

    target = _target_of(args)

    if meta in TARGETED_META_CAPABILITIES:
        if target is not None and target == actor_id:
            return mapped
        if target is None:
            logger.info(f"Denied {meta.value} for actor {actor_id}: no target given")
            mapped.append(DO_NOT_ALLOW)
            return mapped

    elif meta in DELETE_META_CAPABILITIES:
        if target is None:
            return mapped

    if _is_protected_target(target, role_lookup, current_actor_can):
        logger.info(f"Denied {meta.value} on administrator {target!r} for actor {actor_id}")
        mapped.append(DO_NOT_ALLOW)

    return mapped


def is_denied(caps: Sequence[str]) -> bool:
    return DO_NOT_ALLOW in caps
