import logging
from typing import Dict, Iterable, Mapping, Optional

from super_editor.auth import BOOSTED_CAPABILITIES, Role

logger = logging.getLogger(__name__)


def flagged_roles(allcaps: Mapping[str, bool]) -> set[Role]:
    """Roles the host marks as effective by an inline ``<role>: True`` flag."""
    return {role for role in Role if allcaps.get(role.value) is True}


def boost_capabilities(
    allcaps: Mapping[str, bool],
    role: Optional[Role] = None,
) -> Dict[str, bool]:
    """
    Grant the fixed extra capabilities of a role on top of ``allcaps``.

    With an explicit ``role`` only that role's additions apply; otherwise
    every role flagged true in ``allcaps`` is boosted. Additions are forced
    to True, nothing is ever set to False or removed, and the input mapping
    is left untouched.
    """
    roles = {role} if role is not None else flagged_roles(allcaps)
    boosted = dict(allcaps)

    for matched in roles:
        additions = BOOSTED_CAPABILITIES.get(matched, ())
        for cap in additions:
            boosted[cap] = True
        if additions:
            logger.debug(f"Boosted {matched.value} with {len(additions)} capabilities")

    return boosted


def boost_editor(allcaps: Mapping[str, bool]) -> Dict[str, bool]:
    if allcaps.get(Role.EDITOR.value) is not True:
        return dict(allcaps)
    return boost_capabilities(allcaps, Role.EDITOR)


def boost_author(allcaps: Mapping[str, bool]) -> Dict[str, bool]:
    if allcaps.get(Role.AUTHOR.value) is not True:
        return dict(allcaps)
    return boost_capabilities(allcaps, Role.AUTHOR)


def resolve_capabilities(role: Role, baseline: Iterable[str], registry=None) -> Dict[str, bool]:
    """
    Server-authoritative capability resolution.
    Host baseline plus the role name as an inline flag, then the
    ``user_has_cap`` filters (or a plain boost when no pipeline is wired).
    """
    allcaps = {cap: True for cap in baseline}
    allcaps[role.value] = True

    if registry is None:
        return boost_capabilities(allcaps)
    return registry.apply_filters("user_has_cap", allcaps)
