"""
Kink -> role resolution.

Pure functions over a fetched :class:`~flist_bot.kinks.Profile` and a kink map
snapshot. A role qualifies when at least one of its kinks is tagged on the
profile at or above the threshold tier; the qualifying kinks are kept so the
caller can explain the match.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Tuple

from ..kinks import Profile, Tier

DEFAULT_THRESHOLD = Tier.YES


def resolve_roles(
    profile: Profile,
    mapping: Mapping[str, Sequence[str]],
    tier_threshold: Tier = DEFAULT_THRESHOLD,
) -> Dict[str, List[str]]:
    """
    Return ``{role: [matched kink ids]}`` for every qualifying role.

    Roles and kinks keep the order of ``mapping``. Untagged kinks and tiers
    the API reports in an unknown spelling never qualify.
    """
    matches: Dict[str, List[str]] = {}
    for role, item_ids in mapping.items():
        matched = []
        for item_id in item_ids:
            tier = profile.tier_of(item_id)
            if tier is not None and tier_threshold.includes(tier):
                matched.append(str(item_id))
        if matched:
            matches[str(role)] = matched
    return matches


def select_roles(
    matches: Mapping[str, Sequence[str]], default_role: str | None
) -> Tuple[List[str], bool]:
    """
    Apply the fallback policy to a resolution result.

    Returns ``(roles, used_default)``. With no matches the default role is
    used when configured; otherwise the role list is empty.
    """
    if matches:
        return list(matches), False
    if default_role:
        return [default_role], True
    return [], False


__all__ = ["DEFAULT_THRESHOLD", "resolve_roles", "select_roles"]
