"""
Profile-driven role assignment.

``get`` fetches a character, resolves the kink map against it, and grants the
matching roles (or the default role). ``diagnose`` runs the same resolution
without touching roles and DMs the result to the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from ...errors import AuthorizationError, ValidationError
from ...kinks import Profile, Tier
from ...roles import DEFAULT_THRESHOLD, resolve_roles, select_roles
from .. import ParamSpec, command
from ..context import CommandContext
from ..responses import Response, RichResponse, TextResponse

logger = logging.getLogger(__name__)

TIER_CHOICES = ("fave", "favorite", "yes", "maybe", "no")

_PROFILE_PARAMS = (
    ParamSpec("character", variadic=True),
    ParamSpec("tier", required=False, choices=TIER_CHOICES),
)


async def _resolve(ctx: CommandContext) -> Tuple[Profile, Dict[str, List[str]], Tier]:
    tier = Tier.parse(ctx.params.get("tier"))
    if tier is None:
        tier = DEFAULT_THRESHOLD
    profile = await ctx.services.flist.fetch_profile(ctx.params["character"])
    matches = resolve_roles(profile, ctx.services.roles.mapping, tier)
    logger.info(
        "Resolved %d role(s) for %s at tier %s",
        len(matches),
        profile.identifier,
        tier.label,
    )
    return profile, matches, tier


@command(
    "get",
    aliases=("do",),
    guild_only=True,
    params=(*_PROFILE_PARAMS, ParamSpec("member", required=False, keyword="for")),
    summary="look up a character's kinks and get the roles linked to them. "
    "Admins may add `for @user` to assign someone else.",
)
async def get_roles(ctx: CommandContext) -> str:
    scope = ctx.require_scope()

    member_id = ctx.actor_id
    target = ctx.params.get("member")
    if target:
        if not ctx.is_privileged:
            raise AuthorizationError(f"actor {ctx.actor_id} may not assign roles for others")
        member_id = scope.find_member(target)
        if member_id is None:
            raise ValidationError(f'Invalid user: "{target}"')

    _, matches, _ = await _resolve(ctx)
    roles, used_default = select_roles(matches, ctx.services.roles.default_role)
    if not roles:
        return "Hmm, I don't recognize any kinks you have."

    applied = await scope.assign_roles(member_id, roles)
    is_self = member_id == ctx.actor_id
    whom = "you" if is_self else f"<@{member_id}>"
    owner = "your" if is_self else "their"
    if not applied:
        return "None of the matching roles exist in this server."
    if used_default:
        return f"I assigned {whom} the default role."
    names = ", ".join(ctx.role_label(role) for role in applied)
    return f"I assigned {whom} some roles based on {owner} F-List likes: {names}"


@command(
    "diagnose",
    aliases=("test", "try"),
    params=_PROFILE_PARAMS,
    title="F-List Diagnosis",
    summary="DM you the roles a character would get, without assigning them.",
)
async def diagnose(ctx: CommandContext) -> List[Response]:
    profile, matches, tier = await _resolve(ctx)
    catalog = ctx.services.catalog.catalog

    lines: List[str] = []
    for role, item_ids in matches.items():
        lines.append(f"**__{ctx.role_label(role)}__**")
        lines.extend(catalog.label(item_id) for item_id in item_ids)
    if not lines:
        default_role = ctx.services.roles.default_role
        if default_role:
            lines.append(f"No kinks matched; the default role **{ctx.role_label(default_role)}** would be given.")
        else:
            lines.append("No kinks matched and no default role is set.")

    report = RichResponse(
        title=f"Applicable roles for {profile.identifier} ({tier.name.lower()} or better)",
        description="\n".join(lines),
        private=True,
    )
    return [report, TextResponse("I sent you a diagnosis of that F-List.")]
