from __future__ import annotations

from typing import List, Sequence, Tuple

from .. import ParamSpec, command
from ..context import CommandContext
from ._common import quote


def _roles_for_tokens(ctx: CommandContext, tokens: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Map role ids, aliases, and kink names to role ids.

    Returns ``(roles, unmatched_tokens)``. A kink name expands to every role
    it is linked to.
    """
    store = ctx.services.roles
    catalog = ctx.services.catalog.catalog
    roles: List[str] = []
    unmatched: List[str] = []
    for token in tokens:
        role = store.resolve_role_token(token)
        if role.isdigit():
            roles.append(role)
            continue
        item = catalog.find_item(token)
        linked = store.roles_for_item(item.id) if item else []
        if linked:
            roles.extend(linked)
        else:
            unmatched.append(token)
    return list(dict.fromkeys(roles)), unmatched


def _unmatched_note(unmatched: Sequence[str]) -> str:
    if not unmatched:
        return ""
    return "\nI couldn't match: " + ", ".join(quote(t) for t in unmatched)


@command(
    "ilike",
    aliases=("ilove", "addme", "roleme"),
    guild_only=True,
    params=(ParamSpec("roles or kinks", variadic=True, csv=True),),
    summary="give yourself the roles for these roles, aliases, or kinks.",
)
async def ilike(ctx: CommandContext) -> str:
    scope = ctx.require_scope()
    roles, unmatched = _roles_for_tokens(ctx, ctx.params["roles or kinks"])
    applied = await scope.assign_roles(ctx.actor_id, roles) if roles else []
    if not applied:
        return "I couldn't find any roles to give you." + _unmatched_note(unmatched)
    return "I have assigned you some roles based on your interests." + _unmatched_note(unmatched)


@command(
    "idislike",
    aliases=("ihate", "removeme", "unroleme"),
    guild_only=True,
    params=(ParamSpec("roles or kinks", variadic=True, csv=True),),
    summary="remove the roles for these roles, aliases, or kinks from yourself.",
)
async def idislike(ctx: CommandContext) -> str:
    scope = ctx.require_scope()
    roles, unmatched = _roles_for_tokens(ctx, ctx.params["roles or kinks"])
    removed = await scope.remove_roles(ctx.actor_id, roles) if roles else []
    if not removed:
        return "I couldn't find any roles to remove." + _unmatched_note(unmatched)
    return "I have removed some of your roles that you didn't like." + _unmatched_note(unmatched)
