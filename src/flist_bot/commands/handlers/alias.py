from __future__ import annotations

from ...errors import UsageError
from .. import ParamSpec, command
from ..context import CommandContext
from ..responses import RichResponse
from ._common import quote, resolve_guild_role

ADD_ACTIONS = ("add", "set")
REMOVE_ACTIONS = ("remove", "clear")
VIEW_ACTIONS = ("view", "list")


def _view(ctx: CommandContext, role_token: str | None) -> RichResponse | str:
    store = ctx.services.roles
    if role_token:
        role = store.resolve_role_token(role_token)
        label = ctx.role_label(role)
        names = store.aliases_for(role)
        if not names:
            return f"The role {quote(label)} does not have any aliases set."
        return RichResponse(title=f"Aliases for {quote(label)}", description="\n".join(names))

    table = store.aliases
    if not table:
        return "No role aliases are set."
    return RichResponse(
        title="All Role Aliases",
        description="\n".join(
            f"{ctx.role_label(role)} => {', '.join(names)}" for role, names in table.items()
        ),
    )


@command(
    "alias",
    aliases=("aliases",),
    admin=True,
    guild_only=True,
    params=(
        ParamSpec("action", choices=ADD_ACTIONS + REMOVE_ACTIONS + VIEW_ACTIONS),
        ParamSpec("role", required=False),
        ParamSpec("aliases", required=False, variadic=True, csv=True),
    ),
    title="F-List",
    summary="add, remove, or view role aliases.",
)
async def alias(ctx: CommandContext) -> RichResponse | str:
    action = ctx.params["action"]
    role_token = ctx.params.get("role")
    if action in VIEW_ACTIONS:
        return _view(ctx, role_token)

    if not role_token:
        raise UsageError("Missing parameter: role")
    aliases = ctx.params.get("aliases") or []
    if not aliases:
        raise UsageError("Missing parameter: aliases")

    store = ctx.services.roles
    if action in ADD_ACTIONS:
        role = resolve_guild_role(ctx, role_token)
        store.add_aliases(role, aliases)
    else:
        # roles deleted from the guild can still have their aliases removed
        role = store.resolve_role_token(role_token)
        if role not in store.aliases:
            role = resolve_guild_role(ctx, role_token)
        store.remove_aliases(role, aliases)
    return f"Aliases updated for role {quote(ctx.role_label(role))}"
