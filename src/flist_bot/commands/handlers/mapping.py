"""Admin commands that edit or show the kink -> role map."""

from __future__ import annotations

from .. import ParamSpec, command
from ..context import CommandContext
from ..responses import EmbedField, RichResponse
from ._common import quote, require_catalog, resolve_guild_role, resolve_item_ids

_MAP_PARAMS = (
    ParamSpec("role"),
    ParamSpec("kinks", variadic=True, csv=True),
)


@command(
    "assign",
    aliases=("link", "map"),
    admin=True,
    guild_only=True,
    params=_MAP_PARAMS,
    summary="link kinks to a role.",
)
async def assign(ctx: CommandContext) -> str:
    require_catalog(ctx)
    role = resolve_guild_role(ctx, ctx.params["role"])
    item_ids = resolve_item_ids(ctx, ctx.params["kinks"])
    update = ctx.services.roles.add_items_to_role(role, item_ids)

    message = "Kink map successfully updated."
    if update.skipped:
        catalog = ctx.services.catalog.catalog
        message += "\nAlready linked: " + ", ".join(catalog.label(i) for i in update.skipped)
    return message


@command(
    "unassign",
    aliases=("unlink", "unmap"),
    admin=True,
    guild_only=True,
    params=_MAP_PARAMS,
    summary="unlink kinks from a role.",
)
async def unassign(ctx: CommandContext) -> str:
    store = ctx.services.roles
    role = store.resolve_role_token(ctx.params["role"])
    if role not in store.mapping:
        role = resolve_guild_role(ctx, ctx.params["role"])
    item_ids = resolve_item_ids(ctx, ctx.params["kinks"], known=store.items_for_role(role))
    update = store.remove_items_from_role(role, item_ids)

    message = "Kink map successfully updated."
    if update.skipped:
        message += "\nNot linked: " + ", ".join(update.skipped)
    return message


@command(
    "assigned",
    aliases=("linked", "mapped"),
    admin=True,
    guild_only=True,
    params=(ParamSpec("role", required=False, variadic=True),),
    title="F-List",
    summary="show the kinks linked to a role, or to every role.",
)
async def assigned(ctx: CommandContext) -> RichResponse | str:
    store = ctx.services.roles
    catalog = ctx.services.catalog.catalog
    role_token = ctx.params.get("role")

    if role_token:
        role = store.resolve_role_token(role_token)
        item_ids = store.items_for_role(role)
        if not item_ids:
            resolve_guild_role(ctx, role_token)
            return f"There are no kinks assigned to {quote(ctx.role_label(role))}"
        return RichResponse(
            title=f"Kinks assigned to {quote(ctx.role_label(role))}",
            description="\n".join(catalog.label(i) for i in item_ids),
        )

    mapping = store.mapping
    if not mapping:
        return "No kinks are assigned to any role."
    return RichResponse(
        title="Assigned Kinks",
        fields=[
            EmbedField(ctx.role_label(role), "\n".join(catalog.label(i) for i in item_ids))
            for role, item_ids in mapping.items()
        ],
    )
