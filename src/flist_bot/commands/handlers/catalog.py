from __future__ import annotations

from ...errors import UnknownItemError, ValidationError
from .. import ParamSpec, command
from ..context import CommandContext
from ..responses import EmbedField, RichResponse
from ._common import quote, require_catalog


@command(
    "kinks",
    aliases=("groups",),
    params=(ParamSpec("group", required=False, variadic=True),),
    title="F-List",
    summary="list kink groups, or the kinks in one group.",
)
async def kinks(ctx: CommandContext) -> RichResponse:
    catalog = require_catalog(ctx)
    name = ctx.params.get("group")
    if name:
        group = catalog.find_group(name)
        if group is None:
            raise ValidationError(f"Unknown kink group: {quote(name)}")
        return RichResponse(
            title=f"Kink Group: {group.name}",
            description="\n".join(str(item) for item in group.items),
        )
    return RichResponse(
        title="Kink Groups",
        description="\n".join(str(group) for group in catalog.groups.values()),
    )


@command(
    "kink",
    params=(ParamSpec("kink", variadic=True),),
    title="F-List",
    summary="show the description of a kink.",
)
async def kink(ctx: CommandContext) -> RichResponse:
    catalog = require_catalog(ctx)
    name = ctx.params["kink"]
    item = catalog.find_item(name)
    if item is None:
        raise UnknownItemError(name)

    fields = [EmbedField("ID", item.id)]
    group = catalog.group_of(item.id)
    if group is not None:
        fields.append(EmbedField("Group", group.name))
    roles = ctx.services.roles.roles_for_item(item.id)
    if roles:
        fields.append(EmbedField("Roles", ", ".join(ctx.role_label(r) for r in roles)))
    return RichResponse(
        title=f"Kink: {item.name}",
        description=item.description or "*No description.*",
        fields=fields,
    )


@command(
    "search",
    aliases=("find", "lookup"),
    params=(ParamSpec("terms", variadic=True, csv=True),),
    title="F-List",
    summary="find kinks whose names contain any of the terms.",
)
async def search(ctx: CommandContext) -> RichResponse | str:
    catalog = require_catalog(ctx)
    terms = ctx.params["terms"]
    results = catalog.search(terms)
    if not results:
        return "No kinks matched your query."
    return RichResponse(
        title="Kinks matching " + ", ".join(quote(t) for t in terms),
        description="\n".join(str(item) for item in results),
    )
