from __future__ import annotations

from ...errors import ValidationError
from .. import ParamSpec, command, describe
from ..context import CommandContext
from ..responses import RichResponse

INTRO = (
    "FListBot can retrieve your F-List page and assign you roles based on "
    "the things you like. Picking a tier (fave, yes, maybe, no) includes "
    "every tier before it; the default is yes."
)


@command(
    "help",
    aliases=("halp", "ayuda", "?"),
    params=(ParamSpec("command", required=False),),
    summary="list commands, or show usage for one command.",
)
async def help_command(ctx: CommandContext) -> RichResponse | str:
    """Describe registered commands, splitting out the admin-only ones."""
    registry = ctx.services.registry
    prefix = ctx.services.prefix

    name = ctx.params.get("command")
    if name:
        descriptor = registry.lookup(name)
        if descriptor is None:
            raise ValidationError(f'Unknown command: "{name}"')
        return describe(descriptor, prefix)

    general = [describe(d, prefix) for d in registry.all() if not d.requires_elevated_authorization]
    admin = [describe(d, prefix) for d in registry.all() if d.requires_elevated_authorization]

    sections = [INTRO, "**__Usage__**", *general]
    if admin:
        sections += ["", "**__Admin-Only__**", *admin]
    return RichResponse(title="FListBot Help", description="\n".join(sections))
