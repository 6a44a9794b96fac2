"""Helpers shared by handler modules (underscore-prefixed, so not auto-imported)."""

from __future__ import annotations

from typing import Iterable, List

from ...errors import UnknownItemError, UnknownRoleError, ValidationError
from ...kinks import Catalog
from ..context import CommandContext


def quote(value: object) -> str:
    return f'"{value}"'


def require_catalog(ctx: CommandContext) -> Catalog:
    """Return the current catalog, or fail if the kink list has not loaded."""
    holder = ctx.services.catalog
    if not holder.loaded:
        raise ValidationError("The kink list hasn't loaded yet. Try again in a minute.")
    return holder.catalog


def resolve_guild_role(ctx: CommandContext, token: str) -> str:
    """Resolve ``token`` to a role id that exists in the invoking guild."""
    scope = ctx.require_scope()
    role = ctx.services.roles.resolve_role_token(token)
    if not role.isdigit() or not scope.role_name(role):
        raise UnknownRoleError(token)
    return role


def resolve_item_ids(
    ctx: CommandContext, tokens: Iterable[str], known: Iterable[str] = ()
) -> List[str]:
    """
    Resolve kink names or ids to catalog ids.

    Ids listed in ``known`` are accepted as-is even if the catalog no longer
    has them, so stale mappings can still be cleaned up.
    """
    catalog = ctx.services.catalog.catalog
    known = set(known)
    ids: List[str] = []
    for token in tokens:
        item = catalog.find_item(token)
        if item is not None:
            ids.append(item.id)
        elif token in known:
            ids.append(token)
        else:
            raise UnknownItemError(token)
    return list(dict.fromkeys(ids))
