from __future__ import annotations

import asyncio
import logging

from ...errors import UsageError
from .. import ParamSpec, command
from ..context import CommandContext
from ._common import resolve_guild_role

logger = logging.getLogger(__name__)

CLEAR_TOKENS = ("none", "clear", "off")
DEFAULT_CLEANUP_COUNT = 50
MAX_CLEANUP_COUNT = 500

# Give the farewell message time to reach Discord before the client closes
SHUTDOWN_DELAY = 1.0

# Strong references to scheduled shutdowns until they finish
_shutdown_tasks: set[asyncio.Task] = set()


@command(
    "default",
    admin=True,
    guild_only=True,
    params=(ParamSpec("role", required=False, variadic=True),),
    summary="show or set the role given when no kinks match (`none` clears it).",
)
async def default(ctx: CommandContext) -> str:
    store = ctx.services.roles
    token = ctx.params.get("role")
    if token:
        if token.lower() in CLEAR_TOKENS:
            store.set_default_role(None)
        else:
            store.set_default_role(resolve_guild_role(ctx, token))

    role = store.default_role
    name = ctx.role_label(role) if role else "(Not set)"
    return f"Default role: **{name}**"


@command(
    "cleanup",
    aliases=("prune", "tidy"),
    admin=True,
    guild_only=True,
    params=(ParamSpec("count", required=False),),
    summary=f"delete recent messages in this channel (default {DEFAULT_CLEANUP_COUNT}).",
)
async def cleanup(ctx: CommandContext) -> str:
    scope = ctx.require_scope()
    raw = ctx.params.get("count")
    try:
        count = int(raw) if raw else DEFAULT_CLEANUP_COUNT
    except ValueError as exc:
        raise UsageError(f'Invalid count: "{raw}"') from exc
    if not 1 <= count <= MAX_CLEANUP_COUNT:
        raise UsageError(f"Count must be between 1 and {MAX_CLEANUP_COUNT}")

    logger.info("Deleting %d message(s) in scope %s", count, scope.id)
    deleted = await scope.purge(count)
    return f"Deleted {deleted} message(s)."


@command(
    "refresh",
    aliases=("reload",),
    admin=True,
    summary="reload the F-List kink list now.",
)
async def refresh(ctx: CommandContext) -> str:
    count = await ctx.services.flist.refresh_catalog()
    return f"Kink list reloaded: {count} kinks."


async def _shutdown_later(shutdown) -> None:
    await asyncio.sleep(SHUTDOWN_DELAY)
    await shutdown()


def _shutdown_done(task: asyncio.Task) -> None:
    _shutdown_tasks.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("Shutdown failed: %r", task.exception())


@command(
    "exit",
    aliases=("quit", "stop"),
    admin=True,
    summary="stop the bot.",
)
async def exit_bot(ctx: CommandContext) -> str:
    shutdown = ctx.services.shutdown
    if shutdown is None:
        return "Shutdown is not available."
    logger.info("Shutdown requested by %s", ctx.actor_id)
    task = asyncio.create_task(_shutdown_later(shutdown), name="shutdown")
    _shutdown_tasks.add(task)
    task.add_done_callback(_shutdown_done)
    return "Goodbye!"
