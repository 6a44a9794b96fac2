"""
Command registry and auto-discovery of handler modules.

Any module inside ``commands/handlers`` that defines::

    from flist_bot.commands import command, ParamSpec

    @command("kink", params=(ParamSpec("name", variadic=True),), summary="...")
    async def kink(ctx: CommandContext) -> Response | str | None: ...

is picked up automatically at import-time and registered in :data:`REGISTRY`.
The dispatcher resolves incoming command tokens against that registry.

NOTE: If adding a new handler, ensure:
1. Its id and aliases do not collide with an existing command.
2. It returns a ``Response``, a plain string, a list of those, or ``None``.
3. It raises the errors in :mod:`flist_bot.errors` instead of replying itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import import_module
from pathlib import Path
from pkgutil import iter_modules
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Iterable, List, Tuple

from ..errors import DuplicateCommandError
from .context import CommandContext
from .params import ParamSpec

logger = logging.getLogger(__name__)

Handler = Callable[[CommandContext], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class CommandDescriptor:
    """Static description of one command."""

    id: str
    handler: Handler
    aliases: FrozenSet[str] = frozenset()
    requires_elevated_authorization: bool = False
    requires_group_scope: bool = False
    params: Tuple[ParamSpec, ...] = ()
    title: str | None = None
    summary: str = ""


class CommandRegistry:
    """Commands keyed by lower-cased id, with an alias index for lookup."""

    def __init__(self) -> None:
        self._commands: Dict[str, CommandDescriptor] = {}
        self._names: Dict[str, str] = {}

    def register(self, descriptor: CommandDescriptor) -> CommandDescriptor:
        """Add ``descriptor``; raise ``DuplicateCommandError`` on any name clash."""
        cmd_id = descriptor.id.lower()
        aliases = frozenset(a.lower() for a in descriptor.aliases) - {cmd_id}
        if cmd_id in self._commands:
            raise DuplicateCommandError(f"Command '{cmd_id}' already registered")
        for name in (cmd_id, *aliases):
            if name in self._names:
                raise DuplicateCommandError(
                    f"Name '{name}' already used by command '{self._names[name]}'"
                )

        descriptor = CommandDescriptor(
            id=cmd_id,
            handler=descriptor.handler,
            aliases=aliases,
            requires_elevated_authorization=descriptor.requires_elevated_authorization,
            requires_group_scope=descriptor.requires_group_scope,
            params=descriptor.params,
            title=descriptor.title,
            summary=descriptor.summary,
        )
        self._commands[cmd_id] = descriptor
        for name in (cmd_id, *aliases):
            self._names[name] = cmd_id
        return descriptor

    def lookup(self, token: str | None) -> CommandDescriptor | None:
        """Return the command whose id or alias equals ``token`` (any case)."""
        if not token:
            return None
        cmd_id = self._names.get(token.lower())
        return self._commands.get(cmd_id) if cmd_id else None

    def all(self) -> List[CommandDescriptor]:
        """Registered commands in registration order."""
        return list(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, token: str) -> bool:
        return self.lookup(token) is not None


def describe(descriptor: CommandDescriptor, prefix: str = ".flist") -> str:
    """Render a one-line usage string for ``descriptor``."""
    usage = " ".join([prefix, descriptor.id, *(p.usage() for p in descriptor.params)])
    line = f"`{usage}`"
    if descriptor.summary:
        line += f" - {descriptor.summary}"
    if descriptor.aliases:
        line += f" (also: {', '.join(sorted(descriptor.aliases))})"
    return line


REGISTRY = CommandRegistry()


def command(
    cmd_id: str,
    *,
    aliases: Iterable[str] = (),
    admin: bool = False,
    guild_only: bool = False,
    params: Iterable[ParamSpec] = (),
    title: str | None = None,
    summary: str = "",
    registry: CommandRegistry | None = None,
):
    """Decorator registering a handler coroutine as a command."""

    def decorator(fn: Handler) -> Handler:
        target = registry if registry is not None else REGISTRY
        target.register(
            CommandDescriptor(
                id=cmd_id,
                handler=fn,
                aliases=frozenset(aliases),
                requires_elevated_authorization=admin,
                requires_group_scope=guild_only,
                params=tuple(params),
                title=title,
                summary=summary,
            )
        )
        return fn

    return decorator


# ------------------------------------------------------------------ #
# Auto-import handler modules to populate the registry
# ------------------------------------------------------------------ #
_pkg_path = Path(__file__).resolve().parent / "handlers"
for _, modname, _ in iter_modules([str(_pkg_path)]):
    if modname.startswith("_"):
        continue
    import_module(f"{__name__}.handlers.{modname}")

logger.debug("Registered %d command(s)", len(REGISTRY))


__all__ = [
    "CommandDescriptor",
    "CommandRegistry",
    "ParamSpec",
    "REGISTRY",
    "command",
    "describe",
]
