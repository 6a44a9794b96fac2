"""
Command dispatch.

Each invocation moves through ``RECEIVED -> AUTHORIZED -> COMPLETED`` or exits
early to ``REJECTED`` (authorization/scope) or ``FAILED`` (handler error).
Messages that are not a registered command end up ``IGNORED`` and produce no
output at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Tuple

from ..errors import (
    AuthorizationError,
    PersistenceError,
    ScopeError,
    UpstreamError,
    UsageError,
    ValidationError,
)
from . import REGISTRY, CommandDescriptor, CommandRegistry, describe
from .context import CommandContext, CommandInvocation, Scope, Services, Transport
from .params import bind, tokenize
from .responses import ACCENT_COLOR, Response, RichResponse, TextResponse

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = ":warning: You are not authorized to use this command."
NOT_IN_GUILD = ":warning: You cannot use that command in DMs."
UPSTREAM_FAILED = "Oops! I couldn't get that from F-List. Check the name and try again later."
SAVE_FAILED = "Oops! Something went wrong..."
HANDLER_FAILED = ":x: Something went wrong while running that command."
DELIVERY_FAILED = ":warning: I couldn't send that reply. If it was meant for your DMs, check that they are open."


class DispatchState(str, Enum):
    IGNORED = "ignored"
    RECEIVED = "received"
    AUTHORIZED = "authorized"
    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(slots=True)
class DispatchResult:
    state: DispatchState
    command: str | None = None
    responses: List[Response] = field(default_factory=list)


def normalize(result: Any, title: str | None = None) -> List[Response]:
    """
    Turn a handler return value into deliverable responses.

    Rich responses with something to show are stamped with ``title`` and the
    accent color; text gets a bold ``title`` line; empty results vanish.
    """
    if result is None:
        return []
    if isinstance(result, (list, tuple)):
        out: List[Response] = []
        for item in result:
            out.extend(normalize(item, title))
        return out
    if isinstance(result, str):
        result = TextResponse(result)

    if isinstance(result, RichResponse):
        if not result.is_displayable():
            return []
        return [result.stamped(title, ACCENT_COLOR)]
    if isinstance(result, TextResponse):
        if not result.is_displayable():
            return []
        if title:
            return [TextResponse(f"**{title}**\n{result.content}", private=result.private)]
        return [result]

    raise TypeError(f"Unsupported handler result: {type(result).__name__}")


def _rejection(exc: Exception) -> TextResponse:
    return TextResponse(NOT_AUTHORIZED if isinstance(exc, AuthorizationError) else NOT_IN_GUILD)


class Dispatcher:
    """Resolves, authorizes, and runs commands against a registry."""

    def __init__(self, services: Services, registry: CommandRegistry | None = None) -> None:
        self.services = services
        self.registry = registry if registry is not None else REGISTRY

    @property
    def prefix(self) -> str:
        return self.services.prefix

    def parse(self, content: str) -> Tuple[str, List[str]] | None:
        """Split ``content`` into ``(command, args)`` if it carries the prefix."""
        text = (content or "").strip()
        prefix = self.prefix
        if not text.lower().startswith(prefix.lower()):
            return None
        rest = text[len(prefix):]
        if rest and not rest[0].isspace():
            return None
        tokens = tokenize(rest.strip())
        if not tokens:
            return None
        return tokens[0], tokens[1:]

    def authorize(self, descriptor: CommandDescriptor, invocation: CommandInvocation) -> None:
        if descriptor.requires_elevated_authorization and not self.services.is_privileged(invocation.actor_id):
            raise AuthorizationError(f"actor {invocation.actor_id} is not privileged")
        if descriptor.requires_group_scope and invocation.scope is None:
            raise ScopeError("no guild scope")

    async def handle_message(
        self,
        content: str,
        actor_id: int,
        scope: Scope | None,
        transport: Transport,
    ) -> DispatchResult:
        """Parse a raw chat message and dispatch it if it is a command."""
        parsed = self.parse(content)
        if parsed is None:
            return DispatchResult(DispatchState.IGNORED)
        command, args = parsed
        invocation = CommandInvocation(
            actor_id=actor_id,
            scope=scope,
            command=command,
            raw_arguments=tuple(args),
        )
        return await self.dispatch(invocation, transport)

    async def dispatch(self, invocation: CommandInvocation, transport: Transport) -> DispatchResult:
        descriptor = self.registry.lookup(invocation.command)
        if descriptor is None:
            logger.debug("Ignoring unknown command %r", invocation.command)
            return DispatchResult(DispatchState.IGNORED)

        result = DispatchResult(DispatchState.RECEIVED, command=descriptor.id)
        logger.info(
            "Dispatching command '%s' from %s with args: %s",
            descriptor.id,
            invocation.actor_id,
            " ".join(invocation.raw_arguments),
        )

        try:
            self.authorize(descriptor, invocation)
        except (AuthorizationError, ScopeError) as exc:
            logger.info("Rejected command '%s' from %s: %s", descriptor.id, invocation.actor_id, exc)
            result.state = DispatchState.REJECTED
            result.responses = [_rejection(exc)]
            await self._deliver(transport, result.responses)
            return result

        result.state = DispatchState.AUTHORIZED
        try:
            params = bind(descriptor.params, invocation.raw_arguments)
            ctx = CommandContext(
                invocation=invocation,
                descriptor=descriptor,
                services=self.services,
                params=params,
            )
            output = await descriptor.handler(ctx)
            result.responses = normalize(output, descriptor.title)
            result.state = DispatchState.COMPLETED
        except (AuthorizationError, ScopeError) as exc:
            result.state = DispatchState.REJECTED
            result.responses = [_rejection(exc)]
        except Exception as exc:
            result.state = DispatchState.FAILED
            result.responses = [self._render_failure(descriptor, exc)]

        await self._deliver(transport, result.responses)
        return result

    def _render_failure(self, descriptor: CommandDescriptor, exc: Exception) -> TextResponse:
        if isinstance(exc, ValidationError):
            logger.info("Command '%s' rejected input: %s", descriptor.id, exc)
            text = f":warning: {exc}"
            if isinstance(exc, UsageError):
                text += f"\nUsage: {describe(descriptor, self.prefix)}"
            return TextResponse(text)
        if isinstance(exc, UpstreamError):
            logger.error("F-List request failed during '%s': %s", descriptor.id, exc)
            return TextResponse(UPSTREAM_FAILED)
        if isinstance(exc, PersistenceError):
            logger.error("Save failed during '%s': %s", descriptor.id, exc)
            return TextResponse(SAVE_FAILED)
        logger.exception("Command '%s' failed", descriptor.id)
        return TextResponse(HANDLER_FAILED)

    async def _deliver(self, transport: Transport, responses: List[Response]) -> None:
        """Send ``responses`` in order; stop at the first failed send and report it."""
        for response in responses:
            try:
                await transport.deliver(response)
            except Exception:
                logger.exception("Failed to deliver %s", type(response).__name__)
                break
        else:
            return

        try:
            await transport.deliver(TextResponse(DELIVERY_FAILED))
        except Exception:
            logger.exception("Failed to deliver the delivery failure notice")


__all__ = [
    "DispatchState",
    "DispatchResult",
    "Dispatcher",
    "normalize",
    "NOT_AUTHORIZED",
    "NOT_IN_GUILD",
    "UPSTREAM_FAILED",
    "SAVE_FAILED",
    "HANDLER_FAILED",
    "DELIVERY_FAILED",
]
