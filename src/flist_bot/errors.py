"""
Exception taxonomy shared by the catalog, role store, and command pipeline.

Handlers raise these and the dispatcher decides how each one is rendered:

- ``ValidationError`` (and subclasses): shown verbatim to the invoking channel.
- ``AuthorizationError`` / ``ScopeError``: fixed rejection text, handler never runs.
- ``UpstreamError``: generic failure text, details only go to the log.
- ``PersistenceError``: soft failure text, the in-memory change stands.
"""

from __future__ import annotations


class FListBotError(Exception):
    """Base class for every error raised by the bot itself."""

    pass


class ValidationError(FListBotError):
    """Raised for bad user input: unknown kinks, roles, or malformed parameters."""

    pass


class UsageError(ValidationError):
    """Raised when arguments do not fit a command's parameters."""

    pass


class UnknownItemError(ValidationError):
    """Raised when a kink name or id does not resolve in the current catalog."""

    def __init__(self, token: str) -> None:
        super().__init__(f'Unknown kink: "{token}"')
        self.token = token


class UnknownRoleError(ValidationError):
    """Raised when a role token does not name a role in the guild."""

    def __init__(self, token: str) -> None:
        super().__init__(f'Invalid role name or ID: "{token}"')
        self.token = token


class AuthorizationError(FListBotError):
    """Raised when a non-privileged actor invokes a privileged command."""

    pass


class ScopeError(FListBotError):
    """Raised when a guild-only command is invoked outside a guild."""

    pass


class UpstreamError(FListBotError):
    """Raised when the F-List API fails or reports an error."""

    pass


class PersistenceError(FListBotError):
    """Raised when a write-through save fails after a successful mutation."""

    pass


class CatalogLoadError(FListBotError):
    """Raised when a kink list payload has the wrong shape."""

    pass


class DuplicateCommandError(FListBotError):
    """Raised when two commands claim the same id or alias."""

    pass


__all__ = [
    "FListBotError",
    "ValidationError",
    "UsageError",
    "UnknownItemError",
    "UnknownRoleError",
    "AuthorizationError",
    "ScopeError",
    "UpstreamError",
    "PersistenceError",
    "CatalogLoadError",
    "DuplicateCommandError",
]
