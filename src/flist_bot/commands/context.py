"""Per-invocation data and the collaborators handed to command handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, FrozenSet, List, Protocol, Sequence, Tuple

from ..errors import ScopeError
from ..kinks import PreferenceCatalog, Profile
from ..roles import RoleStore

if TYPE_CHECKING:
    from . import CommandDescriptor, CommandRegistry
    from .responses import Response


class Scope(Protocol):
    """Guild/channel context an invocation runs in."""

    id: int

    def role_name(self, role_id: str) -> str:
        """Return the role's display name, or ``""`` if the guild has no such role."""

    def find_member(self, token: str) -> int | None:
        """Resolve a mention or id to a guild member id."""

    async def assign_roles(self, member_id: int, role_ids: Sequence[str]) -> List[str]:
        """Grant ``role_ids`` to the member; return the ids actually applied."""

    async def remove_roles(self, member_id: int, role_ids: Sequence[str]) -> List[str]:
        """Revoke ``role_ids`` from the member; return the ids actually applied."""

    async def purge(self, limit: int) -> int:
        """Delete up to ``limit`` recent messages; return how many were removed."""


class Transport(Protocol):
    """Delivers normalized responses for one invocation."""

    async def deliver(self, response: "Response") -> None:
        ...


class ProfileSource(Protocol):
    """Fetches profiles and refreshes the catalog from the F-List API."""

    async def fetch_profile(self, identifier: str) -> Profile:
        ...

    async def refresh_catalog(self) -> int:
        ...


@dataclass(slots=True)
class Services:
    """Long-lived collaborators shared by every invocation."""

    catalog: PreferenceCatalog
    roles: RoleStore
    flist: ProfileSource
    registry: "CommandRegistry"
    prefix: str = ".flist"
    admins: FrozenSet[int] = frozenset()
    shutdown: Callable[[], Awaitable[None]] | None = None

    def is_privileged(self, actor_id: int) -> bool:
        return int(actor_id) in self.admins


@dataclass(slots=True)
class CommandInvocation:
    """One incoming command: who sent it, where, and the raw tokens."""

    actor_id: int
    scope: Scope | None
    command: str
    raw_arguments: Tuple[str, ...] = ()


@dataclass(slots=True)
class CommandContext:
    """Everything a handler needs for the invocation being serviced."""

    invocation: CommandInvocation
    descriptor: "CommandDescriptor"
    services: Services
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def actor_id(self) -> int:
        return self.invocation.actor_id

    @property
    def scope(self) -> Scope | None:
        return self.invocation.scope

    @property
    def raw_args(self) -> Tuple[str, ...]:
        return self.invocation.raw_arguments

    @property
    def is_privileged(self) -> bool:
        return self.services.is_privileged(self.actor_id)

    def require_scope(self) -> Scope:
        if self.invocation.scope is None:
            raise ScopeError("no guild scope")
        return self.invocation.scope

    def role_label(self, role_id: str) -> str:
        """Role display name in the current guild, falling back to the id."""
        scope = self.invocation.scope
        name = scope.role_name(role_id) if scope is not None else ""
        return name or str(role_id)


__all__ = [
    "Scope",
    "Transport",
    "ProfileSource",
    "Services",
    "CommandInvocation",
    "CommandContext",
]
