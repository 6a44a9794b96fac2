"""Role configuration: kink map store, persistence, and resolution."""

from .persistence import JsonFileStorage, Storage
from .resolution import DEFAULT_THRESHOLD, resolve_roles, select_roles
from .store import MappingUpdate, RoleStore

__all__ = [
    "JsonFileStorage",
    "Storage",
    "DEFAULT_THRESHOLD",
    "resolve_roles",
    "select_roles",
    "MappingUpdate",
    "RoleStore",
]
