"""
In-memory role configuration with write-through persistence.

``RoleStore`` owns three pieces of mutable state:

- the kink map: role id -> ordered, duplicate-free kink ids
- the alias table: role id -> ordered aliases, unique case-insensitively
- settings: currently just the default role

Every mutating call applies the change in memory first and then saves the
affected object through the injected :class:`~flist_bot.roles.persistence.Storage`.
If that save fails the change is kept in memory and ``PersistenceError`` is
raised, so memory and disk can disagree until the next successful save.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Tuple

from ..errors import PersistenceError, UnknownItemError, ValidationError
from ..kinks import Catalog
from .persistence import Storage

logger = logging.getLogger(__name__)

KINKS_FILE = "kinks"
ALIASES_FILE = "aliases"
SETTINGS_FILE = "settings"

_ROLE_MENTION_RE = re.compile(r"^<@&(\d+)>$")


@dataclass(frozen=True, slots=True)
class MappingUpdate:
    """Outcome of a kink map mutation for one role."""

    role: str
    items: Tuple[str, ...]
    changed: Tuple[str, ...]
    skipped: Tuple[str, ...]


def _dedupe_casefold(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for value in values:
        key = value.lower()
        if value and key not in seen:
            seen.add(key)
            out.append(value)
    return out


class RoleStore:
    """Kink map, alias table, and default role for the deployment."""

    def __init__(
        self,
        storage: Storage,
        catalog: Callable[[], Catalog],
        mapping: Dict[str, List[str]] | None = None,
        aliases: Dict[str, List[str]] | None = None,
        default_role: str | None = None,
    ) -> None:
        self._storage = storage
        self._catalog = catalog
        self._mapping: Dict[str, List[str]] = {
            str(role): list(dict.fromkeys(str(i) for i in items))
            for role, items in (mapping or {}).items()
        }
        self._aliases: Dict[str, List[str]] = {
            str(role): _dedupe_casefold(str(a) for a in names)
            for role, names in (aliases or {}).items()
        }
        self._default_role = str(default_role) if default_role else None

    @classmethod
    def load(cls, storage: Storage, catalog: Callable[[], Catalog]) -> "RoleStore":
        """Hydrate a store from ``storage``, treating missing objects as empty."""
        mapping = storage.load(KINKS_FILE) or {}
        aliases = storage.load(ALIASES_FILE) or {}
        settings = storage.load(SETTINGS_FILE) or {}
        store = cls(
            storage,
            catalog,
            mapping=mapping,
            aliases=aliases,
            default_role=settings.get("default"),
        )
        logger.info(
            "Loaded %d mapped role(s) and %d aliased role(s)",
            len(store._mapping),
            len(store._aliases),
        )
        return store

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def _save(self, name: str, obj: object) -> None:
        try:
            self._storage.save(name, obj)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save %s; in-memory state kept: %s", name, exc)
            raise PersistenceError(f"Failed to save {name}") from exc

    def _save_mapping(self) -> None:
        self._save(KINKS_FILE, {role: list(items) for role, items in self._mapping.items()})

    def _save_aliases(self) -> None:
        self._save(ALIASES_FILE, {role: list(names) for role, names in self._aliases.items()})

    def _save_settings(self) -> None:
        self._save(SETTINGS_FILE, {"default": self._default_role})

    # ------------------------------------------------------------------ #
    # Role tokens
    # ------------------------------------------------------------------ #

    def resolve_role_token(self, token: str) -> str:
        """
        Map ``token`` to a role id.

        Role mentions reduce to their id, numeric tokens pass through, and
        anything else is looked up in the alias table. Unmatched tokens are
        returned unchanged for the caller to validate.
        """
        token = str(token).strip()
        mention = _ROLE_MENTION_RE.match(token)
        if mention:
            return mention.group(1)
        if token.isdigit():
            return token
        key = token.lower()
        for role, names in self._aliases.items():
            if any(name.lower() == key for name in names):
                return role
        return token

    # ------------------------------------------------------------------ #
    # Kink map
    # ------------------------------------------------------------------ #

    @property
    def mapping(self) -> Dict[str, Tuple[str, ...]]:
        return {role: tuple(items) for role, items in self._mapping.items()}

    def items_for_role(self, role: str) -> Tuple[str, ...]:
        return tuple(self._mapping.get(str(role), ()))

    def roles_for_item(self, item_id: str) -> List[str]:
        """Return every role whose kink set contains ``item_id``."""
        item_id = str(item_id)
        return [role for role, items in self._mapping.items() if item_id in items]

    def add_items_to_role(self, role: str, item_ids: Iterable[str]) -> MappingUpdate:
        role = str(role)
        ids = [str(i) for i in item_ids]
        catalog = self._catalog()
        for item_id in ids:
            if item_id not in catalog.item_index:
                raise UnknownItemError(item_id)

        items = self._mapping.setdefault(role, [])
        changed: List[str] = []
        skipped: List[str] = []
        for item_id in ids:
            if item_id in items:
                logger.info("Kink already assigned to role %s: %s", role, catalog.label(item_id))
                skipped.append(item_id)
                continue
            items.append(item_id)
            changed.append(item_id)
        if not items:
            del self._mapping[role]

        self._save_mapping()
        return MappingUpdate(role, self.items_for_role(role), tuple(changed), tuple(skipped))

    def remove_items_from_role(self, role: str, item_ids: Iterable[str]) -> MappingUpdate:
        role = str(role)
        items = self._mapping.get(role, [])
        changed: List[str] = []
        skipped: List[str] = []
        for item_id in (str(i) for i in item_ids):
            if item_id in items:
                items.remove(item_id)
                changed.append(item_id)
            else:
                logger.info("Kink not assigned to role %s: %s", role, item_id)
                skipped.append(item_id)
        if role in self._mapping and not items:
            del self._mapping[role]

        self._save_mapping()
        return MappingUpdate(role, self.items_for_role(role), tuple(changed), tuple(skipped))

    # ------------------------------------------------------------------ #
    # Aliases
    # ------------------------------------------------------------------ #

    @property
    def aliases(self) -> Dict[str, Tuple[str, ...]]:
        return {role: tuple(names) for role, names in self._aliases.items()}

    def aliases_for(self, role: str) -> Tuple[str, ...]:
        return tuple(self._aliases.get(str(role), ()))

    def add_aliases(self, role: str, alias_strings: Iterable[str]) -> Tuple[str, ...]:
        role = str(role)
        new = _dedupe_casefold(a.strip() for a in alias_strings)
        # bare numbers are read as role ids, so they can never resolve as aliases
        for alias in new:
            if alias.isdigit():
                raise ValidationError(f"Alias cannot be a number: \"{alias}\"")
        keys = {a.lower() for a in new}

        # an alias may only point at one role
        for other, names in list(self._aliases.items()):
            if other == role:
                continue
            kept = [n for n in names if n.lower() not in keys]
            if len(kept) != len(names):
                logger.info("Moving alias(es) from role %s to role %s", other, role)
            if kept:
                self._aliases[other] = kept
            else:
                del self._aliases[other]

        names = self._aliases.setdefault(role, [])
        existing = {n.lower() for n in names}
        names.extend(a for a in new if a.lower() not in existing)
        if not names:
            del self._aliases[role]

        self._save_aliases()
        return self.aliases_for(role)

    def remove_aliases(self, role: str, alias_strings: Iterable[str]) -> Tuple[str, ...]:
        role = str(role)
        keys = {a.strip().lower() for a in alias_strings}
        names = [n for n in self._aliases.get(role, []) if n.lower() not in keys]
        if names:
            self._aliases[role] = names
        else:
            self._aliases.pop(role, None)

        self._save_aliases()
        return self.aliases_for(role)

    # ------------------------------------------------------------------ #
    # Settings
    # ------------------------------------------------------------------ #

    @property
    def default_role(self) -> str | None:
        return self._default_role

    def set_default_role(self, role: str | None) -> None:
        self._default_role = str(role) if role else None
        self._save_settings()


__all__ = ["RoleStore", "MappingUpdate", "KINKS_FILE", "ALIASES_FILE", "SETTINGS_FILE"]
