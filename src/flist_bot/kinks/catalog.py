"""
Global kink catalog.

``Catalog`` is an immutable snapshot built from one kink list payload.
``PreferenceCatalog`` holds the current snapshot plus the F-List API ticket;
both are replaced by plain attribute assignment, so readers always see either
the old or the new value, never a partial one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from ..errors import CatalogLoadError
from .model import PreferenceGroup, PreferenceItem, decode_entities

logger = logging.getLogger(__name__)


def _same(a: str, b: str) -> bool:
    return str(a).lower() == str(b).lower()


@dataclass(frozen=True, slots=True)
class Catalog:
    """Kink groups keyed by group id plus a flat index keyed by kink id."""

    groups: Dict[str, PreferenceGroup] = field(default_factory=dict)
    item_index: Dict[str, PreferenceItem] = field(default_factory=dict)

    @classmethod
    def load(cls, raw_groups: Mapping[str, Any]) -> "Catalog":
        """Build a catalog from the ``kinks`` object of a kink list payload."""
        if not isinstance(raw_groups, Mapping):
            raise CatalogLoadError(f"Expected a mapping of kink groups, got {type(raw_groups).__name__}")

        groups: Dict[str, PreferenceGroup] = {}
        index: Dict[str, PreferenceItem] = {}
        for group_id, raw in raw_groups.items():
            try:
                items = tuple(PreferenceItem.from_raw(item) for item in raw["items"])
                group = PreferenceGroup(
                    id=str(group_id),
                    name=decode_entities(str(raw["group"])),
                    items=items,
                )
            except (KeyError, TypeError) as exc:
                raise CatalogLoadError(f"Malformed kink group {group_id!r}: {exc!r}") from exc

            groups[group.id] = group
            for item in items:
                index[item.id] = item

        logger.info("Loaded %d kink(s) in %d group(s)", len(index), len(groups))
        return cls(groups=groups, item_index=index)

    def __len__(self) -> int:
        return len(self.item_index)

    def find_item(self, name_or_id: str) -> PreferenceItem | None:
        """Return the first kink whose name (any case) or id equals ``name_or_id``."""
        token = str(name_or_id).strip()
        for item in self.item_index.values():
            if _same(item.name, token) or item.id == token:
                return item
        return None

    def find_group(self, name_or_id: str) -> PreferenceGroup | None:
        """Return the first group whose name (any case) or id equals ``name_or_id``."""
        token = str(name_or_id).strip()
        for group in self.groups.values():
            if _same(group.name, token) or group.id == token:
                return group
        return None

    def group_of(self, item_id: str) -> PreferenceGroup | None:
        """Return the group containing the kink ``item_id``."""
        for group in self.groups.values():
            if any(item.id == str(item_id) for item in group.items):
                return group
        return None

    def search(self, query_terms: Iterable[str]) -> List[PreferenceItem]:
        """Return kinks whose name contains any of ``query_terms`` (case-insensitive)."""
        terms = [t.strip().lower() for t in query_terms if t and t.strip()]
        if not terms:
            return []
        return [
            item
            for item in self.item_index.values()
            if any(term in item.name.lower() for term in terms)
        ]

    def label(self, item_id: str) -> str:
        """Display line for ``item_id``, tolerating ids the catalog no longer has."""
        item = self.item_index.get(str(item_id))
        return str(item) if item else f"{item_id}: *(unknown kink)*"


class PreferenceCatalog:
    """Current catalog snapshot and API ticket shared across invocations."""

    def __init__(self, catalog: Catalog | None = None, ticket: str = "") -> None:
        self._catalog = catalog or Catalog()
        self._ticket = ticket

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def ticket(self) -> str:
        return self._ticket

    @property
    def loaded(self) -> bool:
        return len(self._catalog) > 0

    def replace(self, catalog: Catalog) -> None:
        """Swap in a freshly loaded catalog."""
        self._catalog = catalog

    def set_ticket(self, ticket: str) -> None:
        self._ticket = ticket


__all__ = ["Catalog", "PreferenceCatalog"]
