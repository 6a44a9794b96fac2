"""Dataclass models for the F-List kink taxonomy and fetched profiles.

Kink list payload (the ``kinks`` object of ``kink-list.php``)::

    {"<group_id>": {"group": "<name>",
                    "items": [{"kink_id": 42, "name": "...", "description": "..."}]}}

Profile payload (``character-data.php``)::

    {"name": "<character>", "kinks": {"<kink_id>": "fave" | "yes" | "maybe" | "no"}}

Names and descriptions arrive HTML-escaped; they are decoded once here, at
load time, so everything downstream works with display text.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Mapping, Tuple


def decode_entities(text: str) -> str:
    """Return ``text`` with named and numeric HTML character references decoded."""
    return html.unescape(text or "")


class Tier(IntEnum):
    """Kink choice tiers ordered from most to least preferred."""

    FAVORITE = 0
    YES = 1
    MAYBE = 2
    NO = 3

    @classmethod
    def parse(cls, label: str | None) -> "Tier | None":
        """Return the tier named by ``label`` (upstream or display spelling)."""
        if label is None:
            return None
        return _TIER_LABELS.get(str(label).strip().lower())

    @property
    def label(self) -> str:
        """Upstream spelling used by the F-List API."""
        return _UPSTREAM_LABELS[self]

    def includes(self, other: "Tier") -> bool:
        """Return ``True`` if ``other`` is at or above this threshold."""
        return other <= self


_TIER_LABELS: Dict[str, Tier] = {
    "fave": Tier.FAVORITE,
    "favorite": Tier.FAVORITE,
    "favourite": Tier.FAVORITE,
    "yes": Tier.YES,
    "maybe": Tier.MAYBE,
    "no": Tier.NO,
}

_UPSTREAM_LABELS: Dict[Tier, str] = {
    Tier.FAVORITE: "fave",
    Tier.YES: "yes",
    Tier.MAYBE: "maybe",
    Tier.NO: "no",
}


@dataclass(frozen=True, slots=True)
class PreferenceItem:
    """A single taggable kink."""

    id: str
    name: str
    description: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "PreferenceItem":
        return cls(
            id=str(raw["kink_id"]),
            name=decode_entities(str(raw["name"])),
            description=decode_entities(str(raw.get("description") or "")),
        )

    def __str__(self) -> str:
        return f"{self.id}: **{self.name}**"


@dataclass(frozen=True, slots=True)
class PreferenceGroup:
    """A named category of kinks, in catalog order."""

    id: str
    name: str
    items: Tuple[PreferenceItem, ...] = ()

    def __str__(self) -> str:
        return f"{self.id}: **{self.name}** ({len(self.items)})"


@dataclass(frozen=True, slots=True)
class Profile:
    """A fetched character profile: kink id -> raw tier label."""

    identifier: str
    tier_by_item_id: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, identifier: str, raw: Mapping[str, Any]) -> "Profile":
        kinks = raw.get("kinks") or {}
        return cls(
            identifier=str(raw.get("name") or identifier),
            tier_by_item_id={str(k): str(v) for k, v in dict(kinks).items()},
        )

    def tier_of(self, item_id: str) -> Tier | None:
        """Return the parsed tier for ``item_id`` or ``None`` if untagged."""
        return Tier.parse(self.tier_by_item_id.get(str(item_id)))


__all__ = [
    "decode_entities",
    "Tier",
    "PreferenceItem",
    "PreferenceGroup",
    "Profile",
]
