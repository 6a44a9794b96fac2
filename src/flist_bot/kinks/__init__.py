"""F-List kink taxonomy: models, catalog snapshot, and ticket holder."""

from .catalog import Catalog, PreferenceCatalog
from .model import PreferenceGroup, PreferenceItem, Profile, Tier, decode_entities

__all__ = [
    "Catalog",
    "PreferenceCatalog",
    "PreferenceGroup",
    "PreferenceItem",
    "Profile",
    "Tier",
    "decode_entities",
]
