"""JSON write-through storage for the role mapping, aliases, and settings.

Each named object lives in ``<directory>/<name>.json``:

    kinks.json     {role_id: [kink_id, ...], ...}
    aliases.json   {role_id: [alias, ...], ...}
    settings.json  {"default": role_id | null}

Helpers:
    - JsonFileStorage.load(name)
    - JsonFileStorage.save(name, obj)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Persistence port used by :class:`~flist_bot.roles.store.RoleStore`."""

    def load(self, name: str) -> Any | None:
        """Return the stored object for ``name`` or ``None`` if absent."""

    def save(self, name: str, obj: Any) -> None:
        """Persist ``obj`` under ``name``; raise ``OSError``/``TypeError`` on failure."""


class JsonFileStorage:
    """Tab-indented JSON files in a single directory, replaced atomically."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory / f"{name}.json"

    def load(self, name: str) -> Any | None:
        p = self._path(name)
        if not p.exists():
            return None
        with p.open("r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, name: str, obj: Any) -> None:
        p = self._path(name)
        tmp = p.with_suffix(".tmp")
        logger.info("Saving %s", p.name)
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(obj, f, indent="\t", ensure_ascii=False)
        os.replace(tmp, p)


__all__ = ["Storage", "JsonFileStorage"]
