"""
Locate and parse the optional TOML config.

Lookup order: an explicit ``path``, then ``$FLISTBOT_CONFIG``, then
``config.toml`` in the working directory. Section classes only read the
``[flistbot]`` table; anything else in the file is ignored.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FLISTBOT_CONFIG"
DEFAULT_CONFIG_PATH = Path("config.toml")


def config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    return Path(env_path).expanduser() if env_path else DEFAULT_CONFIG_PATH


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Return the parsed config, or ``{}`` when there is no file to read.

    A file that was asked for explicitly but is missing only logs a warning,
    so the environment can still supply every setting. A file that exists
    but is not valid TOML raises ``ValueError``.
    """
    target = config_path(path)
    if not target.is_file():
        if target != DEFAULT_CONFIG_PATH:
            logger.warning("Config file %s not found; using environment only", target)
        return {}

    try:
        with target.open("rb") as handle:
            raw = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid config file {target}: {exc}") from exc

    logger.info("Loaded config from %s", target)
    return raw


__all__ = ["load_raw_config", "config_path", "CONFIG_ENV_VAR", "DEFAULT_CONFIG_PATH"]
