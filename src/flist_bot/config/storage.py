import os
from pathlib import Path

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent.parent.parent / "data"


class Storage:
    def __init__(self, config: dict | None = None) -> None:
        storage_cfg = (config or {}).get("flistbot", {}).get("storage", {})
        self.DATA_DIR: str = str(storage_cfg.get("data_dir", os.getenv("DATA_DIR", str(_DEFAULT_DATA_DIR))))
