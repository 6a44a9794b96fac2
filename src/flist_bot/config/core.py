import os
from typing import List


def _split_ids(raw: str) -> List[int]:
    return [int(uid.strip()) for uid in raw.split(",") if uid.strip()]


class Core:
    def __init__(self, config: dict | None = None) -> None:
        cfg = (config or {}).get("flistbot", {})
        discord_cfg = cfg.get("discord", {})

        token_env = str(discord_cfg.get("token_env", "DISCORD_API_TOKEN"))
        self.DISCORD_API_TOKEN: str | None = os.getenv(token_env)

        self.COMMAND_PREFIX: str = str(discord_cfg.get("command_prefix", os.getenv("COMMAND_PREFIX", ".flist")))

        # Actors allowed to run privileged commands
        admin_ids_cfg = discord_cfg.get("admin_ids")
        if admin_ids_cfg:
            self.ADMIN_IDS: List[int] = [int(uid) for uid in admin_ids_cfg]
        else:
            self.ADMIN_IDS = _split_ids(os.getenv("ADMIN_IDS", ""))

        required = [
            ("DISCORD_API_TOKEN", self.DISCORD_API_TOKEN),
            ("COMMAND_PREFIX", self.COMMAND_PREFIX.strip()),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")
