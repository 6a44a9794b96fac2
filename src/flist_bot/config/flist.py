import os


class FList:
    def __init__(self, config: dict | None = None) -> None:
        flist_cfg = (config or {}).get("flistbot", {}).get("flist", {})

        account_env = str(flist_cfg.get("account_env", "FLIST_ACCOUNT"))
        password_env = str(flist_cfg.get("password_env", "FLIST_PASSWORD"))
        self.ACCOUNT: str | None = os.getenv(account_env)
        self.PASSWORD: str | None = os.getenv(password_env)

        self.API_URL: str = str(flist_cfg.get("api_url", os.getenv("FLIST_API_URL", "https://www.f-list.net"))).rstrip("/")
        self.USER_AGENT: str = str(flist_cfg.get("user_agent", os.getenv("FLIST_USER_AGENT", "FListBot/request")))

        # Seconds between ticket renewals; tickets expire after 30 minutes upstream
        self.TICKET_INTERVAL: int = int(flist_cfg.get("ticket_interval", os.getenv("FLIST_TICKET_INTERVAL", "1800")))
        # Seconds between kink list refreshes, 0 disables
        self.CATALOG_INTERVAL: int = int(flist_cfg.get("catalog_interval", os.getenv("FLIST_CATALOG_INTERVAL", "86400")))

        missing = [
            name
            for name, val in (("FLIST_ACCOUNT", self.ACCOUNT), ("FLIST_PASSWORD", self.PASSWORD))
            if not val
        ]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")
