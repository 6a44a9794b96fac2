"""Discord client bootstrap."""

from __future__ import annotations

import logging

import discord

from flist_bot import scheduler
from flist_bot.commands import REGISTRY
from flist_bot.commands.context import Services
from flist_bot.commands.dispatcher import Dispatcher
from flist_bot.config import core, flist as flist_cfg, storage
from flist_bot.event_hooks import message_hook, ready_hook
from flist_bot.kinks import PreferenceCatalog
from flist_bot.roles import JsonFileStorage, RoleStore

from .flist import FListClient

logger = logging.getLogger(__name__)

# --- Intents --------------------------------------------------------------- #
intents = discord.Intents.default()
intents.message_content = True
intents.members = True


class FListBotClient(discord.Client):
    """Discord client wired to the command dispatcher."""

    def __init__(self) -> None:
        super().__init__(intents=intents)
        self.catalog = PreferenceCatalog()
        self.flist = FListClient(
            flist_cfg.ACCOUNT,
            flist_cfg.PASSWORD,
            self.catalog,
            api_url=flist_cfg.API_URL,
            user_agent=flist_cfg.USER_AGENT,
        )
        self.roles = RoleStore.load(JsonFileStorage(storage.DATA_DIR), lambda: self.catalog.catalog)
        self.services = Services(
            catalog=self.catalog,
            roles=self.roles,
            flist=self.flist,
            registry=REGISTRY,
            prefix=core.COMMAND_PREFIX,
            admins=frozenset(core.ADMIN_IDS),
            shutdown=self.close,
        )
        self.dispatcher = Dispatcher(self.services, REGISTRY)

    async def on_ready(self) -> None:
        await ready_hook.handle(self)

    async def on_message(self, message: discord.Message) -> None:
        await message_hook.handle(self, message)

    async def close(self) -> None:
        await scheduler.stop()
        await self.flist.close()
        await super().close()


def run() -> None:
    """Start the Discord client using configuration from the environment."""

    if not core.DISCORD_API_TOKEN:
        logger.error("No DISCORD_API_TOKEN configured. Cannot run client.")
        return

    client = FListBotClient()
    try:
        client.run(core.DISCORD_API_TOKEN, log_handler=None)
    except discord.LoginFailure as exc:
        logger.error("Login failed: %s", exc)
    except Exception as exc:  # pragma: no cover - defensive guard
        logger.exception("Unexpected error while running client: %s", exc)
