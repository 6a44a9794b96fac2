import discord

from flist_bot import scheduler
from flist_bot.config import flist as flist_cfg

import logging

logger = logging.getLogger(__name__)


async def handle(client: discord.Client):
    """Publish the help hint and start ticket/kink list maintenance."""
    logger.info(f"Logged in as {client.user.name} (ID: {client.user.id})")

    prefix = client.services.prefix
    await client.change_presence(activity=discord.Game(name=f"{prefix} help"))

    await scheduler.start(
        client.flist,
        flist_cfg.TICKET_INTERVAL,
        flist_cfg.CATALOG_INTERVAL,
    )
    logger.info("FListBot connected.")
