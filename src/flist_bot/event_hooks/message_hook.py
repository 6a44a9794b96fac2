import discord

from flist_bot.clients.adapters import ChannelTransport, DiscordScope

import logging

logger = logging.getLogger(__name__)


async def handle(client: discord.Client, message: discord.Message):
    """
    Handle incoming discord messages.
    - client: FListBot client instance (carries the dispatcher)
    - message: The incoming message object
    """
    # 1) Ignore ourselves and other bots
    author = message.author
    if author.bot or (client.user and author.id == client.user.id):
        return

    # 2) Cheap prefix check before building adapters
    content = message.content or ""
    if not content.lower().startswith(client.services.prefix.lower()):
        return

    # 3) Dispatch; guild-less messages (DMs) get no scope
    guild = message.guild
    scope = DiscordScope(guild, message.channel) if guild else None
    result = await client.dispatcher.handle_message(
        content, author.id, scope, ChannelTransport(message)
    )
    logger.debug("Message %s dispatch state: %s", message.id, result.state.value)
