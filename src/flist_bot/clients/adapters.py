"""
discord.py implementations of the dispatcher's ``Scope`` and ``Transport``.

``DiscordScope`` wraps the guild/channel a command was sent from.
``ChannelTransport`` renders responses for the channel (or the author's DMs
for private responses), splitting anything over Discord's size limits.
"""

from __future__ import annotations

import logging
import re
from typing import List, Sequence

import discord

from ..commands.responses import Response, RichResponse
from ..errors import ValidationError

logger = logging.getLogger(__name__)

MAX_MESSAGE_LEN = 2000
MAX_TITLE_LEN = 256
MAX_DESCRIPTION_LEN = 4096
MAX_FIELDS = 25
MAX_FIELD_NAME_LEN = 256
MAX_FIELD_VALUE_LEN = 1024
MAX_EMBED_TOTAL = 6000

_ID_RE = re.compile(r"\d+")


def split_text(text: str, limit: int) -> List[str]:
    """Split ``text`` into chunks of at most ``limit`` chars, preferring line breaks."""
    chunks: List[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def to_embeds(response: RichResponse) -> List[discord.Embed]:
    """Render ``response`` as one or more embeds within Discord's limits.

    Each description chunk opens an embed; fields follow the last chunk and
    spill into new embeds when the field count or total size would overflow.
    """
    embeds: List[discord.Embed] = []

    def _open(description: str | None = None) -> discord.Embed:
        first = not embeds
        embed = discord.Embed(
            title=_clip(response.title, MAX_TITLE_LEN) if response.title and first else None,
            description=description,
            color=response.color,
            url=response.url if first else None,
        )
        embeds.append(embed)
        return embed

    for chunk in split_text(response.description or "", MAX_DESCRIPTION_LEN):
        _open(chunk)
    embed = embeds[-1] if embeds else _open()

    for fld in response.fields:
        name = _clip(fld.name or "\u200b", MAX_FIELD_NAME_LEN)
        value = _clip(fld.value or "\u200b", MAX_FIELD_VALUE_LEN)
        if len(embed.fields) >= MAX_FIELDS or len(embed) + len(name) + len(value) > MAX_EMBED_TOTAL:
            embed = _open()
        embed.add_field(name=name, value=value, inline=fld.inline)

    if response.image:
        embeds[-1].set_image(url=response.image)
    return embeds


class DiscordScope:
    """Guild-side operations for commands sent from a guild channel."""

    def __init__(self, guild: discord.Guild, channel: discord.abc.Messageable) -> None:
        self.guild = guild
        self.channel = channel
        self.id = guild.id

    def _role(self, role_id: str) -> discord.Role | None:
        role_id = str(role_id)
        return self.guild.get_role(int(role_id)) if role_id.isdigit() else None

    def role_name(self, role_id: str) -> str:
        role = self._role(role_id)
        return role.name if role else ""

    def find_member(self, token: str) -> int | None:
        match = _ID_RE.search(token or "")
        member = self.guild.get_member(int(match.group())) if match else None
        if member is None:
            member = self.guild.get_member_named(token)
        return member.id if member else None

    async def _member(self, member_id: int) -> discord.Member:
        member = self.guild.get_member(member_id)
        if member is None:
            member = await self.guild.fetch_member(member_id)
        return member

    def _roles(self, role_ids: Sequence[str]) -> List[discord.Role]:
        roles = []
        for role_id in role_ids:
            role = self._role(role_id)
            if role is None:
                logger.warning("Role %s not found in guild %s", role_id, self.id)
                continue
            roles.append(role)
        return roles

    async def assign_roles(self, member_id: int, role_ids: Sequence[str]) -> List[str]:
        roles = self._roles(role_ids)
        if not roles:
            return []
        member = await self._member(member_id)
        try:
            await member.add_roles(*roles, reason="FListBot role assignment")
        except discord.Forbidden as exc:
            raise ValidationError("I don't have permission to give out those roles.") from exc
        return [str(role.id) for role in roles]

    async def remove_roles(self, member_id: int, role_ids: Sequence[str]) -> List[str]:
        roles = self._roles(role_ids)
        if not roles:
            return []
        member = await self._member(member_id)
        try:
            await member.remove_roles(*roles, reason="FListBot role removal")
        except discord.Forbidden as exc:
            raise ValidationError("I don't have permission to take away those roles.") from exc
        return [str(role.id) for role in roles]

    async def purge(self, limit: int) -> int:
        deleted = await self.channel.purge(limit=limit)
        return len(deleted)


class ChannelTransport:
    """Sends responses for one incoming message."""

    def __init__(self, message: discord.Message) -> None:
        self.channel = message.channel
        self.author = message.author

    async def deliver(self, response: Response) -> None:
        target = self.author if response.private else self.channel
        if isinstance(response, RichResponse):
            for embed in to_embeds(response):
                await target.send(embed=embed)
            return
        for chunk in split_text(response.content, MAX_MESSAGE_LEN):
            await target.send(chunk)


__all__ = ["DiscordScope", "ChannelTransport", "split_text", "to_embeds"]
