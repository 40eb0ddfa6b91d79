"""
Alt Account Detector - Audit Logs
=================================

Posts message delete/edit and reaction add/remove logs to the channels a
guild has configured.

DESIGN:
    Embed builders are plain functions so they can be tested without a
    bot. The service only decides whether to log and where to send it.
    Bot and system messages are never logged.

Truncation:
    - Deleted content and attachment lists: 1024
    - Edit before/after: 512
    - Reaction message preview: 200
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, Union

import discord

from src.core.config import EmbedColors
from src.core.constants import (
    EDIT_CONTENT_LIMIT,
    EMBED_FIELD_LIMIT,
    REACTION_PREVIEW_LIMIT,
)
from src.core.logger import logger
from src.core.server_config import LogType, ServerConfigStore
from src.utils.retry import safe_fetch_channel, safe_send

if TYPE_CHECKING:
    from src.bot import AltDetectorBot


# =============================================================================
# Helpers
# =============================================================================

def truncate(text: str, limit: int) -> str:
    """Cut text to `limit` characters, ending in "..." when shortened."""
    if len(text) <= limit:
        return text
    return f"{text[:limit - 3]}..."


def _user_field(user: Union[discord.User, discord.Member]) -> str:
    return f"{user} ({user.id})"


def _timestamp_field(now: datetime) -> str:
    return discord.utils.format_dt(now, "F")


def _should_skip(message: discord.Message) -> bool:
    if message.guild is None or message.author is None:
        return True
    return message.author.bot or message.is_system()


# =============================================================================
# Embed Builders
# =============================================================================

def build_delete_embed(message: discord.Message, now: datetime) -> discord.Embed:
    embed = discord.Embed(title="🗑️ Message Deleted", color=EmbedColors.LOG_NEGATIVE, timestamp=now)
    embed.add_field(name="Author", value=_user_field(message.author), inline=True)
    embed.add_field(name="Channel", value=message.channel.mention, inline=True)
    embed.add_field(name="Deleted At", value=_timestamp_field(now), inline=True)

    if message.content:
        embed.add_field(name="💬 Content", value=truncate(message.content, EMBED_FIELD_LIMIT), inline=False)

    if message.attachments:
        attachments = "\n".join(f"[{att.filename}]({att.url})" for att in message.attachments)
        embed.add_field(name="📎 Attachments", value=truncate(attachments, EMBED_FIELD_LIMIT), inline=False)

    embed.set_footer(text=f"Message ID: {message.id}")
    return embed


def build_edit_embed(before: discord.Message, after: discord.Message, now: datetime) -> discord.Embed:
    embed = discord.Embed(title="✏️ Message Edited", color=EmbedColors.LOG_WARNING, timestamp=now)
    embed.add_field(name="Author", value=_user_field(after.author), inline=True)
    embed.add_field(name="Channel", value=after.channel.mention, inline=True)
    embed.add_field(name="Edited At", value=_timestamp_field(now), inline=True)

    if before.content:
        embed.add_field(name="Before", value=truncate(before.content, EDIT_CONTENT_LIMIT), inline=False)
    if after.content:
        embed.add_field(name="After", value=truncate(after.content, EDIT_CONTENT_LIMIT), inline=False)

    embed.add_field(name="Jump to Message", value=f"[Click here]({after.jump_url})", inline=True)
    embed.set_footer(text=f"Message ID: {after.id}")
    return embed


def build_reaction_embed(
    reaction: discord.Reaction,
    user: Union[discord.User, discord.Member],
    added: bool,
    now: datetime,
) -> discord.Embed:
    message = reaction.message
    if added:
        embed = discord.Embed(title="➕ Reaction Added", color=EmbedColors.LOG_POSITIVE, timestamp=now)
    else:
        embed = discord.Embed(title="➖ Reaction Removed", color=EmbedColors.LOG_REMOVED, timestamp=now)

    embed.add_field(name="User", value=_user_field(user), inline=True)
    embed.add_field(name="Channel", value=message.channel.mention, inline=True)
    embed.add_field(name="Added At" if added else "Removed At", value=_timestamp_field(now), inline=True)
    embed.add_field(name="Reaction", value=str(reaction.emoji), inline=True)
    embed.add_field(name="Count", value=str(reaction.count), inline=True)
    embed.add_field(name="Message", value=f"[Jump to message]({message.jump_url})", inline=True)

    if message.content:
        embed.add_field(
            name="💬 Message Content",
            value=truncate(message.content, REACTION_PREVIEW_LIMIT),
            inline=False,
        )

    author = str(message.author) if message.author else "Unknown"
    embed.set_footer(text=f"Message ID: {message.id} | Author: {author}")
    return embed


# =============================================================================
# Audit Log Service
# =============================================================================

class AuditLogService:
    """Routes message and reaction events to configured log channels."""

    def __init__(self, bot: "AltDetectorBot", store: ServerConfigStore) -> None:
        self.bot = bot
        self.store = store

    async def _log_channel(self, guild: discord.Guild, log_type: LogType) -> Optional[discord.abc.Messageable]:
        channel_id = self.store.channel_for(guild.id, log_type)
        if channel_id is None:
            return None
        return guild.get_channel(channel_id) or await safe_fetch_channel(self.bot, channel_id)

    async def _send(self, guild: discord.Guild, log_type: LogType, embed: discord.Embed) -> bool:
        channel = await self._log_channel(guild, log_type)
        if channel is None:
            return False

        sent = await safe_send(channel, embed=embed)
        if sent is None:
            logger.warning(f"Audit log not delivered: {log_type.value} log in {guild.name} ({guild.id})")
            return False
        return True

    async def log_message_delete(self, message: discord.Message) -> bool:
        if _should_skip(message):
            return False
        now = datetime.now(timezone.utc)
        return await self._send(message.guild, LogType.DELETED, build_delete_embed(message, now))

    async def log_message_edit(self, before: discord.Message, after: discord.Message) -> bool:
        """Log an edit; embed-only updates (same content) are ignored."""
        if _should_skip(after) or before.content == after.content:
            return False
        now = datetime.now(timezone.utc)
        return await self._send(after.guild, LogType.EDIT, build_edit_embed(before, after, now))

    async def log_reaction(
        self,
        reaction: discord.Reaction,
        user: Union[discord.User, discord.Member],
        added: bool,
    ) -> bool:
        guild = reaction.message.guild
        if user.bot or guild is None:
            return False
        now = datetime.now(timezone.utc)
        return await self._send(guild, LogType.REACTION, build_reaction_embed(reaction, user, added, now))


__all__ = [
    "truncate",
    "build_delete_embed",
    "build_edit_embed",
    "build_reaction_embed",
    "AuditLogService",
]
