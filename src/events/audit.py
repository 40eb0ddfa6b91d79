"""
Alt Account Detector - Audit Events
===================================

Routes message delete/edit and reaction add/remove events to the
AuditLogService.
"""

from typing import TYPE_CHECKING, Union

import discord
from discord.ext import commands

from src.utils.error_handler import safe_execute

if TYPE_CHECKING:
    from src.bot import AltDetectorBot


class AuditEvents(commands.Cog):
    """Audit log event handlers."""

    def __init__(self, bot: "AltDetectorBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    @safe_execute
    async def on_message_delete(self, message: discord.Message) -> None:
        await self.bot.audit_logs.log_message_delete(message)

    @commands.Cog.listener()
    @safe_execute
    async def on_message_edit(self, before: discord.Message, after: discord.Message) -> None:
        await self.bot.audit_logs.log_message_edit(before, after)

    @commands.Cog.listener()
    @safe_execute
    async def on_reaction_add(
        self,
        reaction: discord.Reaction,
        user: Union[discord.Member, discord.User],
    ) -> None:
        await self.bot.audit_logs.log_reaction(reaction, user, added=True)

    @commands.Cog.listener()
    @safe_execute
    async def on_reaction_remove(
        self,
        reaction: discord.Reaction,
        user: Union[discord.Member, discord.User],
    ) -> None:
        await self.bot.audit_logs.log_reaction(reaction, user, added=False)


async def setup(bot: "AltDetectorBot") -> None:
    """Load the AuditEvents cog."""
    await bot.add_cog(AuditEvents(bot))


__all__ = ["AuditEvents"]
