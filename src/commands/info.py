"""
Alt Account Detector - Info Commands
====================================

/serverinfo, /userinfo and /althistory.
"""

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import check_mod_permission
from src.core.constants import ALTHISTORY_DEFAULT_LIMIT, ALTHISTORY_MAX_LIMIT
from src.core.logger import logger
from src.services.snapshots import fetch_member
from src.views.embeds import (
    build_history_embed,
    build_server_info_embed,
    build_user_info_embed,
)

if TYPE_CHECKING:
    from src.bot import AltDetectorBot


class InfoCog(commands.Cog):
    """Server, user and check-history lookups."""

    def __init__(self, bot: "AltDetectorBot") -> None:
        self.bot = bot

        logger.tree("Info Cog Loaded", [
            ("Commands", "/serverinfo, /userinfo, /althistory"),
        ], emoji="ℹ️")

    @app_commands.command(name="serverinfo", description="Show information about this server")
    @app_commands.guild_only()
    async def serverinfo(self, interaction: discord.Interaction) -> None:
        guild = interaction.guild
        owner = guild.owner
        if owner is None and guild.owner_id:
            owner = await fetch_member(guild, guild.owner_id)

        await interaction.response.send_message(embed=build_server_info_embed(guild, owner))

    @app_commands.command(name="userinfo", description="Show information about a user")
    @app_commands.describe(user="The user to look up (defaults to you)")
    @app_commands.guild_only()
    async def userinfo(self, interaction: discord.Interaction, user: Optional[discord.User] = None) -> None:
        target = user or interaction.user
        member = await fetch_member(interaction.guild, target.id)
        await interaction.response.send_message(embed=build_user_info_embed(target, member))

    @app_commands.command(name="althistory", description="Show recent alt account checks")
    @app_commands.describe(limit="Number of checks to show (1-10)")
    @app_commands.guild_only()
    async def althistory(
        self,
        interaction: discord.Interaction,
        limit: Optional[app_commands.Range[int, 1, ALTHISTORY_MAX_LIMIT]] = None,
    ) -> None:
        if not await check_mod_permission(interaction):
            return

        guild_id = interaction.guild.id
        history = self.bot.check_history
        day_ago = datetime.now(timezone.utc) - timedelta(days=1)

        embed = build_history_embed(
            history.recent(guild_id, limit or ALTHISTORY_DEFAULT_LIMIT),
            history.summary(guild_id, since=day_ago),
            history.summary(guild_id),
        )
        await interaction.response.send_message(embed=embed)


async def setup(bot: "AltDetectorBot") -> None:
    """Load the InfoCog."""
    await bot.add_cog(InfoCog(bot))


__all__ = ["InfoCog"]
