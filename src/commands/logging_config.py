"""
Alt Account Detector - Logging Config Commands
==============================================

/setreactionlogs, /setdeletedlogs, /seteditlogs and /logstatus.

DESIGN:
    The set* commands only post a channel select menu; the selection
    itself is stored by LogChannelSelect. Settings are held in the bot's
    ServerConfigStore for the lifetime of the process.
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import check_admin_permission, check_mod_permission
from src.core.logger import logger
from src.core.server_config import LogType
from src.views.embeds import build_log_status_embed
from src.views.log_config import LogChannelView, build_prompt_embed

if TYPE_CHECKING:
    from src.bot import AltDetectorBot


class LoggingConfigCog(commands.Cog):
    """Per-guild audit log channel configuration."""

    def __init__(self, bot: "AltDetectorBot") -> None:
        self.bot = bot

        logger.tree("Logging Config Cog Loaded", [
            ("Commands", "/setreactionlogs, /setdeletedlogs, /seteditlogs, /logstatus"),
        ], emoji="📝")

    async def _prompt(self, interaction: discord.Interaction, log_type: LogType) -> None:
        if not await check_admin_permission(interaction):
            return

        await interaction.response.send_message(
            embed=build_prompt_embed(log_type),
            view=LogChannelView(interaction.guild, log_type, self.bot.server_configs),
        )

    @app_commands.command(name="setreactionlogs", description="Choose the channel for reaction logs")
    @app_commands.guild_only()
    async def setreactionlogs(self, interaction: discord.Interaction) -> None:
        await self._prompt(interaction, LogType.REACTION)

    @app_commands.command(name="setdeletedlogs", description="Choose the channel for deleted message logs")
    @app_commands.guild_only()
    async def setdeletedlogs(self, interaction: discord.Interaction) -> None:
        await self._prompt(interaction, LogType.DELETED)

    @app_commands.command(name="seteditlogs", description="Choose the channel for message edit logs")
    @app_commands.guild_only()
    async def seteditlogs(self, interaction: discord.Interaction) -> None:
        await self._prompt(interaction, LogType.EDIT)

    @app_commands.command(name="logstatus", description="Show the logging configuration for this server")
    @app_commands.guild_only()
    async def logstatus(self, interaction: discord.Interaction) -> None:
        if not await check_mod_permission(interaction):
            return

        config = self.bot.server_configs.get(interaction.guild.id)
        await interaction.response.send_message(embed=build_log_status_embed(config))


async def setup(bot: "AltDetectorBot") -> None:
    """Load the LoggingConfigCog."""
    await bot.add_cog(LoggingConfigCog(bot))


__all__ = ["LoggingConfigCog"]
