"""
Alt Account Detector - Report Commands
======================================

/safetyreport: guild-wide risk scan of cached members.
/timeline: a user's recent message activity.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import check_mod_permission, get_config
from src.core.constants import TIMELINE_MAX_DAYS
from src.core.logger import logger
from src.services.server_report import scan_guild
from src.services.timeline import build_behavior_timeline, collect_message_events
from src.utils.interaction import safe_defer
from src.views.embeds import build_safety_report_embed, build_timeline_embed

if TYPE_CHECKING:
    from src.bot import AltDetectorBot


class ReportsCog(commands.Cog):
    """Server safety and behavior reports."""

    def __init__(self, bot: "AltDetectorBot") -> None:
        self.bot = bot
        self.config = get_config()

        logger.tree("Reports Cog Loaded", [
            ("Commands", "/safetyreport, /timeline"),
            ("Scan Limit", str(self.config.report_scan_limit)),
        ], emoji="🛡️")

    @app_commands.command(name="safetyreport", description="Scan this server's members for alt account risk")
    @app_commands.guild_only()
    async def safetyreport(self, interaction: discord.Interaction) -> None:
        if not await check_mod_permission(interaction):
            return

        await safe_defer(interaction)

        report = scan_guild(
            interaction.guild,
            limit=self.config.report_scan_limit,
            tz=self.config.tz,
        )
        await interaction.followup.send(embed=build_safety_report_embed(interaction.guild, report))

    @app_commands.command(name="timeline", description="Show a user's recent message activity")
    @app_commands.describe(user="The user to analyze", days="How many days back to look (1-30)")
    @app_commands.guild_only()
    async def timeline(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        days: Optional[app_commands.Range[int, 1, TIMELINE_MAX_DAYS]] = None,
    ) -> None:
        if not await check_mod_permission(interaction):
            return

        await safe_defer(interaction)

        window = days or self.config.timeline_default_days
        now = datetime.now(timezone.utc)
        events = await collect_message_events(
            interaction.guild,
            user.id,
            window,
            self.config.timeline_channel_limit,
            now=now,
        )
        timeline = build_behavior_timeline(events, now, window)

        logger.tree("Timeline Built", [
            ("Target", f"{user} ({user.id})"),
            ("Requested By", f"{interaction.user} ({interaction.user.id})"),
            ("Days", str(timeline.days)),
            ("Messages", str(timeline.total_messages)),
            ("Observations", str(len(timeline.observations))),
        ], emoji="🕒")

        await interaction.followup.send(embed=build_timeline_embed(user, timeline))


async def setup(bot: "AltDetectorBot") -> None:
    """Load the ReportsCog."""
    await bot.add_cog(ReportsCog(bot))


__all__ = ["ReportsCog"]
