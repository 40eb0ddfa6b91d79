"""
Alt Account Detector - Check Command
====================================

!check and /check: score a user and post moderation buttons.

DESIGN:
    Both forms call RiskService.run_check() and render the same embed and
    view; they differ only in how the target is resolved and how the
    reply is sent. The prefix form adds the "LOADING" letter reactions
    while the analysis runs and always removes them afterwards.
"""

import re
from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import check_mod_permission, get_config, is_moderator
from src.core.constants import LOADING_EMOJIS
from src.core.logger import logger
from src.utils.interaction import safe_defer
from src.utils.retry import safe_fetch_user
from src.views.check import build_check_embed, build_check_view

if TYPE_CHECKING:
    from src.bot import AltDetectorBot


_USER_ARG = re.compile(r"<@!?(\d+)>|(\d{15,21})")


def parse_user_id(argument: Optional[str]) -> Optional[int]:
    """Pull a user ID out of a mention or a raw snowflake."""
    if not argument:
        return None
    match = _USER_ARG.fullmatch(argument.strip())
    if match is None:
        return None
    return int(match.group(1) or match.group(2))


# =============================================================================
# Check Cog
# =============================================================================

class CheckCog(commands.Cog):
    """Alt account checks."""

    def __init__(self, bot: "AltDetectorBot") -> None:
        self.bot = bot
        self.config = get_config()

        logger.tree("Check Cog Loaded", [
            ("Commands", f"{self.config.command_prefix}check, /check"),
            ("Function", "Alt account risk analysis"),
        ], emoji="🔍")

    # =========================================================================
    # Loading Reactions
    # =========================================================================

    async def _add_loading(self, message: discord.Message) -> None:
        if not self.config.loading_reactions:
            return
        for emoji in LOADING_EMOJIS:
            try:
                await message.add_reaction(emoji)
            except discord.HTTPException:
                return

    async def _remove_loading(self, message: discord.Message) -> None:
        if not self.config.loading_reactions or self.bot.user is None:
            return
        for emoji in LOADING_EMOJIS:
            try:
                await message.remove_reaction(emoji, self.bot.user)
            except discord.HTTPException:
                continue

    # =========================================================================
    # Prefix Command
    # =========================================================================

    @commands.command(name="check")
    @commands.guild_only()
    async def check_prefix(self, ctx: commands.Context, *, target: Optional[str] = None) -> None:
        """!check <@user|id>"""
        if not is_moderator(ctx.author):
            await ctx.reply("🚫 You need moderator permissions to use this command.")
            return

        await self._add_loading(ctx.message)
        try:
            user: Optional[discord.abc.User] = None
            if ctx.message.mentions:
                user = ctx.message.mentions[0]
            else:
                user_id = parse_user_id(target)
                if user_id is None:
                    await ctx.reply("Please mention a user or provide a valid user ID.")
                    return
                user = await safe_fetch_user(self.bot, user_id)
                if user is None:
                    await ctx.reply("❌ Could not find a user with that ID.")
                    return

            result = await self.bot.risk_service.run_check(user, ctx.guild, ctx.author)
        finally:
            await self._remove_loading(ctx.message)

        await ctx.reply(
            embed=build_check_embed(result.target, result.assessment),
            view=build_check_view(result.target.id, result.target_is_admin),
        )

    # =========================================================================
    # Slash Command
    # =========================================================================

    @app_commands.command(name="check", description="Check a user for alt account risk")
    @app_commands.describe(user="The user to check")
    @app_commands.guild_only()
    async def check_slash(self, interaction: discord.Interaction, user: discord.User) -> None:
        if not await check_mod_permission(interaction):
            return

        await safe_defer(interaction)

        result = await self.bot.risk_service.run_check(user, interaction.guild, interaction.user)
        await interaction.followup.send(
            embed=build_check_embed(result.target, result.assessment),
            view=build_check_view(result.target.id, result.target_is_admin),
        )


# =============================================================================
# Setup
# =============================================================================

async def setup(bot: "AltDetectorBot") -> None:
    """Load the CheckCog."""
    await bot.add_cog(CheckCog(bot))


__all__ = ["CheckCog", "parse_user_id"]
