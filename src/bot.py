"""
Alt Account Detector - Main Bot Class
=====================================

Core Discord client for alt account risk checks.

Features:
- !check and /check alt account analysis with moderation buttons
- Server safety reports and behavior timelines
- Per-guild delete/edit/reaction audit logs
"""

from datetime import datetime

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import get_config
from src.core.logger import logger
from src.core.server_config import ServerConfigStore
from src.services.audit_logs import AuditLogService
from src.services.check_history import CheckHistory
from src.services.risk_service import RiskService
from src.utils.error_handler import ErrorHandler
from src.utils.interaction import safe_respond


GENERIC_ERROR_MESSAGE = "❌ An error occurred while processing your request."


# =============================================================================
# AltDetectorBot Class
# =============================================================================

class AltDetectorBot(commands.Bot):
    """
    Main Discord bot class.

    DESIGN: Central orchestrator that:
    - Holds the services and stores cogs reach through the bot
    - Loads command and event cogs
    - Registers persistent buttons
    - Reports command errors in one place

    SERVICE INITIALIZATION ORDER:
    1. __init__: stores and services (no Discord I/O)
    2. setup_hook (before on_ready):
       - Command cog loading
       - Event cog loading
       - Dynamic item registration
       - Command tree syncing
    3. on_ready: footer avatar, error webhook
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self) -> None:
        self.config = get_config()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True

        super().__init__(
            command_prefix=self.config.command_prefix,
            intents=intents,
            help_command=None,
        )

        self.start_time: datetime = datetime.now()

        self.server_configs = ServerConfigStore()
        self.check_history = CheckHistory(self.config.check_history_size)
        self.risk_service = RiskService(self, self.check_history)
        self.audit_logs = AuditLogService(self, self.server_configs)

        self.tree.on_error = self.on_app_command_error

        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Load cogs and sync commands before on_ready."""
        from src.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
                logger.info(f"Cog Loaded: {cog.split('.')[-1]}")
            except commands.ExtensionError as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        from src.events import EVENT_COGS
        for cog in EVENT_COGS:
            try:
                await self.load_extension(cog)
                logger.debug(f"Event Cog Loaded: {cog.split('.')[-1]}")
            except commands.ExtensionError as e:
                logger.error("Failed to Load Event Cog", [("Cog", cog), ("Error", str(e))])

        from src.views.check import AltActionButton
        self.add_dynamic_items(AltActionButton)

        try:
            synced = await self.tree.sync()
            logger.tree("Commands Synced", [("Count", str(len(synced)))], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        from src.utils.footer import init_footer
        init_footer(self)

        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
            ("Prefix", self.config.command_prefix),
            ("Error Webhook", "Enabled" if self.config.error_webhook_url else "Disabled"),
        ], emoji="🚀")

    # =========================================================================
    # Error Handling
    # =========================================================================

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        """Log slash command failures and tell the user something went wrong."""
        if isinstance(error, app_commands.NoPrivateMessage):
            await safe_respond(interaction, "⚠️ This command only works in a server.")
            return

        original = getattr(error, "original", error)
        ErrorHandler.handle(
            original,
            location=f"command:{interaction.command.qualified_name if interaction.command else 'unknown'}",
            critical=False,
            interaction=interaction,
        )
        await safe_respond(interaction, GENERIC_ERROR_MESSAGE)

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        """Same for prefix commands; unknown commands are ignored."""
        if isinstance(error, commands.CommandNotFound):
            return
        if isinstance(error, commands.NoPrivateMessage):
            await ctx.reply("⚠️ This command only works in a server.")
            return

        original = getattr(error, "original", error)
        ErrorHandler.handle(
            original,
            location=f"command:{ctx.command.qualified_name if ctx.command else 'unknown'}",
            critical=False,
            message=ctx.message,
        )
        try:
            await ctx.reply(GENERIC_ERROR_MESSAGE)
        except discord.HTTPException:
            logger.debug("Failed to send prefix command error reply")

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def close(self) -> None:
        logger.info("Initiating Graceful Shutdown")
        await super().close()
        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
            ("Checks Recorded", str(len(self.check_history))),
        ], emoji="🛑")


__all__ = ["AltDetectorBot", "GENERIC_ERROR_MESSAGE"]
