"""
Alt Account Detector - Error Handler
====================================

Detailed error context and categorized logging.

Features:
- Error categorization (Discord, network, general)
- Recovery suggestions per category
- Discord-specific context capture
- Critical errors saved as JSON for later analysis
- Safe execution decorator for event listeners
"""

import functools
import json
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import discord

from src.core.logger import LOGS_DIR, logger


ERROR_DIR = LOGS_DIR / "errors"


class ErrorContext:
    """Captures and formats detailed error context."""

    @staticmethod
    def get_full_context(e: Exception, location: str, **kwargs) -> Dict[str, Any]:
        """
        Get comprehensive error context.

        Args:
            e: The exception.
            location: Where the error occurred.
            **kwargs: Additional context (interaction, message, etc.)
        """
        context: Dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "location": location,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "traceback": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            "python_version": sys.version,
            "additional_context": {k: str(v)[:200] for k, v in kwargs.items()},
        }

        interaction = kwargs.get("interaction")
        if isinstance(interaction, discord.Interaction):
            context["discord_context"] = {
                "guild": interaction.guild.name if interaction.guild else "DM",
                "user": str(interaction.user),
                "user_id": interaction.user.id,
                "command": interaction.command.qualified_name if interaction.command else None,
            }

        message = kwargs.get("message")
        if isinstance(message, discord.Message):
            context["discord_context"] = {
                "guild": message.guild.name if message.guild else "DM",
                "channel": getattr(message.channel, "name", str(message.channel)),
                "user": str(message.author),
                "user_id": message.author.id,
            }

        return context


class ErrorHandler:
    """Error handling with context and recovery hints."""

    ERROR_CATEGORIES = {
        "discord": (discord.DiscordException,),
        "network": (ConnectionError, TimeoutError, OSError),
    }

    RECOVERY_SUGGESTIONS = (
        (discord.Forbidden, "Check bot permissions in server settings"),
        (discord.NotFound, "Resource not found - check IDs and channels"),
        (discord.HTTPException, "Discord API issue - will retry automatically"),
        (ConnectionError, "Network connection issue - check internet connection"),
        (TimeoutError, "Request timed out - will retry automatically"),
        (OSError, "System resource issue - check disk space and permissions"),
    )

    @classmethod
    def categorize_error(cls, e: Exception) -> str:
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return "general"

    @classmethod
    def get_recovery_suggestion(cls, e: Exception) -> str:
        for error_type, suggestion in cls.RECOVERY_SUGGESTIONS:
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: Exception, location: str, critical: bool = False, **context) -> None:
        """
        Log an error with full context.

        Args:
            e: The exception.
            location: Where the error occurred.
            critical: Whether to save the full context to disk.
            **context: Additional context.
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Category", category.upper()),
            ("Location", location),
            ("Type", full_context["error_type"]),
            ("Error", full_context["error_message"][:200]),
            ("Recovery", suggestion),
        ]
        discord_context = full_context.get("discord_context")
        if discord_context:
            details.append(("User", f"{discord_context['user']} ({discord_context['user_id']})"))
            details.append(("Guild", discord_context["guild"]))

        if critical:
            logger.error("💥 Critical Error", details)
            cls._store_critical_error(full_context)
        else:
            logger.warning(f"[{category.upper()}] in {location}: {full_context['error_type']} - {str(e)[:100]} | Recovery: {suggestion}")

    @staticmethod
    def _store_critical_error(context: Dict[str, Any], error_dir: Optional[Path] = None) -> Optional[Path]:
        """Save critical error context as JSON."""
        target_dir = error_dir or ERROR_DIR
        try:
            target_dir.mkdir(exist_ok=True, parents=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            error_file = target_dir / f"error_{timestamp}.json"
            with open(error_file, "w", encoding="utf-8") as f:
                json.dump(context, f, indent=2, default=str)
        except OSError as save_error:
            logger.warning(f"Failed to save error details: {save_error}")
            return None

        logger.info(f"Critical error saved to {error_file}")
        return error_file


def safe_execute(func):
    """
    Decorator for event listeners that must never crash the dispatcher.

    Usage:
        @safe_execute
        async def on_message_delete(self, message):
            ...
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            ErrorHandler.handle(
                e,
                location=f"{func.__module__}.{func.__qualname__}",
                critical=False,
            )
            return None

    return wrapper


__all__ = [
    "ErrorContext",
    "ErrorHandler",
    "safe_execute",
]
