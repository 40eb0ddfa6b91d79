"""
Alt Account Detector - Embed Footer Utility
===========================================

Centralized footer for informational embeds.
The bot avatar is cached once the bot is ready.
"""

from typing import Optional

import discord

from src.core.logger import logger


# =============================================================================
# Constants
# =============================================================================

FOOTER_TEXT = "Alt Account Detector"
"""Footer text displayed on user-facing embeds."""


# =============================================================================
# Module State
# =============================================================================

_cached_avatar_url: Optional[str] = None
"""Bot avatar URL cached by init_footer()."""


# =============================================================================
# Initialization
# =============================================================================

def init_footer(bot: discord.Client) -> None:
    """
    Cache the bot avatar for footers.

    DESIGN:
        Called once from on_ready, when bot.user is available.
    """
    global _cached_avatar_url

    if bot.user is None:
        logger.warning("Footer Init Skipped: Bot user not available")
        return

    _cached_avatar_url = bot.user.display_avatar.url
    logger.tree("Footer Initialized", [
        ("Text", FOOTER_TEXT),
        ("Avatar Cached", "Yes"),
    ], emoji="📝")


# =============================================================================
# Footer Setter
# =============================================================================

def set_footer(
    embed: discord.Embed,
    text: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> discord.Embed:
    """
    Set the standard footer on an embed.

    Args:
        embed: The embed to add footer to.
        text: Optional override text (defaults to FOOTER_TEXT).
        avatar_url: Optional override avatar URL (uses cached if not provided).

    Returns:
        The embed with footer set.
    """
    url = avatar_url if avatar_url is not None else _cached_avatar_url
    embed.set_footer(text=text or FOOTER_TEXT, icon_url=url)
    return embed


__all__ = [
    "FOOTER_TEXT",
    "init_footer",
    "set_footer",
]
