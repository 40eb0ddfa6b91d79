"""
Alt Account Detector - Interaction Utilities
============================================

Shared helpers for Discord interaction handling.

Provides safe_respond() so callers don't repeat the is_done() check
around every reply.
"""

from typing import Any, Optional

import discord

from src.core.logger import logger


async def safe_respond(
    interaction: discord.Interaction,
    content: Optional[str] = None,
    *,
    embed: Optional[discord.Embed] = None,
    view: Optional[discord.ui.View] = None,
    ephemeral: bool = True,
) -> bool:
    """
    Reply to an interaction whether or not it has been answered yet.

    Uses response.send_message() for the first reply and followup.send()
    afterwards. HTTP failures (usually expired interactions) are logged at
    debug level and reported through the return value.

    Returns:
        True if the message was sent.
    """
    kwargs: dict[str, Any] = {"ephemeral": ephemeral}
    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed
    if view is not None:
        kwargs["view"] = view

    try:
        if interaction.response.is_done():
            await interaction.followup.send(**kwargs)
        else:
            await interaction.response.send_message(**kwargs)
        return True
    except discord.HTTPException as e:
        logger.debug(f"safe_respond failed: {e.status} - {str(e)[:50]}")
        return False


async def safe_defer(interaction: discord.Interaction, *, ephemeral: bool = False) -> bool:
    """Defer an interaction unless it was already answered."""
    try:
        if interaction.response.is_done():
            return False
        await interaction.response.defer(ephemeral=ephemeral, thinking=True)
        return True
    except discord.HTTPException:
        return False


__all__ = [
    "safe_respond",
    "safe_defer",
]
