"""
Alt Account Detector - Retry Utilities
======================================

Retry logic for Discord API calls with exponential backoff, plus safe
wrappers used at the presentation edge.
"""

import asyncio
from typing import Any, Callable, Optional, Tuple, Type

import discord

from src.core.logger import logger


# Exceptions that should trigger a retry
RETRYABLE_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    discord.HTTPException,
    asyncio.TimeoutError,
    ConnectionError,
)

# Retrying these never helps
PERMANENT_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    discord.NotFound,
    discord.Forbidden,
)


async def retry_async(
    coro_func: Callable[..., Any],
    *args,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    exceptions: Tuple[Type[Exception], ...] = RETRYABLE_EXCEPTIONS,
    **kwargs,
) -> Any:
    """
    Retry an async function with exponential backoff.

    Args:
        coro_func: Async function to call.
        *args: Arguments to pass to the function.
        max_retries: Maximum number of retry attempts.
        base_delay: Initial delay between retries (seconds).
        max_delay: Maximum delay between retries (seconds).
        exceptions: Tuple of exception types that trigger retry.
        **kwargs: Keyword arguments to pass to the function.

    Returns:
        Result of the coroutine function.

    Raises:
        NotFound/Forbidden immediately, otherwise the last exception once
        all retries fail.
    """
    last_exception: Optional[BaseException] = None

    for attempt in range(max_retries + 1):
        try:
            return await coro_func(*args, **kwargs)
        except PERMANENT_EXCEPTIONS:
            raise
        except exceptions as e:
            last_exception = e

            if attempt < max_retries:
                # 1s, 2s, 4s ... capped at max_delay
                delay = min(base_delay * (2 ** attempt), max_delay)
                logger.warning(f"Retry {attempt + 1}/{max_retries}: {type(e).__name__} - retrying in {delay:.1f}s")
                await asyncio.sleep(delay)
            else:
                logger.error(f"All {max_retries} retries failed: {type(e).__name__}: {e}")

    raise last_exception


async def safe_fetch_channel(bot, channel_id: Optional[int]) -> Optional[discord.abc.GuildChannel]:
    """
    Get a channel from cache, falling back to the API.

    Returns:
        Channel object or None if not found/failed.
    """
    if not channel_id:
        return None

    channel = bot.get_channel(channel_id)
    if channel:
        return channel

    try:
        return await retry_async(
            bot.fetch_channel,
            channel_id,
            max_retries=2,
            base_delay=0.5,
        )
    except (discord.NotFound, discord.Forbidden):
        return None
    except discord.HTTPException as e:
        logger.error(f"Failed to fetch channel {channel_id}: {e}")
        return None


async def safe_fetch_user(bot, user_id: int) -> Optional[discord.User]:
    """
    Fetch a user by ID from the API.

    Returns:
        User object or None if the ID does not resolve.
    """
    try:
        return await retry_async(
            bot.fetch_user,
            user_id,
            max_retries=2,
            base_delay=0.5,
        )
    except discord.NotFound:
        return None
    except discord.HTTPException as e:
        logger.error(f"Failed to fetch user {user_id}: {e}")
        return None


async def safe_send(
    channel: discord.abc.Messageable,
    content: Optional[str] = None,
    **kwargs,
) -> Optional[discord.Message]:
    """
    Send a message with retry logic.

    Args:
        channel: Channel to send to.
        content: Message content.
        **kwargs: Additional arguments (embed, view, etc.)

    Returns:
        Sent message or None on failure.
    """
    if not channel:
        return None

    try:
        return await retry_async(
            channel.send,
            content,
            max_retries=2,
            base_delay=0.5,
            **kwargs,
        )
    except discord.HTTPException as e:
        logger.error(f"Failed to send message: {e}")
        return None


__all__ = [
    "retry_async",
    "safe_fetch_channel",
    "safe_fetch_user",
    "safe_send",
    "RETRYABLE_EXCEPTIONS",
]
