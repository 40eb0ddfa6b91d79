"""
Alt Account Detector - Retry Utility Tests
==========================================

Tests for retry_async and the safe_* wrappers.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from src.utils.retry import retry_async, safe_fetch_channel, safe_fetch_user, safe_send


def _http_error(cls, status: int):
    response = MagicMock()
    response.status = status
    response.reason = "error"
    return cls(response, "error")


@pytest.fixture
def no_sleep():
    with patch("src.utils.retry.asyncio.sleep", new=AsyncMock()) as sleep:
        yield sleep


class TestRetryAsync:

    @pytest.mark.asyncio
    async def test_returns_first_success(self, no_sleep):
        func = AsyncMock(return_value="ok")

        assert await retry_async(func, 1, key="v") == "ok"
        func.assert_awaited_once_with(1, key="v")
        no_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_retries_transient_errors(self, no_sleep):
        func = AsyncMock(side_effect=[asyncio.TimeoutError(), _http_error(discord.HTTPException, 500), "ok"])

        assert await retry_async(func, max_retries=3, base_delay=1.0) == "ok"
        assert func.await_count == 3
        assert [c.args[0] for c in no_sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_raises_after_exhausting(self, no_sleep):
        func = AsyncMock(side_effect=ConnectionError("down"))

        with pytest.raises(ConnectionError):
            await retry_async(func, max_retries=2)
        assert func.await_count == 3

    @pytest.mark.asyncio
    async def test_permanent_errors_are_not_retried(self, no_sleep):
        func = AsyncMock(side_effect=_http_error(discord.Forbidden, 403))

        with pytest.raises(discord.Forbidden):
            await retry_async(func)
        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_delay_is_capped(self, no_sleep):
        func = AsyncMock(side_effect=[ConnectionError()] * 4 + ["ok"])

        await retry_async(func, max_retries=4, base_delay=4.0, max_delay=5.0)

        assert [c.args[0] for c in no_sleep.await_args_list] == [4.0, 5.0, 5.0, 5.0]


class TestSafeWrappers:

    @pytest.mark.asyncio
    async def test_fetch_channel_prefers_cache(self, no_sleep):
        channel = MagicMock()
        bot = MagicMock()
        bot.get_channel = MagicMock(return_value=channel)
        bot.fetch_channel = AsyncMock()

        assert await safe_fetch_channel(bot, 5) is channel
        bot.fetch_channel.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetch_channel_none_id(self):
        assert await safe_fetch_channel(MagicMock(), None) is None

    @pytest.mark.asyncio
    async def test_fetch_channel_not_found(self, no_sleep):
        bot = MagicMock()
        bot.get_channel = MagicMock(return_value=None)
        bot.fetch_channel = AsyncMock(side_effect=_http_error(discord.NotFound, 404))

        assert await safe_fetch_channel(bot, 5) is None

    @pytest.mark.asyncio
    async def test_fetch_user_not_found(self, no_sleep):
        bot = MagicMock()
        bot.fetch_user = AsyncMock(side_effect=_http_error(discord.NotFound, 404))

        assert await safe_fetch_user(bot, 123) is None

    @pytest.mark.asyncio
    async def test_send_failure_returns_none(self, no_sleep):
        channel = MagicMock()
        channel.send = AsyncMock(side_effect=_http_error(discord.HTTPException, 500))

        assert await safe_send(channel, "hi") is None
        assert channel.send.await_count == 3

    @pytest.mark.asyncio
    async def test_send_without_channel(self):
        assert await safe_send(None, "hi") is None
