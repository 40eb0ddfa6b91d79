"""
Alt Account Detector - Error Handler Tests
==========================================

Tests for error categorization, critical error storage and safe_execute.
"""

import json
from unittest.mock import MagicMock

import discord
import pytest

from src.utils.error_handler import ErrorContext, ErrorHandler, safe_execute


def _forbidden():
    response = MagicMock()
    response.status = 403
    response.reason = "Forbidden"
    return discord.Forbidden(response, "Missing Permissions")


class TestCategorization:

    @pytest.mark.parametrize("error,category", [
        (_forbidden(), "discord"),
        (ConnectionError("down"), "network"),
        (TimeoutError(), "network"),
        (ValueError("bad"), "general"),
    ])
    def test_categorize(self, error, category):
        assert ErrorHandler.categorize_error(error) == category

    def test_forbidden_suggestion_beats_http_exception(self):
        assert ErrorHandler.get_recovery_suggestion(_forbidden()) == "Check bot permissions in server settings"

    def test_unknown_suggestion(self):
        assert ErrorHandler.get_recovery_suggestion(KeyError("x")).startswith("Unexpected error")


class TestErrorContext:

    def test_basic_context(self):
        try:
            raise ValueError("broken")
        except ValueError as e:
            context = ErrorContext.get_full_context(e, "tests.here", extra="x" * 500)

        assert context["location"] == "tests.here"
        assert context["error_type"] == "ValueError"
        assert "broken" in context["traceback"]
        assert len(context["additional_context"]["extra"]) == 200
        assert "discord_context" not in context


class TestCriticalStorage:

    def test_store_writes_json(self, tmp_path):
        context = {"location": "main", "error_type": "RuntimeError"}

        path = ErrorHandler._store_critical_error(context, error_dir=tmp_path / "errors")

        assert path is not None
        assert json.loads(path.read_text(encoding="utf-8")) == context


class TestSafeExecute:

    @pytest.mark.asyncio
    async def test_returns_value(self):
        @safe_execute
        async def ok(value):
            return value * 2

        assert await ok(4) == 8

    @pytest.mark.asyncio
    async def test_swallows_and_returns_none(self):
        @safe_execute
        async def broken():
            raise RuntimeError("listener failed")

        assert await broken() is None
