"""
Alt Account Detector - Behavior Timeline Tests
==============================================

Tests for message activity summaries.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import discord
import pytest

from src.services.timeline import (
    MessageEvent,
    build_behavior_timeline,
    collect_message_events,
    count_bursts,
    window_start,
)

from tests.conftest import NOW


def _event(ago: timedelta, channel: str = "general", link: bool = False, attachment: bool = False, length: int = 10):
    return MessageEvent(
        created_at=NOW - ago,
        channel_id=hash(channel) & 0xFFFF,
        channel_name=channel,
        length=length,
        has_attachment=attachment,
        has_link=link,
    )


# =============================================================================
# Bursts
# =============================================================================

class TestCountBursts:

    def test_five_within_a_minute_is_one_burst(self):
        times = [NOW + timedelta(seconds=10 * i) for i in range(5)]
        assert count_bursts(times) == 1

    def test_runs_do_not_overlap(self):
        times = [NOW + timedelta(seconds=5 * i) for i in range(9)]
        assert count_bursts(times) == 1

    def test_spread_out_messages(self):
        times = [NOW + timedelta(minutes=i) for i in range(10)]
        assert count_bursts(times) == 0

    def test_order_does_not_matter(self):
        times = [NOW + timedelta(seconds=s) for s in (40, 0, 30, 10, 20)]
        assert count_bursts(times) == 1


# =============================================================================
# Timeline
# =============================================================================

class TestBuildBehaviorTimeline:

    def test_no_messages(self):
        timeline = build_behavior_timeline([], NOW, 7)

        assert timeline.total_messages == 0
        assert timeline.first_seen is None
        assert timeline.busiest_hour is None
        assert len(timeline.daily_counts) == 7
        assert timeline.observations == ("No messages found in the last 7 days",)

    def test_days_are_clamped(self):
        assert build_behavior_timeline([], NOW, 0).days == 1
        assert build_behavior_timeline([], NOW, 365).days == 30

    def test_events_outside_window_ignored(self):
        events = [_event(timedelta(days=2)), _event(timedelta(days=10))]

        timeline = build_behavior_timeline(events, NOW, 7)

        assert timeline.total_messages == 1

    def test_channel_breakdown_and_ratios(self):
        events = [
            _event(timedelta(hours=1), "general", link=True),
            _event(timedelta(hours=2), "general", link=True),
            _event(timedelta(hours=3), "memes", attachment=True),
            _event(timedelta(hours=4), "general", length=30),
        ]

        timeline = build_behavior_timeline(events, NOW, 7)

        assert timeline.channel_breakdown == (("general", 3), ("memes", 1))
        assert timeline.link_ratio == 0.5
        assert timeline.attachment_ratio == 0.25
        assert timeline.average_length == (10 + 10 + 10 + 30) / 4
        assert "Mostly link messages" in timeline.observations
        assert "Mostly attachment messages" not in timeline.observations

    def test_daily_counts_end_today(self):
        events = [_event(timedelta(hours=1)), _event(timedelta(days=1, hours=1))]

        timeline = build_behavior_timeline(events, NOW, 3)

        assert [count for _, count in timeline.daily_counts] == [0, 1, 1]
        assert timeline.daily_counts[-1][0] == NOW.date()
        assert timeline.active_days == 2

    def test_window_starts_at_midnight_of_first_day(self):
        assert window_start(NOW, 7) == datetime(2024, 6, 9, tzinfo=timezone.utc)
        assert window_start(NOW, 1) == datetime(2024, 6, 15, tzinfo=timezone.utc)

    @pytest.mark.parametrize("days", [1, 3, 7, 30])
    def test_daily_counts_cover_every_counted_message(self, days):
        events = [_event(timedelta(hours=h)) for h in range(1, 24 * 31, 5)]

        timeline = build_behavior_timeline(events, NOW, days)

        assert sum(count for _, count in timeline.daily_counts) == timeline.total_messages
        assert timeline.active_days <= len(timeline.daily_counts) == days

    def test_partial_day_before_window_is_excluded(self):
        # 6d20h ago is June 8 16:00, the day before a 7-day window opens
        events = [_event(timedelta(days=6, hours=20)), _event(timedelta(days=6, hours=11)), _event(timedelta(hours=1))]

        timeline = build_behavior_timeline(events, NOW, 7)

        assert timeline.total_messages == 2
        assert timeline.active_days == 2
        assert timeline.daily_counts[0] == (NOW.date() - timedelta(days=6), 1)
        assert sum(count for _, count in timeline.daily_counts) == 2

    def test_busiest_hour(self):
        events = [
            _event(timedelta(hours=2)),                 # 10:00
            _event(timedelta(hours=2, minutes=30)),     # 09:30
            _event(timedelta(days=1, hours=2)),         # 10:00
        ]

        assert build_behavior_timeline(events, NOW, 7).busiest_hour == 10

    def test_burst_single_channel_single_day(self):
        events = [_event(timedelta(minutes=30, seconds=5 * i), "spam") for i in range(10)]

        timeline = build_behavior_timeline(events, NOW, 7)

        assert timeline.burst_count == 2
        assert "Burst posting detected (2 bursts)" in timeline.observations
        assert "Single-channel activity" in timeline.observations
        assert "All activity on a single day" in timeline.observations

    def test_dormant(self):
        events = [_event(timedelta(days=5)), _event(timedelta(days=6), "other")]

        timeline = build_behavior_timeline(events, NOW, 14)

        assert "Dormant for 5 days" in timeline.observations


# =============================================================================
# Collection
# =============================================================================

class _History:
    """Async iterator standing in for channel.history()."""

    def __init__(self, messages):
        self._messages = list(messages)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._messages:
            raise StopAsyncIteration
        return self._messages.pop(0)


def _message(author_id: int, channel, content: str = "hello"):
    message = MagicMock()
    message.author.id = author_id
    message.channel = channel
    message.content = content
    message.attachments = []
    message.created_at = NOW - timedelta(hours=1)
    return message


class TestCollectMessageEvents:

    @pytest.mark.asyncio
    async def test_filters_author_and_skips_unreadable(self, mock_permissions):
        readable = MagicMock()
        readable.id = 10
        readable.name = "general"
        readable.permissions_for = MagicMock(return_value=mock_permissions(view_channel=True, read_message_history=True))
        readable.history = MagicMock(return_value=_History([
            _message(1, readable, "see https://example.com"),
            _message(2, readable),
        ]))

        hidden = MagicMock()
        hidden.name = "staff"
        hidden.permissions_for = MagicMock(return_value=mock_permissions())

        guild = MagicMock()
        guild.text_channels = [readable, hidden]

        events = await collect_message_events(guild, 1, days=7, per_channel_limit=50, now=NOW)

        assert len(events) == 1
        assert events[0].has_link is True
        assert events[0].channel_name == "general"
        hidden.history.assert_not_called()
        readable.history.assert_called_once_with(limit=50, after=window_start(NOW, 7), oldest_first=False)

    @pytest.mark.asyncio
    async def test_forbidden_channel_is_skipped(self, mock_permissions):
        response = MagicMock()
        response.status = 403
        response.reason = "Forbidden"

        channel = MagicMock()
        channel.name = "locked"
        channel.permissions_for = MagicMock(return_value=mock_permissions(view_channel=True, read_message_history=True))
        channel.history = MagicMock(side_effect=discord.Forbidden(response, "Missing Access"))

        guild = MagicMock()
        guild.text_channels = [channel]

        assert await collect_message_events(guild, 1, days=7, per_channel_limit=50, now=NOW) == []
