"""
Alt Account Detector - Behavior Timeline
========================================

Summarizes a user's recent message activity in a guild.

DESIGN:
    collect_message_events() does the slow part (paging channel history)
    and reduces every message to a MessageEvent. build_behavior_timeline()
    is pure, so all the analysis is testable without Discord.

Observations:
    - Burst posting (5+ messages within 60 seconds)
    - Mostly link or attachment messages
    - Single-channel activity
    - All activity on one day
    - Dormant for several days
"""

import re
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

import discord

from src.core.constants import (
    TIMELINE_BURST_SIZE,
    TIMELINE_BURST_WINDOW_SECONDS,
    TIMELINE_MAX_DAYS,
    TIMELINE_TOP_CHANNELS,
)
from src.core.logger import logger


LINK_PATTERN = re.compile(r"https?://\S+", re.IGNORECASE)

MOSTLY_RATIO = 0.5
SINGLE_CHANNEL_MIN_MESSAGES = 5
SINGLE_DAY_MIN_MESSAGES = 10
DORMANT_DAYS = 3


# =============================================================================
# Models
# =============================================================================

@dataclass(frozen=True)
class MessageEvent:
    """One message reduced to what the timeline needs."""

    created_at: datetime
    channel_id: int
    channel_name: str
    length: int = 0
    has_attachment: bool = False
    has_link: bool = False

    @classmethod
    def from_message(cls, message: discord.Message) -> "MessageEvent":
        content = message.content or ""
        return cls(
            created_at=message.created_at,
            channel_id=message.channel.id,
            channel_name=getattr(message.channel, "name", str(message.channel.id)),
            length=len(content),
            has_attachment=bool(message.attachments),
            has_link=bool(LINK_PATTERN.search(content)),
        )


@dataclass(frozen=True)
class BehaviorTimeline:
    days: int
    total_messages: int
    first_seen: Optional[datetime]
    last_seen: Optional[datetime]
    active_days: int
    daily_counts: Tuple[Tuple[date, int], ...]
    busiest_hour: Optional[int]
    channel_breakdown: Tuple[Tuple[str, int], ...]
    burst_count: int
    link_ratio: float
    attachment_ratio: float
    average_length: float
    observations: Tuple[str, ...]


# =============================================================================
# Analysis
# =============================================================================

def window_start(now: datetime, days: int) -> datetime:
    """UTC midnight of the first day covered by a `days`-day window ending at `now`."""
    first_day = now.astimezone(timezone.utc).date() - timedelta(days=days - 1)
    return datetime(first_day.year, first_day.month, first_day.day, tzinfo=timezone.utc)


def count_bursts(times: Sequence[datetime]) -> int:
    """
    Count non-overlapping runs of TIMELINE_BURST_SIZE messages that fit
    inside TIMELINE_BURST_WINDOW_SECONDS.
    """
    ordered = sorted(times)
    window = timedelta(seconds=TIMELINE_BURST_WINDOW_SECONDS)
    bursts = 0
    i = 0
    while i + TIMELINE_BURST_SIZE <= len(ordered):
        if ordered[i + TIMELINE_BURST_SIZE - 1] - ordered[i] <= window:
            bursts += 1
            i += TIMELINE_BURST_SIZE
        else:
            i += 1
    return bursts


def _observations(
    timeline_days: int,
    events: Sequence[MessageEvent],
    now: datetime,
    active_days: int,
    channels: int,
    bursts: int,
    link_ratio: float,
    attachment_ratio: float,
) -> List[str]:
    if not events:
        return [f"No messages found in the last {timeline_days} days"]

    notes: List[str] = []
    if bursts:
        notes.append(f"Burst posting detected ({bursts} bursts)")
    if link_ratio >= MOSTLY_RATIO:
        notes.append("Mostly link messages")
    if attachment_ratio >= MOSTLY_RATIO:
        notes.append("Mostly attachment messages")
    if channels == 1 and len(events) >= SINGLE_CHANNEL_MIN_MESSAGES:
        notes.append("Single-channel activity")
    if active_days == 1 and len(events) >= SINGLE_DAY_MIN_MESSAGES:
        notes.append("All activity on a single day")

    last_seen = max(e.created_at for e in events)
    dormant = (now - last_seen).days
    if dormant >= DORMANT_DAYS:
        notes.append(f"Dormant for {dormant} days")

    return notes


def build_behavior_timeline(
    events: Sequence[MessageEvent],
    now: datetime,
    days: int,
) -> BehaviorTimeline:
    """
    Summarize message events from the last `days` UTC calendar days,
    today included.

    Args:
        events: Messages by the user, in any order.
        now: End of the window.
        days: Window length, clamped to [1, TIMELINE_MAX_DAYS].
    """
    days = max(1, min(days, TIMELINE_MAX_DAYS))
    start = window_start(now, days)
    in_window = sorted(
        (e for e in events if start <= e.created_at <= now),
        key=lambda e: e.created_at,
    )
    total = len(in_window)

    per_day = Counter(e.created_at.astimezone(timezone.utc).date() for e in in_window)
    today = now.astimezone(timezone.utc).date()
    daily_counts = tuple(
        (day, per_day.get(day, 0))
        for day in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
    )

    hours = Counter(e.created_at.astimezone(timezone.utc).hour for e in in_window)
    busiest_hour = min(hours, key=lambda h: (-hours[h], h)) if hours else None

    channel_counts = Counter(e.channel_name for e in in_window)
    breakdown = tuple(sorted(channel_counts.items(), key=lambda kv: (-kv[1], kv[0]))[:TIMELINE_TOP_CHANNELS])

    bursts = count_bursts([e.created_at for e in in_window])
    link_ratio = sum(e.has_link for e in in_window) / total if total else 0.0
    attachment_ratio = sum(e.has_attachment for e in in_window) / total if total else 0.0

    return BehaviorTimeline(
        days=days,
        total_messages=total,
        first_seen=in_window[0].created_at if in_window else None,
        last_seen=in_window[-1].created_at if in_window else None,
        active_days=len(per_day),
        daily_counts=daily_counts,
        busiest_hour=busiest_hour,
        channel_breakdown=breakdown,
        burst_count=bursts,
        link_ratio=link_ratio,
        attachment_ratio=attachment_ratio,
        average_length=(sum(e.length for e in in_window) / total) if total else 0.0,
        observations=tuple(_observations(
            days, in_window, now, len(per_day), len(channel_counts),
            bursts, link_ratio, attachment_ratio,
        )),
    )


# =============================================================================
# Collection
# =============================================================================

async def collect_message_events(
    guild: discord.Guild,
    user_id: int,
    days: int,
    per_channel_limit: int,
    now: Optional[datetime] = None,
) -> List[MessageEvent]:
    """
    Page through readable text channels for a user's recent messages.

    Channels the bot cannot read are skipped.
    """
    now = now or datetime.now(timezone.utc)
    after = window_start(now, max(1, min(days, TIMELINE_MAX_DAYS)))
    events: List[MessageEvent] = []
    skipped = 0

    for channel in guild.text_channels:
        perms = channel.permissions_for(guild.me)
        if not (perms.view_channel and perms.read_message_history):
            skipped += 1
            continue

        try:
            async for message in channel.history(limit=per_channel_limit, after=after, oldest_first=False):
                if message.author.id == user_id:
                    events.append(MessageEvent.from_message(message))
        except discord.Forbidden:
            skipped += 1
        except discord.HTTPException as e:
            skipped += 1
            logger.warning(f"History read failed in #{channel.name}: {e}")

    logger.tree("Timeline Messages Collected", [
        ("Guild", f"{guild.name} ({guild.id})"),
        ("User ID", str(user_id)),
        ("Messages", str(len(events))),
        ("Channels Skipped", str(skipped)),
    ], emoji="🕒")

    return events


__all__ = [
    "window_start",
    "MessageEvent",
    "BehaviorTimeline",
    "count_bursts",
    "build_behavior_timeline",
    "collect_message_events",
]
