"""
Alt Account Detector - Check History
====================================

Recent alt checks per guild, kept in memory.

DESIGN:
    Each guild gets a bounded deque, so the oldest checks fall off once
    the configured size is reached. History lives for the process
    lifetime only and is lost on restart.
"""

from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Dict, List, Optional

from src.risk.models import RiskLabel


@dataclass(frozen=True)
class CheckRecord:
    """One completed alt check."""

    user_id: int
    user_tag: str
    moderator_id: int
    score: int
    label: RiskLabel
    checked_at: datetime


@dataclass(frozen=True)
class CheckHistorySummary:
    total: int
    by_label: Dict[RiskLabel, int]
    average_score: float
    unique_users: int


class CheckHistory:
    """Bounded per-guild log of CheckRecord entries."""

    def __init__(self, max_per_guild: int = 50) -> None:
        self._max = max_per_guild
        self._records: Dict[int, Deque[CheckRecord]] = {}

    def record(self, guild_id: int, record: CheckRecord) -> None:
        if guild_id not in self._records:
            self._records[guild_id] = deque(maxlen=self._max)
        self._records[guild_id].append(record)

    def recent(self, guild_id: int, limit: int = 5) -> List[CheckRecord]:
        """Most recent checks first."""
        records = self._records.get(guild_id)
        if not records:
            return []
        return list(reversed(records))[:limit]

    def summary(self, guild_id: int, since: Optional[datetime] = None) -> CheckHistorySummary:
        records = [
            r for r in self._records.get(guild_id, ())
            if since is None or r.checked_at >= since
        ]
        if not records:
            return CheckHistorySummary(total=0, by_label={}, average_score=0.0, unique_users=0)

        return CheckHistorySummary(
            total=len(records),
            by_label=dict(Counter(r.label for r in records)),
            average_score=sum(r.score for r in records) / len(records),
            unique_users=len({r.user_id for r in records}),
        )

    def __len__(self) -> int:
        return sum(len(r) for r in self._records.values())


__all__ = [
    "CheckRecord",
    "CheckHistorySummary",
    "CheckHistory",
]
