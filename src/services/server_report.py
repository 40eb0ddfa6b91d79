"""
Alt Account Detector - Server Safety Report
===========================================

Scores every cached member of a guild and summarizes the results.

DESIGN:
    scan_guild() only reads the member cache; it never fetches users one
    by one, so banners are unknown and the report is a cheap estimate
    rather than a full /check of every member. Mutual-connection timing
    is not part of the scan.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple

import discord

from src.core.constants import REPORT_TOP_ENTRIES
from src.core.logger import logger
from src.risk import RiskAssessment, RiskLabel, evaluate
from .snapshots import build_member_snapshot, build_user_snapshot


NEW_ACCOUNT_DAYS = 7
RECENT_JOIN_HOURS = 24


@dataclass(frozen=True)
class ReportEntry:
    """One scored member."""

    member_id: int
    display: str
    assessment: RiskAssessment
    has_default_avatar: bool = False


@dataclass(frozen=True)
class ServerSafetyReport:
    total_scanned: int
    label_counts: Dict[RiskLabel, int]
    average_score: float
    new_accounts: int
    default_avatars: int
    recent_joins: int
    top_entries: Tuple[ReportEntry, ...]
    truncated: bool = False

    @property
    def high_risk_count(self) -> int:
        return self.label_counts[RiskLabel.HIGH] + self.label_counts[RiskLabel.CRITICAL]

    @property
    def high_risk_percent(self) -> float:
        if not self.total_scanned:
            return 0.0
        return self.high_risk_count * 100 / self.total_scanned


def build_server_report(entries: Iterable[ReportEntry], truncated: bool = False) -> ServerSafetyReport:
    """
    Aggregate scored members into a report.

    Top entries are ordered by score (highest first), ties broken by
    member ID so the order is stable.
    """
    entries = list(entries)
    counts = Counter(e.assessment.label for e in entries)
    label_counts = {label: counts.get(label, 0) for label in RiskLabel}

    recent_joins = sum(
        1 for e in entries
        if e.assessment.join_analysis is not None
        and e.assessment.join_analysis.join_hours < RECENT_JOIN_HOURS
    )

    ranked = sorted(entries, key=lambda e: (-e.assessment.score, e.member_id))

    return ServerSafetyReport(
        total_scanned=len(entries),
        label_counts=label_counts,
        average_score=(sum(e.assessment.score for e in entries) / len(entries)) if entries else 0.0,
        new_accounts=sum(1 for e in entries if e.assessment.age_days < NEW_ACCOUNT_DAYS),
        default_avatars=sum(1 for e in entries if e.has_default_avatar),
        recent_joins=recent_joins,
        top_entries=tuple(ranked[:REPORT_TOP_ENTRIES]),
        truncated=truncated,
    )


def scan_guild(
    guild: discord.Guild,
    limit: int,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
) -> ServerSafetyReport:
    """Score up to `limit` cached non-bot members of a guild."""
    now = now or datetime.now(timezone.utc)
    entries: List[ReportEntry] = []
    truncated = False

    for member in guild.members:
        if member.bot:
            continue
        if len(entries) >= limit:
            truncated = True
            break

        user = build_user_snapshot(member)
        assessment = evaluate(user, build_member_snapshot(member), now=now, tz=tz)
        entries.append(ReportEntry(
            member_id=member.id,
            display=str(member),
            assessment=assessment,
            has_default_avatar=not user.has_avatar,
        ))

    report = build_server_report(entries, truncated=truncated)

    logger.tree("Safety Report Built", [
        ("Guild", f"{guild.name} ({guild.id})"),
        ("Scanned", str(report.total_scanned)),
        ("High/Critical", str(report.high_risk_count)),
        ("Average Score", f"{report.average_score:.1f}"),
        ("Truncated", "Yes" if truncated else "No"),
    ], emoji="🛡️")

    return report


__all__ = [
    "ReportEntry",
    "ServerSafetyReport",
    "build_server_report",
    "scan_guild",
]
