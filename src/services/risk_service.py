"""
Alt Account Detector - Risk Service
===================================

Runs a complete alt check for one target.

DESIGN:
    Both the !check prefix command and the /check slash command go
    through run_check(), so the mutual-connection merge happens exactly
    once per check no matter how it was triggered.

Flow:
    1. Refetch the user (banner data) and look up the member
    2. Evaluate the snapshots
    3. Compare mutual guild join timing against the requester
    4. Merge the mutual analysis into the assessment
    5. Record the check and log a summary
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import discord

from src.core.config import get_config, is_admin
from src.core.logger import logger
from src.risk import (
    MutualConnectionReport,
    RiskAssessment,
    analyze_mutual_connections,
    apply_mutual_analysis,
    evaluate,
)
from .check_history import CheckHistory, CheckRecord
from .snapshots import (
    build_member_snapshot,
    build_user_snapshot,
    collect_memberships,
    fetch_full_user,
    fetch_member,
)

if TYPE_CHECKING:
    from src.bot import AltDetectorBot


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one alt check, ready to render."""

    target: discord.abc.User
    assessment: RiskAssessment
    target_is_admin: bool


class RiskService:
    """Orchestrates snapshot fetching, scoring and mutual analysis."""

    def __init__(self, bot: "AltDetectorBot", history: CheckHistory) -> None:
        self.bot = bot
        self.history = history
        self.config = get_config()

    def mutual_report(self, target_id: int, requester_id: int) -> MutualConnectionReport:
        try:
            target_memberships, requester_memberships = collect_memberships(
                self.bot, target_id, requester_id
            )
        except discord.DiscordException as e:
            logger.warning(f"Mutual connection lookup failed: {type(e).__name__}: {e}")
            return MutualConnectionReport.unavailable()
        return analyze_mutual_connections(target_memberships, requester_memberships)

    async def run_check(
        self,
        target: discord.abc.User,
        guild: discord.Guild,
        requester: discord.abc.User,
    ) -> CheckResult:
        """
        Score a target and record the check.

        Args:
            target: User being checked.
            guild: Guild the check runs in.
            requester: Moderator who asked for the check.
        """
        now = datetime.now(timezone.utc)

        user = await fetch_full_user(self.bot, target)
        member = await fetch_member(guild, target.id)
        member_snapshot = build_member_snapshot(member) if member is not None else None

        assessment = evaluate(
            build_user_snapshot(user),
            member_snapshot,
            now=now,
            tz=self.config.tz,
        )
        report = self.mutual_report(target.id, requester.id)
        assessment = apply_mutual_analysis(assessment, report)

        target_is_admin = member is not None and is_admin(member)

        self.history.record(guild.id, CheckRecord(
            user_id=target.id,
            user_tag=str(user),
            moderator_id=requester.id,
            score=assessment.score,
            label=assessment.label,
            checked_at=now,
        ))

        logger.tree("Alt Check Complete", [
            ("Target", f"{user} ({user.id})"),
            ("Guild", f"{guild.name} ({guild.id})"),
            ("Requested By", f"{requester} ({requester.id})"),
            ("Score", f"{assessment.score} ({assessment.label.value})"),
            ("Confidence", f"{assessment.confidence}%"),
            ("In Server", "Yes" if member_snapshot else "No"),
            ("Mutual Servers", str(report.mutual_count)),
        ], emoji="🔍")

        return CheckResult(target=user, assessment=assessment, target_is_admin=target_is_admin)


__all__ = [
    "CheckResult",
    "RiskService",
]
