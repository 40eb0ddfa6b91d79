"""
Alt Account Detector - Mutual Connections
=========================================

Compares when two users joined the guilds they share.

DESIGN:
    Two accounts that keep joining the same servers within minutes of each
    other are a strong alt signal. The analyzer only looks at membership
    records; collecting them from Discord happens in the services layer.

    apply_mutual_analysis() is the single merge step that folds a report
    into an assessment. It does not guard against being applied twice,
    so callers must apply it exactly once per check.
"""

from dataclasses import replace
from typing import Dict, List, Sequence

from src.core.constants import MS_PER_HOUR, MUTUAL_CONNECTIONS_DISPLAY_LIMIT
from src.core.logger import logger
from .engine import clamp
from .models import (
    GuildMembership,
    MutualConnection,
    MutualConnectionReport,
    RiskAssessment,
    RiskLabel,
)


CLOSE_TIMING_DELTA = 25
NO_MUTUAL_SERVERS_DELTA = 5

CLOSE_TIMING_FACTOR = "Suspicious mutual server timing patterns"
NO_MUTUAL_SERVERS_FACTOR = "No detectable mutual servers"


# =============================================================================
# Analysis
# =============================================================================

def _hours_between(a: GuildMembership, b: GuildMembership) -> float:
    return abs((a.joined_at - b.joined_at).total_seconds()) * 1000 / MS_PER_HOUR


def analyze_mutual_connections(
    target_memberships: Sequence[GuildMembership],
    requesting_memberships: Sequence[GuildMembership],
) -> MutualConnectionReport:
    """
    Find shared guilds and flag close join timing.

    Shared guilds are reported in the target's order. Only the first five
    connections are kept for display, but mutual_count covers all of them.
    """
    try:
        requesting_by_guild: Dict[int, GuildMembership] = {
            m.guild_id: m for m in requesting_memberships
        }

        connections: List[MutualConnection] = []
        patterns: List[str] = []
        close_timing = False

        for target in target_memberships:
            other = requesting_by_guild.get(target.guild_id)
            if other is None:
                continue

            diff_hours = _hours_between(target, other)
            connections.append(MutualConnection(
                guild_id=target.guild_id,
                guild_name=target.guild_name,
                target_joined_at=target.joined_at,
                requesting_joined_at=other.joined_at,
                join_difference_hours=diff_hours,
                target_roles=target.role_count,
                both_have_roles=target.role_count > 0 and other.role_count > 0,
            ))

            if diff_hours < 24:
                patterns.append(f"Joined {target.guild_name} within 24 hours of each other")
            if diff_hours < 1:
                patterns.append(f"Joined {target.guild_name} within 1 hour of each other")
                close_timing = True

        return MutualConnectionReport(
            mutual_count=len(connections),
            connections=tuple(connections[:MUTUAL_CONNECTIONS_DISPLAY_LIMIT]),
            suspicious_patterns=tuple(patterns),
            has_close_timing_pattern=close_timing,
        )

    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Mutual connection analysis failed: {type(e).__name__}: {e}")
        return MutualConnectionReport.unavailable()


# =============================================================================
# Merge
# =============================================================================

def apply_mutual_analysis(
    assessment: RiskAssessment,
    report: MutualConnectionReport,
) -> RiskAssessment:
    """Fold a mutual-connection report into an assessment and relabel it."""
    score = assessment.score
    factors = list(assessment.factors)

    if report.has_close_timing_pattern:
        score += CLOSE_TIMING_DELTA
        factors.append(CLOSE_TIMING_FACTOR)
    if report.mutual_count == 0:
        score += NO_MUTUAL_SERVERS_DELTA
        factors.append(NO_MUTUAL_SERVERS_FACTOR)

    score = clamp(score)
    return replace(
        assessment,
        score=score,
        label=RiskLabel.from_score(score),
        factors=tuple(factors),
        mutual_analysis=report,
    )


__all__ = [
    "CLOSE_TIMING_FACTOR",
    "NO_MUTUAL_SERVERS_FACTOR",
    "analyze_mutual_connections",
    "apply_mutual_analysis",
]
