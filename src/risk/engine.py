"""
Alt Account Detector - Risk Engine
==================================

Folds the rule set over a user/member snapshot pair and produces a
RiskAssessment.

DESIGN:
    The engine is a pure function of its inputs plus the current time.
    It never raises for well-formed snapshots and never performs I/O;
    fetching snapshots and logging results is the caller's job.

    Post-processing order matters:
    1. Activity score is taken from the raw fold total
    2. Legitimacy bonus (3+ positive signals) lowers the score by 10
    3. Score is clamped to [0, 100] and labelled
    4. Confidence counts every signal, including the bonus line
"""

from datetime import datetime, timezone, tzinfo
from typing import List, Optional, Sequence

from src.core.constants import (
    CONFIDENCE_BASE_EXTERNAL,
    CONFIDENCE_BASE_MEMBER,
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    CONFIDENCE_PER_DATA_POINT,
    LEGITIMACY_BONUS,
    LEGITIMACY_BONUS_THRESHOLD,
    MS_PER_DAY,
    MS_PER_HOUR,
    SCORE_MAX,
    SCORE_MIN,
)
from .models import (
    AccountAnalysis,
    JoinAnalysis,
    MemberSnapshot,
    PermissionTier,
    RiskAssessment,
    RiskLabel,
    SignalCategory,
    UserSnapshot,
)
from .rules import RULES, Rule, RuleContext


LEGITIMACY_BONUS_SIGNAL = "Multiple legitimacy indicators present"

_PERMISSION_LABELS = {
    PermissionTier.ADMINISTRATOR: "Admin",
    PermissionTier.MODERATOR: "Moderator",
    PermissionTier.NONE: "Member",
}


# =============================================================================
# Helpers
# =============================================================================

def clamp(value: int, low: int = SCORE_MIN, high: int = SCORE_MAX) -> int:
    return max(low, min(high, value))


def compute_confidence(has_member: bool, data_points: int) -> int:
    """Confidence grows with evidence and is higher for in-server checks."""
    base = CONFIDENCE_BASE_MEMBER if has_member else CONFIDENCE_BASE_EXTERNAL
    return clamp(base + data_points * CONFIDENCE_PER_DATA_POINT, CONFIDENCE_MIN, CONFIDENCE_MAX)


def _build_join_analysis(ctx: RuleContext) -> Optional[JoinAnalysis]:
    member = ctx.member
    if member is None:
        return None
    join_age = ctx.join_age_ms or 0
    return JoinAnalysis(
        joined_at=member.joined_at,
        roles=member.role_count,
        premium=member.is_boosting,
        permissions=_PERMISSION_LABELS[member.permission_tier],
        join_hours=join_age // MS_PER_HOUR,
        join_days=join_age // MS_PER_DAY,
    )


def _build_account_analysis(user: UserSnapshot, join: Optional[JoinAnalysis], age_days: int) -> AccountAnalysis:
    if age_days > 90:
        stability = "Stable"
    elif age_days > 30:
        stability = "Moderate"
    else:
        stability = "Unstable"

    completeness = sum((
        25 if user.has_avatar else 0,
        25 if user.has_banner else 0,
        25 if user.global_name else 0,
        25 if join is not None and join.roles > 0 else 0,
    ))

    if join is None:
        integration = "None"
    elif join.roles > 2:
        integration = "High"
    elif join.roles > 0:
        integration = "Medium"
    else:
        integration = "Low"

    return AccountAnalysis(
        account_stability=stability,
        profile_completeness=completeness,
        server_integration=integration,
    )


# =============================================================================
# Evaluation
# =============================================================================

def evaluate(
    user: UserSnapshot,
    member: Optional[MemberSnapshot] = None,
    *,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
    rules: Sequence[Rule] = RULES,
) -> RiskAssessment:
    """
    Score a user's likelihood of being an alt account.

    Args:
        user: Account snapshot.
        member: Membership snapshot, or None for an external check.
        now: Evaluation time (defaults to the current UTC time).
        tz: Timezone used by the creation-hour heuristic.
        rules: Ordered rule set to fold.

    Returns:
        RiskAssessment with score in [0, 100] and confidence in [65, 95].
    """
    ctx = RuleContext(
        user=user,
        member=member,
        now=now or datetime.now(timezone.utc),
        tz=tz,
    )

    score = 0
    factors: List[str] = []
    positive: List[str] = []
    suspicious: List[str] = []
    buckets = {
        SignalCategory.FACTOR: factors,
        SignalCategory.POSITIVE: positive,
        SignalCategory.SUSPICIOUS: suspicious,
    }

    for rule in rules:
        outcome = rule(ctx)
        if outcome is None:
            continue
        score += outcome.delta
        buckets[outcome.category].append(outcome.signal)

    activity_score = clamp(SCORE_MAX - score)
    legitimacy_indicators = len(positive)
    risk_indicators = len(factors) + len(suspicious)

    if legitimacy_indicators >= LEGITIMACY_BONUS_THRESHOLD:
        score = max(SCORE_MIN, score - LEGITIMACY_BONUS)
        positive.append(LEGITIMACY_BONUS_SIGNAL)

    score = clamp(score)
    data_points = len(factors) + len(positive) + len(suspicious)
    join_analysis = _build_join_analysis(ctx)

    return RiskAssessment(
        score=score,
        label=RiskLabel.from_score(score),
        confidence=compute_confidence(member is not None, data_points),
        factors=tuple(factors + suspicious),
        positive_indicators=tuple(positive),
        account_age_ms=ctx.account_age_ms,
        age_days=ctx.age_days,
        analysis=_build_account_analysis(user, join_analysis, ctx.age_days),
        activity_score=activity_score,
        legitimacy_indicators=legitimacy_indicators,
        risk_indicators=risk_indicators,
        join_analysis=join_analysis,
    )


__all__ = [
    "LEGITIMACY_BONUS_SIGNAL",
    "clamp",
    "compute_confidence",
    "evaluate",
]
