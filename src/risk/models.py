"""
Alt Account Detector - Risk Models
==================================

Value objects consumed and produced by the risk engine.

DESIGN:
    Every record is a frozen dataclass built once per evaluation.
    Adjustments (such as merging mutual-connection results) produce a new
    instance through dataclasses.replace instead of mutating in place.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


# =============================================================================
# Enums
# =============================================================================

class PermissionTier(str, Enum):
    """Highest moderation capability a member holds."""

    NONE = "none"
    MODERATOR = "moderator"
    ADMINISTRATOR = "administrator"


class RiskLabel(str, Enum):
    """Discrete risk level derived from a clamped score."""

    MINIMAL = "Minimal"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @classmethod
    def from_score(cls, score: int) -> "RiskLabel":
        """Map a score in [0, 100] to its label."""
        if score >= 80:
            return cls.CRITICAL
        if score >= 60:
            return cls.HIGH
        if score >= 35:
            return cls.MEDIUM
        if score >= 15:
            return cls.LOW
        return cls.MINIMAL


class SignalCategory(str, Enum):
    """Which output list a rule's signal lands in."""

    FACTOR = "factor"
    POSITIVE = "positive"
    SUSPICIOUS = "suspicious"


# =============================================================================
# Snapshots
# =============================================================================

@dataclass(frozen=True)
class UserSnapshot:
    """Facts about an account at evaluation time."""

    id: str
    username: str
    created_at: datetime
    global_name: Optional[str] = None
    has_avatar: bool = False
    avatar_is_animated: bool = False
    has_banner: bool = False
    discriminator: Optional[str] = None

    @property
    def username_lower(self) -> str:
        return (self.username or "").lower()


@dataclass(frozen=True)
class MemberSnapshot:
    """Facts about the user's membership in the evaluated guild."""

    joined_at: datetime
    role_count: int = 0
    is_boosting: bool = False
    is_timed_out: bool = False
    permission_tier: PermissionTier = PermissionTier.NONE


# =============================================================================
# Rule Output
# =============================================================================

@dataclass(frozen=True)
class RuleOutcome:
    """Score delta and human-readable signal emitted by one rule."""

    delta: int
    signal: str
    category: SignalCategory = SignalCategory.FACTOR


# =============================================================================
# Assessment
# =============================================================================

@dataclass(frozen=True)
class JoinAnalysis:
    """Membership details shown alongside an assessment."""

    joined_at: datetime
    roles: int
    premium: bool
    permissions: str
    join_hours: int
    join_days: int


@dataclass(frozen=True)
class AccountAnalysis:
    """Coarse account summary derived from the snapshots."""

    account_stability: str
    profile_completeness: int
    server_integration: str


@dataclass(frozen=True)
class GuildMembership:
    """One (guild, join time) pair for a user."""

    guild_id: int
    joined_at: datetime
    guild_name: str = ""
    role_count: int = 0


@dataclass(frozen=True)
class MutualConnection:
    """Join timing of two users in one shared guild."""

    guild_id: int
    guild_name: str
    target_joined_at: datetime
    requesting_joined_at: datetime
    join_difference_hours: float
    target_roles: int
    both_have_roles: bool


@dataclass(frozen=True)
class MutualConnectionReport:
    """Result of comparing two users' guild memberships."""

    mutual_count: int = 0
    connections: Tuple[MutualConnection, ...] = ()
    suspicious_patterns: Tuple[str, ...] = ()
    has_close_timing_pattern: bool = False

    @classmethod
    def unavailable(cls) -> "MutualConnectionReport":
        """Degraded report used when the lookup fails."""
        return cls(suspicious_patterns=("❓ Unable to analyze mutual connections",))


@dataclass(frozen=True)
class RiskAssessment:
    """Complete output of one risk evaluation."""

    score: int
    label: RiskLabel
    confidence: int
    factors: Tuple[str, ...]
    positive_indicators: Tuple[str, ...]
    account_age_ms: int
    age_days: int
    analysis: AccountAnalysis
    activity_score: int
    legitimacy_indicators: int
    risk_indicators: int
    join_analysis: Optional[JoinAnalysis] = None
    mutual_analysis: Optional[MutualConnectionReport] = None


__all__ = [
    "PermissionTier",
    "RiskLabel",
    "SignalCategory",
    "UserSnapshot",
    "MemberSnapshot",
    "RuleOutcome",
    "JoinAnalysis",
    "AccountAnalysis",
    "GuildMembership",
    "MutualConnection",
    "MutualConnectionReport",
    "RiskAssessment",
]
