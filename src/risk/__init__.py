"""
Alt Account Detector - Risk Package
===================================

Pure scoring core: snapshots in, assessments out.
"""

from .engine import compute_confidence, evaluate
from .models import (
    AccountAnalysis,
    GuildMembership,
    JoinAnalysis,
    MemberSnapshot,
    MutualConnection,
    MutualConnectionReport,
    PermissionTier,
    RiskAssessment,
    RiskLabel,
    RuleOutcome,
    SignalCategory,
    UserSnapshot,
)
from .mutual import analyze_mutual_connections, apply_mutual_analysis
from .rules import RULES, RuleContext, SignalWeights


__all__ = [
    "evaluate",
    "compute_confidence",
    "analyze_mutual_connections",
    "apply_mutual_analysis",
    "RULES",
    "RuleContext",
    "SignalWeights",
    "AccountAnalysis",
    "GuildMembership",
    "JoinAnalysis",
    "MemberSnapshot",
    "MutualConnection",
    "MutualConnectionReport",
    "PermissionTier",
    "RiskAssessment",
    "RiskLabel",
    "RuleOutcome",
    "SignalCategory",
    "UserSnapshot",
]
