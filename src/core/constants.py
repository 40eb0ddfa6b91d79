"""
Alt Account Detector - Centralized Constants
============================================

All magic numbers and constants are defined here for maintainability.
Import from this module instead of hardcoding values.
"""

# =============================================================================
# Time Constants
# =============================================================================

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

# =============================================================================
# Risk Scoring
# =============================================================================

SCORE_MIN = 0
SCORE_MAX = 100

CONFIDENCE_MIN = 65
CONFIDENCE_MAX = 95
CONFIDENCE_BASE_MEMBER = 85           # Member record available
CONFIDENCE_BASE_EXTERNAL = 70         # User not in server
CONFIDENCE_PER_DATA_POINT = 2

LEGITIMACY_BONUS_THRESHOLD = 3        # Positive indicators needed for bonus
LEGITIMACY_BONUS = 10

# =============================================================================
# Mutual Connections
# =============================================================================

MUTUAL_CONNECTIONS_DISPLAY_LIMIT = 5
MUTUAL_PATTERNS_DISPLAY_LIMIT = 3

# =============================================================================
# Embed Limits
# =============================================================================

EMBED_FIELD_LIMIT = 1024
EDIT_CONTENT_LIMIT = 512
REACTION_PREVIEW_LIMIT = 200
RISK_FACTORS_DISPLAY_LIMIT = 10
POSITIVE_INDICATORS_DISPLAY_LIMIT = 6
SELECT_MENU_OPTION_LIMIT = 25

# =============================================================================
# Check Command
# =============================================================================

LOADING_EMOJIS = ("🇱", "🇴", "🇦", "🇩", "🇮", "🇳", "🇬")
"""Reactions added to a !check message while the analysis runs."""

ALTHISTORY_DEFAULT_LIMIT = 5
ALTHISTORY_MAX_LIMIT = 10

# =============================================================================
# Reports
# =============================================================================

REPORT_TOP_ENTRIES = 5
TIMELINE_MAX_DAYS = 30
TIMELINE_BURST_WINDOW_SECONDS = 60
TIMELINE_BURST_SIZE = 5
TIMELINE_TOP_CHANNELS = 5


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "MS_PER_SECOND",
    "MS_PER_MINUTE",
    "MS_PER_HOUR",
    "MS_PER_DAY",
    "SCORE_MIN",
    "SCORE_MAX",
    "CONFIDENCE_MIN",
    "CONFIDENCE_MAX",
    "CONFIDENCE_BASE_MEMBER",
    "CONFIDENCE_BASE_EXTERNAL",
    "CONFIDENCE_PER_DATA_POINT",
    "LEGITIMACY_BONUS_THRESHOLD",
    "LEGITIMACY_BONUS",
    "MUTUAL_CONNECTIONS_DISPLAY_LIMIT",
    "MUTUAL_PATTERNS_DISPLAY_LIMIT",
    "EMBED_FIELD_LIMIT",
    "EDIT_CONTENT_LIMIT",
    "REACTION_PREVIEW_LIMIT",
    "RISK_FACTORS_DISPLAY_LIMIT",
    "POSITIVE_INDICATORS_DISPLAY_LIMIT",
    "SELECT_MENU_OPTION_LIMIT",
    "LOADING_EMOJIS",
    "ALTHISTORY_DEFAULT_LIMIT",
    "ALTHISTORY_MAX_LIMIT",
    "REPORT_TOP_ENTRIES",
    "TIMELINE_MAX_DAYS",
    "TIMELINE_BURST_WINDOW_SECONDS",
    "TIMELINE_BURST_SIZE",
    "TIMELINE_TOP_CHANNELS",
]
