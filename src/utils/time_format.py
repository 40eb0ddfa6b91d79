"""
Alt Account Detector - Time Formatting Utils
============================================

Human-readable durations for embeds.

Features:
- Account age as "Xd Yh"
- Relative "N days ago" / "N hours ago" strings
- Compact "2d 3h 15m" durations
"""

from src.core.constants import MS_PER_DAY, MS_PER_HOUR


def format_account_age(age_ms: int) -> str:
    """
    Format an account age in milliseconds as whole days and hours.

    Examples:
        - 90 minutes: "0d 1h"
        - 26 hours: "1d 2h"
    """
    age_ms = max(0, age_ms)
    days = age_ms // MS_PER_DAY
    hours = (age_ms % MS_PER_DAY) // MS_PER_HOUR
    return f"{days}d {hours}h"


def format_ago(days: int, hours: int) -> str:
    """Prefer days when at least one full day has passed."""
    if days > 0:
        return f"{days} days ago"
    return f"{hours} hours ago"


def format_duration(total_minutes: int) -> str:
    """
    Format minutes into a compact duration string.

    Examples:
        - 45 minutes: "45m"
        - 125 minutes: "2h 5m"
        - 1500 minutes: "1d 1h"
        - 0 minutes: "0m"
    """
    if not total_minutes or total_minutes < 0:
        return "0m"

    days: int = total_minutes // (24 * 60)
    remaining: int = total_minutes % (24 * 60)
    hours: int = remaining // 60
    minutes: int = remaining % 60

    parts: list[str] = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    # Minutes are the fallback so the result is never empty
    if minutes > 0 or (days == 0 and hours == 0):
        parts.append(f"{minutes}m")

    return " ".join(parts)


__all__ = [
    "format_account_age",
    "format_ago",
    "format_duration",
]
