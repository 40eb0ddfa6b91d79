"""
Alt Account Detector - Risk Rules
=================================

Independent scoring rules for the alt-account risk engine.

DESIGN:
    Each rule is a pure function taking a RuleContext and returning a
    RuleOutcome (or None when it does not apply). RULES lists them in
    evaluation order; the engine folds them left to right, so the order
    here is the order factors appear in the output.

Signals:
    - Account age tier
    - Profile (default avatar, animated avatar, banner)
    - Username patterns (numbers, "user" prefix, alt keywords, length)
    - Display name (alt keywords, customization)
    - Membership (join timing, roles, boost, timeout, permissions)
    - Creation hour, ID suffix, joke discriminator
    - New account that joined immediately
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional, Tuple

from src.core.constants import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE
from .models import (
    MemberSnapshot,
    PermissionTier,
    RuleOutcome,
    SignalCategory,
    UserSnapshot,
)


# =============================================================================
# Signal Weights
# =============================================================================

class SignalWeights:
    """Point values for each detection signal."""

    # Account age
    AGE_UNDER_1_DAY = 85
    AGE_UNDER_3_DAYS = 70
    AGE_UNDER_7_DAYS = 50
    AGE_UNDER_30_DAYS = 25
    AGE_UNDER_90_DAYS = 10
    AGE_OVER_1_YEAR = -5

    # Profile
    DEFAULT_AVATAR = 20
    ANIMATED_AVATAR = -8
    CUSTOM_BANNER = -10

    # Username
    GENERIC_NUMBERED_NAME = 35
    DEFAULT_USER_PATTERN = 45
    ALT_KEYWORD = 40
    TEMPORARY_KEYWORD = 50
    RANDOM_PATTERN = 30
    VERY_SHORT_NAME = 25
    VERY_LONG_NAME = 15

    # Display name
    ALT_DISPLAY_NAME = 35
    CUSTOM_DISPLAY_NAME = -3

    # Membership
    JOINED_UNDER_10_MINUTES = 35
    JOINED_UNDER_1_HOUR = 25
    JOINED_UNDER_1_DAY = 15
    NO_ROLES = 15
    MULTIPLE_ROLES = -5
    SERVER_BOOSTER = -15
    TIMED_OUT = 20
    ADMINISTRATOR = -25
    MODERATOR = -15
    NOT_IN_SERVER = 10
    NEW_ACCOUNT_JOINED = 20

    # Account metadata
    UNUSUAL_CREATION_HOUR = 10
    SUSPICIOUS_ID_SUFFIX = 15
    JOKE_DISCRIMINATOR = 12


SUSPICIOUS_ID_SUFFIXES = frozenset({"0000", "1111", "9999"})
JOKE_DISCRIMINATORS = frozenset({"0001", "0002", "1337", "6969", "0420"})
UNUSUAL_CREATION_HOURS = range(2, 7)  # 2:00 - 6:59

_GENERIC_NUMBERED = re.compile(r"[a-z]+\d{4,}", re.IGNORECASE)
_DEFAULT_USER = re.compile(r"user\d+", re.IGNORECASE)
_RANDOM_PATTERN = re.compile(r"[a-z]{3,8}\d{3,8}", re.IGNORECASE)


# =============================================================================
# Rule Context
# =============================================================================

def _as_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _elapsed_ms(now: datetime, then: datetime) -> int:
    return int((_as_aware(now) - _as_aware(then)).total_seconds() * 1000)


@dataclass(frozen=True)
class RuleContext:
    """Inputs shared by every rule for one evaluation."""

    user: UserSnapshot
    member: Optional[MemberSnapshot]
    now: datetime
    tz: tzinfo = timezone.utc

    @property
    def account_age_ms(self) -> int:
        return _elapsed_ms(self.now, self.user.created_at)

    @property
    def age_days(self) -> int:
        return self.account_age_ms // MS_PER_DAY

    @property
    def join_age_ms(self) -> Optional[int]:
        if self.member is None:
            return None
        return _elapsed_ms(self.now, self.member.joined_at)


Rule = Callable[[RuleContext], Optional[RuleOutcome]]


# =============================================================================
# Account Age
# =============================================================================

def account_age_tier(ctx: RuleContext) -> Optional[RuleOutcome]:
    days = ctx.age_days
    if days < 1:
        return RuleOutcome(SignalWeights.AGE_UNDER_1_DAY, "Account created less than 24 hours ago")
    if days < 3:
        return RuleOutcome(SignalWeights.AGE_UNDER_3_DAYS, "Account less than 3 days old")
    if days < 7:
        return RuleOutcome(SignalWeights.AGE_UNDER_7_DAYS, "Account less than 1 week old")
    if days < 30:
        return RuleOutcome(SignalWeights.AGE_UNDER_30_DAYS, "Account less than 1 month old")
    if days < 90:
        return RuleOutcome(SignalWeights.AGE_UNDER_90_DAYS, "Relatively new account (< 3 months)")
    if days > 365:
        return RuleOutcome(
            SignalWeights.AGE_OVER_1_YEAR,
            "Well-established account (1+ years)",
            SignalCategory.POSITIVE,
        )
    return None


# =============================================================================
# Profile
# =============================================================================

def default_avatar(ctx: RuleContext) -> Optional[RuleOutcome]:
    if ctx.user.has_avatar:
        return None
    return RuleOutcome(SignalWeights.DEFAULT_AVATAR, "Using default Discord avatar")


def animated_avatar(ctx: RuleContext) -> Optional[RuleOutcome]:
    if not (ctx.user.has_avatar and ctx.user.avatar_is_animated):
        return None
    return RuleOutcome(
        SignalWeights.ANIMATED_AVATAR,
        "Has animated avatar (Nitro user)",
        SignalCategory.POSITIVE,
    )


def custom_banner(ctx: RuleContext) -> Optional[RuleOutcome]:
    if not ctx.user.has_banner:
        return None
    return RuleOutcome(
        SignalWeights.CUSTOM_BANNER,
        "Has custom banner (Nitro user)",
        SignalCategory.POSITIVE,
    )


# =============================================================================
# Username
# =============================================================================

def generic_numbered_username(ctx: RuleContext) -> Optional[RuleOutcome]:
    if not _GENERIC_NUMBERED.fullmatch(ctx.user.username_lower):
        return None
    return RuleOutcome(SignalWeights.GENERIC_NUMBERED_NAME, "Generic username pattern (name + many numbers)")


def default_user_pattern(ctx: RuleContext) -> Optional[RuleOutcome]:
    if not _DEFAULT_USER.fullmatch(ctx.user.username_lower):
        return None
    return RuleOutcome(SignalWeights.DEFAULT_USER_PATTERN, 'Default "user" + numbers pattern')


def alt_keyword_username(ctx: RuleContext) -> Optional[RuleOutcome]:
    name = ctx.user.username_lower
    if not any(word in name for word in ("alt", "backup", "second")):
        return None
    return RuleOutcome(SignalWeights.ALT_KEYWORD, "Username suggests alternative account")


def temporary_username(ctx: RuleContext) -> Optional[RuleOutcome]:
    name = ctx.user.username_lower
    if not any(word in name for word in ("temp", "throwaway")):
        return None
    return RuleOutcome(SignalWeights.TEMPORARY_KEYWORD, "Username suggests temporary account")


def random_pattern_username(ctx: RuleContext) -> Optional[RuleOutcome]:
    name = ctx.user.username_lower
    if not _RANDOM_PATTERN.fullmatch(name) or "real" in name:
        return None
    return RuleOutcome(
        SignalWeights.RANDOM_PATTERN,
        "Random-looking username pattern",
        SignalCategory.SUSPICIOUS,
    )


def very_short_username(ctx: RuleContext) -> Optional[RuleOutcome]:
    if len(ctx.user.username_lower) > 3:
        return None
    return RuleOutcome(SignalWeights.VERY_SHORT_NAME, "Very short username (3 characters or less)")


def very_long_username(ctx: RuleContext) -> Optional[RuleOutcome]:
    if len(ctx.user.username_lower) < 25:
        return None
    return RuleOutcome(SignalWeights.VERY_LONG_NAME, "Unusually long username")


# =============================================================================
# Display Name
# =============================================================================

def alt_display_name(ctx: RuleContext) -> Optional[RuleOutcome]:
    display = (ctx.user.global_name or "").lower()
    if not display or not ("alt" in display or "backup" in display):
        return None
    return RuleOutcome(SignalWeights.ALT_DISPLAY_NAME, "Display name suggests alt account")


def custom_display_name(ctx: RuleContext) -> Optional[RuleOutcome]:
    display = ctx.user.global_name
    if not display or display == ctx.user.username:
        return None
    return RuleOutcome(
        SignalWeights.CUSTOM_DISPLAY_NAME,
        "Has custom display name",
        SignalCategory.POSITIVE,
    )


# =============================================================================
# Membership
# =============================================================================

def join_timing(ctx: RuleContext) -> Optional[RuleOutcome]:
    join_age = ctx.join_age_ms
    if join_age is None:
        return None
    if join_age < 10 * MS_PER_MINUTE:
        return RuleOutcome(SignalWeights.JOINED_UNDER_10_MINUTES, "Joined server extremely recently (< 10 minutes)")
    if join_age < MS_PER_HOUR:
        return RuleOutcome(SignalWeights.JOINED_UNDER_1_HOUR, "Joined server very recently (< 1 hour)")
    if join_age < MS_PER_DAY:
        return RuleOutcome(SignalWeights.JOINED_UNDER_1_DAY, "Joined server recently (< 24 hours)")
    return None


def role_count(ctx: RuleContext) -> Optional[RuleOutcome]:
    if ctx.member is None:
        return None
    if ctx.member.role_count == 0:
        return RuleOutcome(SignalWeights.NO_ROLES, "No roles assigned")
    if ctx.member.role_count >= 3:
        return RuleOutcome(SignalWeights.MULTIPLE_ROLES, "Has multiple roles", SignalCategory.POSITIVE)
    return None


def server_booster(ctx: RuleContext) -> Optional[RuleOutcome]:
    if ctx.member is None or not ctx.member.is_boosting:
        return None
    return RuleOutcome(
        SignalWeights.SERVER_BOOSTER,
        "Server booster (shows investment)",
        SignalCategory.POSITIVE,
    )


def timed_out(ctx: RuleContext) -> Optional[RuleOutcome]:
    if ctx.member is None or not ctx.member.is_timed_out:
        return None
    return RuleOutcome(SignalWeights.TIMED_OUT, "Currently timed out", SignalCategory.SUSPICIOUS)


def permission_tier(ctx: RuleContext) -> Optional[RuleOutcome]:
    if ctx.member is None:
        return None
    if ctx.member.permission_tier is PermissionTier.ADMINISTRATOR:
        return RuleOutcome(
            SignalWeights.ADMINISTRATOR,
            "Has administrator permissions",
            SignalCategory.POSITIVE,
        )
    if ctx.member.permission_tier is PermissionTier.MODERATOR:
        return RuleOutcome(
            SignalWeights.MODERATOR,
            "Has moderation permissions",
            SignalCategory.POSITIVE,
        )
    return None


def not_in_server(ctx: RuleContext) -> Optional[RuleOutcome]:
    if ctx.member is not None:
        return None
    return RuleOutcome(SignalWeights.NOT_IN_SERVER, "User not in server (external check)")


# =============================================================================
# Account Metadata
# =============================================================================

def unusual_creation_hour(ctx: RuleContext) -> Optional[RuleOutcome]:
    hour = _as_aware(ctx.user.created_at).astimezone(ctx.tz).hour
    if hour not in UNUSUAL_CREATION_HOURS:
        return None
    return RuleOutcome(
        SignalWeights.UNUSUAL_CREATION_HOUR,
        "Account created during unusual hours (2-6 AM)",
        SignalCategory.SUSPICIOUS,
    )


def suspicious_id_suffix(ctx: RuleContext) -> Optional[RuleOutcome]:
    if str(ctx.user.id)[-4:] not in SUSPICIOUS_ID_SUFFIXES:
        return None
    return RuleOutcome(SignalWeights.SUSPICIOUS_ID_SUFFIX, "Suspicious ID pattern")


def joke_discriminator(ctx: RuleContext) -> Optional[RuleOutcome]:
    tag = ctx.user.discriminator
    if not tag or tag == "0" or tag not in JOKE_DISCRIMINATORS:
        return None
    return RuleOutcome(SignalWeights.JOKE_DISCRIMINATOR, 'Common "joke" discriminator')


def new_account_joined(ctx: RuleContext) -> Optional[RuleOutcome]:
    join_age = ctx.join_age_ms
    if join_age is None or ctx.age_days >= 7 or join_age >= MS_PER_DAY:
        return None
    return RuleOutcome(
        SignalWeights.NEW_ACCOUNT_JOINED,
        "New account immediately joined server",
        SignalCategory.SUSPICIOUS,
    )


# =============================================================================
# Rule Registry
# =============================================================================

RULES: Tuple[Rule, ...] = (
    account_age_tier,
    default_avatar,
    animated_avatar,
    custom_banner,
    generic_numbered_username,
    default_user_pattern,
    alt_keyword_username,
    temporary_username,
    random_pattern_username,
    very_short_username,
    very_long_username,
    alt_display_name,
    custom_display_name,
    join_timing,
    role_count,
    server_booster,
    timed_out,
    permission_tier,
    not_in_server,
    unusual_creation_hour,
    suspicious_id_suffix,
    joke_discriminator,
    new_account_joined,
)
"""Rules in evaluation order."""


__all__ = [
    "SignalWeights",
    "RuleContext",
    "Rule",
    "RULES",
    "SUSPICIOUS_ID_SUFFIXES",
    "JOKE_DISCRIMINATORS",
    "account_age_tier",
    "default_avatar",
    "animated_avatar",
    "custom_banner",
    "generic_numbered_username",
    "default_user_pattern",
    "alt_keyword_username",
    "temporary_username",
    "random_pattern_username",
    "very_short_username",
    "very_long_username",
    "alt_display_name",
    "custom_display_name",
    "join_timing",
    "role_count",
    "server_booster",
    "timed_out",
    "permission_tier",
    "not_in_server",
    "unusual_creation_hour",
    "suspicious_id_suffix",
    "joke_discriminator",
    "new_account_joined",
]
