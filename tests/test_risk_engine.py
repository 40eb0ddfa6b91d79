"""
Alt Account Detector - Risk Engine Tests
========================================

Tests for the rule fold, post-processing and scenario scoring.
"""

from dataclasses import replace
from datetime import timedelta, timezone, datetime
from zoneinfo import ZoneInfo

import pytest

from src.risk.engine import LEGITIMACY_BONUS_SIGNAL, compute_confidence, evaluate
from src.risk import rules
from src.risk.models import PermissionTier, RiskLabel, RuleOutcome, SignalCategory
from src.risk.rules import RULES, RuleContext, SignalWeights

from tests.conftest import NOW


# =============================================================================
# Scenarios
# =============================================================================

class TestScenarios:
    """End-to-end scores for representative accounts."""

    def test_brand_new_suspicious_account(self, make_user):
        user = make_user(username="user123456", age=timedelta(hours=2), has_avatar=False)

        result = evaluate(user, None, now=NOW)

        assert result.score == 100
        assert result.label is RiskLabel.CRITICAL
        assert "Account created less than 24 hours ago" in result.factors
        assert "Using default Discord avatar" in result.factors
        assert 'Default "user" + numbers pattern' in result.factors
        assert "User not in server (external check)" in result.factors
        assert result.join_analysis is None
        assert result.analysis.server_integration == "None"

    def test_established_legitimate_member(self, make_user, make_member):
        user = make_user(
            username="oakleaf",
            global_name="Oak Leaf",
            age=timedelta(days=500),
            avatar_is_animated=True,
            has_banner=True,
        )
        member = make_member(
            joined=timedelta(days=400),
            role_count=5,
            permission_tier=PermissionTier.MODERATOR,
        )

        result = evaluate(user, member, now=NOW)

        assert result.score == 0
        assert result.label is RiskLabel.MINIMAL
        assert result.factors == ()
        assert result.legitimacy_indicators == 6
        assert result.positive_indicators[-1] == LEGITIMACY_BONUS_SIGNAL
        assert len(result.positive_indicators) == 7
        assert result.activity_score == 100
        assert result.confidence == 95

    def test_external_check_adds_penalty(self, make_user):
        result = evaluate(make_user(), None, now=NOW)

        assert result.score == SignalWeights.NOT_IN_SERVER
        assert result.factors == ("User not in server (external check)",)
        assert result.confidence == 70 + 2 * 1


# =============================================================================
# Post-processing
# =============================================================================

class TestPostProcessing:
    """Activity score, legitimacy bonus, confidence and factor ordering."""

    def test_activity_score_uses_raw_total(self, make_user, make_member):
        # Raw total 20 (no avatar) -> activity 80; no bonus involved
        user = make_user(has_avatar=False)
        result = evaluate(user, make_member(), now=NOW)

        assert result.score == 20
        assert result.activity_score == 80

    def test_legitimacy_bonus_lowers_score(self, make_user, make_member):
        # +20 no avatar, +35 alt display name, -10 banner, -3 custom display name, -15 boost
        user = make_user(has_avatar=False, has_banner=True, global_name="my alt")
        member = make_member(is_boosting=True)

        result = evaluate(user, member, now=NOW)

        assert result.activity_score == 100 - 27
        assert result.score == 27 - 10
        assert result.legitimacy_indicators == 3
        assert LEGITIMACY_BONUS_SIGNAL in result.positive_indicators

    def test_no_bonus_below_threshold(self, make_user, make_member):
        user = make_user(has_banner=True, global_name="Oak")
        result = evaluate(user, make_member(), now=NOW)

        assert result.legitimacy_indicators == 2
        assert LEGITIMACY_BONUS_SIGNAL not in result.positive_indicators

    def test_suspicious_signals_follow_primary_factors(self, make_user, make_member):
        # random pattern (suspicious) fires before ID suffix (factor) in rule order
        user = make_user(username="abcd1234", user_id="123456789012340000")
        member = make_member(is_timed_out=True)

        result = evaluate(user, member, now=NOW)

        assert result.factors.index("Suspicious ID pattern") < result.factors.index("Random-looking username pattern")
        assert result.factors[-2:] == ("Random-looking username pattern", "Currently timed out")

    def test_risk_indicators_count_factors_and_suspicious(self, make_user, make_member):
        user = make_user(username="abcd1234", has_avatar=False)
        result = evaluate(user, make_member(is_timed_out=True), now=NOW)

        assert result.risk_indicators == len(result.factors)

    def test_confidence_counts_bonus_indicator(self, make_user, make_member):
        user = make_user(age=timedelta(days=500), has_banner=True, global_name="Oak")
        member = make_member(role_count=4)

        result = evaluate(user, member, now=NOW)

        # 4 positives + synthetic bonus = 5 data points
        assert result.confidence == min(95, 85 + 2 * 5)

    @pytest.mark.parametrize("has_member,points,expected", [
        (True, 0, 85),
        (False, 0, 70),
        (True, 10, 95),
        (False, 3, 76),
    ])
    def test_compute_confidence(self, has_member, points, expected):
        assert compute_confidence(has_member, points) == expected


# =============================================================================
# Invariants
# =============================================================================

class TestInvariants:
    """Determinism, clamping and label consistency."""

    def test_deterministic(self, make_user, make_member):
        user = make_user(username="temp_alt_99", has_avatar=False, age=timedelta(days=3))
        member = make_member(joined=timedelta(minutes=5), role_count=0)

        assert evaluate(user, member, now=NOW) == evaluate(user, member, now=NOW)

    @pytest.mark.parametrize("username,age,avatar", [
        ("user1", timedelta(minutes=1), False),
        ("throwawayalt", timedelta(hours=5), False),
        ("oakleaf", timedelta(days=2000), True),
        ("ab", timedelta(days=45), False),
        ("x" * 30, timedelta(days=10), True),
    ])
    def test_score_and_confidence_bounds(self, make_user, username, age, avatar):
        result = evaluate(make_user(username=username, age=age, has_avatar=avatar), None, now=NOW)

        assert 0 <= result.score <= 100
        assert 65 <= result.confidence <= 95
        assert 0 <= result.activity_score <= 100
        assert result.label is RiskLabel.from_score(result.score)

    @pytest.mark.parametrize("score,label", [
        (100, RiskLabel.CRITICAL),
        (80, RiskLabel.CRITICAL),
        (79, RiskLabel.HIGH),
        (60, RiskLabel.HIGH),
        (59, RiskLabel.MEDIUM),
        (35, RiskLabel.MEDIUM),
        (34, RiskLabel.LOW),
        (15, RiskLabel.LOW),
        (14, RiskLabel.MINIMAL),
        (0, RiskLabel.MINIMAL),
    ])
    def test_label_boundaries(self, score, label):
        assert RiskLabel.from_score(score) is label

    def test_younger_account_scores_higher(self, make_user):
        scores = [
            evaluate(make_user(has_avatar=False, age=timedelta(days=days)), None, now=NOW).score
            for days in (400, 200, 60, 20, 5, 2)
        ]

        assert scores == sorted(scores)
        assert len(set(scores)) == len(scores)

    def test_no_duplicate_signals(self, make_user, make_member):
        user = make_user(username="useralt12345", has_avatar=False, age=timedelta(hours=1))
        result = evaluate(user, make_member(joined=timedelta(minutes=3), role_count=0), now=NOW)

        assert len(result.factors) == len(set(result.factors))
        assert len(result.positive_indicators) == len(set(result.positive_indicators))

    def test_naive_datetimes_are_treated_as_utc(self, make_user):
        user = make_user(age=timedelta(days=10))
        aware = evaluate(user, None, now=NOW)
        naive = evaluate(
            replace(user, created_at=user.created_at.replace(tzinfo=None)),
            None,
            now=NOW.replace(tzinfo=None),
        )

        assert aware.score == naive.score
        assert aware.age_days == naive.age_days


# =============================================================================
# Analysis Summary
# =============================================================================

class TestAccountAnalysis:

    def test_profile_completeness_counts_four_parts(self, make_user, make_member):
        user = make_user(has_banner=True, global_name="Oak")
        result = evaluate(user, make_member(role_count=2), now=NOW)

        assert result.analysis.profile_completeness == 100
        assert result.analysis.server_integration == "Medium"
        assert result.analysis.account_stability == "Stable"

    def test_join_analysis_reports_permissions(self, make_user, make_member):
        member = make_member(
            joined=timedelta(hours=30),
            permission_tier=PermissionTier.ADMINISTRATOR,
            is_boosting=True,
        )
        result = evaluate(make_user(), member, now=NOW)

        assert result.join_analysis.permissions == "Admin"
        assert result.join_analysis.join_hours == 30
        assert result.join_analysis.join_days == 1
        assert result.join_analysis.premium is True

    @pytest.mark.parametrize("days,stability", [(91, "Stable"), (90, "Moderate"), (31, "Moderate"), (30, "Unstable")])
    def test_stability_tiers(self, make_user, days, stability):
        result = evaluate(make_user(age=timedelta(days=days)), None, now=NOW)
        assert result.analysis.account_stability == stability


# =============================================================================
# Rule Set
# =============================================================================

class TestRuleSet:

    def test_custom_rule_set(self, make_user):
        result = evaluate(make_user(has_avatar=False), None, now=NOW, rules=RULES[:2])
        assert result.factors == ("Using default Discord avatar",)

    def test_reference_timezone_shifts_creation_hour(self, make_user):
        # Created 09:00 UTC, which is 05:00 in New York (EDT)
        user = replace(make_user(), created_at=datetime(2023, 6, 1, 9, 0, tzinfo=timezone.utc))

        utc = evaluate(user, None, now=NOW)
        new_york = evaluate(user, None, now=NOW, tz=ZoneInfo("America/New_York"))

        assert "Account created during unusual hours (2-6 AM)" not in utc.factors
        assert "Account created during unusual hours (2-6 AM)" in new_york.factors
        assert new_york.score == utc.score + SignalWeights.UNUSUAL_CREATION_HOUR


# =============================================================================
# Individual Rules
# =============================================================================

FACTOR = SignalCategory.FACTOR
SUSPICIOUS = SignalCategory.SUSPICIOUS


class TestRules:
    """Each rule on its own, boundaries included."""

    @pytest.mark.parametrize("discriminator,expected", [
        ("1337", RuleOutcome(SignalWeights.JOKE_DISCRIMINATOR, 'Common "joke" discriminator')),
        ("0001", RuleOutcome(SignalWeights.JOKE_DISCRIMINATOR, 'Common "joke" discriminator')),
        ("0420", RuleOutcome(SignalWeights.JOKE_DISCRIMINATOR, 'Common "joke" discriminator')),
        ("0", None),
        ("1234", None),
        (None, None),
    ])
    def test_joke_discriminator(self, make_user, discriminator, expected):
        ctx = RuleContext(make_user(discriminator=discriminator), None, NOW)
        assert rules.joke_discriminator(ctx) == expected

    @pytest.mark.parametrize("username,applies", [
        ("oak1234", True),
        ("oakleaf98765", True),
        ("oak123", False),
        ("1234", False),
        ("oak_1234", False),
    ])
    def test_generic_numbered_username(self, make_user, username, applies):
        outcome = rules.generic_numbered_username(RuleContext(make_user(username=username), None, NOW))
        expected = RuleOutcome(SignalWeights.GENERIC_NUMBERED_NAME, "Generic username pattern (name + many numbers)")
        assert outcome == (expected if applies else None)

    @pytest.mark.parametrize("username,applies", [
        ("user123", True),
        ("USER9", True),
        ("user", False),
        ("myuser123", False),
    ])
    def test_default_user_pattern(self, make_user, username, applies):
        outcome = rules.default_user_pattern(RuleContext(make_user(username=username), None, NOW))
        expected = RuleOutcome(SignalWeights.DEFAULT_USER_PATTERN, 'Default "user" + numbers pattern')
        assert outcome == (expected if applies else None)

    @pytest.mark.parametrize("username,applies", [
        ("altaccount", True),
        ("backupguy", True),
        ("mysecond", True),
        ("oakleaf", False),
    ])
    def test_alt_keyword_username(self, make_user, username, applies):
        outcome = rules.alt_keyword_username(RuleContext(make_user(username=username), None, NOW))
        expected = RuleOutcome(SignalWeights.ALT_KEYWORD, "Username suggests alternative account")
        assert outcome == (expected if applies else None)

    @pytest.mark.parametrize("username,applies", [
        ("tempacct", True),
        ("throwaway_01", True),
        ("oakleaf", False),
    ])
    def test_temporary_username(self, make_user, username, applies):
        outcome = rules.temporary_username(RuleContext(make_user(username=username), None, NOW))
        expected = RuleOutcome(SignalWeights.TEMPORARY_KEYWORD, "Username suggests temporary account")
        assert outcome == (expected if applies else None)

    @pytest.mark.parametrize("username,applies", [
        ("abc123", True),
        ("abcdefgh12345678", True),
        ("real12345", False),
        ("ab123", False),
        ("abcdefghi123", False),
        ("abc12", False),
    ])
    def test_random_pattern_username(self, make_user, username, applies):
        outcome = rules.random_pattern_username(RuleContext(make_user(username=username), None, NOW))
        expected = RuleOutcome(SignalWeights.RANDOM_PATTERN, "Random-looking username pattern", SUSPICIOUS)
        assert outcome == (expected if applies else None)

    def test_real_prefix_still_counts_as_generic_numbered(self, make_user):
        result = evaluate(make_user(username="real12345"), None, now=NOW)

        assert "Generic username pattern (name + many numbers)" in result.factors
        assert "Random-looking username pattern" not in result.factors

    @pytest.mark.parametrize("username,applies", [
        ("ab", True),
        ("abc", True),
        ("abcd", False),
    ])
    def test_very_short_username(self, make_user, username, applies):
        outcome = rules.very_short_username(RuleContext(make_user(username=username), None, NOW))
        expected = RuleOutcome(SignalWeights.VERY_SHORT_NAME, "Very short username (3 characters or less)")
        assert outcome == (expected if applies else None)

    @pytest.mark.parametrize("length,applies", [(24, False), (25, True), (32, True)])
    def test_very_long_username(self, make_user, length, applies):
        outcome = rules.very_long_username(RuleContext(make_user(username="a" * length), None, NOW))
        expected = RuleOutcome(SignalWeights.VERY_LONG_NAME, "Unusually long username")
        assert outcome == (expected if applies else None)

    @pytest.mark.parametrize("global_name,applies", [
        ("My Alt", True),
        ("BACKUP", True),
        ("Oak Leaf", False),
        ("", False),
        (None, False),
    ])
    def test_alt_display_name(self, make_user, global_name, applies):
        outcome = rules.alt_display_name(RuleContext(make_user(global_name=global_name), None, NOW))
        expected = RuleOutcome(SignalWeights.ALT_DISPLAY_NAME, "Display name suggests alt account")
        assert outcome == (expected if applies else None)

    def test_custom_display_name(self, make_user):
        same = RuleContext(make_user(username="oakleaf", global_name="oakleaf"), None, NOW)
        custom = RuleContext(make_user(username="oakleaf", global_name="Oak"), None, NOW)

        assert rules.custom_display_name(same) is None
        assert rules.custom_display_name(custom) == RuleOutcome(
            SignalWeights.CUSTOM_DISPLAY_NAME, "Has custom display name", SignalCategory.POSITIVE,
        )

    @pytest.mark.parametrize("joined,expected", [
        (timedelta(minutes=9, seconds=59), RuleOutcome(
            SignalWeights.JOINED_UNDER_10_MINUTES, "Joined server extremely recently (< 10 minutes)")),
        (timedelta(minutes=10), RuleOutcome(
            SignalWeights.JOINED_UNDER_1_HOUR, "Joined server very recently (< 1 hour)")),
        (timedelta(minutes=59), RuleOutcome(
            SignalWeights.JOINED_UNDER_1_HOUR, "Joined server very recently (< 1 hour)")),
        (timedelta(hours=1), RuleOutcome(
            SignalWeights.JOINED_UNDER_1_DAY, "Joined server recently (< 24 hours)")),
        (timedelta(hours=23, minutes=59), RuleOutcome(
            SignalWeights.JOINED_UNDER_1_DAY, "Joined server recently (< 24 hours)")),
        (timedelta(hours=24), None),
    ])
    def test_join_timing_tiers(self, make_user, make_member, joined, expected):
        ctx = RuleContext(make_user(), make_member(joined=joined), NOW)
        assert rules.join_timing(ctx) == expected

    def test_join_timing_needs_membership(self, make_user):
        assert rules.join_timing(RuleContext(make_user(), None, NOW)) is None

    @pytest.mark.parametrize("age,joined,applies", [
        (timedelta(days=6, hours=23), timedelta(hours=23), True),
        (timedelta(hours=2), timedelta(minutes=1), True),
        (timedelta(days=7), timedelta(hours=1), False),
        (timedelta(days=3), timedelta(hours=24), False),
    ])
    def test_new_account_joined(self, make_user, make_member, age, joined, applies):
        ctx = RuleContext(make_user(age=age), make_member(joined=joined), NOW)
        expected = RuleOutcome(SignalWeights.NEW_ACCOUNT_JOINED, "New account immediately joined server", SUSPICIOUS)
        assert rules.new_account_joined(ctx) == (expected if applies else None)

    def test_new_account_joined_needs_membership(self, make_user):
        assert rules.new_account_joined(RuleContext(make_user(age=timedelta(hours=1)), None, NOW)) is None

    @pytest.mark.parametrize("hour,minute,applies", [
        (1, 59, False),
        (2, 0, True),
        (6, 59, True),
        (7, 0, False),
    ])
    def test_unusual_creation_hour(self, make_user, hour, minute, applies):
        user = replace(make_user(), created_at=datetime(2023, 3, 1, hour, minute, tzinfo=timezone.utc))
        expected = RuleOutcome(
            SignalWeights.UNUSUAL_CREATION_HOUR, "Account created during unusual hours (2-6 AM)", SUSPICIOUS,
        )
        assert rules.unusual_creation_hour(RuleContext(user, None, NOW)) == (expected if applies else None)

    @pytest.mark.parametrize("user_id,applies", [
        ("123456789012340000", True),
        ("123456789012341111", True),
        ("123456789012349999", True),
        ("123456789012345678", False),
    ])
    def test_suspicious_id_suffix(self, make_user, user_id, applies):
        outcome = rules.suspicious_id_suffix(RuleContext(make_user(user_id=user_id), None, NOW))
        expected = RuleOutcome(SignalWeights.SUSPICIOUS_ID_SUFFIX, "Suspicious ID pattern")
        assert outcome == (expected if applies else None)

    @pytest.mark.parametrize("role_count,expected", [
        (0, RuleOutcome(SignalWeights.NO_ROLES, "No roles assigned")),
        (1, None),
        (2, None),
        (3, RuleOutcome(SignalWeights.MULTIPLE_ROLES, "Has multiple roles", SignalCategory.POSITIVE)),
    ])
    def test_role_count(self, make_user, make_member, role_count, expected):
        ctx = RuleContext(make_user(), make_member(role_count=role_count), NOW)
        assert rules.role_count(ctx) == expected

    def test_timed_out_is_suspicious(self, make_user, make_member):
        ctx = RuleContext(make_user(), make_member(is_timed_out=True), NOW)

        outcome = rules.timed_out(ctx)

        assert outcome.delta == SignalWeights.TIMED_OUT
        assert outcome.category is SUSPICIOUS

    def test_default_factor_category(self, make_user):
        outcome = rules.default_avatar(RuleContext(make_user(has_avatar=False), None, NOW))
        assert outcome.category is FACTOR
