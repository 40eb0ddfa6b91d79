"""
Alt Account Detector - Test Fixtures
====================================

Shared fixtures and factories for all tests.
"""

import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules
os.environ.setdefault("DISCORD_TOKEN", "test-token")
os.environ["LOGS_DIR"] = tempfile.mkdtemp(prefix="altdetector-logs-")

from src.core import config as config_module  # noqa: E402
from src.risk.models import (  # noqa: E402
    GuildMembership,
    MemberSnapshot,
    PermissionTier,
    UserSnapshot,
)


# Fixed evaluation time; 12:00 UTC keeps derived creation hours out of 2-6 AM
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Config
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Each test loads config fresh from its own environment."""
    monkeypatch.setattr(config_module, "_config", None)
    yield
    config_module._config = None


# =============================================================================
# Snapshot Factories
# =============================================================================

@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_user():
    """Factory for UserSnapshot with neutral defaults (avatar, 200-day-old account)."""
    def _create(
        username: str = "oakleaf",
        age: timedelta = timedelta(days=200),
        user_id: str = "123456789012345678",
        global_name: Optional[str] = None,
        has_avatar: bool = True,
        avatar_is_animated: bool = False,
        has_banner: bool = False,
        discriminator: Optional[str] = "0",
    ) -> UserSnapshot:
        return UserSnapshot(
            id=user_id,
            username=username,
            created_at=NOW - age,
            global_name=global_name,
            has_avatar=has_avatar,
            avatar_is_animated=avatar_is_animated,
            has_banner=has_banner,
            discriminator=discriminator,
        )
    return _create


@pytest.fixture
def make_member():
    """Factory for MemberSnapshot with neutral defaults (joined 100 days ago, 1 role)."""
    def _create(
        joined: timedelta = timedelta(days=100),
        role_count: int = 1,
        is_boosting: bool = False,
        is_timed_out: bool = False,
        permission_tier: PermissionTier = PermissionTier.NONE,
    ) -> MemberSnapshot:
        return MemberSnapshot(
            joined_at=NOW - joined,
            role_count=role_count,
            is_boosting=is_boosting,
            is_timed_out=is_timed_out,
            permission_tier=permission_tier,
        )
    return _create


@pytest.fixture
def make_membership():
    def _create(guild_id: int, joined: timedelta, role_count: int = 0, name: Optional[str] = None) -> GuildMembership:
        return GuildMembership(
            guild_id=guild_id,
            joined_at=NOW - joined,
            guild_name=name or f"Guild {guild_id}",
            role_count=role_count,
        )
    return _create


# =============================================================================
# Discord Mocks
# =============================================================================

@pytest.fixture
def mock_permissions():
    """Factory for guild permission objects with everything off by default."""
    def _create(**flags) -> MagicMock:
        perms = MagicMock()
        for name in (
            "administrator", "manage_guild", "moderate_members",
            "ban_members", "kick_members", "view_channel", "read_message_history",
        ):
            setattr(perms, name, flags.get(name, False))
        return perms
    return _create


@pytest.fixture
def mock_discord_member(mock_permissions):
    """Factory for discord.Member-like mocks."""
    def _create(
        user_id: int = 555000111,
        name: str = "oakleaf",
        joined_at: Optional[datetime] = None,
        roles: int = 1,
        premium: bool = False,
        timed_out: bool = False,
        bot: bool = False,
        avatar: bool = True,
        **perm_flags,
    ) -> MagicMock:
        member = MagicMock()
        member.id = user_id
        member.name = name
        member.global_name = None
        member.discriminator = "0"
        member.bot = bot
        member.created_at = NOW - timedelta(days=200)
        member.joined_at = joined_at if joined_at is not None else NOW - timedelta(days=100)
        member.roles = [MagicMock() for _ in range(roles + 1)]  # includes @everyone
        member.premium_since = NOW - timedelta(days=5) if premium else None
        member.is_timed_out = MagicMock(return_value=timed_out)
        member.guild_permissions = mock_permissions(**perm_flags)
        member.__str__ = MagicMock(return_value=name)
        if avatar:
            member.avatar = MagicMock()
            member.avatar.is_animated = MagicMock(return_value=False)
        else:
            member.avatar = None
        member.banner = None
        member.display_avatar.url = "https://cdn.discordapp.com/embed/avatars/0.png"
        return member
    return _create


@pytest.fixture
def mock_interaction():
    """Interaction mock with an unanswered response."""
    interaction = MagicMock()
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.response.send_message = AsyncMock()
    interaction.response.edit_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction
