"""
Alt Account Detector - Snapshot Extraction
==========================================

Turns discord.py users and members into the plain snapshots the risk
engine consumes.

DESIGN:
    This is the only place that reads Discord objects for scoring.
    A member that cannot be fetched (left, never joined, no access) is
    reported as None and scored as an external check, not as an error.
"""

from typing import List, Optional, Tuple

import discord

from src.core.logger import logger
from src.risk.models import (
    GuildMembership,
    MemberSnapshot,
    PermissionTier,
    UserSnapshot,
)


# =============================================================================
# Snapshot Builders
# =============================================================================

def build_user_snapshot(user: discord.abc.User) -> UserSnapshot:
    """Build a UserSnapshot from a User or Member."""
    avatar = user.avatar
    return UserSnapshot(
        id=str(user.id),
        username=user.name,
        created_at=user.created_at,
        global_name=user.global_name,
        has_avatar=avatar is not None,
        avatar_is_animated=avatar is not None and avatar.is_animated(),
        has_banner=getattr(user, "banner", None) is not None,
        discriminator=user.discriminator,
    )


def permission_tier(member: discord.Member) -> PermissionTier:
    """Highest moderation capability the member holds."""
    perms = member.guild_permissions
    if perms.administrator:
        return PermissionTier.ADMINISTRATOR
    if perms.moderate_members:
        return PermissionTier.MODERATOR
    return PermissionTier.NONE


def role_count(member: discord.Member) -> int:
    """Roles excluding @everyone."""
    return max(0, len(member.roles) - 1)


def build_member_snapshot(member: discord.Member) -> Optional[MemberSnapshot]:
    """Build a MemberSnapshot, or None when the join time is unknown."""
    if member.joined_at is None:
        return None
    return MemberSnapshot(
        joined_at=member.joined_at,
        role_count=role_count(member),
        is_boosting=member.premium_since is not None,
        is_timed_out=member.is_timed_out(),
        permission_tier=permission_tier(member),
    )


# =============================================================================
# Fetching
# =============================================================================

async def fetch_member(guild: discord.Guild, user_id: int) -> Optional[discord.Member]:
    """Get a member from cache, falling back to the API."""
    member = guild.get_member(user_id)
    if member is not None:
        return member

    try:
        return await guild.fetch_member(user_id)
    except (discord.NotFound, discord.Forbidden):
        return None
    except discord.HTTPException as e:
        logger.warning(f"Member fetch failed for {user_id} in {guild.id}: {e}")
        return None


async def fetch_member_snapshot(guild: discord.Guild, user_id: int) -> Optional[MemberSnapshot]:
    member = await fetch_member(guild, user_id)
    if member is None:
        return None
    return build_member_snapshot(member)


async def fetch_full_user(bot: discord.Client, user: discord.abc.User) -> discord.abc.User:
    """
    Refetch a user so banner data is present.

    Members and cached users never carry banners; only fetch_user() does.
    Falls back to the given user if the API call fails.
    """
    try:
        return await bot.fetch_user(user.id)
    except discord.HTTPException as e:
        logger.debug(f"Full user fetch failed for {user.id}: {e}")
        return user


def collect_memberships(
    bot: discord.Client,
    user_id: int,
    other_id: int,
) -> Tuple[List[GuildMembership], List[GuildMembership]]:
    """
    Membership records for two users across guilds where both are cached.

    Returns:
        (user memberships, other memberships) in the bot's guild order.
    """
    user_memberships: List[GuildMembership] = []
    other_memberships: List[GuildMembership] = []

    for guild in bot.guilds:
        member = guild.get_member(user_id)
        other = guild.get_member(other_id)
        if member is None or other is None:
            continue
        if member.joined_at is None or other.joined_at is None:
            continue

        user_memberships.append(GuildMembership(
            guild_id=guild.id,
            joined_at=member.joined_at,
            guild_name=guild.name,
            role_count=role_count(member),
        ))
        other_memberships.append(GuildMembership(
            guild_id=guild.id,
            joined_at=other.joined_at,
            guild_name=guild.name,
            role_count=role_count(other),
        ))

    return user_memberships, other_memberships


__all__ = [
    "build_user_snapshot",
    "build_member_snapshot",
    "permission_tier",
    "role_count",
    "fetch_member",
    "fetch_member_snapshot",
    "fetch_full_user",
    "collect_memberships",
]
