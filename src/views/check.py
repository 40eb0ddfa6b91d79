"""
Alt Account Detector - Check Result View
========================================

Embed and moderation buttons attached to an alt check result.

DESIGN:
    Buttons are DynamicItems whose custom_id carries the action and the
    target ID (alt_action:<action>:<user_id>), so they keep working after
    a restart without any stored state. Every click re-fetches the target
    and re-checks permissions and admin immunity, because the situation
    may have changed since the check was posted.
"""

import re
from typing import Dict, Optional, Tuple

import discord

from src.core.config import EmbedColors, is_admin, is_moderator
from src.core.constants import (
    MUTUAL_PATTERNS_DISPLAY_LIMIT,
    POSITIVE_INDICATORS_DISPLAY_LIMIT,
    RISK_FACTORS_DISPLAY_LIMIT,
)
from src.core.logger import logger
from src.risk import RiskAssessment, RiskLabel
from src.services.snapshots import fetch_member
from src.utils.time_format import format_account_age, format_ago


# =============================================================================
# Label Presentation
# =============================================================================

RISK_COLORS: Dict[RiskLabel, int] = {
    RiskLabel.CRITICAL: EmbedColors.CRITICAL,
    RiskLabel.HIGH: EmbedColors.HIGH,
    RiskLabel.MEDIUM: EmbedColors.MEDIUM,
    RiskLabel.LOW: EmbedColors.LOW,
    RiskLabel.MINIMAL: EmbedColors.MINIMAL,
}

RISK_EMOJIS: Dict[RiskLabel, str] = {
    RiskLabel.CRITICAL: "🚨",
    RiskLabel.HIGH: "⛔",
    RiskLabel.MEDIUM: "⚠️",
    RiskLabel.LOW: "🟡",
    RiskLabel.MINIMAL: "✅",
}

VERDICTS: Dict[RiskLabel, str] = {
    RiskLabel.CRITICAL: "**CRITICAL RISK** - Immediate review recommended",
    RiskLabel.HIGH: "**HIGH RISK** - Close monitoring advised",
    RiskLabel.MEDIUM: "**MEDIUM RISK** - Proceed with caution",
    RiskLabel.LOW: "**LOW RISK** - Appears legitimate",
    RiskLabel.MINIMAL: "**MINIMAL RISK** - Highly likely legitimate",
}


# =============================================================================
# Check Embed
# =============================================================================

def build_check_embed(user: discord.abc.User, assessment: RiskAssessment) -> discord.Embed:
    """Render an assessment for moderators."""
    label = assessment.label
    embed = discord.Embed(
        title=f"{RISK_EMOJIS[label]} Alt Account Detector Analysis:",
        description=f"**Target:** {user} ({user.id})",
        color=RISK_COLORS.get(label, EmbedColors.BLURPLE),
        timestamp=discord.utils.utcnow(),
    )
    embed.set_thumbnail(url=user.display_avatar.url)

    embed.add_field(name="Risk Score:", value=f"**{assessment.score}/100** ({label.value})", inline=True)
    embed.add_field(name="Confidence:", value=f"{assessment.confidence}%", inline=True)
    embed.add_field(name="Account Age:", value=format_account_age(assessment.account_age_ms), inline=True)

    analysis = assessment.analysis
    embed.add_field(name="Account Stability:", value=analysis.account_stability, inline=True)
    embed.add_field(name="Profile Complete:", value=f"{analysis.profile_completeness}%", inline=True)
    embed.add_field(name="Server Integration:", value=analysis.server_integration, inline=True)

    join = assessment.join_analysis
    if join is not None:
        credentials = (
            f"Joined: {format_ago(join.join_days, join.join_hours)}\n"
            f"Roles: {join.roles}\n"
            f"Status: {join.permissions}"
        )
        if join.premium:
            credentials += "\n💎 Server Booster"
        embed.add_field(name="Server Credentials:", value=credentials, inline=True)

    embed.add_field(name="📊 Activity Score", value=f"{assessment.activity_score}/100", inline=True)
    embed.add_field(name="✅ Legitimacy Signs", value=str(assessment.legitimacy_indicators), inline=True)

    mutual = assessment.mutual_analysis
    if mutual is not None:
        timing = (
            "🚨 Suspicious timing patterns detected"
            if mutual.has_close_timing_pattern
            else "✅ No suspicious timing patterns"
        )
        embed.add_field(
            name="Mutual Servers:",
            value=f"Mutual servers: {mutual.mutual_count}\n{timing}",
            inline=True,
        )
        if mutual.suspicious_patterns:
            embed.add_field(
                name="🔗 Connection Patterns",
                value="\n".join(mutual.suspicious_patterns[:MUTUAL_PATTERNS_DISPLAY_LIMIT]),
                inline=False,
            )

    if assessment.factors:
        embed.add_field(
            name="Risk Indicators",
            value="\n".join(f"- {f}" for f in assessment.factors[:RISK_FACTORS_DISPLAY_LIMIT]),
            inline=False,
        )

    if assessment.positive_indicators:
        embed.add_field(
            name="✅ Legitimacy Indicators",
            value="\n".join(f"- {p}" for p in assessment.positive_indicators[:POSITIVE_INDICATORS_DISPLAY_LIMIT]),
            inline=False,
        )

    embed.add_field(name="📋 Final Assessment", value=VERDICTS[label], inline=False)

    embed.set_footer(
        text=(
            f"Analysis: {assessment.risk_indicators} risk factors • "
            f"{assessment.legitimacy_indicators} positive signs • "
            "Checked by Alt Account Detector"
        ),
        icon_url=user.display_avatar.url,
    )
    return embed


# =============================================================================
# Action Buttons
# =============================================================================

ACTION_STYLES: Dict[str, Tuple[str, discord.ButtonStyle]] = {
    "allow": ("✅ Allow", discord.ButtonStyle.success),
    "kick": ("❌ Kick", discord.ButtonStyle.danger),
    "ban": ("🔨 Ban", discord.ButtonStyle.danger),
    "confirmkick": ("Yes, Kick", discord.ButtonStyle.danger),
    "confirmban": ("Yes, Ban", discord.ButtonStyle.danger),
    "cancel": ("Cancel", discord.ButtonStyle.secondary),
}

_VERBS = {"kick": "kick", "ban": "ban", "confirmkick": "kick", "confirmban": "ban"}


async def _resolve_target(
    client: discord.Client,
    guild: discord.Guild,
    user_id: int,
) -> Tuple[Optional[discord.abc.User], Optional[discord.Member]]:
    """
    Find the button's target before the interaction is answered.

    Cached members and users cost no API call. Cache misses fall back to
    single fetches without retry.
    """
    member = await fetch_member(guild, user_id)
    if member is not None:
        return member, member

    user = client.get_user(user_id)
    if user is not None:
        return user, None

    try:
        return await client.fetch_user(user_id), None
    except discord.HTTPException as e:
        logger.debug(f"Button target fetch failed for {user_id}: {e}")
        return None, None


def _has_action_permission(member: discord.abc.User, verb: str) -> bool:
    perms = getattr(member, "guild_permissions", None)
    if perms is None:
        return False
    return perms.kick_members if verb == "kick" else perms.ban_members


class AltActionButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=r"alt_action:(?P<action>allow|kick|ban|confirmkick|confirmban|cancel):(?P<user_id>\d+)",
):
    """
    Persistent moderation button on a check result.

    Works after bot restart by using DynamicItem with regex pattern.
    """

    def __init__(self, action: str, user_id: int, *, admin_immune: bool = False) -> None:
        label, style = ACTION_STYLES[action]
        immune = admin_immune and action in ("kick", "ban")
        if immune:
            label = f"{label} (Admin Immune)"

        super().__init__(
            discord.ui.Button(
                label=label,
                style=style,
                custom_id=f"alt_action:{action}:{user_id}",
                disabled=immune,
            )
        )
        self.action = action
        self.user_id = user_id

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match: re.Match[str],
    ) -> "AltActionButton":
        """Reconstruct the button from the custom_id regex match."""
        return cls(match.group("action"), int(match.group("user_id")))

    async def callback(self, interaction: discord.Interaction) -> None:
        guild = interaction.guild
        if guild is None:
            await interaction.response.send_message("⚠️ This action only works in a server.", ephemeral=True)
            return

        target, member = await _resolve_target(interaction.client, guild, self.user_id)
        if target is None:
            await interaction.response.send_message("⚠️ User not found.", ephemeral=True)
            return

        target_is_admin = member is not None and is_admin(member)

        logger.tree("Alt Action Clicked", [
            ("Action", self.action),
            ("Clicked By", f"{interaction.user} ({interaction.user.id})"),
            ("Target", f"{target} ({target.id})"),
            ("Guild", f"{guild.name} ({guild.id})"),
        ], emoji="🖱️")

        if self.action == "allow":
            await self._allow(interaction, target)
        elif self.action == "cancel":
            await self._cancel(interaction)
        elif self.action in ("kick", "ban"):
            await self._prompt(interaction, target, member, target_is_admin)
        else:
            await self._execute(interaction, target, member, target_is_admin)

    # =========================================================================
    # Actions
    # =========================================================================

    async def _allow(self, interaction: discord.Interaction, target: discord.User) -> None:
        if not is_moderator(interaction.user):
            await interaction.response.send_message(
                "🚫 You need moderator permissions to use this button.",
                ephemeral=True,
            )
            return
        await interaction.response.edit_message(content=f"✅ Allowed **{target}**", view=None)

    async def _cancel(self, interaction: discord.Interaction) -> None:
        if not is_moderator(interaction.user):
            await interaction.response.send_message(
                "🚫 You need moderator permissions to use this button.",
                ephemeral=True,
            )
            return
        await interaction.response.edit_message(content="❎ Action cancelled.", view=None)

    async def _prompt(
        self,
        interaction: discord.Interaction,
        target: discord.User,
        member: Optional[discord.Member],
        target_is_admin: bool,
    ) -> None:
        verb = _VERBS[self.action]
        if not _has_action_permission(interaction.user, verb):
            await interaction.response.send_message(f"🚫 You do not have permission to {verb}.", ephemeral=True)
            return
        if member is None:
            await interaction.response.send_message("⚠️ User is not in the server.", ephemeral=True)
            return
        if target_is_admin:
            await interaction.response.send_message(
                f"🛡️ Cannot {verb} this user - they have administrator privileges.",
                ephemeral=True,
            )
            return

        await interaction.response.send_message(
            f"⚠️ Are you sure you want to **{verb}** {target}?",
            view=build_confirm_view(verb, target.id),
        )

    async def _execute(
        self,
        interaction: discord.Interaction,
        target: discord.User,
        member: Optional[discord.Member],
        target_is_admin: bool,
    ) -> None:
        verb = _VERBS[self.action]
        if not _has_action_permission(interaction.user, verb):
            await interaction.response.send_message(f"🚫 You do not have permission to {verb}.", ephemeral=True)
            return
        if target_is_admin:
            await interaction.response.edit_message(
                content=f"🛡️ Cannot {verb} this user - they have administrator privileges.",
                view=None,
            )
            return
        if member is None:
            await interaction.response.edit_message(content="⚠️ User is not in the server.", view=None)
            return

        try:
            if verb == "kick":
                await member.kick(reason=f"Kicked by {interaction.user} via alt check")
            else:
                await member.ban(reason=f"Banned by {interaction.user} via alt check")
        except discord.HTTPException as e:
            logger.error("Alt Action Failed", [
                ("Action", verb),
                ("Target", f"{target} ({target.id})"),
                ("Moderator", f"{interaction.user} ({interaction.user.id})"),
                ("Error", str(e)[:100]),
            ])
            await interaction.response.edit_message(content=f"❌ Failed to {verb} **{target}**.", view=None)
            return

        logger.tree(f"Member {'Kicked' if verb == 'kick' else 'Banned'} via Alt Check", [
            ("Target", f"{target} ({target.id})"),
            ("Moderator", f"{interaction.user} ({interaction.user.id})"),
            ("Guild", f"{member.guild.name} ({member.guild.id})"),
        ], emoji="👢" if verb == "kick" else "🔨")

        done = f"👢 Kicked **{target}**" if verb == "kick" else f"🔨 Banned **{target}**"
        await interaction.response.edit_message(content=done, view=None)


# =============================================================================
# View Builders
# =============================================================================

def build_check_view(user_id: int, target_is_admin: bool) -> discord.ui.View:
    """Allow / Kick / Ban row; kick and ban are disabled for admins."""
    view = discord.ui.View(timeout=None)
    view.add_item(AltActionButton("allow", user_id))
    view.add_item(AltActionButton("kick", user_id, admin_immune=target_is_admin))
    view.add_item(AltActionButton("ban", user_id, admin_immune=target_is_admin))
    return view


def build_confirm_view(verb: str, user_id: int) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(AltActionButton(f"confirm{verb}", user_id))
    view.add_item(AltActionButton("cancel", user_id))
    return view


__all__ = [
    "RISK_COLORS",
    "RISK_EMOJIS",
    "VERDICTS",
    "build_check_embed",
    "AltActionButton",
    "build_check_view",
    "build_confirm_view",
]
