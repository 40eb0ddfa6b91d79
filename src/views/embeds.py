"""
Alt Account Detector - Informational Embeds
===========================================

Embeds for /serverinfo, /userinfo, /althistory, /logstatus,
/safetyreport and /timeline.
"""

from typing import Optional, Sequence

import discord

from src.core.config import EmbedColors
from src.core.server_config import GuildLogConfig
from src.risk import RiskLabel
from src.services.check_history import CheckHistorySummary, CheckRecord
from src.services.server_report import ServerSafetyReport
from src.services.timeline import BehaviorTimeline
from src.utils.footer import set_footer
from src.utils.time_format import format_duration
from .check import RISK_EMOJIS


def _date(dt) -> str:
    return discord.utils.format_dt(dt, "D")


# =============================================================================
# Server / User Info
# =============================================================================

def build_server_info_embed(guild: discord.Guild, owner: Optional[discord.abc.User]) -> discord.Embed:
    embed = discord.Embed(
        title=f"📊 Server Information: {guild.name}",
        color=EmbedColors.INFO,
        timestamp=discord.utils.utcnow(),
    )
    if guild.icon:
        embed.set_thumbnail(url=guild.icon.url)

    embed.add_field(name="Owner", value=str(owner) if owner else "Unknown", inline=True)
    embed.add_field(name="Members", value=str(guild.member_count or 0), inline=True)
    embed.add_field(name="Created", value=_date(guild.created_at), inline=True)
    embed.add_field(name="🛡️ Verification Level", value=str(guild.verification_level).title(), inline=True)
    embed.add_field(name="Channels", value=str(len(guild.channels)), inline=True)
    embed.add_field(name="Emojis", value=str(len(guild.emojis)), inline=True)
    return set_footer(embed)


def build_user_info_embed(user: discord.abc.User, member: Optional[discord.Member]) -> discord.Embed:
    accent = getattr(user, "accent_color", None)
    embed = discord.Embed(
        title=f"User Information: {user}",
        color=accent or EmbedColors.INFO,
        timestamp=discord.utils.utcnow(),
    )
    embed.set_thumbnail(url=user.display_avatar.url)

    embed.add_field(name="ID", value=str(user.id), inline=True)
    embed.add_field(name="Account Created", value=_date(user.created_at), inline=True)
    embed.add_field(name="Bot", value="Yes" if user.bot else "No", inline=True)

    if member is not None:
        if member.joined_at:
            embed.add_field(name="Joined Server", value=_date(member.joined_at), inline=True)
        roles = [role.name for role in member.roles if not role.is_default()]
        embed.add_field(name="Roles", value=(", ".join(roles) or "None")[:1024], inline=False)
        if member.premium_since:
            embed.add_field(name="Boosting Since", value=_date(member.premium_since), inline=True)

    return set_footer(embed)


# =============================================================================
# Check History
# =============================================================================

def build_history_embed(
    records: Sequence[CheckRecord],
    day_summary: CheckHistorySummary,
    total_summary: CheckHistorySummary,
) -> discord.Embed:
    embed = discord.Embed(
        title="📜 Recent Alt Account Checks",
        color=EmbedColors.ORANGE,
        timestamp=discord.utils.utcnow(),
    )

    if not records:
        embed.description = "No checks recorded since the bot started."
    else:
        lines = [
            f"{RISK_EMOJIS[r.label]} **{r.user_tag}** ({r.user_id}) - "
            f"{r.score}/100 {r.label.value} - by <@{r.moderator_id}> "
            f"{discord.utils.format_dt(r.checked_at, 'R')}"
            for r in records
        ]
        embed.description = "\n".join(lines)[:4096]

    high_risk = sum(
        total_summary.by_label.get(label, 0)
        for label in (RiskLabel.HIGH, RiskLabel.CRITICAL)
    )
    embed.add_field(
        name="Last 24 Hours",
        value=f"{day_summary.total} checks" if day_summary.total else "No checks recorded",
        inline=False,
    )
    embed.add_field(name="Total Checks", value=str(total_summary.total), inline=True)
    embed.add_field(name="High Risk Found", value=str(high_risk), inline=True)
    if total_summary.total:
        embed.add_field(name="Average Score", value=f"{total_summary.average_score:.1f}", inline=True)

    return set_footer(embed, text="History is kept in memory until the bot restarts")


# =============================================================================
# Log Status
# =============================================================================

def _channel_or_unset(channel_id: Optional[int]) -> str:
    return f"<#{channel_id}>" if channel_id else "Not configured"


def build_log_status_embed(config: GuildLogConfig) -> discord.Embed:
    embed = discord.Embed(
        title="📊 Logging Configuration Status",
        color=EmbedColors.INFO,
        timestamp=discord.utils.utcnow(),
    )
    embed.add_field(name="🎭 Reaction Logs", value=_channel_or_unset(config.reaction_logs_channel), inline=True)
    embed.add_field(name="🗑️ Deleted Message Logs", value=_channel_or_unset(config.deleted_logs_channel), inline=True)
    embed.add_field(name="✏️ Edit Message Logs", value=_channel_or_unset(config.edit_logs_channel), inline=True)
    return set_footer(embed)


# =============================================================================
# Safety Report
# =============================================================================

def build_safety_report_embed(guild: discord.Guild, report: ServerSafetyReport) -> discord.Embed:
    if report.label_counts[RiskLabel.CRITICAL]:
        color = EmbedColors.CRITICAL
    elif report.label_counts[RiskLabel.HIGH]:
        color = EmbedColors.HIGH
    else:
        color = EmbedColors.MINIMAL

    embed = discord.Embed(
        title=f"🛡️ Server Safety Report: {guild.name}",
        color=color,
        timestamp=discord.utils.utcnow(),
    )

    embed.add_field(name="Members Scanned", value=str(report.total_scanned), inline=True)
    embed.add_field(name="Average Risk", value=f"{report.average_score:.1f}/100", inline=True)
    embed.add_field(name="High/Critical", value=f"{report.high_risk_count} ({report.high_risk_percent:.1f}%)", inline=True)

    distribution = "\n".join(
        f"{RISK_EMOJIS[label]} {label.value}: {report.label_counts[label]}"
        for label in (RiskLabel.CRITICAL, RiskLabel.HIGH, RiskLabel.MEDIUM, RiskLabel.LOW, RiskLabel.MINIMAL)
    )
    embed.add_field(name="Risk Distribution", value=distribution, inline=False)

    embed.add_field(name="New Accounts (< 7d)", value=str(report.new_accounts), inline=True)
    embed.add_field(name="Default Avatars", value=str(report.default_avatars), inline=True)
    embed.add_field(name="Joined (< 24h)", value=str(report.recent_joins), inline=True)

    if report.top_entries:
        top = "\n".join(
            f"{RISK_EMOJIS[e.assessment.label]} <@{e.member_id}> - {e.assessment.score}/100"
            for e in report.top_entries
        )
        embed.add_field(name="Highest Risk Members", value=top, inline=False)

    note = "Cached members only"
    if report.truncated:
        note += " • Scan limit reached"
    return set_footer(embed, text=note)


# =============================================================================
# Behavior Timeline
# =============================================================================

def _sparkline(counts: Sequence[int]) -> str:
    blocks = "▁▂▃▄▅▆▇█"
    peak = max(counts) if counts else 0
    if not peak:
        return blocks[0] * len(counts)
    return "".join(blocks[round(c * (len(blocks) - 1) / peak)] for c in counts)


def build_timeline_embed(user: discord.abc.User, timeline: BehaviorTimeline) -> discord.Embed:
    embed = discord.Embed(
        title=f"🕒 Behavior Timeline: {user}",
        description=f"Last {timeline.days} days of message activity",
        color=EmbedColors.INFO,
        timestamp=discord.utils.utcnow(),
    )
    embed.set_thumbnail(url=user.display_avatar.url)

    embed.add_field(name="Messages", value=str(timeline.total_messages), inline=True)
    embed.add_field(name="Active Days", value=f"{timeline.active_days}/{timeline.days}", inline=True)
    embed.add_field(
        name="Busiest Hour (UTC)",
        value=f"{timeline.busiest_hour:02d}:00" if timeline.busiest_hour is not None else "N/A",
        inline=True,
    )

    if timeline.first_seen and timeline.last_seen:
        span_minutes = int((timeline.last_seen - timeline.first_seen).total_seconds() // 60)
        embed.add_field(name="First Seen", value=discord.utils.format_dt(timeline.first_seen, "R"), inline=True)
        embed.add_field(name="Last Seen", value=discord.utils.format_dt(timeline.last_seen, "R"), inline=True)
        embed.add_field(name="Active Span", value=format_duration(span_minutes), inline=True)

    counts = [count for _, count in timeline.daily_counts]
    embed.add_field(name="Daily Activity", value=f"`{_sparkline(counts)}`", inline=False)

    if timeline.channel_breakdown:
        channels = "\n".join(f"#{name}: {count}" for name, count in timeline.channel_breakdown)
        embed.add_field(name="Top Channels", value=channels, inline=True)

    embed.add_field(
        name="Content Mix",
        value=(
            f"Links: {timeline.link_ratio:.0%}\n"
            f"Attachments: {timeline.attachment_ratio:.0%}\n"
            f"Avg Length: {timeline.average_length:.0f}"
        ),
        inline=True,
    )

    if timeline.observations:
        embed.add_field(
            name="Observations",
            value="\n".join(f"- {o}" for o in timeline.observations),
            inline=False,
        )

    return set_footer(embed)


__all__ = [
    "build_server_info_embed",
    "build_user_info_embed",
    "build_history_embed",
    "build_log_status_embed",
    "build_safety_report_embed",
    "build_timeline_embed",
]
