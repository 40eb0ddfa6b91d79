"""
Alt Account Detector - Services Package
=======================================

Services sit between Discord and the pure risk core.

DESIGN:
    Services are created once in bot.py and reached through the bot
    instance. They should:
    - Do all Discord I/O for their feature
    - Treat missing members/channels as absent data, not errors
    - Log notable events as trees

Available Services:
    RiskService: Full alt check for one target
    CheckHistory: Recent checks per guild (in memory)
    AuditLogService: Delete/edit/reaction log embeds
    Server report: Guild-wide safety scan
    Timeline: Per-user message activity summary
"""

from .audit_logs import AuditLogService
from .check_history import CheckHistory, CheckHistorySummary, CheckRecord
from .risk_service import CheckResult, RiskService
from .server_report import ReportEntry, ServerSafetyReport, build_server_report, scan_guild
from .timeline import (
    BehaviorTimeline,
    MessageEvent,
    build_behavior_timeline,
    collect_message_events,
)


__all__ = [
    "AuditLogService",
    "CheckHistory",
    "CheckHistorySummary",
    "CheckRecord",
    "CheckResult",
    "RiskService",
    "ReportEntry",
    "ServerSafetyReport",
    "build_server_report",
    "scan_guild",
    "BehaviorTimeline",
    "MessageEvent",
    "build_behavior_timeline",
    "collect_message_events",
]
