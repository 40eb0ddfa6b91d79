"""
Alt Account Detector - Source Package
=====================================

Moderation assistant that scores how likely an account is an alt,
renders review/action controls, and optionally audits message and
reaction activity.

Package Structure:
- bot.py: Main Discord bot class
- commands/: Prefix and slash command cogs
- core/: Configuration, logging, constants, per-guild settings store
- events/: Event listener cogs (audit logging)
- risk/: Pure risk-scoring engine and mutual-connection analyzer
- services/: Snapshot extraction, check orchestration, reports
- utils/: Helper functions
- views/: Embeds, buttons and select menus

Version: v1.0.0
"""
