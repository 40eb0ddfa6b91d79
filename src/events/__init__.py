"""
Alt Account Detector - Events Package
=====================================

Event handler Cogs.

DESIGN:
    Each event file contains a Cog class with @commands.Cog.listener decorators.
    Cogs are loaded dynamically by the bot using load_extension().

    Event routing:
    - audit.py: Message delete/edit, reaction add/remove -> AuditLogService
"""

# =============================================================================
# Event Cog Registry
# =============================================================================

EVENT_COGS = [
    "src.events.audit",
]
"""Event cog module paths, loaded in setup_hook."""


__all__ = [
    "EVENT_COGS",
]
