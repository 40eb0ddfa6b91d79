"""
Alt Account Detector - Commands Package
=======================================

Command implementations, one Cog per file.

DESIGN:
    Cogs are loaded dynamically by the bot using load_extension().

    To add a new command:
    1. Create new_command.py in this directory
    2. Create a Cog class with @app_commands.command decorators
    3. Add async def setup(bot) function at the end
    4. Add the cog to COMMAND_COGS list below

Available Commands:
    !check, /check: Alt account risk analysis (moderator)
    /serverinfo, /userinfo: Server and user lookups
    /althistory: Recent checks in this server (moderator)
    /setreactionlogs, /setdeletedlogs, /seteditlogs: Log channels (admin)
    /logstatus: Logging configuration (moderator)
    /safetyreport, /timeline: Reports (moderator)
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "src.commands.check",
    "src.commands.info",
    "src.commands.logging_config",
    "src.commands.reports",
]
"""Command cog module paths, loaded in setup_hook."""


__all__ = [
    "COMMAND_COGS",
]
