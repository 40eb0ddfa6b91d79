"""
Alt Account Detector - Configuration Module
===========================================

Centralized configuration management with environment variable validation.

DESIGN:
    This module provides a single source of truth for all configuration,
    loaded from environment variables at startup. Using a dataclass ensures
    type safety once loaded.

    Key patterns:
    - Singleton pattern via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
    - Permission helpers centralize authorization logic
"""

import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    DESIGN:
        Required fields raise ConfigValidationError if missing.
        Optional fields have sensible defaults for development.

    Attributes:
        discord_token: Discord bot authentication token.
        developer_id: User ID of the bot developer (always treated as moderator).
        command_prefix: Prefix for message commands such as !check.
        reference_timezone: IANA timezone used for the creation-hour heuristic.
        error_webhook_url: Optional webhook for error alerts.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    discord_token: str

    # -------------------------------------------------------------------------
    # Optional: Identity
    # -------------------------------------------------------------------------

    developer_id: Optional[int] = None
    command_prefix: str = "!"

    # -------------------------------------------------------------------------
    # Optional: Scoring
    # -------------------------------------------------------------------------

    reference_timezone: str = "UTC"

    # -------------------------------------------------------------------------
    # Optional: Limits
    # -------------------------------------------------------------------------

    check_history_size: int = 50        # Checks remembered per guild (process lifetime)
    report_scan_limit: int = 1000       # Members scored by /safetyreport
    timeline_default_days: int = 7
    timeline_channel_limit: int = 200   # Messages read per channel by /timeline

    # -------------------------------------------------------------------------
    # Optional: Display
    # -------------------------------------------------------------------------

    loading_reactions: bool = True

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None

    @property
    def tz(self) -> tzinfo:
        """Reference timezone as a tzinfo object."""
        if self.reference_timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.reference_timezone)


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Standardized color palette for Discord embeds."""

    GREEN = 0x00FF00
    YELLOW = 0xFFFF00
    ORANGE = 0xFFA500
    RED = 0xFF0000
    DARK_RED = 0x8B0000
    SOFT_RED = 0xFF4444
    BLURPLE = 0x5865F2

    # Risk labels
    CRITICAL = DARK_RED
    HIGH = RED
    MEDIUM = ORANGE
    LOW = YELLOW
    MINIMAL = GREEN

    # Log-specific colors
    LOG_NEGATIVE = RED       # Deletes
    LOG_WARNING = ORANGE     # Edits
    LOG_POSITIVE = GREEN     # Reaction added
    LOG_REMOVED = SOFT_RED   # Reaction removed

    INFO = BLURPLE
    WARNING = ORANGE


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int_optional(value: Optional[str]) -> Optional[int]:
    """
    Parse optional string to integer, returning None on failure.

    Args:
        value: String value from environment variable, may be None.

    Returns:
        Parsed integer or None if parsing fails.
    """
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_int_with_default(value: Optional[str], default: int, name: str, min_val: int = None, max_val: int = None) -> int:
    """
    Parse optional integer with default and range validation.

    Args:
        value: String value from environment variable.
        default: Default value if not set or invalid.
        name: Variable name for warning messages.
        min_val: Minimum allowed value (inclusive).
        max_val: Maximum allowed value (inclusive).

    Returns:
        Parsed integer within valid range, or default.
    """
    if not value:
        return default
    try:
        parsed = int(value)
        if min_val is not None and parsed < min_val:
            from src.core.logger import logger
            logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
            return min_val
        if max_val is not None and parsed > max_val:
            from src.core.logger import logger
            logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
            return max_val
        return parsed
    except ValueError:
        from src.core.logger import logger
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default


def _parse_bool(value: Optional[str], default: bool) -> bool:
    """Parse a boolean flag such as "1", "true", "no"."""
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """
    Validate URL format for webhooks.

    Args:
        value: URL string to validate.
        name: Variable name for warning messages.

    Returns:
        URL if valid, None if invalid or empty.
    """
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


def _validate_timezone(value: Optional[str]) -> str:
    """Return a loadable IANA timezone name, raising on unknown zones."""
    if not value or value.upper() == "UTC":
        return "UTC"
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigValidationError(f"Invalid timezone for REFERENCE_TIMEZONE: {value}")
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object with all settings.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        raise ConfigValidationError("Missing required environment variables: DISCORD_TOKEN")

    return Config(
        discord_token=discord_token,
        developer_id=_parse_int_optional(os.getenv("DEVELOPER_ID")),
        command_prefix=os.getenv("COMMAND_PREFIX", "!") or "!",
        reference_timezone=_validate_timezone(os.getenv("REFERENCE_TIMEZONE")),
        check_history_size=_parse_int_with_default(
            os.getenv("CHECK_HISTORY_SIZE"), 50, "CHECK_HISTORY_SIZE", min_val=1, max_val=1000
        ),
        report_scan_limit=_parse_int_with_default(
            os.getenv("REPORT_SCAN_LIMIT"), 1000, "REPORT_SCAN_LIMIT", min_val=10, max_val=100000
        ),
        timeline_default_days=_parse_int_with_default(
            os.getenv("TIMELINE_DEFAULT_DAYS"), 7, "TIMELINE_DEFAULT_DAYS", min_val=1, max_val=30
        ),
        timeline_channel_limit=_parse_int_with_default(
            os.getenv("TIMELINE_CHANNEL_LIMIT"), 200, "TIMELINE_CHANNEL_LIMIT", min_val=10, max_val=1000
        ),
        loading_reactions=_parse_bool(os.getenv("LOADING_REACTIONS"), True),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Returns:
        The global Config instance.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> None:
    """
    Validate configuration and log results at startup.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from src.core.logger import logger

    config = get_config()

    logger.tree("Configuration Validated", [
        ("Required", "✅ All required variables set"),
        ("Prefix", config.command_prefix),
        ("Reference Timezone", config.reference_timezone),
        ("Check History", f"{config.check_history_size} per guild"),
        ("Error Webhook", "Enabled" if config.error_webhook_url else "Disabled"),
    ], emoji="⚙️")


# =============================================================================
# Permission Helpers
# =============================================================================

def is_developer(user_id: int) -> bool:
    """Check if user is the bot developer."""
    developer_id = get_config().developer_id
    return developer_id is not None and user_id == developer_id


def is_admin(member) -> bool:
    """
    Check if a member can administer the bot in this guild.

    Args:
        member: Discord member object to check.

    Returns:
        True if member has Administrator or Manage Server.
    """
    if member is None:
        return False
    perms = getattr(member, "guild_permissions", None)
    if perms is None:
        return False
    return bool(perms.administrator or perms.manage_guild)


def is_moderator(member) -> bool:
    """
    Check if a member may run alt checks and view reports.

    Args:
        member: Discord member object to check.

    Returns:
        True if member can timeout, ban or kick, is an admin,
        or is the configured developer.
    """
    if member is None:
        return False
    if is_developer(member.id):
        return True
    perms = getattr(member, "guild_permissions", None)
    if perms is None:
        return False
    if perms.moderate_members or perms.ban_members or perms.kick_members:
        return True
    return is_admin(member)


async def check_mod_permission(interaction) -> bool:
    """
    Check mod permission and send error if not authorized.

    Returns:
        True if authorized, False if not (error already sent).
    """
    if not is_moderator(interaction.user):
        await interaction.response.send_message(
            "🚫 You need moderator permissions to use this command.",
            ephemeral=True,
        )
        return False
    return True


async def check_admin_permission(interaction) -> bool:
    """
    Check admin permission and send error if not authorized.

    Returns:
        True if authorized, False if not (error already sent).
    """
    if not is_admin(interaction.user):
        await interaction.response.send_message(
            "🚫 You need administrator permissions to configure logging.",
            ephemeral=True,
        )
        return False
    return True


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "get_config",
    "load_config",
    "validate_and_log_config",
    "is_developer",
    "is_admin",
    "is_moderator",
    "check_mod_permission",
    "check_admin_permission",
]
