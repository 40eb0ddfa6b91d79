"""
Alt Account Detector - Core Package
===================================

Configuration, logging, constants and the per-guild settings store.

DESIGN:
    - get_config() returns the same Config instance
    - logger is a global TreeLogger instance
    - ServerConfigStore is created by the bot and passed where needed
"""

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    get_config,
    is_admin,
    is_developer,
    is_moderator,
)

from .logger import logger, TreeLogger

from .server_config import GuildLogConfig, LogType, ServerConfigStore


__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "get_config",
    "is_admin",
    "is_developer",
    "is_moderator",
    # Logger
    "logger",
    "TreeLogger",
    # Server config
    "GuildLogConfig",
    "LogType",
    "ServerConfigStore",
]
