"""
Alt Account Detector - Server Config Store
==========================================

Per-guild logging channel settings.

DESIGN:
    Settings live in memory for the lifetime of the process. The store is
    created once by the bot and handed to the cogs and services that read
    or write it; nothing reaches for it through module globals.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional


class LogType(str, Enum):
    """Kinds of audit log a guild can route to a channel."""

    REACTION = "reaction"
    DELETED = "deleted"
    EDIT = "edit"


@dataclass(frozen=True)
class GuildLogConfig:
    """Logging channels configured for one guild."""

    reaction_logs_channel: Optional[int] = None
    deleted_logs_channel: Optional[int] = None
    edit_logs_channel: Optional[int] = None

    def channel_for(self, log_type: LogType) -> Optional[int]:
        return getattr(self, _FIELD_BY_TYPE[log_type])


_FIELD_BY_TYPE = {
    LogType.REACTION: "reaction_logs_channel",
    LogType.DELETED: "deleted_logs_channel",
    LogType.EDIT: "edit_logs_channel",
}


class ServerConfigStore:
    """Key-value store of GuildLogConfig keyed by guild ID."""

    def __init__(self) -> None:
        self._configs: Dict[int, GuildLogConfig] = {}

    def get(self, guild_id: int) -> GuildLogConfig:
        """Return the guild's config, creating an empty one on first access."""
        config = self._configs.get(guild_id)
        if config is None:
            config = GuildLogConfig()
            self._configs[guild_id] = config
        return config

    def set_channel(self, guild_id: int, log_type: LogType, channel_id: Optional[int]) -> GuildLogConfig:
        """Route a log type to a channel (None disables it)."""
        updated = replace(self.get(guild_id), **{_FIELD_BY_TYPE[log_type]: channel_id})
        self._configs[guild_id] = updated
        return updated

    def channel_for(self, guild_id: int, log_type: LogType) -> Optional[int]:
        return self.get(guild_id).channel_for(log_type)

    def clear(self, guild_id: int) -> None:
        self._configs.pop(guild_id, None)

    def __len__(self) -> int:
        return len(self._configs)


__all__ = [
    "LogType",
    "GuildLogConfig",
    "ServerConfigStore",
]
