"""
Alt Account Detector - Log Channel Select
=========================================

Select menu used by /setreactionlogs, /setdeletedlogs and /seteditlogs.
"""

from typing import Dict, List, Tuple

import discord

from src.core.config import EmbedColors, is_admin
from src.core.constants import SELECT_MENU_OPTION_LIMIT
from src.core.logger import logger
from src.core.server_config import LogType, ServerConfigStore


NO_CHANNELS_VALUE = "none"

LOG_TYPE_TEXT: Dict[LogType, Tuple[str, str, int, str]] = {
    # title, description noun, color, confirmation noun
    LogType.REACTION: ("🎭 Configure Reaction Logs", "reaction logs", EmbedColors.INFO, "Reaction logs"),
    LogType.DELETED: ("🗑️ Configure Deleted Message Logs", "deleted message logs", EmbedColors.RED, "Deleted message logs"),
    LogType.EDIT: ("✏️ Configure Message Edit Logs", "message edit logs", EmbedColors.ORANGE, "Message edit logs"),
}


def build_channel_options(channels: List[discord.TextChannel], log_type: LogType) -> List[discord.SelectOption]:
    """First 25 text channels, or a single placeholder option when there are none."""
    options = [
        discord.SelectOption(
            label=f"#{channel.name}"[:100],
            value=str(channel.id),
            description=f"Set as {log_type.value} logs channel",
        )
        for channel in channels[:SELECT_MENU_OPTION_LIMIT]
    ]
    if not options:
        options.append(discord.SelectOption(
            label="No text channels available",
            value=NO_CHANNELS_VALUE,
            description="Create a text channel first",
        ))
    return options


def build_prompt_embed(log_type: LogType) -> discord.Embed:
    title, noun, color, _ = LOG_TYPE_TEXT[log_type]
    return discord.Embed(
        title=title,
        description=f"Select a channel where {noun} will be posted.",
        color=color,
    )


class LogChannelSelect(discord.ui.Select):
    """Routes one log type to the chosen channel."""

    def __init__(
        self,
        guild: discord.Guild,
        log_type: LogType,
        store: ServerConfigStore,
    ) -> None:
        super().__init__(
            custom_id=f"select_{log_type.value}_logs_{guild.id}",
            placeholder=f"Choose a channel for {log_type.value} logs",
            options=build_channel_options(list(guild.text_channels), log_type),
        )
        self.guild_id = guild.id
        self.log_type = log_type
        self.store = store

    async def callback(self, interaction: discord.Interaction) -> None:
        if interaction.guild is None or interaction.guild.id != self.guild_id:
            await interaction.response.send_message(
                "❌ This menu belongs to a different server.",
                ephemeral=True,
            )
            return

        if not is_admin(interaction.user):
            await interaction.response.send_message(
                "🚫 You need administrator permissions to configure logging.",
                ephemeral=True,
            )
            return

        value = self.values[0]
        if value == NO_CHANNELS_VALUE:
            await interaction.response.send_message(
                "❌ No valid channels available. Create a text channel first.",
                ephemeral=True,
            )
            return

        channel_id = int(value)
        self.store.set_channel(self.guild_id, self.log_type, channel_id)

        logger.tree("Log Channel Configured", [
            ("Guild", f"{interaction.guild.name} ({self.guild_id})"),
            ("Log Type", self.log_type.value),
            ("Channel ID", str(channel_id)),
            ("By", f"{interaction.user} ({interaction.user.id})"),
        ], emoji="📝")

        confirmation = LOG_TYPE_TEXT[self.log_type][3]
        await interaction.response.edit_message(
            content=f"✅ {confirmation} configured for <#{channel_id}>",
            embed=None,
            view=None,
        )


class LogChannelView(discord.ui.View):
    """Holds a single LogChannelSelect."""

    def __init__(self, guild: discord.Guild, log_type: LogType, store: ServerConfigStore) -> None:
        super().__init__(timeout=300)
        self.add_item(LogChannelSelect(guild, log_type, store))


__all__ = [
    "NO_CHANNELS_VALUE",
    "build_channel_options",
    "build_prompt_embed",
    "LogChannelSelect",
    "LogChannelView",
]
