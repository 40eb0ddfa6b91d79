"""
Alt Account Detector - Views Package
====================================

Embeds, buttons and select menus.
"""

from .check import AltActionButton, build_check_embed, build_check_view, build_confirm_view
from .log_config import LogChannelSelect, LogChannelView, build_prompt_embed


__all__ = [
    "AltActionButton",
    "build_check_embed",
    "build_check_view",
    "build_confirm_view",
    "LogChannelSelect",
    "LogChannelView",
    "build_prompt_embed",
]
