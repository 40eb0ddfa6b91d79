"""
Alt Account Detector - Utils Package
====================================

Stateless helpers used across commands, views and services.

Available Utilities:
    Footer: Standardized embed footer with cached avatar
    Retry: Exponential backoff and safe Discord API wrappers
    ErrorHandler: Categorized error logging
    Interaction: Safe reply/defer helpers
    TimeFormat: Account age and duration strings
"""

from .error_handler import ErrorContext, ErrorHandler, safe_execute
from .footer import FOOTER_TEXT, init_footer, set_footer
from .interaction import safe_defer, safe_respond
from .retry import retry_async, safe_fetch_channel, safe_fetch_user, safe_send
from .time_format import format_account_age, format_ago, format_duration


__all__ = [
    # Error handling
    "ErrorContext",
    "ErrorHandler",
    "safe_execute",
    # Footer
    "FOOTER_TEXT",
    "init_footer",
    "set_footer",
    # Interaction
    "safe_defer",
    "safe_respond",
    # Retry
    "retry_async",
    "safe_fetch_channel",
    "safe_fetch_user",
    "safe_send",
    # Time
    "format_account_age",
    "format_ago",
    "format_duration",
]
