#!/usr/bin/env python3
"""
Alt Account Detector - Entry Point
==================================

Discord moderation assistant that scores accounts for alt-account risk.

Features:
- !check / /check risk analysis with kick/ban buttons
- /safetyreport and /timeline reports
- Optional delete/edit/reaction audit logs
"""

import asyncio
import sys

from dotenv import load_dotenv

# Configuration is read from the environment on first access
load_dotenv()

from src.core.config import ConfigValidationError, get_config, validate_and_log_config  # noqa: E402
from src.core.logger import logger  # noqa: E402
from src.utils.error_handler import ErrorHandler  # noqa: E402


async def main() -> None:
    """
    Start the bot.

    1. Loads and validates configuration
    2. Creates the bot instance
    3. Connects to Discord until interrupted
    """
    try:
        config = get_config()
    except ConfigValidationError as e:
        logger.error("Configuration Invalid", [("Error", str(e))])
        sys.exit(1)

    validate_and_log_config()

    from src.bot import AltDetectorBot
    bot = AltDetectorBot()

    try:
        async with bot:
            await bot.start(config.discord_token)
    except Exception as e:
        ErrorHandler.handle(e, location="main.main", critical=True)
        sys.exit(1)


if __name__ == "__main__":
    logger.tree("ALT DETECTOR STARTING", [
        ("Entry", "main.py"),
        ("Python", sys.version.split()[0]),
    ], emoji="🔥")

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user (Ctrl+C)")
