"""
Addon Localizer - localization tooling for Lua addons built on L["key"] tables.
"""

import asyncio
import logging
import sys

from .main import main as async_main

logger = logging.getLogger(__name__)


def main() -> None:
    """Console script entry point; exits with the command's exit code."""
    try:
        exit_code = asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Addon Localizer failed: {e}")
        sys.exit(1)
    sys.exit(exit_code)


__all__ = ["main"]
