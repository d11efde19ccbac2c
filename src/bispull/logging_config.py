"""
Logging setup for the bispull command line.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, to the ``bispull`` logger. Libraries that log every
request (aiohttp, asyncio, Playwright's driver) are held at WARNING unless
bispull itself runs at DEBUG.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

QUIET_LOGGERS = ("aiohttp", "asyncio", "playwright")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Attach console and file handlers to the ``bispull`` logger.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Also write records to this file
        format_string: Record format (default: ``DEFAULT_FORMAT``)
        force: Replace handlers from an earlier call

    Returns:
        The ``bispull`` logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    logger = logging.getLogger("bispull")
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        logger.handlers.clear()

        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if log_file:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

        for handler in handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    # Records go to our handlers only, not also through the root logger
    logger.propagate = False

    third_party_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    return logger
