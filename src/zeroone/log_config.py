# zeroone/log_config.py
"""Loguru setup for zeroone.

Every module in the package imports ``logger`` from here. Nothing is
configured on import; applications call ``configure_logging`` once. The
installed handler masks bearer tokens and password fields, because request
and login traces can contain both.
"""

import re
import sys
from typing import Any

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

_SECRET_PATTERNS = (
    (re.compile(r"(Bearer\s+)[A-Za-z0-9\-_.=]+"), r"\1***"),
    (re.compile(r'("password"\s*:\s*")[^"]*(")'), r"\1***\2"),
)


def redact(message: str) -> str:
    """Mask bearer tokens and JSON password values in a log message."""
    for pattern, replacement in _SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def _redacting_filter(record: dict[str, Any]) -> bool:
    record["message"] = redact(record["message"])
    return True


def configure_logging(level: str = "INFO", sink=sys.stderr, serialize: bool = False):
    """Replace all Loguru handlers with a single zeroone handler.

    Args:
        level: Minimum level, case-insensitive (e.g. "debug", "WARNING").
        sink: Anything Loguru accepts as a sink (stream, path, callable).
        serialize: Emit one JSON object per record instead of formatted text.
    """
    logger.remove()
    logger.add(
        sink,
        level=level.upper(),
        format=LOG_FORMAT,
        filter=_redacting_filter,
        colorize=sink is sys.stderr and not serialize,
        serialize=serialize,
        backtrace=True,
        diagnose=False,  # Locals would include credentials
    )
    logger.debug(f"zeroone logging at {level.upper()} to {sink}")


__all__ = ["configure_logging", "logger", "redact"]
