"""
Logging setup for the client package.
"""

from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: int | str) -> int:
    """Accept numeric levels as well as names like ``"debug"``."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        msg = f"Unknown log level: {level!r}"
        raise ValueError(msg)
    return value


def setup_logger(
    logger: logging.Logger, log_level: int | str, fmt: str = DEFAULT_FORMAT
) -> None:
    """
    Set the level of ``logger`` and give it a console handler.

    The handler is added once, so creating several clients does not
    duplicate log lines.

    Args:
        logger: The logger instance to configure
        log_level: Level number or name
        fmt: Format of the console handler
    """
    level = resolve_level(log_level)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)
