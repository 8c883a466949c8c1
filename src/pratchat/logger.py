"""
Logging setup for PratChat, built on loguru.

Usage:
    from pratchat.logger import get_logger, setup_logging

    setup_logging(level="DEBUG")
    logger = get_logger(__name__)
"""

import sys
from typing import Optional

from loguru import logger as _logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_logger.configure(extra={"name": "pratchat"})


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Replace loguru's default sink with PratChat's format.

    Args:
        level: Minimum level for console (and file) output.
        log_file: Optional path; when set, logs are also written there with rotation.
    """
    _logger.remove()
    _logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, colorize=True)

    if log_file:
        _logger.add(
            log_file,
            level=level.upper(),
            format=LOG_FORMAT,
            rotation="10 MB",
            retention=3,
            encoding="utf-8",
        )


def get_logger(name: str):
    """Return a logger bound to the given module name."""
    return _logger.bind(name=name)
