"""Loguru sink setup.

pyagree only emits records through ``loguru.logger``; nothing is configured on
import. Applications that want pyagree's debug trail call ``configure_logging``.
"""

from __future__ import annotations

import sys

from loguru import logger

from pyagree.config import PyagreeSettings, get_settings


def configure_logging(
    level: str | None = None,
    *,
    settings: PyagreeSettings | None = None,
) -> int:
    """Replace loguru's default sink with a stderr sink at the configured level.

    Args:
        level: Explicit level name. Overrides the settings when given.
        settings: Settings to read ``debug``/``log_level`` from (defaults to ``get_settings()``).

    Returns:
        The loguru handler id of the installed sink.
    """
    settings = settings or get_settings()
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level

    logger.remove()
    return logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    )
