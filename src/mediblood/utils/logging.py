"""Loguru sinks for the order desk CLI and services."""

import sys
from typing import Optional

from loguru import logger

from ..config import get_settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Replace loguru's sinks with the order desk's.

    Messages go to stderr, as JSON records when ``log_format`` is ``json``.
    Outside debug mode they are also kept in ``log_file``, rotated daily, so
    offline sessions leave a trail of demotions and local saves.

    Args:
        log_level: Overrides the configured level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()
    level = (log_level or settings.log_level).upper()
    as_json = settings.log_format == "json"

    logger.remove()
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=level,
        colorize=not as_json,
        serialize=as_json,
        backtrace=settings.debug_mode,
        diagnose=settings.debug_mode,
    )

    if not settings.debug_mode:
        logger.add(
            settings.log_file,
            format=LOG_FORMAT,
            level=level,
            serialize=as_json,
            rotation="1 day",
            retention="30 days",
            compression="gz",
        )

    logger.debug(f"Order desk logging at {level} ({settings.log_format})")
