"""Loguru setup for the flashcard CLI: console output plus a per-run log file."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def configure_logging(logs_dir: Path | None, level: str = "INFO", console: bool = True) -> Path | None:
    """
    Replace loguru's default sink with the library's sinks.

    Args:
        logs_dir: Directory for the per-run log file; None disables file logging
        level: Minimum level for every sink
        console: Whether to log to stderr as well

    Returns:
        The log file in use, or None when file logging is off or unavailable
    """
    level = level.upper()
    logger.remove()
    if console:
        logger.add(sys.stderr, level=level, format=LOG_FORMAT, backtrace=False, diagnose=False)

    if logs_dir is None:
        return None
    log_file = logs_dir / f"flashcards_{datetime.now():%Y%m%d_%H%M%S}.log"
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format=LOG_FORMAT,
            rotation="5 MB",
            retention=5,
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )
    except OSError as exc:
        logger.warning(f"File logging disabled; unable to write to {logs_dir}: {exc}")
        return None
    logger.debug(f"Logging to {log_file}")
    return log_file


__all__ = ["LOG_FORMAT", "configure_logging"]
