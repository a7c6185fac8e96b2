"""Logging setup shared by the decode service and the live runner."""

from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotated at midnight, one file per day
LOG_RETENTION_DAYS = 30

_QUIET_LOGGERS = ("urllib3", "PIL")


def _rotating_file_handler(log_file: str) -> TimedRotatingFileHandler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    return TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_RETENTION_DAYS,
        encoding="utf-8",
    )


def setup_logging(log_level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Route every logger to stderr and, optionally, a rotating file.

    stderr keeps stdout free for whoever launched the service process.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR). Unknown names
            fall back to INFO.
        log_file: Optional log file path; parent directories are created.

    Returns:
        The root logger.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(_rotating_file_handler(log_file))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Re-running replaces handlers instead of stacking duplicates
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
