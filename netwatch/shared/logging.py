"""Logging configuration utilities."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Kiosk devices keep a few small log files on flash storage
LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 3


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    quiet_loggers: Optional[List[str]] = None,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging for netwatch services.

    Logs go to stderr, and additionally to a size-rotated file when
    ``log_file`` is set. Calling this again replaces the previous handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_string: Custom format string for log messages.
        quiet_loggers: Extra logger names to set to WARNING level.
        log_file: Optional path of a rotating log file.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        ))

    logging.basicConfig(
        level=log_level,
        format=format_string or DEFAULT_FORMAT,
        handlers=handlers,
        force=True,
    )

    # paho logs every packet at DEBUG
    for logger_name in ["paho", "asyncio"] + (quiet_loggers or []):
        logging.getLogger(logger_name).setLevel(logging.WARNING)
