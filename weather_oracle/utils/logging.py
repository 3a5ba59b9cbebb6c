"""Logging configuration for Weather Oracle."""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

from weather_oracle.config import LOG_FILE, LOG_FORMAT, LOG_LEVEL


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure logging for the application.

    Records always go to stderr, never stdout, because `aggregate --json`
    writes its document to stdout. A log file, when given, receives the
    same records in append mode.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string for log messages
        log_file: Optional path to append log records to (LOG_FILE env by default)
    """
    level = level or LOG_LEVEL
    format_string = format_string or LOG_FORMAT
    log_file = log_file or LOG_FILE

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
        handlers=handlers,
    )
