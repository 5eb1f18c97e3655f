"""Logging configuration for contactmap.

Library modules get a module-level logger with get_logger(__name__); the
command line calls setup_logging() once at start-up.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
SIMPLE_FORMAT = "[%(levelname)s] %(message)s"

LOGGER_PREFIX = "contactmap"


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name (typically __name__)."""
    return logging.getLogger(name)


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure logging for the contactmap package.

    Args:
        verbose: Use DEBUG level with file/line info instead of WARNING
        log_file: Optional path to also write logs to
        stream: Console stream (defaults to stderr)
    """
    logger = logging.getLogger(LOGGER_PREFIX)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)

    fmt = VERBOSE_FORMAT if verbose else SIMPLE_FORMAT

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        logger.addHandler(file_handler)
