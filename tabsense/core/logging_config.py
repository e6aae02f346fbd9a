"""
Logging configuration for TabSense.

Library modules only obtain loggers through get_logger(); handlers are
installed when the host application calls setup_logging().
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from tabsense.core.constants import LOG_FORMAT, LOG_DATE_FORMAT

PACKAGE_LOGGER_NAME = "tabsense"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Union[str, Path]] = None,
    log_format: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to write log records to
        log_format: Custom log format string (default: LOG_FORMAT)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logger.setLevel(numeric_level)

    # Replace handlers from earlier calls to avoid duplicate records
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()

    formatter = logging.Formatter(log_format or LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace."""
    if name != PACKAGE_LOGGER_NAME and not name.startswith(PACKAGE_LOGGER_NAME + "."):
        name = f"{PACKAGE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
