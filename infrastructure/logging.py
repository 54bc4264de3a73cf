"""
Logging infrastructure setup.

This module provides logging configuration for the application.
"""

import logging
import os

import coloredlogs  # type: ignore

# Get logger for this module
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def get_log_level() -> int:
    """
    Get the logging level from the LOG_LEVEL environment variable.

    Returns:
        The logging level (defaults to logging.INFO if not set or invalid)
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_name, logging.INFO)


def setup_logger(verbose: bool = False) -> None:
    """
    Configure and initialize the application logger.

    Args:
        verbose: Force DEBUG regardless of LOG_LEVEL
    """
    log_level = logging.DEBUG if verbose else get_log_level()

    coloredlogs.install(
        level=log_level,
        fmt=LOG_FORMAT,
        level_styles={
            "debug": {"color": "cyan"},
            "info": {"color": "green"},
            "warning": {"color": "yellow"},
            "error": {"color": "red"},
            "critical": {"color": "red", "bold": True},
        },
    )

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))

    logger.debug("log level: %s", logging.getLevelName(log_level))
