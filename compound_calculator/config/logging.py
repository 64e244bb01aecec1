"""
Logging setup.

Configures the loguru logger for library and script use.
"""

import sys

from loguru import logger

from compound_calculator.config.settings import get_settings


def setup_logging(level: str | None = None) -> None:
    """
    Replace the default loguru sink with a stderr sink.

    Args:
        level: Log level name, defaults to the configured log level
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or get_settings().log_level).upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
    )
