"""
Logging setup for applications embedding fleetstats.

Importing the library never touches logging configuration. Hosts that want
the standard log format and JSON wide events call ``configure_logging()``.
"""

import logging
from typing import Optional

import structlog

from .config import Config
from .exceptions import ConfigurationError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_structlog() -> None:
    """Route wide events through stdlib logging as JSON lines."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging and wide event rendering for scripts and services
    using the library.

    Args:
        level: Level name (default: Config.LOG_LEVEL)

    Raises:
        ConfigurationError: If the level name is not a logging level
    """
    level_name = (level or Config.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown log level: {level_name}", config_key='FLEETSTATS_LOG_LEVEL')

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    configure_structlog()
