"""Logging configuration."""

import logging
import sys
from typing import Optional

import structlog

from ..settings import get_settings


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None):
    """
    Configure structlog on top of the standard library logger.

    Args:
        level: Log level name, defaults to the ``log_level`` setting
        fmt: "json" or "console", defaults to the ``log_format`` setting
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    fmt = fmt or settings.log_format

    # Clear existing handlers
    logging.root.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.root.setLevel(level)
    logging.root.addHandler(handler)

    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

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
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
