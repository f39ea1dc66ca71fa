"""
Pricewise — Logging setup

Configures stdlib logging and structlog. Library code only ever calls
``structlog.get_logger(__name__)``; the host application calls
``configure_logging()`` once at startup.
"""

from __future__ import annotations

import logging
import sys

import structlog

from pricewise.config import settings


def configure_logging(log_level: str | None = None, json: bool | None = None) -> None:
    """
    Set up structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to
            settings.LOG_LEVEL.
        json: Render JSON lines (True) or human-readable console output
            (False). Defaults to settings.LOG_JSON.

    Raises:
        ValueError: If log_level is not a known logging level.
    """
    level_name = (log_level or settings.LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{level_name}'")

    use_json = settings.LOG_JSON if json is None else json

    # Configure stdlib logging first (for third-party libraries)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
