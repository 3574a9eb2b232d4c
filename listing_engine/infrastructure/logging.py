"""Structured logging setup."""

import logging
import sys

import structlog

from listing_engine.infrastructure.config import Settings, get_settings


def configure_logging(config: Settings | None = None) -> None:
    """Configure stdlib logging and structlog processors.

    Args:
        config: Settings to read level and renderer from. Defaults to the
            process settings.
    """
    config = config or get_settings()

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if config.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
