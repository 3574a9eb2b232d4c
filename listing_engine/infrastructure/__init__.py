"""Infrastructure - settings and logging."""

from listing_engine.infrastructure.config import Settings, get_settings, settings
from listing_engine.infrastructure.logging import configure_logging

__all__ = [
    "Settings",
    "configure_logging",
    "get_settings",
    "settings",
]
