"""Pytest configuration and shared fixtures."""

import pytest

from listing_engine.application import repository
from listing_engine.domain import platforms


@pytest.fixture(autouse=True)
def reset_singletons() -> None:
    """Give every test a fresh platform registry and listing repository."""
    platforms._platform_registry = None
    repository._listing_repo = None
