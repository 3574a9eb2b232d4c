"""Listing draft validation against platform rules."""

from listing_engine.validation.engine import (
    RULES,
    ValidationErrors,
    is_publishable,
    validate,
)

__all__ = [
    "RULES",
    "ValidationErrors",
    "is_publishable",
    "validate",
]
