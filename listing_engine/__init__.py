"""Listing Configuration Engine.

This package provides:
- Variant matrix generation with stable combination identity
- Lazy category tree navigation with attribute loading
- Platform-aware draft validation
- Bulk import of listings from CSV files
- A draft reducer and editor session for save and publish flows
"""

from listing_engine.application import EditorSession, create_editor_session, reduce
from listing_engine.domain import ListingDraft, PlatformConfig, get_platform_registry
from listing_engine.validation import is_publishable, validate

__version__ = "0.1.0"

__all__ = [
    "EditorSession",
    "ListingDraft",
    "PlatformConfig",
    "create_editor_session",
    "get_platform_registry",
    "is_publishable",
    "reduce",
    "validate",
]
