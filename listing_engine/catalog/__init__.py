"""Category catalog.

Provides taxonomy parsing, category data sources, pure path helpers and
the lazy category tree resolver.
"""

from listing_engine.catalog.navigation import CategoryPath, path_label, path_to
from listing_engine.catalog.resolver import CategoryTreeResolver, SelectionResult
from listing_engine.catalog.sources import (
    STATIC_ATTRIBUTES,
    CategoryDataSource,
    HttpCategorySource,
    StaticCategorySource,
    create_category_source,
)
from listing_engine.catalog.taxonomy import TaxonomyParser

__all__ = [
    # Taxonomy
    "TaxonomyParser",
    # Sources
    "STATIC_ATTRIBUTES",
    "CategoryDataSource",
    "HttpCategorySource",
    "StaticCategorySource",
    "create_category_source",
    # Navigation
    "CategoryPath",
    "path_label",
    "path_to",
    # Resolver
    "CategoryTreeResolver",
    "SelectionResult",
]
