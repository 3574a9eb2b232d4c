"""Domain layer - Value objects, entities, platform rules, exceptions.

This module exports the building blocks every engine operates on:

- **Value Objects**: Immutable typed ids, combination keys, matrix defaults
- **Variants**: Dimensions, values and combinations
- **Categories**: Taxonomy nodes and leaf attributes
- **Platforms**: Per-marketplace rule sets and their registry
- **Draft**: The listing draft aggregate
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from listing_engine.domain import ListingDraft, get_platform_registry

    platform = get_platform_registry().get("etsy")
    draft = ListingDraft.create(platform)
"""

from listing_engine.domain.base import Identifier, ValueObject
from listing_engine.domain.categories import Attribute, AttributeValue, CategoryNode
from listing_engine.domain.draft import ListingDraft
from listing_engine.domain.exceptions import (
    CategoryFetchError,
    CombinationNotFoundError,
    DimensionNotFoundError,
    DomainError,
    DuplicateDimensionError,
    DuplicateVariantValueError,
    MediaUploadError,
    PersistenceError,
    UnknownPlatformError,
    UnsupportedFieldError,
    VariantError,
    VariantValueNotFoundError,
)
from listing_engine.domain.platforms import (
    BUILTIN_PLATFORMS,
    CustomField,
    FieldType,
    PlatformConfig,
    PlatformConfigRegistry,
    get_platform_registry,
    load_platform_overrides,
)
from listing_engine.domain.value_objects import (
    CombinationKey,
    DimensionId,
    SharedDefaults,
    VariantValueId,
)
from listing_engine.domain.variants import (
    EDITABLE_FIELDS,
    VariantCombination,
    VariantDimension,
    VariantDimensionSet,
    VariantValue,
)

__all__ = [
    # Base
    "Identifier",
    "ValueObject",
    # Value Objects
    "CombinationKey",
    "DimensionId",
    "SharedDefaults",
    "VariantValueId",
    # Variants
    "EDITABLE_FIELDS",
    "VariantCombination",
    "VariantDimension",
    "VariantDimensionSet",
    "VariantValue",
    # Categories
    "Attribute",
    "AttributeValue",
    "CategoryNode",
    # Platforms
    "BUILTIN_PLATFORMS",
    "CustomField",
    "FieldType",
    "PlatformConfig",
    "PlatformConfigRegistry",
    "get_platform_registry",
    "load_platform_overrides",
    # Draft
    "ListingDraft",
    # Exceptions
    "CategoryFetchError",
    "CombinationNotFoundError",
    "DimensionNotFoundError",
    "DomainError",
    "DuplicateDimensionError",
    "DuplicateVariantValueError",
    "MediaUploadError",
    "PersistenceError",
    "UnknownPlatformError",
    "UnsupportedFieldError",
    "VariantError",
    "VariantValueNotFoundError",
]
