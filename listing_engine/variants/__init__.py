"""Variant matrix generation.

Pure functions over variant dimensions and combinations: regeneration
with identity-based preservation, bulk and single-cell edits, and SKU
helpers.
"""

from listing_engine.variants.generator import (
    BULK_FIELDS,
    apply_to_all,
    assign_sku_sequence,
    build_sku,
    generate_skus,
    regenerate,
    total_quantity,
    update_combination,
)

__all__ = [
    "BULK_FIELDS",
    "apply_to_all",
    "assign_sku_sequence",
    "build_sku",
    "generate_skus",
    "regenerate",
    "total_quantity",
    "update_combination",
]
