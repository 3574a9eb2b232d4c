"""Listing draft aggregate.

The full in-progress, unsaved state of one listing being edited. A draft
is owned by exactly one editor session and is replaced, never mutated,
by the reducer in ``listing_engine.application.reducer``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Self

from listing_engine.domain.categories import Attribute, CategoryNode
from listing_engine.domain.platforms import PlatformConfig
from listing_engine.domain.variants import VariantCombination, VariantDimensionSet


@dataclass(frozen=True)
class ListingDraft:
    """Aggregate form state of a listing editor.

    Attributes:
        platform: Target platform rules (read-only reference).
        marketplace_id: Connected shop/marketplace the draft targets.
        listing_id: Persisted listing id once created.
        title: Listing title.
        description: Listing description.
        brand: Brand name.
        sku: Listing-level SKU.
        price: Base price in major currency units.
        quantity: Listing-level stock when there are no variants.
        tags: Search tags.
        images: Image URLs in display order.
        variants: Variant dimensions in declaration order.
        combinations: Current variant matrix.
        category: Selected leaf category.
        category_attributes: Attributes declared by the selected leaf.
        attribute_values: Attribute values keyed by attribute id.
        custom_fields: Platform custom field values keyed by field name.
        field_errors: Errors raised at the point of an edit (e.g., a
            duplicate option name), keyed by field.
        variant_quantity: Stock given to newly generated variant
            combinations.
    """

    platform: PlatformConfig
    marketplace_id: str | None = None
    listing_id: str | None = None
    title: str = ""
    description: str = ""
    brand: str = ""
    sku: str = ""
    price: Decimal = Decimal("0")
    quantity: int = 0
    tags: tuple[str, ...] = ()
    images: tuple[str, ...] = ()
    variants: VariantDimensionSet = field(default_factory=VariantDimensionSet)
    combinations: tuple[VariantCombination, ...] = ()
    category: CategoryNode | None = None
    category_attributes: tuple[Attribute, ...] = ()
    attribute_values: Mapping[str, str] = field(default_factory=dict)
    custom_fields: Mapping[str, str] = field(default_factory=dict)
    field_errors: Mapping[str, str] = field(default_factory=dict)
    variant_quantity: int = 1

    @classmethod
    def create(
        cls,
        platform: PlatformConfig,
        marketplace_id: str | None = None,
        variant_quantity: int = 1,
    ) -> Self:
        """Create an empty draft for a platform.

        Args:
            platform: Target platform rules.
            marketplace_id: Optional connected shop id.
            variant_quantity: Stock for newly generated combinations.

        Returns:
            New empty ListingDraft.
        """
        return cls(
            platform=platform,
            marketplace_id=marketplace_id,
            variant_quantity=variant_quantity,
        )

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def has_variations(self) -> bool:
        """Check if the draft has a variant matrix."""
        return len(self.combinations) > 0

    @property
    def category_path(self) -> tuple[str, ...]:
        """Names from root to the selected category."""
        if self.category is None:
            return ()
        return tuple(self.category.path_parts)

    @property
    def total_quantity(self) -> int:
        """Sellable stock across visible variants, or the listing quantity.

        Returns:
            Total quantity.
        """
        if not self.combinations:
            return self.quantity
        return sum(c.quantity for c in self.combinations if c.is_visible)

    def custom_value(self, name: str) -> str:
        """Get a custom field value.

        Args:
            name: Custom field name.

        Returns:
            The value, or an empty string if unset.
        """
        return self.custom_fields.get(name, "")
