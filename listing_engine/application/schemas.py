"""Listing payload schemas.

Pydantic models for the listing document handed to a listing repository
on save and publish.
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from listing_engine.domain.draft import ListingDraft
from listing_engine.domain.variants import VariantCombination, VariantDimension


# ============================================================================
# Variant Schemas
# ============================================================================


class VariantValuePayload(BaseModel):
    """One option of a dimension."""

    id: str = Field(..., description="Variant value id")
    name: str = Field(..., description="Option label")
    color_code: str | None = Field(default=None, description="Swatch color")


class DimensionPayload(BaseModel):
    """A variation axis."""

    id: str = Field(..., description="Dimension id")
    name: str = Field(..., description="Dimension label")
    values: list[VariantValuePayload] = Field(default_factory=list, description="Options")

    @classmethod
    def from_domain(cls, dimension: VariantDimension) -> "DimensionPayload":
        """Create payload from a dimension."""
        return cls(
            id=str(dimension.id),
            name=dimension.name,
            values=[
                VariantValuePayload(id=str(v.id), name=v.name, color_code=v.color_code)
                for v in dimension.values
            ],
        )


class VariationPayload(BaseModel):
    """One sellable variant."""

    key: str = Field(..., description="Combination key (value ids joined by '-')")
    value_ids: list[str] = Field(..., description="Variant value ids, one per dimension")
    options: list[str] = Field(..., description="Option labels, one per dimension")
    price: Decimal = Field(..., ge=0, description="Variant price")
    quantity: int = Field(..., ge=0, description="Variant stock")
    sku: str = Field(default="", description="Variant SKU")
    is_visible: bool = Field(default=True, description="Whether the variant is offered")
    images: list[str] = Field(default_factory=list, description="Variant image URLs")

    @classmethod
    def from_domain(cls, combination: VariantCombination) -> "VariationPayload":
        """Create payload from a combination."""
        return cls(
            key=str(combination.key),
            value_ids=[str(v) for v in combination.key.value_ids],
            options=list(combination.option_names),
            price=combination.price,
            quantity=combination.quantity,
            sku=combination.sku,
            is_visible=combination.is_visible,
            images=list(combination.images),
        )


# ============================================================================
# Listing Schemas
# ============================================================================


class ListingPayload(BaseModel):
    """Listing document written by save and publish."""

    platform: str = Field(..., description="Platform id")
    status: Literal["draft", "active"] = Field(
        default="draft", description="draft until published, then active"
    )
    marketplace_id: str | None = Field(default=None, description="Target marketplace")
    title: str = Field(default="", description="Listing title")
    description: str = Field(default="", description="Listing description")
    brand: str = Field(default="", description="Brand name")
    sku: str = Field(default="", description="Listing SKU")
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Base price")
    quantity: int = Field(default=0, ge=0, description="Total stock")
    tags: list[str] = Field(default_factory=list, description="Search tags")
    images: list[str] = Field(default_factory=list, description="Image URLs")
    category_id: str | None = Field(default=None, description="Leaf category id")
    category_path: list[str] = Field(
        default_factory=list, description="Category names from root to leaf"
    )
    attributes: dict[str, str] = Field(
        default_factory=dict, description="Category attribute values by attribute id"
    )
    custom_fields: dict[str, str] = Field(
        default_factory=dict, description="Platform custom field values"
    )
    dimensions: list[DimensionPayload] = Field(
        default_factory=list, description="Variation axes"
    )
    variations: list[VariationPayload] = Field(
        default_factory=list, description="Variant matrix"
    )

    @classmethod
    def from_draft(
        cls,
        draft: ListingDraft,
        status: Literal["draft", "active"] = "draft",
    ) -> "ListingPayload":
        """Create payload from a draft.

        Quantity is the sum over variants when the draft has any.
        """
        return cls(
            platform=draft.platform.id,
            status=status,
            marketplace_id=draft.marketplace_id,
            title=draft.title.strip(),
            description=draft.description,
            brand=draft.brand.strip(),
            sku=draft.sku.strip(),
            price=draft.price,
            quantity=draft.total_quantity,
            tags=list(draft.tags),
            images=list(draft.images),
            category_id=draft.category.id if draft.category else None,
            category_path=list(draft.category_path),
            attributes={k: v for k, v in draft.attribute_values.items() if v},
            custom_fields={k: v for k, v in draft.custom_fields.items() if v},
            dimensions=[DimensionPayload.from_domain(d) for d in draft.variants.active],
            variations=[VariationPayload.from_domain(c) for c in draft.combinations],
        )
