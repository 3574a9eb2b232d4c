"""Listing draft reducer.

Every edit to a draft is an action. ``reduce(draft, action)`` returns the
next draft and never mutates its input. Dimension edits regenerate the
variant matrix; user mistakes (duplicate option names, tag limits,
invalid numbers) are recorded in ``draft.field_errors`` under the
action's error key instead of being raised. Programming errors (unknown
ids, undeclared fields) still raise.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

from listing_engine.domain.categories import Attribute, CategoryNode
from listing_engine.domain.draft import ListingDraft
from listing_engine.domain.exceptions import (
    DuplicateDimensionError,
    DuplicateVariantValueError,
    UnsupportedFieldError,
)
from listing_engine.domain.platforms import PlatformConfig
from listing_engine.domain.value_objects import (
    CombinationKey,
    DimensionId,
    SharedDefaults,
    VariantValueId,
)
from listing_engine.domain.variants import VariantDimensionSet
from listing_engine.variants import generator

logger = structlog.get_logger()

# Scalar draft fields settable through SetField
SCALAR_FIELDS: tuple[str, ...] = ("title", "description", "brand", "sku", "price", "quantity")

# Errors caused by user input; reported on the draft instead of raised
USER_ERRORS = (DuplicateDimensionError, DuplicateVariantValueError, ValueError)


# ============================================================================
# Actions
# ============================================================================


@dataclass(frozen=True)
class Action:
    """Base class for draft actions."""

    @property
    def error_key(self) -> str:
        """Field key that errors from this action are reported under."""
        return "draft"


@dataclass(frozen=True)
class SetField(Action):
    """Set a scalar field (title, description, brand, sku, price, quantity)."""

    name: str
    value: Any

    @property
    def error_key(self) -> str:
        return self.name


@dataclass(frozen=True)
class AddTag(Action):
    """Append a search tag."""

    tag: str

    @property
    def error_key(self) -> str:
        return "tags"


@dataclass(frozen=True)
class RemoveTag(Action):
    """Remove a search tag."""

    tag: str

    @property
    def error_key(self) -> str:
        return "tags"


@dataclass(frozen=True)
class AddImages(Action):
    """Append uploaded image URLs."""

    urls: tuple[str, ...]

    @property
    def error_key(self) -> str:
        return "images"


@dataclass(frozen=True)
class RemoveImage(Action):
    """Remove an image from the listing and every variant."""

    url: str

    @property
    def error_key(self) -> str:
        return "images"


@dataclass(frozen=True)
class AddDimension(Action):
    """Declare a new variation axis."""

    name: str
    dimension_id: DimensionId | None = None

    @property
    def error_key(self) -> str:
        return "variations"


@dataclass(frozen=True)
class RemoveDimension(Action):
    """Remove a variation axis and its values."""

    dimension_id: DimensionId

    @property
    def error_key(self) -> str:
        return "variations"


@dataclass(frozen=True)
class AddVariantValue(Action):
    """Add an option to a dimension."""

    dimension_id: DimensionId
    name: str
    color_code: str | None = None
    value_id: VariantValueId | None = None

    @property
    def error_key(self) -> str:
        return f"variations.{self.dimension_id}"


@dataclass(frozen=True)
class RemoveVariantValue(Action):
    """Remove an option from a dimension."""

    dimension_id: DimensionId
    value_id: VariantValueId

    @property
    def error_key(self) -> str:
        return f"variations.{self.dimension_id}"


@dataclass(frozen=True)
class UpdateCombination(Action):
    """Edit one field of one variant."""

    key: CombinationKey
    field_name: str
    value: Any

    @property
    def error_key(self) -> str:
        return f"combinations.{self.key}.{self.field_name}"


@dataclass(frozen=True)
class ApplyToAll(Action):
    """Overwrite one field on every variant."""

    field_name: str
    value: Any

    @property
    def error_key(self) -> str:
        return f"combinations.{self.field_name}"


@dataclass(frozen=True)
class AssignSkuSequence(Action):
    """Number variant SKUs from a prefix."""

    prefix: str

    @property
    def error_key(self) -> str:
        return "sku"


@dataclass(frozen=True)
class GenerateSkus(Action):
    """Build variant SKUs from option names (listing SKU as base by default)."""

    base_sku: str | None = None

    @property
    def error_key(self) -> str:
        return "sku"


@dataclass(frozen=True)
class SelectCategory(Action):
    """Assign a leaf category and its attribute schema."""

    category: CategoryNode
    attributes: tuple[Attribute, ...] = ()

    @property
    def error_key(self) -> str:
        return "category"


@dataclass(frozen=True)
class ClearCategory(Action):
    """Remove the category assignment."""

    @property
    def error_key(self) -> str:
        return "category"


@dataclass(frozen=True)
class SetAttributeValue(Action):
    """Set a category attribute value."""

    attribute_id: str
    value: str

    @property
    def error_key(self) -> str:
        return f"attributes.{self.attribute_id}"


@dataclass(frozen=True)
class SetCustomField(Action):
    """Set a platform custom field declared by the draft's platform."""

    name: str
    value: str

    @property
    def error_key(self) -> str:
        return f"custom_fields.{self.name}"


@dataclass(frozen=True)
class ChangePlatform(Action):
    """Rebind the draft to another platform's rules."""

    platform: PlatformConfig

    @property
    def error_key(self) -> str:
        return "platform"


# ============================================================================
# Handlers
# ============================================================================


def _parse_price(value: Any) -> Decimal:
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError("Price must be a number") from e
    if not price.is_finite() or price < 0:
        raise ValueError("Price must be a non-negative number")
    return price


def _parse_quantity(value: Any) -> int:
    try:
        quantity = int(str(value).strip())
    except ValueError as e:
        raise ValueError("Quantity must be a whole number") from e
    if quantity < 0:
        raise ValueError("Quantity cannot be negative")
    return quantity


def _with_variants(draft: ListingDraft, variants: VariantDimensionSet) -> ListingDraft:
    defaults = SharedDefaults(
        price=draft.price,
        quantity=draft.variant_quantity,
    )
    combinations = generator.regenerate(variants, draft.combinations, defaults)
    return replace(draft, variants=variants, combinations=tuple(combinations))


def _set_field(draft: ListingDraft, action: SetField) -> ListingDraft:
    if action.name not in SCALAR_FIELDS:
        raise UnsupportedFieldError(action.name, list(SCALAR_FIELDS))
    if action.name == "price":
        return replace(draft, price=_parse_price(action.value))
    if action.name == "quantity":
        return replace(draft, quantity=_parse_quantity(action.value))
    return replace(draft, **{action.name: str(action.value)})


def _add_tag(draft: ListingDraft, action: AddTag) -> ListingDraft:
    tag = action.tag.strip()
    if not tag:
        raise ValueError("Tag cannot be blank")
    if any(t.lower() == tag.lower() for t in draft.tags):
        raise ValueError(f"Tag '{tag}' already added")
    limit = draft.platform.max_tags
    if limit is not None and len(draft.tags) >= limit:
        raise ValueError(f"Maximum {limit} tags allowed")
    return replace(draft, tags=(*draft.tags, tag))


def _remove_tag(draft: ListingDraft, action: RemoveTag) -> ListingDraft:
    return replace(draft, tags=tuple(t for t in draft.tags if t != action.tag))


def _add_images(draft: ListingDraft, action: AddImages) -> ListingDraft:
    images = list(draft.images)
    for url in action.urls:
        if url and url not in images:
            images.append(url)
    return replace(draft, images=tuple(images))


def _remove_image(draft: ListingDraft, action: RemoveImage) -> ListingDraft:
    return replace(
        draft,
        images=tuple(u for u in draft.images if u != action.url),
        combinations=tuple(
            replace(c, images=tuple(u for u in c.images if u != action.url))
            if action.url in c.images else c
            for c in draft.combinations
        ),
    )


def _add_dimension(draft: ListingDraft, action: AddDimension) -> ListingDraft:
    variants, _ = draft.variants.add_dimension(action.name, action.dimension_id)
    return _with_variants(draft, variants)


def _remove_dimension(draft: ListingDraft, action: RemoveDimension) -> ListingDraft:
    return _with_variants(draft, draft.variants.remove_dimension(action.dimension_id))


def _add_variant_value(draft: ListingDraft, action: AddVariantValue) -> ListingDraft:
    variants = draft.variants.add_value(
        action.dimension_id, action.name, action.color_code, action.value_id
    )
    return _with_variants(draft, variants)


def _remove_variant_value(draft: ListingDraft, action: RemoveVariantValue) -> ListingDraft:
    variants = draft.variants.remove_value(action.dimension_id, action.value_id)
    return _with_variants(draft, variants)


def _update_combination(draft: ListingDraft, action: UpdateCombination) -> ListingDraft:
    combinations = generator.update_combination(
        draft.combinations, action.key, action.field_name, action.value
    )
    return replace(draft, combinations=tuple(combinations))


def _apply_to_all(draft: ListingDraft, action: ApplyToAll) -> ListingDraft:
    combinations = generator.apply_to_all(draft.combinations, action.field_name, action.value)
    return replace(draft, combinations=tuple(combinations))


def _assign_sku_sequence(draft: ListingDraft, action: AssignSkuSequence) -> ListingDraft:
    if not action.prefix.strip():
        raise ValueError("SKU prefix cannot be blank")
    combinations = generator.assign_sku_sequence(draft.combinations, action.prefix)
    return replace(draft, combinations=tuple(combinations))


def _generate_skus(draft: ListingDraft, action: GenerateSkus) -> ListingDraft:
    base = draft.sku if action.base_sku is None else action.base_sku
    combinations = generator.generate_skus(draft.combinations, base)
    return replace(draft, combinations=tuple(combinations))


def _select_category(draft: ListingDraft, action: SelectCategory) -> ListingDraft:
    if action.category.is_leaf is False:
        raise ValueError(f"{action.category.name} is not a leaf category")
    return replace(
        draft,
        category=action.category,
        category_attributes=tuple(action.attributes),
        attribute_values={},
        field_errors={
            k: v for k, v in draft.field_errors.items() if not k.startswith("attributes.")
        },
    )


def _clear_category(draft: ListingDraft, action: ClearCategory) -> ListingDraft:
    return replace(draft, category=None, category_attributes=(), attribute_values={})


def _set_attribute_value(draft: ListingDraft, action: SetAttributeValue) -> ListingDraft:
    attribute = next((a for a in draft.category_attributes if a.id == action.attribute_id), None)
    if attribute is None:
        allowed = [a.id for a in draft.category_attributes]
        raise UnsupportedFieldError(action.attribute_id, allowed)

    value = action.value.strip()
    if value and attribute.values and not attribute.allow_custom:
        if value not in {v.name for v in attribute.values}:
            raise ValueError(f"{attribute.name} must be one of the listed values")
    return replace(draft, attribute_values={**draft.attribute_values, attribute.id: value})


def _set_custom_field(draft: ListingDraft, action: SetCustomField) -> ListingDraft:
    if draft.platform.get_custom_field(action.name) is None:
        allowed = [f.name for f in draft.platform.custom_fields]
        raise UnsupportedFieldError(action.name, allowed)
    return replace(draft, custom_fields={**draft.custom_fields, action.name: action.value})


def _change_platform(draft: ListingDraft, action: ChangePlatform) -> ListingDraft:
    logger.info(
        "Draft platform changed",
        from_platform=draft.platform.id,
        to_platform=action.platform.id,
    )
    return replace(draft, platform=action.platform)


_HANDLERS: dict[type[Action], Callable[[ListingDraft, Any], ListingDraft]] = {
    SetField: _set_field,
    AddTag: _add_tag,
    RemoveTag: _remove_tag,
    AddImages: _add_images,
    RemoveImage: _remove_image,
    AddDimension: _add_dimension,
    RemoveDimension: _remove_dimension,
    AddVariantValue: _add_variant_value,
    RemoveVariantValue: _remove_variant_value,
    UpdateCombination: _update_combination,
    ApplyToAll: _apply_to_all,
    AssignSkuSequence: _assign_sku_sequence,
    GenerateSkus: _generate_skus,
    SelectCategory: _select_category,
    ClearCategory: _clear_category,
    SetAttributeValue: _set_attribute_value,
    SetCustomField: _set_custom_field,
    ChangePlatform: _change_platform,
}


# ============================================================================
# Reducer
# ============================================================================


def reduce(draft: ListingDraft, action: Action) -> ListingDraft:
    """Apply one action to a draft.

    Args:
        draft: Current draft.
        action: Edit to apply.

    Returns:
        Next draft. On a user error the draft is unchanged apart from a
        field error under ``action.error_key``; a successful action clears
        that key.

    Raises:
        TypeError: If the action type is not handled.
        DomainError: For programming errors such as unknown ids.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unhandled action: {type(action).__name__}")

    key = action.error_key
    try:
        updated = handler(draft, action)
    except USER_ERRORS as e:
        message = getattr(e, "message", None) or str(e)
        return replace(draft, field_errors={**draft.field_errors, key: message})

    if key in updated.field_errors:
        return replace(
            updated,
            field_errors={k: v for k, v in updated.field_errors.items() if k != key},
        )
    return updated


def reduce_all(draft: ListingDraft, actions: list[Action]) -> ListingDraft:
    """Apply actions in order."""
    for action in actions:
        draft = reduce(draft, action)
    return draft
