"""Platform-aware draft validation.

``validate`` checks a listing draft against a platform's rules and
returns a map of field key to error message. Every rule runs on every
call; a draft with an empty map is publishable. Validation never raises
and never touches the draft.

Field keys:
    title, description, category, brand, images, tags, sku, variations,
    attributes.<attribute id>, custom_fields.<field name>
"""

from collections.abc import Callable
from decimal import Decimal, InvalidOperation

from listing_engine.domain.draft import ListingDraft
from listing_engine.domain.platforms import CustomField, FieldType, PlatformConfig

ValidationErrors = dict[str, str]
Rule = Callable[[ListingDraft, PlatformConfig], ValidationErrors]


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


# ============================================================================
# Rules
# ============================================================================


def check_title(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """Title is required and limited in length."""
    if _blank(draft.title):
        return {"title": "Title is required"}
    if len(draft.title) > config.title_max_length:
        return {
            "title": f"Title exceeds {config.title_max_length} characters ({len(draft.title)})"
        }
    return {}


def check_description(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """Description may be blank but is limited in length."""
    if len(draft.description) > config.description_max_length:
        return {
            "description": (
                f"Description exceeds {config.description_max_length} characters "
                f"({len(draft.description)})"
            )
        }
    return {}


def check_category(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """A leaf category must be selected when the platform requires one."""
    if config.requires_category and draft.category is None:
        return {"category": "Category is required"}
    return {}


def check_brand(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """Brand must be set when the platform requires one."""
    if config.requires_brand and _blank(draft.brand):
        return {"brand": "Brand is required"}
    return {}


def check_images(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """Image count must be within the platform bounds."""
    count = len(draft.images)
    if count < config.min_images:
        return {"images": f"Minimum {config.min_images} image(s) required"}
    if count > config.max_images:
        return {"images": f"Maximum {config.max_images} images allowed"}
    return {}


def check_tags(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """Tag count is limited when the platform defines a maximum."""
    if config.max_tags is not None and len(draft.tags) > config.max_tags:
        return {"tags": f"Maximum {config.max_tags} tags allowed"}
    return {}


def check_sku(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """SKUs are needed on the listing, or on every visible variation."""
    if not config.requires_sku:
        return {}
    if draft.combinations:
        missing = [c for c in draft.combinations if c.is_visible and _blank(c.sku)]
        if missing:
            return {"sku": f"SKU is required for {len(missing)} variation(s)"}
        return {}
    if _blank(draft.sku):
        return {"sku": "SKU is required"}
    return {}


def check_variations(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """Variations are rejected on platforms without variation support."""
    if not config.has_variations and draft.variants.active:
        return {"variations": f"{config.name} does not support variations"}
    return {}


def check_attributes(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """Required attributes of the selected leaf must have values."""
    if draft.category is None:
        return {}
    return {
        f"attributes.{attribute.id}": f"{attribute.name} is required"
        for attribute in draft.category_attributes
        if attribute.required and _blank(draft.attribute_values.get(attribute.id))
    }


def check_custom_fields(draft: ListingDraft, config: PlatformConfig) -> ValidationErrors:
    """Declared custom fields are checked against their schema."""
    errors: ValidationErrors = {}
    for custom_field in config.custom_fields:
        message = _custom_field_error(custom_field, draft.custom_value(custom_field.name))
        if message:
            errors[f"custom_fields.{custom_field.name}"] = message
    return errors


def _custom_field_error(custom_field: CustomField, value: str) -> str | None:
    name = custom_field.name
    if _blank(value):
        return f"{name} is required" if custom_field.required else None

    if custom_field.max_length is not None and len(value) > custom_field.max_length:
        return f"{name} exceeds {custom_field.max_length} characters ({len(value)})"

    if custom_field.type == FieldType.NUMBER:
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return f"{name} must be a number"
        if not number.is_finite():
            return f"{name} must be a number"

    if custom_field.options and custom_field.type == FieldType.SELECT:
        if value.strip() not in custom_field.options:
            return f"{name} must be one of: {', '.join(custom_field.options)}"

    if custom_field.options and custom_field.type == FieldType.MULTISELECT:
        chosen = [v.strip() for v in value.split(",") if v.strip()]
        invalid = [v for v in chosen if v not in custom_field.options]
        if invalid:
            return f"{name} has invalid options: {', '.join(invalid)}"

    return None


RULES: tuple[Rule, ...] = (
    check_title,
    check_description,
    check_category,
    check_brand,
    check_images,
    check_tags,
    check_sku,
    check_variations,
    check_attributes,
    check_custom_fields,
)


# ============================================================================
# Entry Points
# ============================================================================


def validate(draft: ListingDraft, config: PlatformConfig | None = None) -> ValidationErrors:
    """Validate a draft against a platform.

    Args:
        draft: Draft to check.
        config: Platform rules; the draft's own platform if omitted. Pass
            another platform to check a draft before copying it there.

    Returns:
        Error message per field key (empty when publishable).
    """
    config = config or draft.platform
    errors: ValidationErrors = {}
    for rule in RULES:
        errors.update(rule(draft, config))
    return errors


def is_publishable(errors: ValidationErrors) -> bool:
    """Check if a validation result allows publishing."""
    return not errors
