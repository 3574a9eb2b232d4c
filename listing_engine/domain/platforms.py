"""Per-marketplace listing constraints.

Static lookup of title/description limits, image bounds, tag limits,
required fields and custom field schemas for every supported marketplace.
Configs are built once at process start and never mutated.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field

from listing_engine.domain.exceptions import UnknownPlatformError
from listing_engine.infrastructure.config import get_settings

logger = structlog.get_logger()


# ============================================================================
# Config Records
# ============================================================================


class FieldType(str, Enum):
    """Input type of a platform custom field."""

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"


@dataclass(frozen=True)
class CustomField:
    """Declared schema for one platform-specific field.

    Attributes:
        name: Field key in the draft's custom field values.
        type: Input type.
        required: Whether a non-blank value is needed to publish.
        max_length: Optional maximum length of the value.
        options: Allowed values for select/multiselect fields.
    """

    name: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    max_length: int | None = None
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlatformConfig:
    """Immutable rule set a draft is validated against.

    Attributes:
        id: Platform identifier (e.g., "etsy").
        name: Display name.
        color: Brand color used by the UI.
        title_max_length: Maximum title length.
        description_max_length: Maximum description length.
        min_images: Minimum number of images.
        max_images: Maximum number of images.
        max_tags: Maximum number of tags, if the platform limits them.
        bullet_points: Number of bullet points, if the platform has them.
        requires_category: Whether a leaf category must be selected.
        requires_brand: Whether a brand is mandatory.
        requires_sku: Whether SKUs are mandatory.
        has_variations: Whether the platform supports variant matrices.
        custom_fields: Platform-specific field schemas.
    """

    id: str
    name: str
    title_max_length: int
    description_max_length: int
    min_images: int
    max_images: int
    requires_category: bool
    requires_brand: bool
    requires_sku: bool
    has_variations: bool
    color: str = "#8B5CF6"
    max_tags: int | None = None
    bullet_points: int | None = None
    custom_fields: tuple[CustomField, ...] = field(default_factory=tuple)

    def get_custom_field(self, name: str) -> CustomField | None:
        """Find a custom field schema by name.

        Args:
            name: Field name.

        Returns:
            CustomField if declared, None otherwise.
        """
        for custom_field in self.custom_fields:
            if custom_field.name == name:
                return custom_field
        return None


# ============================================================================
# Built-in Platforms
# ============================================================================

_OCCASIONS = (
    "Birthday", "Wedding", "Anniversary", "Christmas", "Valentine's Day",
    "Mother's Day", "Father's Day", "Graduation", "Other",
)
_STYLES = (
    "Minimalist", "Bohemian", "Vintage", "Modern", "Rustic", "Romantic",
    "Classic", "Industrial", "Scandinavian",
)
_VAT_RATES = ("0", "1", "10", "20")

BUILTIN_PLATFORMS: tuple[PlatformConfig, ...] = (
    PlatformConfig(
        id="etsy",
        name="Etsy",
        color="#F56400",
        title_max_length=140,
        description_max_length=10000,
        min_images=1,
        max_images=10,
        max_tags=13,
        requires_category=True,
        requires_brand=False,
        requires_sku=True,
        has_variations=True,
        custom_fields=(
            CustomField("materials", FieldType.TEXT, max_length=500),
            CustomField("occasion", FieldType.SELECT, options=_OCCASIONS),
            CustomField("style", FieldType.SELECT, options=_STYLES),
        ),
    ),
    PlatformConfig(
        id="trendyol",
        name="Trendyol",
        color="#FF6000",
        title_max_length=100,
        description_max_length=20000,
        min_images=1,
        max_images=8,
        requires_category=True,
        requires_brand=True,
        requires_sku=True,
        has_variations=True,
        custom_fields=(
            CustomField("cargoCompanyId", FieldType.NUMBER, required=True),
            CustomField("shipmentAddressId", FieldType.NUMBER, required=True),
            CustomField("returningAddressId", FieldType.NUMBER, required=True),
            CustomField("vatRate", FieldType.SELECT, required=True, options=_VAT_RATES),
        ),
    ),
    PlatformConfig(
        id="hepsiburada",
        name="Hepsiburada",
        color="#FF6600",
        title_max_length=150,
        description_max_length=4000,
        min_images=1,
        max_images=8,
        requires_category=True,
        requires_brand=True,
        requires_sku=True,
        has_variations=True,
        custom_fields=(
            CustomField("merchantSku", FieldType.TEXT, required=True, max_length=100),
            CustomField("tax", FieldType.SELECT, required=True, options=_VAT_RATES),
        ),
    ),
    PlatformConfig(
        id="amazon",
        name="Amazon",
        color="#FF9900",
        title_max_length=200,
        description_max_length=2000,
        min_images=1,
        max_images=9,
        bullet_points=5,
        requires_category=True,
        requires_brand=True,
        requires_sku=True,
        has_variations=True,
        custom_fields=tuple(
            CustomField(f"bulletPoint{i}", FieldType.TEXT, max_length=500)
            for i in range(1, 6)
        ) + (CustomField("searchTerms", FieldType.TEXT, max_length=250),),
    ),
    PlatformConfig(
        id="shopify",
        name="Shopify",
        color="#95BF47",
        title_max_length=255,
        description_max_length=65535,
        min_images=1,
        max_images=250,
        requires_category=False,
        requires_brand=False,
        requires_sku=True,
        has_variations=True,
        custom_fields=(
            CustomField("productType", FieldType.TEXT, max_length=255),
            CustomField("vendor", FieldType.TEXT, max_length=255),
        ),
    ),
    PlatformConfig(
        id="ikas",
        name="ikas",
        color="#6366F1",
        title_max_length=255,
        description_max_length=100000,
        min_images=1,
        max_images=50,
        requires_category=True,
        requires_brand=False,
        requires_sku=True,
        has_variations=True,
    ),
    PlatformConfig(
        id="n11",
        name="N11",
        color="#7B68EE",
        title_max_length=100,
        description_max_length=10000,
        min_images=1,
        max_images=8,
        requires_category=True,
        requires_brand=True,
        requires_sku=True,
        has_variations=True,
        custom_fields=(
            CustomField("preparingDay", FieldType.NUMBER, required=True),
            CustomField("shipmentTemplate", FieldType.TEXT, required=True),
        ),
    ),
    PlatformConfig(
        id="ciceksepeti",
        name="Çiçeksepeti",
        color="#E91E63",
        title_max_length=150,
        description_max_length=5000,
        min_images=1,
        max_images=10,
        requires_category=True,
        requires_brand=True,
        requires_sku=True,
        has_variations=True,
    ),
    PlatformConfig(
        id="master",
        name="Master Listings",
        color="#8B5CF6",
        title_max_length=500,
        description_max_length=100000,
        min_images=1,
        max_images=50,
        max_tags=50,
        requires_category=False,
        requires_brand=False,
        requires_sku=True,
        has_variations=True,
    ),
)


# ============================================================================
# Override Schemas
# ============================================================================


class CustomFieldSchema(BaseModel):
    """Custom field entry in a platform override file."""

    name: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    max_length: int | None = Field(default=None, alias="maxLength", ge=1)
    options: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def to_domain(self) -> CustomField:
        """Convert to the immutable domain record."""
        return CustomField(
            name=self.name,
            type=self.type,
            required=self.required,
            max_length=self.max_length,
            options=tuple(self.options),
        )


class PlatformConfigSchema(BaseModel):
    """Platform entry in an override file.

    Accepts the camelCase keys used by the web client's static config.
    """

    id: str
    name: str
    color: str = "#8B5CF6"
    title_max_length: int = Field(alias="titleMaxLength", ge=1)
    description_max_length: int = Field(alias="descriptionMaxLength", ge=0)
    min_images: int = Field(alias="minImages", ge=0)
    max_images: int = Field(alias="maxImages", ge=0)
    max_tags: int | None = Field(default=None, alias="maxTags", ge=0)
    bullet_points: int | None = Field(default=None, alias="bulletPoints", ge=0)
    requires_category: bool = Field(alias="requiresCategory")
    requires_brand: bool = Field(alias="requiresBrand")
    requires_sku: bool = Field(alias="requiresSku")
    has_variations: bool = Field(alias="hasVariations")
    custom_fields: list[CustomFieldSchema] = Field(
        default_factory=list, alias="customFields"
    )

    model_config = {"populate_by_name": True}

    def to_domain(self) -> PlatformConfig:
        """Convert to the immutable domain record."""
        return PlatformConfig(
            id=self.id.lower(),
            name=self.name,
            color=self.color,
            title_max_length=self.title_max_length,
            description_max_length=self.description_max_length,
            min_images=self.min_images,
            max_images=self.max_images,
            max_tags=self.max_tags,
            bullet_points=self.bullet_points,
            requires_category=self.requires_category,
            requires_brand=self.requires_brand,
            requires_sku=self.requires_sku,
            has_variations=self.has_variations,
            custom_fields=tuple(f.to_domain() for f in self.custom_fields),
        )


def load_platform_overrides(path: str | Path) -> list[PlatformConfig]:
    """Load platform configs from a JSON file.

    The file holds either a list of platform objects or an object keyed
    by platform id.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed platform configs.
    """
    with open(path, encoding="utf-8") as f:
        raw: Any = json.load(f)

    entries = list(raw.values()) if isinstance(raw, dict) else raw
    return [PlatformConfigSchema.model_validate(entry).to_domain() for entry in entries]


# ============================================================================
# Registry
# ============================================================================


class PlatformConfigRegistry:
    """Registry of platform configurations.

    Built from the built-in table plus optional overrides and provides
    case-insensitive lookup.
    """

    def __init__(
        self,
        platforms: tuple[PlatformConfig, ...] | list[PlatformConfig] = BUILTIN_PLATFORMS,
        overrides: list[PlatformConfig] | None = None,
        default_platform: str = "master",
    ) -> None:
        """Initialize registry.

        Args:
            platforms: Base platform configs.
            overrides: Configs that replace or extend the base set.
            default_platform: Platform id used for unknown lookups.

        Raises:
            UnknownPlatformError: If the default platform is not registered.
        """
        self._platforms: dict[str, PlatformConfig] = {}
        for config in [*platforms, *(overrides or [])]:
            self._platforms[config.id.lower()] = config

        self._default_id = default_platform.lower()
        if self._default_id not in self._platforms:
            raise UnknownPlatformError(default_platform)

    def get(self, platform_id: str) -> PlatformConfig:
        """Get platform config, falling back to the default platform.

        Args:
            platform_id: Platform identifier (case-insensitive).

        Returns:
            Matching PlatformConfig, or the default one if unknown.
        """
        config = self._platforms.get(platform_id.lower())
        if config is None:
            logger.warning(
                "Unknown platform, using default",
                platform_id=platform_id,
                default_platform=self._default_id,
            )
            return self._platforms[self._default_id]
        return config

    def require(self, platform_id: str) -> PlatformConfig:
        """Get platform config without fallback.

        Args:
            platform_id: Platform identifier (case-insensitive).

        Returns:
            Matching PlatformConfig.

        Raises:
            UnknownPlatformError: If the platform is not registered.
        """
        config = self._platforms.get(platform_id.lower())
        if config is None:
            raise UnknownPlatformError(platform_id)
        return config

    def list_platforms(self) -> list[PlatformConfig]:
        """List all registered platforms.

        Returns:
            Platform configs in registration order.
        """
        return list(self._platforms.values())

    def __contains__(self, platform_id: object) -> bool:
        return isinstance(platform_id, str) and platform_id.lower() in self._platforms


# Global registry instance
_platform_registry: PlatformConfigRegistry | None = None


def get_platform_registry() -> PlatformConfigRegistry:
    """Get the platform registry singleton.

    Applies overrides from ``platform_config_path`` when configured.

    Returns:
        PlatformConfigRegistry instance.
    """
    global _platform_registry
    if _platform_registry is None:
        config = get_settings()
        overrides = None
        if config.platform_config_path:
            overrides = load_platform_overrides(config.platform_config_path)
            logger.info(
                "Loaded platform overrides",
                path=config.platform_config_path,
                count=len(overrides),
            )
        _platform_registry = PlatformConfigRegistry(
            overrides=overrides,
            default_platform=config.default_platform,
        )
    return _platform_registry
