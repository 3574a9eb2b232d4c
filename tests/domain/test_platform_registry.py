"""Tests for platform configurations and the registry."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from listing_engine.domain import (
    BUILTIN_PLATFORMS,
    FieldType,
    PlatformConfigRegistry,
    UnknownPlatformError,
    get_platform_registry,
    load_platform_overrides,
)
from listing_engine.infrastructure import config

OVERRIDE = {
    "id": "Pazarama",
    "name": "Pazarama",
    "titleMaxLength": 120,
    "descriptionMaxLength": 5000,
    "minImages": 2,
    "maxImages": 8,
    "maxTags": 5,
    "requiresCategory": True,
    "requiresBrand": True,
    "requiresSku": True,
    "hasVariations": False,
    "customFields": [
        {"name": "desi", "type": "number", "required": True},
        {"name": "origin", "type": "select", "options": ["TR", "CN"]},
    ],
}


@pytest.fixture
def registry() -> PlatformConfigRegistry:
    """Create registry with built-in platforms."""
    return PlatformConfigRegistry()


class TestBuiltinPlatforms:
    """Tests for the built-in platform table."""

    def test_all_platforms_registered(self, registry: PlatformConfigRegistry) -> None:
        """Every shipped platform is listed in order."""
        assert [p.id for p in registry.list_platforms()] == [
            "etsy", "trendyol", "hepsiburada", "amazon", "shopify",
            "ikas", "n11", "ciceksepeti", "master",
        ]

    def test_etsy_rules(self, registry: PlatformConfigRegistry) -> None:
        """Etsy limits titles to 140 characters and 13 tags."""
        etsy = registry.get("etsy")
        assert etsy.title_max_length == 140
        assert etsy.max_tags == 13
        assert etsy.requires_category

    def test_trendyol_custom_fields(self, registry: PlatformConfigRegistry) -> None:
        """Trendyol declares required shipping and tax fields."""
        trendyol = registry.get("trendyol")
        assert trendyol.requires_brand
        assert trendyol.get_custom_field("cargoCompanyId").type is FieldType.NUMBER
        assert trendyol.get_custom_field("vatRate").options == ("0", "1", "10", "20")
        assert trendyol.get_custom_field("unknown") is None

    def test_amazon_bullet_points(self, registry: PlatformConfigRegistry) -> None:
        """Amazon declares five bullet point fields."""
        amazon = registry.get("amazon")
        assert amazon.bullet_points == 5
        assert amazon.get_custom_field("bulletPoint5") is not None

    def test_all_require_sku(self) -> None:
        """Every built-in platform requires SKUs."""
        assert all(p.requires_sku for p in BUILTIN_PLATFORMS)


class TestLookup:
    """Tests for registry lookup."""

    def test_case_insensitive(self, registry: PlatformConfigRegistry) -> None:
        """Ids match regardless of case."""
        assert registry.get("ETSY").id == "etsy"
        assert "Trendyol" in registry
        assert "ebay" not in registry

    def test_unknown_falls_back_to_default(self, registry: PlatformConfigRegistry) -> None:
        """Unknown ids give the master platform."""
        assert registry.get("ebay").id == "master"

    def test_require_unknown_raises(self, registry: PlatformConfigRegistry) -> None:
        """require() has no fallback."""
        with pytest.raises(UnknownPlatformError) as exc_info:
            registry.require("ebay")
        assert exc_info.value.details == {"platform_id": "ebay"}

    def test_default_must_exist(self) -> None:
        """A default that is not registered is rejected."""
        with pytest.raises(UnknownPlatformError):
            PlatformConfigRegistry(default_platform="ebay")

    def test_custom_default(self) -> None:
        """The fallback platform is configurable."""
        registry = PlatformConfigRegistry(default_platform="etsy")
        assert registry.get("ebay").id == "etsy"


class TestOverrides:
    """Tests for JSON platform overrides."""

    def test_load_list(self, tmp_path: Path) -> None:
        """A list of camelCase entries is parsed."""
        path = tmp_path / "platforms.json"
        path.write_text(json.dumps([OVERRIDE]), encoding="utf-8")

        [pazarama] = load_platform_overrides(path)

        assert pazarama.id == "pazarama"
        assert pazarama.min_images == 2
        assert not pazarama.has_variations
        assert pazarama.get_custom_field("desi").required
        assert pazarama.get_custom_field("origin").options == ("TR", "CN")

    def test_load_mapping_and_replace(self, tmp_path: Path) -> None:
        """Entries keyed by id replace built-in platforms."""
        etsy = {**OVERRIDE, "id": "etsy", "name": "Etsy", "titleMaxLength": 80}
        path = tmp_path / "platforms.json"
        path.write_text(json.dumps({"etsy": etsy}), encoding="utf-8")

        registry = PlatformConfigRegistry(overrides=load_platform_overrides(path))

        assert registry.get("etsy").title_max_length == 80
        assert len(registry.list_platforms()) == len(BUILTIN_PLATFORMS)

    def test_invalid_entry(self, tmp_path: Path) -> None:
        """Entries missing limits fail validation."""
        path = tmp_path / "platforms.json"
        path.write_text(json.dumps([{"id": "x", "name": "X"}]), encoding="utf-8")

        with pytest.raises(ValidationError):
            load_platform_overrides(path)

    def test_singleton_applies_configured_overrides(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """get_platform_registry() reads platform_config_path."""
        path = tmp_path / "platforms.json"
        path.write_text(json.dumps([OVERRIDE]), encoding="utf-8")
        monkeypatch.setattr(config.settings, "platform_config_path", str(path))

        registry = get_platform_registry()

        assert "pazarama" in registry
        assert get_platform_registry() is registry
