"""Tests for variant dimensions and dimension sets."""

from decimal import Decimal

import pytest

from listing_engine.domain import (
    CombinationKey,
    DimensionId,
    DimensionNotFoundError,
    DuplicateDimensionError,
    DuplicateVariantValueError,
    VariantValueId,
    VariantValueNotFoundError,
)
from listing_engine.domain.variants import VariantCombination, VariantDimension, VariantDimensionSet


@pytest.fixture
def colors() -> VariantDimension:
    """Color dimension with Red and Blue."""
    return (
        VariantDimension.create("Color", DimensionId("color"))
        .add_value("Red", "#FF0000", VariantValueId("red"))
        .add_value("Blue", value_id=VariantValueId("blue"))
    )


class TestVariantDimension:
    """Tests for VariantDimension."""

    def test_create_trims_name(self) -> None:
        """Names are trimmed and ids generated."""
        dimension = VariantDimension.create("  Size ")
        assert dimension.name == "Size"
        assert dimension.values == ()

    def test_add_value(self, colors: VariantDimension) -> None:
        """Values keep insertion order and swatch colors."""
        assert [v.name for v in colors.values] == ["Red", "Blue"]
        assert colors.get_value(VariantValueId("red")).color_code == "#FF0000"

    def test_duplicate_value_case_insensitive(self, colors: VariantDimension) -> None:
        """Duplicate names are rejected regardless of case and spacing."""
        with pytest.raises(DuplicateVariantValueError):
            colors.add_value(" red ")

    def test_blank_value_rejected(self, colors: VariantDimension) -> None:
        """Blank names raise ValueError."""
        with pytest.raises(ValueError):
            colors.add_value("   ")

    def test_immutable_add(self, colors: VariantDimension) -> None:
        """Adding returns a new dimension."""
        updated = colors.add_value("Green")
        assert len(colors.values) == 2
        assert len(updated.values) == 3

    def test_remove_value(self, colors: VariantDimension) -> None:
        """Removing drops the value by id."""
        updated = colors.remove_value(VariantValueId("red"))
        assert [v.name for v in updated.values] == ["Blue"]

    def test_remove_unknown_value(self, colors: VariantDimension) -> None:
        """Unknown ids raise VariantValueNotFoundError."""
        with pytest.raises(VariantValueNotFoundError):
            colors.remove_value(VariantValueId("green"))


class TestVariantDimensionSet:
    """Tests for VariantDimensionSet."""

    def test_add_dimension(self) -> None:
        """Dimensions are appended in declaration order."""
        dims, color = VariantDimensionSet().add_dimension("Color")
        dims, size = dims.add_dimension("Size")

        assert [d.name for d in dims] == ["Color", "Size"]
        assert len(dims) == 2
        assert dims.get(size.id) == size
        assert dims.get(color.id) == color

    def test_duplicate_dimension(self) -> None:
        """Dimension names are unique case-insensitively."""
        dims, _ = VariantDimensionSet().add_dimension("Color")
        with pytest.raises(DuplicateDimensionError):
            dims.add_dimension("COLOR")

    def test_blank_dimension(self) -> None:
        """Blank dimension names raise ValueError."""
        with pytest.raises(ValueError):
            VariantDimensionSet().add_dimension(" ")

    def test_active_skips_empty(self) -> None:
        """Only dimensions with values are active."""
        dims, color = VariantDimensionSet().add_dimension("Color")
        dims, _ = dims.add_dimension("Size")
        dims = dims.add_value(color.id, "Red")

        assert [d.name for d in dims.active] == ["Color"]

    def test_add_and_remove_value(self) -> None:
        """Values are added to and removed from the named dimension."""
        dims, color = VariantDimensionSet().add_dimension("Color")
        dims = dims.add_value(color.id, "Red", value_id=VariantValueId("red"))
        dims = dims.remove_value(color.id, VariantValueId("red"))

        assert dims.get(color.id).values == ()

    def test_remove_dimension(self) -> None:
        """Removing drops the dimension and its values."""
        dims, color = VariantDimensionSet().add_dimension("Color")
        dims = dims.add_value(color.id, "Red").remove_dimension(color.id)
        assert len(dims) == 0

    def test_unknown_dimension(self) -> None:
        """Unknown dimension ids raise DimensionNotFoundError."""
        dims = VariantDimensionSet()
        with pytest.raises(DimensionNotFoundError):
            dims.add_value(DimensionId("missing"), "Red")
        with pytest.raises(DimensionNotFoundError):
            dims.remove_dimension(DimensionId("missing"))


class TestVariantCombination:
    """Tests for VariantCombination."""

    def test_label(self) -> None:
        """Label joins option names."""
        combination = VariantCombination(
            key=CombinationKey.of("red", "l"),
            option_names=("Red", "Large"),
            price=Decimal("10"),
        )
        assert combination.label == "Red, Large"
        assert combination.is_visible
