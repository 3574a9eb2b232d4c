"""Tests for variant matrix generator."""

from decimal import Decimal
from math import prod

import pytest

from listing_engine.domain.exceptions import CombinationNotFoundError, UnsupportedFieldError
from listing_engine.domain.value_objects import (
    CombinationKey,
    DimensionId,
    SharedDefaults,
    VariantValueId,
)
from listing_engine.domain.variants import VariantDimension, VariantDimensionSet, VariantValue
from listing_engine.variants.generator import (
    apply_to_all,
    assign_sku_sequence,
    generate_skus,
    regenerate,
    total_quantity,
    update_combination,
)


def build_set(layout: dict[str, list[str]]) -> VariantDimensionSet:
    """Build a dimension set with deterministic ids ("color:red")."""
    dims = VariantDimensionSet()
    for name, values in layout.items():
        dims, dimension = dims.add_dimension(name, DimensionId(name.lower()))
        for value in values:
            dims = dims.add_value(
                dimension.id, value, value_id=VariantValueId(f"{name.lower()}:{value.lower()}")
            )
    return dims


@pytest.fixture
def color_size() -> VariantDimensionSet:
    """Two dimensions: 3 colors x 2 sizes."""
    return build_set({"Color": ["Red", "Blue", "Green"], "Size": ["S", "L"]})


class TestRegenerate:
    """Tests for regenerate."""

    def test_no_dimensions_gives_empty_matrix(self) -> None:
        """No dimensions means no matrix."""
        assert regenerate(VariantDimensionSet()) == []

    def test_dimensions_without_values_give_empty_matrix(self) -> None:
        """Dimensions with no values are ignored."""
        dims = build_set({"Color": [], "Size": []})
        assert regenerate(dims) == []

    def test_single_dimension_one_per_value(self) -> None:
        """One dimension yields one combination per value keyed by that value."""
        dims = build_set({"Color": ["Red", "Blue"]})
        result = regenerate(dims)

        assert [c.key for c in result] == [
            CombinationKey.of("color:red"),
            CombinationKey.of("color:blue"),
        ]
        assert [c.option_names for c in result] == [("Red",), ("Blue",)]

    def test_empty_dimension_is_skipped(self) -> None:
        """An empty dimension does not zero out the product."""
        dims = build_set({"Color": ["Red", "Blue"], "Size": []})
        result = regenerate(dims)

        assert len(result) == 2
        assert all(len(c.key.value_ids) == 1 for c in result)

    @pytest.mark.parametrize(
        "layout",
        [
            {"A": ["1"]},
            {"A": ["1", "2", "3"], "B": ["x", "y"]},
            {"A": ["1", "2"], "B": ["x", "y", "z"], "C": ["p", "q"]},
        ],
    )
    def test_cartesian_product_size_and_distinct_keys(self, layout: dict[str, list[str]]) -> None:
        """Matrix size is the product of cardinalities with distinct identities."""
        result = regenerate(build_set(layout))

        assert len(result) == prod(len(v) for v in layout.values())
        assert len({c.key for c in result}) == len(result)

    def test_order_is_first_dimension_outermost(self, color_size: VariantDimensionSet) -> None:
        """Output follows nested iteration with the first dimension outermost."""
        result = regenerate(color_size)

        assert [c.option_names for c in result] == [
            ("Red", "S"), ("Red", "L"),
            ("Blue", "S"), ("Blue", "L"),
            ("Green", "S"), ("Green", "L"),
        ]

    def test_deterministic(self, color_size: VariantDimensionSet) -> None:
        """Same input gives the same output."""
        assert regenerate(color_size) == regenerate(color_size)

    def test_new_combinations_use_shared_defaults(self, color_size: VariantDimensionSet) -> None:
        """New cells start from shared defaults."""
        defaults = SharedDefaults(price=Decimal("19.90"), quantity=5)
        result = regenerate(color_size, shared_defaults=defaults)

        for combination in result:
            assert combination.price == Decimal("19.90")
            assert combination.quantity == 5
            assert combination.sku == ""
            assert combination.is_visible is True
            assert combination.images == ()

    def test_edits_survive_unrelated_dimension_change(
        self, color_size: VariantDimensionSet
    ) -> None:
        """Adding a size keeps every existing cell's edits verbatim."""
        first = regenerate(color_size)
        red_s = CombinationKey.of("color:red", "size:s")
        edited = update_combination(first, red_s, "price", "42.50")
        edited = update_combination(edited, red_s, "sku", "RED-S")
        edited = update_combination(edited, red_s, "images", ["a.jpg"])
        edited = update_combination(edited, red_s, "is_visible", False)

        dims = color_size.add_value(
            DimensionId("size"), "XL", value_id=VariantValueId("size:xl")
        )
        second = regenerate(dims, edited, SharedDefaults(price=Decimal("1"), quantity=9))

        before = {c.key: c for c in edited}
        after = {c.key: c for c in second}
        assert len(second) == 9
        for key, old in before.items():
            new = after[key]
            assert (new.price, new.quantity, new.sku, new.is_visible, new.images) == (
                old.price, old.quantity, old.sku, old.is_visible, old.images,
            )
        assert after[red_s].price == Decimal("42.50")
        assert after[red_s].images == ("a.jpg",)

        added = [c for c in second if c.key not in before]
        assert len(added) == 3
        assert all(c.quantity == 9 for c in added)

    def test_removing_value_removes_exactly_its_combinations(
        self, color_size: VariantDimensionSet
    ) -> None:
        """Removing a value drops only the cells that reference it."""
        first = apply_to_all(regenerate(color_size), "quantity", 7)
        blue = VariantValueId("color:blue")

        dims = color_size.remove_value(DimensionId("color"), blue)
        second = regenerate(dims, first)

        expected = [c for c in first if not c.key.contains(blue)]
        assert second == expected

    def test_option_names_refresh_but_edits_persist(self) -> None:
        """Display names follow the dimension, editable fields stay."""
        dims = build_set({"Color": ["Red"]})
        first = update_combination(
            regenerate(dims), CombinationKey.of("color:red"), "sku", "R-1"
        )

        color = dims.dimensions[0]
        renamed = VariantDimensionSet(
            dimensions=(
                VariantDimension(
                    id=color.id,
                    name=color.name,
                    values=(VariantValue(id=color.values[0].id, name="Crimson"),),
                ),
            )
        )
        second = regenerate(renamed, first)

        assert second[0].option_names == ("Crimson",)
        assert second[0].sku == "R-1"


class TestBulkEdits:
    """Tests for apply_to_all and update_combination."""

    def test_apply_to_all_keeps_identities(self, color_size: VariantDimensionSet) -> None:
        """Bulk update overwrites the field without touching keys."""
        matrix = regenerate(color_size)
        updated = apply_to_all(matrix, "price", Decimal("10"))

        assert [c.key for c in updated] == [c.key for c in matrix]
        assert all(c.price == Decimal("10") for c in updated)

    def test_apply_to_all_visibility(self, color_size: VariantDimensionSet) -> None:
        """Visibility can be toggled for all cells."""
        updated = apply_to_all(regenerate(color_size), "is_visible", False)
        assert not any(c.is_visible for c in updated)
        assert total_quantity(updated) == 0

    def test_apply_to_all_rejects_unknown_field(self, color_size: VariantDimensionSet) -> None:
        """Only bulk fields are accepted."""
        with pytest.raises(UnsupportedFieldError):
            apply_to_all(regenerate(color_size), "images", [])

    def test_apply_to_all_rejects_negative_price(self, color_size: VariantDimensionSet) -> None:
        """Negative prices are invalid."""
        with pytest.raises(ValueError):
            apply_to_all(regenerate(color_size), "price", "-1")

    def test_update_unknown_combination(self, color_size: VariantDimensionSet) -> None:
        """Editing a missing identity raises."""
        with pytest.raises(CombinationNotFoundError):
            update_combination(
                regenerate(color_size), CombinationKey.of("nope"), "price", 1
            )

    def test_update_changes_only_target(self, color_size: VariantDimensionSet) -> None:
        """Single-cell edit leaves other cells unchanged."""
        matrix = regenerate(color_size)
        target = matrix[3].key
        updated = update_combination(matrix, target, "quantity", 12)

        for old, new in zip(matrix, updated):
            if old.key == target:
                assert new.quantity == 12
            else:
                assert new == old

    def test_single_image_url_is_one_image(self, color_size: VariantDimensionSet) -> None:
        """A bare URL string becomes a one-image tuple, not its characters."""
        matrix = regenerate(color_size)
        target = matrix[0].key

        updated = update_combination(matrix, target, "images", "https://x.jpg")

        assert updated[0].images == ("https://x.jpg",)


class TestSkuHelpers:
    """Tests for SKU helpers and totals."""

    def test_assign_sku_sequence(self, color_size: VariantDimensionSet) -> None:
        """Sequential SKUs follow matrix order."""
        result = assign_sku_sequence(regenerate(color_size), "TSHIRT")
        assert [c.sku for c in result[:3]] == ["TSHIRT-001", "TSHIRT-002", "TSHIRT-003"]

    def test_generate_skus_from_option_names(self, color_size: VariantDimensionSet) -> None:
        """SKUs shorten the first option and keep the rest."""
        result = generate_skus(regenerate(color_size), "TEE")
        assert result[0].sku == "TEE-RED-S"
        assert result[2].sku == "TEE-BLU-S"
        assert result[5].sku == "TEE-GRE-L"

    def test_generate_skus_default_base(self) -> None:
        """Blank base falls back to SKU."""
        result = generate_skus(regenerate(build_set({"Size": ["Large"]})))
        assert result[0].sku == "SKU-LAR"

    def test_total_quantity_counts_visible_only(self, color_size: VariantDimensionSet) -> None:
        """Hidden cells are excluded from totals."""
        matrix = apply_to_all(regenerate(color_size), "quantity", 2)
        matrix = update_combination(matrix, matrix[0].key, "is_visible", False)
        assert total_quantity(matrix) == 10
