"""Variant dimension and combination models.

Dimensions are named axes of variation (Color, Size) holding an ordered
set of distinct values. Combinations are the sellable cells of the
Cartesian product across all dimensions.

All models are immutable; mutating operations return new instances.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Self

from listing_engine.domain.exceptions import (
    DimensionNotFoundError,
    DuplicateDimensionError,
    DuplicateVariantValueError,
    VariantValueNotFoundError,
)
from listing_engine.domain.value_objects import CombinationKey, DimensionId, VariantValueId


# ============================================================================
# Dimensions
# ============================================================================


@dataclass(frozen=True)
class VariantValue:
    """One option of a dimension.

    Attributes:
        id: Stable value identifier.
        name: Option label (e.g., "Red").
        color_code: Optional swatch color (e.g., "#FF0000").
    """

    id: VariantValueId
    name: str
    color_code: str | None = None


@dataclass(frozen=True)
class VariantDimension:
    """A named axis of product variation.

    Attributes:
        id: Stable dimension identifier, generated once.
        name: Dimension label (e.g., "Color").
        values: Options in insertion order, names unique case-insensitively.
    """

    id: DimensionId
    name: str
    values: tuple[VariantValue, ...] = ()

    @classmethod
    def create(cls, name: str, dimension_id: DimensionId | None = None) -> Self:
        """Create an empty dimension.

        Args:
            name: Dimension label.
            dimension_id: Optional pre-generated id.

        Returns:
            New VariantDimension.
        """
        return cls(id=dimension_id or DimensionId.generate(), name=name.strip())

    def has_value_named(self, name: str) -> bool:
        """Check for an existing option with the same name.

        Args:
            name: Option name (compared case-insensitively, trimmed).

        Returns:
            True if an option with that name exists.
        """
        needle = name.strip().lower()
        return any(v.name.lower() == needle for v in self.values)

    def get_value(self, value_id: VariantValueId) -> VariantValue | None:
        """Find a value by id.

        Args:
            value_id: Value identifier.

        Returns:
            VariantValue if found, None otherwise.
        """
        for value in self.values:
            if value.id == value_id:
                return value
        return None

    def add_value(
        self,
        name: str,
        color_code: str | None = None,
        value_id: VariantValueId | None = None,
    ) -> Self:
        """Append an option.

        Args:
            name: Option label; surrounding whitespace is dropped.
            color_code: Optional swatch color.
            value_id: Optional pre-generated id.

        Returns:
            New dimension with the option appended.

        Raises:
            DuplicateVariantValueError: If the name already exists.
            ValueError: If the name is blank.
        """
        trimmed = name.strip()
        if not trimmed:
            raise ValueError("Option name cannot be blank")
        if self.has_value_named(trimmed):
            raise DuplicateVariantValueError(str(self.id), trimmed)

        value = VariantValue(
            id=value_id or VariantValueId.generate(),
            name=trimmed,
            color_code=color_code,
        )
        return replace(self, values=(*self.values, value))

    def remove_value(self, value_id: VariantValueId) -> Self:
        """Remove an option.

        Args:
            value_id: Id of the option to remove.

        Returns:
            New dimension without the option.

        Raises:
            VariantValueNotFoundError: If the value is not in this dimension.
        """
        if self.get_value(value_id) is None:
            raise VariantValueNotFoundError(str(self.id), str(value_id))
        return replace(self, values=tuple(v for v in self.values if v.id != value_id))


@dataclass(frozen=True)
class VariantDimensionSet:
    """Ordered collection of dimensions.

    Declaration order defines the order of ids in every combination key.
    """

    dimensions: tuple[VariantDimension, ...] = ()

    def __iter__(self):
        return iter(self.dimensions)

    def __len__(self) -> int:
        return len(self.dimensions)

    @property
    def active(self) -> tuple[VariantDimension, ...]:
        """Dimensions that currently have at least one value."""
        return tuple(d for d in self.dimensions if d.values)

    def get(self, dimension_id: DimensionId) -> VariantDimension | None:
        """Find a dimension by id.

        Args:
            dimension_id: Dimension identifier.

        Returns:
            VariantDimension if found, None otherwise.
        """
        for dimension in self.dimensions:
            if dimension.id == dimension_id:
                return dimension
        return None

    def add_dimension(
        self,
        name: str,
        dimension_id: DimensionId | None = None,
    ) -> tuple[Self, VariantDimension]:
        """Append a new empty dimension.

        Args:
            name: Dimension label.
            dimension_id: Optional pre-generated id.

        Returns:
            Tuple of (new set, created dimension).

        Raises:
            DuplicateDimensionError: If a dimension with that name exists.
            ValueError: If the name is blank.
        """
        trimmed = name.strip()
        if not trimmed:
            raise ValueError("Dimension name cannot be blank")
        if any(d.name.lower() == trimmed.lower() for d in self.dimensions):
            raise DuplicateDimensionError(trimmed)

        dimension = VariantDimension.create(trimmed, dimension_id)
        return replace(self, dimensions=(*self.dimensions, dimension)), dimension

    def remove_dimension(self, dimension_id: DimensionId) -> Self:
        """Remove a dimension and all its values.

        Raises:
            DimensionNotFoundError: If the dimension is not in the set.
        """
        self._require(dimension_id)
        return replace(
            self,
            dimensions=tuple(d for d in self.dimensions if d.id != dimension_id),
        )

    def add_value(
        self,
        dimension_id: DimensionId,
        name: str,
        color_code: str | None = None,
        value_id: VariantValueId | None = None,
    ) -> Self:
        """Append an option to one dimension.

        Raises:
            DimensionNotFoundError: If the dimension is not in the set.
            DuplicateVariantValueError: If the option name already exists.
        """
        dimension = self._require(dimension_id).add_value(name, color_code, value_id)
        return self._swap(dimension)

    def remove_value(self, dimension_id: DimensionId, value_id: VariantValueId) -> Self:
        """Remove an option from one dimension.

        Raises:
            DimensionNotFoundError: If the dimension is not in the set.
            VariantValueNotFoundError: If the value is not in the dimension.
        """
        dimension = self._require(dimension_id).remove_value(value_id)
        return self._swap(dimension)

    def _require(self, dimension_id: DimensionId) -> VariantDimension:
        dimension = self.get(dimension_id)
        if dimension is None:
            raise DimensionNotFoundError(str(dimension_id))
        return dimension

    def _swap(self, updated: VariantDimension) -> Self:
        return replace(
            self,
            dimensions=tuple(updated if d.id == updated.id else d for d in self.dimensions),
        )


# ============================================================================
# Combinations
# ============================================================================


@dataclass(frozen=True)
class VariantCombination:
    """One sellable cell of the variant matrix.

    Attributes:
        key: Stable identity (ordered value ids).
        option_names: Display labels matching ``key`` order.
        price: Price in major currency units.
        quantity: Stock quantity.
        sku: Stock keeping unit; empty until assigned.
        is_visible: Whether the variant is offered for sale.
        images: Image URLs specific to this variant.
    """

    key: CombinationKey
    option_names: tuple[str, ...] = ()
    price: Decimal = Decimal("0")
    quantity: int = 0
    sku: str = ""
    is_visible: bool = True
    images: tuple[str, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        """Human-readable name (e.g., "Red, Large")."""
        return ", ".join(self.option_names)


# Attributes that survive regeneration and may be edited per cell.
EDITABLE_FIELDS: tuple[str, ...] = ("price", "quantity", "sku", "is_visible", "images")
