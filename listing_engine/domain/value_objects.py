"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self

from listing_engine.domain.base import Identifier, ValueObject


# ============================================================================
# Typed Identifiers
# ============================================================================


@dataclass(frozen=True)
class DimensionId(Identifier):
    """Strongly-typed variant dimension identifier.

    Generated once when the dimension is created and never reassigned.
    """

    pass


@dataclass(frozen=True)
class VariantValueId(Identifier):
    """Strongly-typed variant value identifier.

    Combination identity is built from these, so a value keeps its id
    for as long as it stays in its dimension.
    """

    pass


# ============================================================================
# Combination Identity
# ============================================================================


@dataclass(frozen=True)
class CombinationKey(ValueObject):
    """Stable identity of a variant combination.

    An ordered tuple of value ids, one per dimension that has values, in
    dimension-declaration order.

    Attributes:
        value_ids: Ordered value ids.
    """

    value_ids: tuple[VariantValueId, ...]

    def __post_init__(self) -> None:
        """Validate key is non-empty."""
        if not self.value_ids:
            raise ValueError("Combination key needs at least one value id")

    @classmethod
    def of(cls, *value_ids: str | VariantValueId) -> Self:
        """Build a key from raw strings or typed ids.

        Args:
            value_ids: Value ids in dimension order.

        Returns:
            CombinationKey instance.
        """
        return cls(
            value_ids=tuple(
                v if isinstance(v, VariantValueId) else VariantValueId(v)
                for v in value_ids
            )
        )

    def contains(self, value_id: VariantValueId) -> bool:
        """Check if the key references a value.

        Args:
            value_id: Value id to look for.

        Returns:
            True if the value id is part of this key.
        """
        return value_id in self.value_ids

    def __str__(self) -> str:
        """Return string representation.

        Returns:
            Value ids joined with '-'.
        """
        return "-".join(str(v) for v in self.value_ids)


# ============================================================================
# Matrix Defaults
# ============================================================================


@dataclass(frozen=True)
class SharedDefaults(ValueObject):
    """Initial price and quantity for newly created combinations.

    Attributes:
        price: Price in major currency units.
        quantity: Stock quantity.
    """

    price: Decimal = Decimal("0")
    quantity: int = 1

    def __post_init__(self) -> None:
        """Validate defaults."""
        if self.price < 0:
            raise ValueError(f"Default price cannot be negative: {self.price}")
        if self.quantity < 0:
            raise ValueError(f"Default quantity cannot be negative: {self.quantity}")
