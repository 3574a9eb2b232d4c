"""Base classes for domain layer.

Provides the value object and typed identifier building blocks shared by
variant, category and draft models.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Self
from uuid import uuid4


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. They have no lifecycle and are interchangeable
    when their values are equal.

    Example:
        @dataclass(frozen=True)
        class SharedDefaults(ValueObject):
            price: Decimal
            quantity: int
    """

    pass


# ============================================================================
# Identifier Base
# ============================================================================


@dataclass(frozen=True)
class Identifier(ValueObject):
    """Strongly-typed string identifier.

    Subclasses give each kind of id its own type so a dimension id can
    never be passed where a value id is expected.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate identifier format."""
        if not self.value or not self.value.strip():
            raise ValueError(f"{type(self).__name__} cannot be empty")

    @classmethod
    def generate(cls) -> Self:
        """Generate a new random identifier.

        Returns:
            New identifier backed by a UUID4 string.
        """
        return cls(value=str(uuid4()))

    def __str__(self) -> str:
        """Return string representation.

        Returns:
            Identifier value.
        """
        return self.value
