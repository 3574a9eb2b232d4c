"""Variant matrix generator.

Derives the sellable combinations of a listing from its variant
dimensions. The matrix is always exactly the Cartesian product of the
dimensions that currently have values, ordered with the first dimension
outermost. Combinations are identified by their tuple of value ids, so
per-cell edits survive regeneration as long as those values exist.

Every function here is pure: inputs are never mutated and the same
inputs always produce the same output.
"""

from collections.abc import Iterable, Sequence
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from itertools import product
from typing import Any

import structlog

from listing_engine.domain.exceptions import CombinationNotFoundError, UnsupportedFieldError
from listing_engine.domain.value_objects import CombinationKey, SharedDefaults
from listing_engine.domain.variants import (
    EDITABLE_FIELDS,
    VariantCombination,
    VariantDimension,
)

logger = structlog.get_logger()

# Fields that may be overwritten across the whole matrix at once
BULK_FIELDS: tuple[str, ...] = ("price", "quantity", "sku", "is_visible")

DEFAULT_SKU_BASE = "SKU"


def regenerate(
    dimensions: Iterable[VariantDimension],
    previous: Sequence[VariantCombination] = (),
    shared_defaults: SharedDefaults | None = None,
) -> list[VariantCombination]:
    """Rebuild the combination matrix.

    Dimensions without values are skipped. For every generated identity
    the editable fields of a previous combination with the same identity
    are carried over verbatim; new identities start from the shared
    defaults.

    Args:
        dimensions: Dimensions in declaration order.
        previous: Combinations from the last generation.
        shared_defaults: Price and quantity for new combinations.

    Returns:
        Combinations in nested iteration order (first dimension outermost).
    """
    defaults = shared_defaults or SharedDefaults()
    active = [d for d in dimensions if d.values]
    if not active:
        if previous:
            logger.debug("Variant matrix cleared", previous=len(previous))
        return []

    previous_by_key = {c.key: c for c in previous}
    combinations: list[VariantCombination] = []
    kept = 0

    for values in product(*(d.values for d in active)):
        key = CombinationKey(value_ids=tuple(v.id for v in values))
        names = tuple(v.name for v in values)
        existing = previous_by_key.get(key)

        if existing is not None:
            kept += 1
            combinations.append(replace(existing, option_names=names))
        else:
            combinations.append(
                VariantCombination(
                    key=key,
                    option_names=names,
                    price=defaults.price,
                    quantity=defaults.quantity,
                )
            )

    logger.debug(
        "Variant matrix regenerated",
        dimensions=len(active),
        combinations=len(combinations),
        kept=kept,
        dropped=len(previous) - kept,
    )
    return combinations


def apply_to_all(
    combinations: Sequence[VariantCombination],
    field_name: str,
    value: Any,
) -> list[VariantCombination]:
    """Overwrite one attribute on every combination.

    Identities and order are unchanged.

    Args:
        combinations: Current matrix.
        field_name: One of ``price``, ``quantity``, ``sku``, ``is_visible``.
        value: New value.

    Returns:
        Updated combinations.

    Raises:
        UnsupportedFieldError: If the field cannot be bulk-edited.
    """
    if field_name not in BULK_FIELDS:
        raise UnsupportedFieldError(field_name, list(BULK_FIELDS))
    value = _coerce(field_name, value)
    return [replace(c, **{field_name: value}) for c in combinations]


def update_combination(
    combinations: Sequence[VariantCombination],
    key: CombinationKey,
    field_name: str,
    value: Any,
) -> list[VariantCombination]:
    """Edit one attribute of a single combination.

    Args:
        combinations: Current matrix.
        key: Identity of the combination to edit.
        field_name: Any editable field (see ``EDITABLE_FIELDS``).
        value: New value.

    Returns:
        Updated combinations.

    Raises:
        UnsupportedFieldError: If the field is not editable.
        CombinationNotFoundError: If no combination has that identity.
    """
    if field_name not in EDITABLE_FIELDS:
        raise UnsupportedFieldError(field_name, list(EDITABLE_FIELDS))
    if not any(c.key == key for c in combinations):
        raise CombinationNotFoundError(str(key))

    value = _coerce(field_name, value)
    return [replace(c, **{field_name: value}) if c.key == key else c for c in combinations]


def assign_sku_sequence(
    combinations: Sequence[VariantCombination],
    prefix: str,
) -> list[VariantCombination]:
    """Number SKUs in matrix order (e.g., "TSHIRT-001", "TSHIRT-002").

    Args:
        combinations: Current matrix.
        prefix: SKU prefix.

    Returns:
        Combinations with sequential SKUs.
    """
    prefix = prefix.strip()
    return [
        replace(c, sku=f"{prefix}-{index:03d}")
        for index, c in enumerate(combinations, start=1)
    ]


def generate_skus(
    combinations: Sequence[VariantCombination],
    base_sku: str = "",
) -> list[VariantCombination]:
    """Build SKUs from option names (e.g., "SKU-RED-L").

    The first option is shortened to three letters, the rest are kept
    whole. All parts are upper-cased.

    Args:
        combinations: Current matrix.
        base_sku: Listing SKU used as prefix; defaults to "SKU".

    Returns:
        Combinations with generated SKUs.
    """
    base = base_sku.strip() or DEFAULT_SKU_BASE
    return [replace(c, sku=build_sku(base, c.option_names)) for c in combinations]


def build_sku(base: str, option_names: Sequence[str]) -> str:
    """Compose a SKU from a base and option names."""
    parts = [base]
    for index, name in enumerate(option_names):
        token = name.strip().replace(" ", "").upper()
        parts.append(token[:3] if index == 0 else token)
    return "-".join(parts)


def total_quantity(combinations: Iterable[VariantCombination]) -> int:
    """Sum stock over visible combinations."""
    return sum(c.quantity for c in combinations if c.is_visible)


def _coerce(field_name: str, value: Any) -> Any:
    if field_name == "price":
        try:
            price = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"Invalid price: {value!r}") from e
        if not price.is_finite() or price < 0:
            raise ValueError(f"Price must be a non-negative number: {price}")
        return price
    if field_name == "quantity":
        quantity = int(value)
        if quantity < 0:
            raise ValueError(f"Quantity cannot be negative: {quantity}")
        return quantity
    if field_name == "sku":
        return str(value).strip()
    if field_name == "is_visible":
        return bool(value)
    if field_name == "images":
        if isinstance(value, str):
            return (value,)
        return tuple(value)
    return value
