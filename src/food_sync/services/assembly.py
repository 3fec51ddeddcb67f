"""Assembly of food documents from fetched rows and overrides."""

import logging
from collections.abc import Iterable
from enum import StrEnum

from food_sync.domain.foods import FetchedFood, FoodDocument, PortionEntry

_logger = logging.getLogger(__name__)


class PortionSortKey(StrEnum):
    """How portions are keyed and ordered on a document.

    ``UNIT`` keys portions by unit alone. ``COMPOSITE`` keys them by
    ``(amount, unit, modifier)`` so several portions sharing a unit keep
    distinct keys.
    """

    UNIT = "unit"
    COMPOSITE = "composite"


def portion_sort_value(
    portion: PortionEntry, sort_key: PortionSortKey
) -> tuple[object, ...]:
    """Return the value portions are ordered by."""
    if sort_key is PortionSortKey.COMPOSITE:
        # Portions without an amount order below any amount.
        amount = portion.amount
        return (amount is not None, amount or 0, portion.unit, portion.modifier)
    return (portion.unit,)


def portion_key(portion: PortionEntry, sort_key: PortionSortKey) -> str:
    """Return the array item key stored with a portion."""
    if sort_key is PortionSortKey.COMPOSITE:
        return f"{_format_amount(portion.amount)}{portion.unit}{portion.modifier}"
    return portion.unit


def order_portions(
    overrides: Iterable[PortionEntry],
    fetched: Iterable[PortionEntry],
    sort_key: PortionSortKey = PortionSortKey.UNIT,
) -> list[PortionEntry]:
    """Concatenate override then store portions and order them by key.

    Portions are ordered by descending key; ties keep concatenation order.
    """
    combined = [*overrides, *fetched]
    return sorted(
        combined,
        key=lambda portion: portion_sort_value(portion, sort_key),
        reverse=True,
    )


def assemble_document(
    identifier: str,
    fetched: FetchedFood,
    overrides: Iterable[PortionEntry] = (),
    sort_key: PortionSortKey = PortionSortKey.UNIT,
) -> FoodDocument | None:
    """Build a document, or return None when the base record is missing."""
    if fetched.food is None:
        _logger.error("Could not find fdc_id: %s", identifier)
        return None

    nutrients = sorted(fetched.nutrients, key=lambda nutrient: nutrient.name)
    portions = order_portions(overrides, fetched.portions, sort_key)
    return FoodDocument(
        id=identifier,
        fdc_id=fetched.food.fdc_id,
        description=fetched.food.description,
        source=fetched.food.source,
        nutrients=tuple(nutrients),
        portions=tuple((portion_key(p, sort_key), p) for p in portions),
        brand=fetched.brand,
    )


def _format_amount(amount: float | None) -> str:
    """Format an amount without a trailing ``.0`` for whole numbers."""
    if amount is None:
        return ""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)
