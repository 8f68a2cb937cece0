"""Packaging rules: weight limits and packaging prices per cover kind."""

from __future__ import annotations

from dataclasses import dataclass

from pickup_hub.model import (
    GRAMS_IN_KILO,
    KOPECKS_IN_RUBLE,
    Cover,
    ExcessWeightError,
    InvalidInputError,
    Order,
)


@dataclass(frozen=True)
class _Packaging:
    price_kopecks: int
    max_weight_grams: int | None = None


_PACKAGING = {
    Cover.BAG: _Packaging(5 * KOPECKS_IN_RUBLE, 10 * GRAMS_IN_KILO),
    Cover.BOX: _Packaging(20 * KOPECKS_IN_RUBLE, 30 * GRAMS_IN_KILO),
    Cover.FILM: _Packaging(1 * KOPECKS_IN_RUBLE),
}


def _packaging_for(order: Order) -> _Packaging | None:
    try:
        return _PACKAGING[Cover(order.cover)]
    except ValueError:
        return None


def validate_order(order: Order) -> None:
    """Raise if the order's cover is unknown or cannot hold its weight."""
    packaging = _packaging_for(order)
    if packaging is None:
        raise InvalidInputError()
    if packaging.max_weight_grams is not None and order.weight_grams >= packaging.max_weight_grams:
        raise ExcessWeightError()


def packaging_price(order: Order) -> int:
    """Price of the packaging in kopecks; an unknown cover yields the order price."""
    packaging = _packaging_for(order)
    if packaging is None:
        return order.price_kopecks
    return packaging.price_kopecks