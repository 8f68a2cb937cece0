from datetime import datetime, timezone

import pytest

from pickup_hub.cover import packaging_price, validate_order
from pickup_hub.model import ExcessWeightError, InvalidInputError, Order


def make_order(cover, weight=1000, price=5000):
    return Order(
        id=1,
        recipient_id=2,
        weight_grams=weight,
        price_kopecks=price,
        cover=cover,
        expire_date=datetime(2100, 1, 1, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize("cover, weight", [("bag", 9999), ("box", 29999), ("film", 10**9)])
def test_validate_accepts_allowed_weight(cover, weight):
    order = make_order(cover, weight)
    assert validate_order(order) is None
    assert order.weight_grams == weight


@pytest.mark.parametrize("cover, weight", [("bag", 10000), ("bag", 15000), ("box", 30000)])
def test_validate_rejects_excess_weight(cover, weight):
    with pytest.raises(ExcessWeightError):
        validate_order(make_order(cover, weight))


def test_validate_rejects_unknown_cover():
    with pytest.raises(InvalidInputError):
        validate_order(make_order("crate"))


@pytest.mark.parametrize("cover, expected", [("bag", 500), ("box", 2000), ("film", 100)])
def test_packaging_price(cover, expected):
    assert packaging_price(make_order(cover)) == expected


def test_packaging_price_for_unknown_cover_is_order_price():
    assert packaging_price(make_order("crate", price=4321)) == 4321


def test_box_packaging_costs_more_than_bag():
    assert packaging_price(make_order("box")) > packaging_price(make_order("bag")) > packaging_price(make_order("film"))