from datetime import datetime, timedelta, timezone

import pytest

from pickup_hub.file_storage import OrderStorage
from pickup_hub.metrics import failed_order_counter, given_orders_gauge
from pickup_hub.model import (
    KOPECKS_IN_RUBLE,
    ExcessWeightError,
    InvalidInputError,
    OrderInput,
    ServiceError,
)
from pickup_hub.order_service import OrderError, OrderService, parse_order_input

RECIPIENT = 7


def _date(days: int) -> str:
    moment = datetime.now(timezone.utc) + timedelta(days=days)
    return f"{moment.day}.{moment.month}.{moment.year}"


def _input(order_id, recipient=RECIPIENT, weight=1000, price=1000, cover="bag", days=30):
    return OrderInput(
        id=order_id,
        recipient_id=recipient,
        weight_grams=weight,
        price_kopecks=price,
        cover=cover,
        expire_date=_date(days),
    )


def _shifted(days: int):
    return lambda: datetime.now(timezone.utc) + timedelta(days=days)


@pytest.fixture
def storage(tmp_path):
    return OrderStorage(tmp_path / "orders.json")


@pytest.fixture
def service(storage):
    return OrderService(storage)


def test_parse_order_input_reads_day_month_year():
    order = parse_order_input(
        OrderInput(id=1, recipient_id=2, weight_grams=3, price_kopecks=4, cover="box", expire_date="2.1.2006")
    )
    assert order.expire_date == datetime(2006, 1, 2, tzinfo=timezone.utc)
    assert (order.id, order.recipient_id, order.weight_grams, order.price_kopecks) == (1, 2, 3, 4)


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"id": 0}, "id should be positive"),
        ({"recipient_id": -1}, "recipient id should be positive"),
        ({"weight_grams": 0}, "order weight should be positive"),
        ({"price_kopecks": 0}, "order price should be positive"),
        ({"expire_date": "2006-01-02"}, "wrong date format"),
    ],
)
def test_parse_order_input_rejects_bad_fields(changes, message):
    values = dict(id=1, recipient_id=2, weight_grams=3, price_kopecks=4, cover="box", expire_date="2.1.2006")
    values.update(changes)
    with pytest.raises(OrderError, match=message):
        parse_order_input(OrderInput(**values))


def test_accept_adds_packaging_price(service, storage):
    service.accept_from_courier(_input(1, price=1000, cover="bag"))
    record = storage.get_by_id(1)
    assert record.price_kopecks - 1000 == 5 * KOPECKS_IN_RUBLE


def test_accept_rejects_expired_order(service, storage):
    with pytest.raises(OrderError, match="trying to get expired order"):
        service.accept_from_courier(_input(1, days=-3))
    assert storage.get_by_id(1) is None


def test_accept_rejects_heavy_bag_and_unknown_cover(service):
    with pytest.raises(ExcessWeightError):
        service.accept_from_courier(_input(1, weight=10_000, cover="bag"))
    with pytest.raises(InvalidInputError):
        service.accept_from_courier(_input(2, cover="crate"))


def test_accept_twice_fails(service):
    service.accept_from_courier(_input(1))
    with pytest.raises(ServiceError, match="trying to get existing order"):
        service.accept_from_courier(_input(1))


def test_failed_counter_counts_only_errors(storage):
    counter = failed_order_counter()
    service = OrderService(storage, failed_counter=counter)
    service.accept_from_courier(_input(1))
    before = counter.value
    with pytest.raises(OrderError):
        service.remove(0)
    assert counter.value == before + 1


def test_remove_rejects_not_expired_order(service):
    service.accept_from_courier(_input(1))
    with pytest.raises(OrderError, match="given or not expired"):
        service.remove(1)


def test_remove_expired_order(service, storage):
    service.accept_from_courier(_input(1, days=1))
    later = OrderService(storage, clock=_shifted(60))
    later.remove(1)
    assert storage.get_by_id(1) is None


def test_remove_unknown_order(service):
    with pytest.raises(ServiceError, match="order not found"):
        service.remove(42)


def test_give_marks_orders_given(service, storage):
    service.accept_from_courier(_input(1))
    service.accept_from_courier(_input(2))
    service.give([1, 2])
    assert storage.get_by_id(1).is_given and storage.get_by_id(2).is_given


def test_give_checks(service):
    service.accept_from_courier(_input(1, recipient=RECIPIENT))
    service.accept_from_courier(_input(2, recipient=RECIPIENT + 1))
    with pytest.raises(OrderError, match="order 99 is not in the storage"):
        service.give([99])
    with pytest.raises(OrderError, match="different recipients"):
        service.give([1, 2])
    service.give([1])
    with pytest.raises(OrderError, match="order 1 is already given"):
        service.give([1])


def test_give_failure_moves_gauge_by_number_of_ids(storage):
    gauge = given_orders_gauge()
    service = OrderService(storage, given_orders_gauge=gauge)
    service.accept_from_courier(_input(1))
    service.give([1])
    assert gauge.value == 0
    ids = [1, 99]
    with pytest.raises(OrderError):
        service.give(ids)
    assert gauge.value == len(ids)


def test_list_orders_last_n_and_not_given(service):
    for order_id in (1, 2, 3):
        service.accept_from_courier(_input(order_id))
    assert [order.id for order in service.list_orders(RECIPIENT, 2)] == [2, 3]
    assert [order.id for order in service.list_orders(RECIPIENT, 0)] == [1, 2, 3]
    service.give([1])
    assert [order.id for order in service.list_orders(RECIPIENT, 0, True)] == [2, 3]


def test_list_orders_rejects_bad_arguments(service):
    with pytest.raises(OrderError, match="recipient id should be positive"):
        service.list_orders(0, 0)
    with pytest.raises(OrderError, match="n should not be negative"):
        service.list_orders(RECIPIENT, -1)


def test_return_flow(service, storage):
    service.accept_from_courier(_input(1))
    with pytest.raises(OrderError, match="order is not given yet"):
        service.return_order(1, RECIPIENT)
    service.give([1])
    with pytest.raises(OrderError, match="belongs to different recipient"):
        service.return_order(1, RECIPIENT + 1)
    service.return_order(1, RECIPIENT)
    record = storage.get_by_id(1)
    assert record.is_returned and not record.is_given
    with pytest.raises(OrderError, match="already returned"):
        service.return_order(1, RECIPIENT)


def test_return_after_two_days_fails(service, storage):
    service.accept_from_courier(_input(1))
    service.give([1])
    later = OrderService(storage, clock=_shifted(3))
    with pytest.raises(OrderError, match="more than 2 days passed"):
        later.return_order(1, RECIPIENT)


def test_list_returned_pages(service):
    ids = [1, 2, 3, 4, 5]
    for order_id in ids:
        service.accept_from_courier(_input(order_id))
    service.give(ids)
    for order_id in ids:
        service.return_order(order_id, RECIPIENT)
    assert [order.id for order in service.list_returned(0, 2)] == ids
    assert [order.id for order in service.list_returned(2, 2)] == [3, 4]
    assert [order.id for order in service.list_returned(3, 2)] == [5]
    with pytest.raises(OrderError, match="empty list"):
        service.list_returned(4, 2)


def test_list_returned_rejects_bad_arguments(service):
    with pytest.raises(OrderError, match="pageNum should not be negative"):
        service.list_returned(-1, 10)
    with pytest.raises(OrderError, match="ordersPerPage should be positive"):
        service.list_returned(1, 0)