"""Business rules for accepting, giving and returning orders."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from pickup_hub.cover import packaging_price, validate_order
from pickup_hub.file_storage import OrderRecord
from pickup_hub.metrics import NullCounter, NullGauge
from pickup_hub.model import Order, OrderInput, ServiceError

RETURN_WINDOW = timedelta(days=2)


class OrderError(ServiceError):
    """An order request broke a business rule."""


class OrderStore(Protocol):
    def get_by_id(self, order_id: int) -> OrderRecord | None: ...
    def accept_from_courier(self, order: Order) -> None: ...
    def remove(self, order_id: int) -> None: ...
    def give(self, ids: Sequence[int]) -> None: ...
    def list_all(self, recipient: int) -> list[Order]: ...
    def list_not_given(self, recipient: int) -> list[Order]: ...
    def return_order(self, order_id: int) -> None: ...
    def list_returned(self) -> list[Order]: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_order_input(order_input: OrderInput) -> Order:
    """Validate raw courier input and turn it into an order.

    The expiry date is written as day.month.year, e.g. ``2.1.2006``.
    """
    if order_input.id <= 0:
        raise OrderError("id should be positive")
    if order_input.recipient_id <= 0:
        raise OrderError("recipient id should be positive")
    if order_input.weight_grams <= 0:
        raise OrderError("order weight should be positive")
    if order_input.price_kopecks <= 0:
        raise OrderError("order price should be positive")
    try:
        expires = datetime.strptime(order_input.expire_date, "%d.%m.%Y").replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise OrderError("wrong date format") from exc
    return Order(
        id=order_input.id,
        recipient_id=order_input.recipient_id,
        weight_grams=order_input.weight_grams,
        price_kopecks=order_input.price_kopecks,
        cover=order_input.cover,
        expire_date=expires,
    )


class OrderService:
    """Order operations on top of an order store, with optional metrics."""

    def __init__(
        self,
        storage: OrderStore,
        *,
        given_orders_gauge: Any = None,
        failed_counter: Any = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._storage = storage
        self._given_gauge = given_orders_gauge if given_orders_gauge is not None else NullGauge()
        self._failed_counter = failed_counter if failed_counter is not None else NullCounter()
        self._clock = clock

    @contextmanager
    def _counting_failures(self) -> Iterator[None]:
        try:
            yield
        except Exception as exc:
            self._failed_counter.failed_inc(exc)
            raise

    def accept_from_courier(self, order_input: OrderInput) -> None:
        """Validate a new order, add its packaging price and store it."""
        with self._counting_failures():
            order = parse_order_input(order_input)
            if order.expire_date < self._clock():
                raise OrderError("can not get order: trying to get expired order")
            validate_order(order)
            order.price_kopecks += packaging_price(order)
            self._storage.accept_from_courier(order)

    def remove(self, order_id: int) -> None:
        """Hand an expired, not given order back to the courier."""
        with self._counting_failures():
            if order_id <= 0:
                raise OrderError("id should be positive")
            record = self._storage.get_by_id(order_id)
            if record is not None and (record.expire_date > self._clock() or record.is_given):
                raise OrderError(
                    "order can not be removed: trying to remove order that is given or not expired"
                )
            self._storage.remove(order_id)

    def give(self, ids: Sequence[int]) -> None:
        """Give orders of a single recipient out of the pick-up point."""
        ids = list(ids)
        with self._counting_failures():
            try:
                self._check_giveable(ids)
                self._storage.give(ids)
            except Exception as exc:
                self._given_gauge.success_add(exc, float(len(ids)))
                raise
            self._given_gauge.success_add(None, float(len(ids)))

    def _check_giveable(self, ids: Sequence[int]) -> None:
        recipient = 0
        now = self._clock()
        for order_id in ids:
            record = self._storage.get_by_id(order_id)
            if record is None:
                raise OrderError(f"can not give orders: order {order_id} is not in the storage")
            if recipient and record.recipient_id != recipient:
                raise OrderError("can not give orders: orders belong to different recipients")
            if record.is_given:
                raise OrderError(f"can not give orders: order {order_id} is already given")
            if record.is_returned:
                raise OrderError(f"can not give orders: order {order_id} is already returned by recipient")
            if record.expire_date < now:
                raise OrderError(f"can not give orders: order {order_id} is expired")
            if not recipient:
                recipient = record.recipient_id

    def list_orders(self, recipient: int, n: int = 0, only_not_given: bool = False) -> list[Order]:
        """The recipient's orders; with n > 0 only the last n of them."""
        with self._counting_failures():
            if recipient <= 0:
                raise OrderError("recipient id should be positive")
            if n < 0:
                raise OrderError("n should not be negative")
            if only_not_given:
                found = self._storage.list_not_given(recipient)
            else:
                found = self._storage.list_all(recipient)
            if n == 0 or len(found) <= n:
                return found
            return found[-n:]

    def return_order(self, order_id: int, recipient: int) -> None:
        """Take a given order back from its recipient within two days."""
        with self._counting_failures():
            try:
                self._check_returnable(order_id, recipient)
                self._storage.return_order(order_id)
            except Exception as exc:
                self._given_gauge.success_dec(exc)
                raise
            self._given_gauge.success_dec(None)

    def _check_returnable(self, order_id: int, recipient: int) -> None:
        if order_id <= 0:
            raise OrderError("id should be positive")
        if recipient <= 0:
            raise OrderError("recipient id should be positive")
        record = self._storage.get_by_id(order_id)
        if record is None:
            raise OrderError("order can not be returned: order not found")
        if record.recipient_id != recipient:
            raise OrderError("order can not be returned: order belongs to different recipient")
        if record.is_returned:
            raise OrderError("order can not be returned: order is already returned")
        if not record.is_given:
            raise OrderError("order can not be returned: order is not given yet")
        if record.given_time is None or record.given_time + RETURN_WINDOW < self._clock():
            raise OrderError("order can not be returned: more than 2 days passed")

    def list_returned(self, page_num: int = 0, orders_per_page: int = 10) -> list[Order]:
        """Returned orders; page 0 means all of them, pages are numbered from 1."""
        with self._counting_failures():
            if page_num < 0:
                raise OrderError("pageNum should not be negative")
            if orders_per_page <= 0:
                raise OrderError("ordersPerPage should be positive")
            found = self._storage.list_returned()
            if page_num == 0:
                return found
            first = (page_num - 1) * orders_per_page
            if not found or len(found) <= first:
                raise OrderError("empty list")
            size = orders_per_page
            if len(found) < page_num * orders_per_page:
                size = len(found) % orders_per_page
            return found[first : first + size]