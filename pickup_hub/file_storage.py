"""JSON-file backed storage for orders and pick-up points."""

from __future__ import annotations

import dataclasses
import json
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from os import PathLike
from pathlib import Path
from typing import Any

from pickup_hub.model import ObjectNotFoundError, Order, PickPoint, ServiceError


@dataclass
class OrderRecord:
    """An order as kept in storage, with its delivery state."""

    id: int
    recipient_id: int
    weight_grams: int
    price_kopecks: int
    cover: str
    expire_date: datetime
    is_returned: bool = False
    is_given: bool = False
    given_time: datetime | None = None


def _parse_time(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _record_from_order(order: Order) -> OrderRecord:
    return OrderRecord(
        id=order.id,
        recipient_id=order.recipient_id,
        weight_grams=order.weight_grams,
        price_kopecks=order.price_kopecks,
        cover=order.cover,
        expire_date=order.expire_date,
    )


def _record_to_order(record: OrderRecord) -> Order:
    return Order(
        id=record.id,
        recipient_id=record.recipient_id,
        weight_grams=record.weight_grams,
        price_kopecks=record.price_kopecks,
        cover=record.cover,
        expire_date=record.expire_date,
    )


def _record_to_json(record: OrderRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "recipient": record.recipient_id,
        "weight": record.weight_grams,
        "price": record.price_kopecks,
        "cover": str(record.cover),
        "expires": record.expire_date.isoformat(),
        "is_returned": record.is_returned,
        "is_given": record.is_given,
        "given": record.given_time.isoformat() if record.given_time else None,
    }


def _record_from_json(data: dict[str, Any]) -> OrderRecord:
    given = data.get("given")
    return OrderRecord(
        id=data["id"],
        recipient_id=data["recipient"],
        weight_grams=data["weight"],
        price_kopecks=data["price"],
        cover=data["cover"],
        expire_date=_parse_time(data["expires"]),
        is_returned=bool(data.get("is_returned", False)),
        is_given=bool(data.get("is_given", False)),
        given_time=_parse_time(given) if given else None,
    )


def _open_json_list(path: Path) -> list[Any]:
    """Create the file when missing, then return the JSON list it holds."""
    if not path.exists():
        path.touch()
        return []
    raw = path.read_text(encoding="utf-8")
    if not raw:
        return []
    return json.loads(raw)


class OrderStorage:
    """Orders persisted as a JSON list in a single file."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        self._records = [_record_from_json(item) for item in _open_json_list(self._path)]

    def _save(self) -> None:
        payload = json.dumps([_record_to_json(record) for record in self._records])
        self._path.write_text(payload, encoding="utf-8")

    def get_by_id(self, order_id: int) -> OrderRecord | None:
        with self._lock:
            for record in self._records:
                if record.id == order_id:
                    return dataclasses.replace(record)
        return None

    def accept_from_courier(self, order: Order) -> None:
        with self._lock:
            if any(record.id == order.id for record in self._records):
                raise ServiceError("can not get order: trying to get existing order")
            self._records.append(_record_from_order(order))
            self._save()

    def remove(self, order_id: int) -> None:
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == order_id:
                    del self._records[index]
                    self._save()
                    return
        raise ServiceError("order can not be removed: order not found")

    def give(self, ids: Iterable[int]) -> None:
        wanted = set(ids)
        with self._lock:
            now = datetime.now(timezone.utc)
            for record in self._records:
                if record.id in wanted:
                    record.is_given = True
                    record.given_time = now
            self._save()

    def _filter(self, predicate: Callable[[OrderRecord], bool]) -> list[Order]:
        with self._lock:
            found = [_record_to_order(record) for record in self._records if predicate(record)]
        if not found:
            raise ServiceError("can not list orders: orders not found")
        return found

    def list_all(self, recipient: int) -> list[Order]:
        return self._filter(lambda record: record.recipient_id == recipient)

    def list_not_given(self, recipient: int) -> list[Order]:
        return self._filter(lambda record: record.recipient_id == recipient and not record.is_given)

    def return_order(self, order_id: int) -> None:
        with self._lock:
            for record in self._records:
                if record.id == order_id:
                    record.is_given = False
                    record.is_returned = True
                    self._save()
                    return
        raise ServiceError("order can not be returned: order not found")

    def list_returned(self) -> list[Order]:
        return self._filter(lambda record: record.is_returned)


class PointStorage:
    """Pick-up points persisted as a JSON list in a single file."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        self._points = [PickPoint.from_dict(item) for item in _open_json_list(self._path)]

    def _save(self) -> None:
        payload = json.dumps([point.to_dict() for point in self._points])
        self._path.write_text(payload, encoding="utf-8")

    def add(self, point: PickPoint) -> int:
        with self._lock:
            if any(stored.id == point.id for stored in self._points):
                raise ServiceError("can not write new pick-up point: trying to add existing point")
            self._points.append(dataclasses.replace(point))
            self._save()
            return point.id

    def get_by_id(self, point_id: int) -> PickPoint:
        with self._lock:
            for point in self._points:
                if point.id == point_id:
                    return dataclasses.replace(point)
        raise ObjectNotFoundError()

    def update(self, point: PickPoint) -> None:
        with self._lock:
            for index, stored in enumerate(self._points):
                if stored.id == point.id:
                    self._points[index] = dataclasses.replace(point)
                    self._save()
                    return
        raise ObjectNotFoundError()

    def delete(self, point_id: int) -> None:
        with self._lock:
            for index, stored in enumerate(self._points):
                if stored.id == point_id:
                    del self._points[index]
                    self._save()
                    return
        raise ObjectNotFoundError()