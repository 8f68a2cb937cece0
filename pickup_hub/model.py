"""Domain types and errors shared across the pick-up point service."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

KOPECKS_IN_RUBLE = 100
GRAMS_IN_KILO = 1000

MESSAGE_SUCCESS = b"operation completed successfully"

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class ServiceError(Exception):
    """Base class for every error the service reports."""

    default_message = "service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class ObjectNotFoundError(ServiceError):
    default_message = "object not found"


class InvalidEnvironmentError(ServiceError):
    default_message = "invalid environment"


class InvalidInputError(ServiceError):
    default_message = "invalid input"


class ExcessWeightError(ServiceError):
    default_message = "excess weight"


class InvalidKafkaMessageError(ServiceError):
    default_message = "invalid kafka message"


class EmptyRequestError(ServiceError):
    default_message = "empty request"


class EmptyBodyRequestError(ServiceError):
    default_message = "empty body request"


class CacheMissedError(ServiceError):
    default_message = "cache missed"


class Cover(str, Enum):
    """Kinds of packaging an order can be wrapped in."""

    BOX = "box"
    BAG = "bag"
    FILM = "film"

    def __str__(self) -> str:
        return self.value


@dataclass
class Order:
    id: int
    recipient_id: int
    weight_grams: int
    price_kopecks: int
    cover: str
    expire_date: datetime


@dataclass
class OrderInput:
    """Raw order data as entered by a courier; the date is still text."""

    id: int
    recipient_id: int
    weight_grams: int
    price_kopecks: int
    cover: str
    expire_date: str


@dataclass
class PickPoint:
    id: int = 0
    name: str = ""
    address: str = ""
    contact: str = ""

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping; a zero id is left out."""
        data: dict[str, Any] = {}
        if self.id:
            data["id"] = self.id
        data["name"] = self.name
        data["address"] = self.address
        data["contact"] = self.contact
        return data

    @classmethod
    def from_dict(cls, data: Any) -> PickPoint:
        """Build a point from a decoded JSON object, ignoring unknown keys."""
        if not isinstance(data, Mapping):
            raise ValueError("pick-up point must be a JSON object")
        lowered = {str(key).lower(): value for key, value in data.items()}
        values: dict[str, Any] = {}
        for name, kind in (("id", int), ("name", str), ("address", str), ("contact", str)):
            value = lowered.get(name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, kind):
                raise ValueError(f"field {name!r} has a wrong type")
            values[name] = value
        return cls(**values)


@dataclass
class HttpRequest:
    """The parts of an HTTP request that are worth logging."""

    method: str = "GET"
    url: str = "/"
    body: bytes | None = None
    login: str = ""


@dataclass
class RequestMessage:
    caught_time: datetime = ZERO_TIME
    request: HttpRequest | None = None


def _format_time(moment: datetime) -> str:
    return moment.isoformat()


def _parse_time(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class LogMessage:
    caught_time: datetime = ZERO_TIME
    method: str = ""
    url: str = ""
    body: str = ""
    login: str = ""

    def to_json(self) -> str:
        return json.dumps(
            {
                "time": _format_time(self.caught_time),
                "method": self.method,
                "url": self.url,
                "body": self.body,
                "login": self.login,
            }
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> LogMessage:
        """Decode a log message; malformed input raises InvalidKafkaMessageError."""
        try:
            data = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise InvalidKafkaMessageError() from exc
        if not isinstance(data, dict):
            raise InvalidKafkaMessageError()
        fields: dict[str, Any] = {}
        for key, name in (("method", "method"), ("url", "url"), ("body", "body"), ("login", "login")):
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise InvalidKafkaMessageError()
            fields[name] = value
        raw_time = data.get("time")
        if raw_time is not None:
            if not isinstance(raw_time, str):
                raise InvalidKafkaMessageError()
            try:
                fields["caught_time"] = _parse_time(raw_time)
            except ValueError as exc:
                raise InvalidKafkaMessageError() from exc
        return cls(**fields)