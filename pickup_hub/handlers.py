"""HTTP handlers for creating, reading, updating and deleting pick-up points."""

from __future__ import annotations

import json
import re
from typing import Protocol

from werkzeug.wrappers import Request, Response

from pickup_hub.model import (
    MESSAGE_SUCCESS,
    InvalidInputError,
    ObjectNotFoundError,
    PickPoint,
)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")
_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}


class PointService(Protocol):
    def read(self, point_id: int) -> PickPoint: ...
    def create(self, point: PickPoint) -> PickPoint: ...
    def update(self, point: PickPoint) -> None: ...
    def delete(self, point_id: int) -> None: ...


def _decode_point(request: Request) -> PickPoint:
    """Decode the first JSON value of the body; raises ValueError when it is no point."""
    text = request.get_data(as_text=True).lstrip()
    data, _ = json.JSONDecoder().raw_decode(text)
    if data is None:
        return PickPoint()
    return PickPoint.from_dict(data)


def _encode_point(point: PickPoint) -> bytes:
    text = json.dumps(point.to_dict(), separators=(",", ":"), ensure_ascii=False)
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text.encode("utf-8")


def _parse_id(point_id: str | int) -> int:
    text = str(point_id)
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid id {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"id {text!r} out of range")
    return value


def _status_for(error: Exception) -> int:
    if isinstance(error, InvalidInputError):
        return 400
    if isinstance(error, ObjectNotFoundError):
        return 404
    return 500


def _json_response(payload: bytes) -> Response:
    return Response(payload, status=200, mimetype="application/json")


class PickPointHandler:
    """Maps HTTP requests onto a pick-up point service."""

    def __init__(self, service: PointService) -> None:
        self._service = service

    def create(self, request: Request) -> Response:
        try:
            point = _decode_point(request)
        except ValueError:
            return Response(status=400)
        try:
            created = self._service.create(point)
        except Exception:
            return Response(status=500)
        return _json_response(_encode_point(created))

    def read(self, request: Request, point_id: str | int) -> Response:
        try:
            parsed = _parse_id(point_id)
        except ValueError:
            return Response(status=500)
        try:
            point = self._service.read(parsed)
        except Exception as exc:
            return Response(status=_status_for(exc))
        return _json_response(_encode_point(point))

    def update(self, request: Request) -> Response:
        try:
            point = _decode_point(request)
        except ValueError:
            return Response(status=400)
        try:
            self._service.update(point)
        except Exception as exc:
            return Response(status=_status_for(exc))
        return Response(MESSAGE_SUCCESS, status=200, mimetype="text/plain")

    def delete(self, request: Request, point_id: str | int) -> Response:
        try:
            parsed = _parse_id(point_id)
        except ValueError:
            return Response(status=500)
        try:
            self._service.delete(parsed)
        except Exception as exc:
            return Response(status=_status_for(exc))
        return Response(MESSAGE_SUCCESS, status=200, mimetype="text/plain")