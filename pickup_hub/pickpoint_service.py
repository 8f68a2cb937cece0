"""Pick-up point operations combining a repository, a cache and transactions."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any, Protocol, TypeVar

from pickup_hub.metrics import NullCounter, NullHistogram
from pickup_hub.model import InvalidInputError, PickPoint

T = TypeVar("T")


class AccessMode(Enum):
    READ_WRITE = "read write"
    READ_ONLY = "read only"


class DummyTransactor:
    """Runs the work directly; for stores that have no transactions."""

    def run_serializable(self, mode: AccessMode, func: Callable[[], T]) -> T:
        return func()


class PointRepository(Protocol):
    def add(self, point: PickPoint) -> int: ...
    def get_by_id(self, point_id: int) -> PickPoint: ...
    def update(self, point: PickPoint) -> None: ...
    def delete(self, point_id: int) -> None: ...


class PointCache(Protocol):
    def set(self, key: str, value: Any) -> None: ...
    def get(self, key: str) -> Any: ...
    def delete(self, *args: str) -> None: ...


class Transactor(Protocol):
    def run_serializable(self, mode: AccessMode, func: Callable[[], T]) -> T: ...


class PickPointService:
    """CRUD on pick-up points with read-through caching and request metrics."""

    def __init__(
        self,
        repo: PointRepository,
        cache: PointCache,
        transactor: Transactor,
        *,
        counter: Any = None,
        histogram: Any = None,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._transactor = transactor
        self._counter = counter if counter is not None else NullCounter()
        self._histogram = histogram if histogram is not None else NullHistogram()

    @contextmanager
    def _measured(self) -> Iterator[None]:
        start = time.monotonic()
        try:
            yield
        finally:
            self._counter.inc()
            self._histogram.observe_since(start)

    def read(self, point_id: int) -> PickPoint:
        """Return a point, from the cache when possible."""
        with self._measured():
            if point_id <= 0:
                raise InvalidInputError()
            key = str(point_id)
            try:
                return PickPoint.from_dict(self._cache.get(key))
            except Exception:
                pass

            def load() -> PickPoint:
                point = self._repo.get_by_id(point_id)
                self._cache.set(key, point)
                return point

            return self._transactor.run_serializable(AccessMode.READ_ONLY, load)

    def create(self, point: PickPoint) -> PickPoint:
        """Store a new point and set the id the repository assigned."""
        with self._measured():
            point.id = self._repo.add(point)
            return point

    def update(self, point: PickPoint) -> None:
        with self._measured():
            if point.id <= 0:
                raise InvalidInputError()

            def change() -> None:
                self._repo.update(point)
                self._cache.delete(str(point.id))

            self._transactor.run_serializable(AccessMode.READ_WRITE, change)

    def delete(self, point_id: int) -> None:
        with self._measured():
            if point_id <= 0:
                raise InvalidInputError()

            def remove() -> None:
                self._repo.delete(point_id)
                self._cache.delete(str(point_id))

            self._transactor.run_serializable(AccessMode.READ_WRITE, remove)