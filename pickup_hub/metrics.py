"""In-process counters, gauges and histograms for service metrics."""

from __future__ import annotations

import threading
import time
from collections.abc import Iterable

DEFAULT_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


class Counter:
    """A monotonically growing count."""

    def __init__(self, name: str, help_text: str = "") -> None:
        self.name = name
        self.help = help_text
        self.value = 0.0
        self._lock = threading.Lock()

    def inc(self) -> None:
        with self._lock:
            self.value += 1

    def failed_inc(self, error: BaseException | None) -> None:
        """Count one failure when an error is given."""
        if error is not None:
            self.inc()


class Gauge:
    """A value that may go up and down."""

    def __init__(self, name: str, help_text: str = "") -> None:
        self.name = name
        self.help = help_text
        self.value = 0.0
        self._lock = threading.Lock()

    def add(self, amount: float) -> None:
        with self._lock:
            self.value += amount

    def dec(self) -> None:
        self.add(-1)

    def success_add(self, error: BaseException | None, amount: float) -> None:
        """Add the amount when an error is given."""
        if error is not None:
            self.add(amount)

    def success_dec(self, error: BaseException | None) -> None:
        """Decrement when an error is given."""
        if error is not None:
            self.dec()


class Histogram:
    """Counts observations into cumulative upper-bound buckets."""

    def __init__(self, name: str, help_text: str = "", buckets: Iterable[float] = DEFAULT_BUCKETS) -> None:
        self.name = name
        self.help = help_text
        self.buckets = tuple(sorted(buckets))
        self.bucket_counts = {bound: 0 for bound in self.buckets}
        self.count = 0
        self.sum = 0.0
        self._lock = threading.Lock()

    def observe(self, value: float) -> None:
        with self._lock:
            self.count += 1
            self.sum += value
            for bound in self.buckets:
                if value <= bound:
                    self.bucket_counts[bound] += 1

    def observe_since(self, start: float) -> None:
        """Observe seconds elapsed since a time.monotonic() reading."""
        self.observe(time.monotonic() - start)


class _Discarding:
    """Base for metrics that publish nothing; they only tally what they dropped."""

    def __init__(self) -> None:
        self.dropped = 0
        self._lock = threading.Lock()

    def _drop(self) -> None:
        with self._lock:
            self.dropped += 1


class NullCounter(_Discarding):
    """A counter that publishes nothing."""

    def inc(self) -> None:
        self._drop()

    def failed_inc(self, error: BaseException | None) -> None:
        if error is not None:
            self._drop()


class NullGauge(_Discarding):
    """A gauge that publishes nothing."""

    def success_add(self, error: BaseException | None, amount: float) -> None:
        if error is not None:
            self._drop()

    def success_dec(self, error: BaseException | None) -> None:
        if error is not None:
            self._drop()


class NullHistogram(_Discarding):
    """A histogram that publishes nothing."""

    def observe_since(self, start: float) -> None:
        self._drop()


def pickpoint_counter() -> Counter:
    return Counter("pickpoint_grpc", "Number of requests handled")


def failed_order_counter() -> Counter:
    return Counter("failed_orders_grpc", "Number of failed requests to order service")


def given_orders_gauge() -> Gauge:
    return Gauge("given_orders_grpc", "Number of given orders")


def request_pickpoint_histogram() -> Histogram:
    return Histogram("pickpoint_grpc_request", "Requests handling histogram")