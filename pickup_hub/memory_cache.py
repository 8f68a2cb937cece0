"""Thread-safe in-process key/value cache with time-to-live eviction."""

from __future__ import annotations

import dataclasses
import json
import threading
import time
from collections.abc import Callable
from typing import Any

from pickup_hub.model import CacheMissedError

DEFAULT_TTL = 60.0
DEFAULT_SWEEP_INTERVAL = 5.0


def _jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


class MemoryCache:
    """Stores values as JSON text; entries unused for longer than the TTL are swept away.

    Reading an entry refreshes its timestamp. A background thread sweeps
    expired entries every ``sweep_interval`` seconds until :meth:`close`.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, tuple[str, float]] = {}
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweep_interval = sweep_interval
        self._thread = threading.Thread(target=self._sweep, name="memory-cache-sweeper", daemon=True)
        self._thread.start()

    def _sweep(self) -> None:
        while not self._stop.wait(self._sweep_interval):
            self.delete_expired()

    def __enter__(self) -> MemoryCache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def close(self) -> None:
        """Stop the background sweeper and wait for it to finish."""
        self._stop.set()
        if self._thread is not threading.current_thread():
            self._thread.join()

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable value; raises TypeError when it is not."""
        payload = json.dumps(_jsonable(value))
        with self._lock:
            self._entries[key] = (payload, self._clock())

    def get(self, key: str) -> Any:
        """Return the decoded value for a key; raises CacheMissedError when absent."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                raise CacheMissedError()
            payload = entry[0]
            self._entries[key] = (payload, self._clock())
        return json.loads(payload)

    def delete(self, *args: str) -> None:
        """Drop the given keys; unknown keys are ignored."""
        with self._lock:
            for key in args:
                self._entries.pop(key, None)

    def delete_expired(self) -> None:
        now = self._clock()
        with self._lock:
            expired = [key for key, (_, stamp) in self._entries.items() if now - stamp > self._ttl]
            for key in expired:
                del self._entries[key]

    def ping(self) -> None:
        """Check the cache is usable; raises RuntimeError once it has been closed."""
        if self._stop.is_set():
            raise RuntimeError("cache is closed")