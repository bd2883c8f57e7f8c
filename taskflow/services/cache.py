# taskflow/services/cache.py
import threading
import time
from typing import Any, Callable, Optional, Tuple


class TimedCache:
    """Holds a single value that goes stale after ttl seconds.

    One instance lives on the application state and is handed to routes and
    background jobs; reads and writes are serialized with a lock.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._value: Any = None
        self._stored_at: Optional[float] = None

    def get(self) -> Any:
        """The cached value if it is still fresh, otherwise None"""
        with self._lock:
            if self._stored_at is None:
                return None
            if self._clock() - self._stored_at >= self.ttl_seconds:
                return None
            return self._value

    def get_stale(self) -> Tuple[Any, Optional[float]]:
        """The last stored value and its age in seconds, fresh or not"""
        with self._lock:
            if self._stored_at is None:
                return None, None
            return self._value, self._clock() - self._stored_at

    def set(self, value: Any) -> None:
        with self._lock:
            self._value = value
            self._stored_at = self._clock()

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._stored_at = None
