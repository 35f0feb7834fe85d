"""Single-slot, last-write-wins cell."""

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class LatestValueCell(Generic[T]):
    """Holds only the newest value written to it.

    Writers never block on readers beyond a short lock; a newer value simply
    replaces the older one, which is discarded unread.
    """

    def __init__(self) -> None:
        self._value: T | None = None
        self._version = 0
        self._lock = threading.Lock()

    def put(self, value: T) -> None:
        with self._lock:
            self._value = value
            self._version += 1

    def get(self) -> T | None:
        with self._lock:
            return self._value

    def invalidate(self) -> None:
        """Drop the held value so the next reader has to fetch a fresh one."""
        with self._lock:
            self._value = None

    @property
    def version(self) -> int:
        """Number of values written so far."""
        with self._lock:
            return self._version
