"""Timer queue running callbacks one at a time.

The engine's ticks and its timeout timer are both callbacks on the same
queue, so a timeout can never fire in the middle of a tick.
"""

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(order=True)
class TimerHandle:
    """A scheduled callback. Ordered by due time, then by scheduling order."""

    due: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    name: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueue(ABC):
    """Single-consumer queue of delayed callbacks.

    Callbacks run serially, in due-time order. A callback that raises is
    logged and does not stop the queue.
    """

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> TimerHandle:
        """Schedule ``callback`` to run after ``delay_ms`` milliseconds."""

    def cancel(self, handle: TimerHandle | None) -> None:
        """Cancel a pending callback; cancelling twice or after it ran is a no-op."""
        if handle is not None:
            handle.cancel()

    @abstractmethod
    def monotonic_ms(self) -> float:
        """Clock the queue schedules against, in milliseconds."""

    def shutdown(self) -> None:
        """Stop accepting work and release resources."""

    @staticmethod
    def _run(handle: TimerHandle) -> None:
        try:
            handle.callback()
        except Exception:
            logger.exception(f"Timer callback {handle.name or handle.callback!r} failed")


class ThreadedTimerQueue(TimerQueue):
    """Timer queue served by one daemon worker thread.

    Example:
        queue = ThreadedTimerQueue()
        handle = queue.call_later(100, lambda: print("tick"))
        queue.cancel(handle)
        queue.shutdown()
    """

    def __init__(self, name: str = "callwatch-timer") -> None:
        self._heap: list[TimerHandle] = []
        self._counter = itertools.count()
        self._condition = threading.Condition()
        self._running = True
        self._thread = threading.Thread(target=self._worker, name=name, daemon=True)
        self._thread.start()

    def monotonic_ms(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> TimerHandle:
        handle = TimerHandle(
            due=self.monotonic_ms() + max(0.0, delay_ms),
            sequence=next(self._counter),
            callback=callback,
            name=name,
        )
        with self._condition:
            if not self._running:
                handle.cancel()
                return handle
            heapq.heappush(self._heap, handle)
            self._condition.notify()
        return handle

    def shutdown(self, timeout: float = 2.0) -> None:
        with self._condition:
            self._running = False
            self._heap.clear()
            self._condition.notify()
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    def _next_due(self) -> TimerHandle | None:
        """Block until a callback is due or the queue shuts down."""
        with self._condition:
            while self._running:
                while self._heap and self._heap[0].cancelled:
                    heapq.heappop(self._heap)
                if not self._heap:
                    self._condition.wait()
                    continue
                wait_ms = self._heap[0].due - self.monotonic_ms()
                if wait_ms <= 0:
                    return heapq.heappop(self._heap)
                self._condition.wait(wait_ms / 1000.0)
        return None

    def _worker(self) -> None:
        logger.debug("Timer worker started")
        while True:
            handle = self._next_due()
            if handle is None:
                break
            if not handle.cancelled:
                self._run(handle)
        logger.debug("Timer worker stopped")
