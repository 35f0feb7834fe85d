"""ManualTimerQueue - timer queue driven by a virtual clock.

Nothing runs until the test advances the clock, which makes tick ordering,
timeouts and delays fully deterministic.

Example:
    queue = ManualTimerQueue()
    engine = Engine(device, store, timer_queue=queue)
    engine.start()
    queue.advance(10)  # runs the first tick
"""

import heapq
import itertools
import logging
from collections.abc import Callable

from ..scheduling.timer_queue import TimerHandle, TimerQueue

logger = logging.getLogger(__name__)


class ManualTimerQueue(TimerQueue):
    """Timer queue whose clock only moves when told to."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms
        self._heap: list[TimerHandle] = []
        self._counter = itertools.count()
        self._shutdown = False

    def monotonic_ms(self) -> float:
        return self.now_ms

    def call_later(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> TimerHandle:
        handle = TimerHandle(
            due=self.now_ms + max(0.0, delay_ms),
            sequence=next(self._counter),
            callback=callback,
            name=name,
        )
        if self._shutdown:
            handle.cancel()
        else:
            heapq.heappush(self._heap, handle)
        return handle

    def shutdown(self) -> None:
        self._shutdown = True
        self._heap.clear()

    def pending(self) -> list[TimerHandle]:
        """Live (not cancelled) callbacks in due order."""
        return sorted(h for h in self._heap if not h.cancelled)

    def pending_names(self) -> list[str]:
        return [h.name for h in self.pending()]

    def run_next(self) -> bool:
        """Jump the clock to the next due callback and run it.

        Returns:
            False if nothing was pending
        """
        while self._heap:
            handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self.now_ms = max(self.now_ms, handle.due)
            self._run(handle)
            return True
        return False

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward, running everything that falls due.

        Returns:
            Number of callbacks run
        """
        target = self.now_ms + delta_ms
        ran = 0
        while self._heap:
            handle = self._heap[0]
            if handle.cancelled:
                heapq.heappop(self._heap)
                continue
            if handle.due > target:
                break
            heapq.heappop(self._heap)
            self.now_ms = max(self.now_ms, handle.due)
            self._run(handle)
            ran += 1
        self.now_ms = target
        return ran
