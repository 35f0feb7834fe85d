"""Tests for refresh timing, the timer queues and the latest-value cell."""

import random
import threading

import pytest

from callwatch.mock import ManualTimerQueue
from callwatch.scheduling import LatestValueCell, ThreadedTimerQueue, calculate_refresh_delay


class TestCalculateRefreshDelay:
    """Tests for calculate_refresh_delay."""

    @pytest.mark.parametrize("base_seconds", [0.5, 1.0, 5.0])
    def test_within_jitter_bounds(self, base_seconds: float) -> None:
        rng = random.Random(42)
        low = base_seconds * 1000 * 0.9 - 1e-6
        high = base_seconds * 1000 * 1.1 + 1e-6

        delays = [calculate_refresh_delay(base_seconds, rng) for _ in range(1000)]

        assert all(low <= delay <= high for delay in delays)

    def test_jitter_varies(self) -> None:
        rng = random.Random(7)

        delays = {calculate_refresh_delay(1.0, rng) for _ in range(50)}

        assert len(delays) > 1

    def test_bottom_of_range(self, low_jitter) -> None:
        assert calculate_refresh_delay(5.0, low_jitter) == pytest.approx(4500.0)

    def test_returns_fractional_milliseconds(self, low_jitter) -> None:
        assert calculate_refresh_delay(0.0015, low_jitter) == pytest.approx(1.35)


class TestManualTimerQueue:
    """Tests for ManualTimerQueue."""

    def test_runs_in_due_order(self) -> None:
        queue = ManualTimerQueue()
        calls: list[str] = []
        queue.call_later(30, lambda: calls.append("late"))
        queue.call_later(10, lambda: calls.append("early"))
        queue.call_later(10, lambda: calls.append("early-second"))

        ran = queue.advance(30)

        assert ran == 3
        assert calls == ["early", "early-second", "late"]
        assert queue.monotonic_ms() == 30

    def test_nothing_runs_before_due(self) -> None:
        queue = ManualTimerQueue()
        calls: list[int] = []
        queue.call_later(100, lambda: calls.append(1))

        queue.advance(99)

        assert calls == []
        assert queue.pending_names() == [""]

    def test_cancelled_callback_skipped(self) -> None:
        queue = ManualTimerQueue()
        calls: list[int] = []
        handle = queue.call_later(10, lambda: calls.append(1), name="timeout")

        queue.cancel(handle)
        queue.cancel(handle)

        assert queue.pending() == []
        assert not queue.run_next()
        assert calls == []

    def test_callback_may_schedule_more(self) -> None:
        """Callbacks scheduled while advancing run in the same advance if due."""
        queue = ManualTimerQueue()
        calls: list[float] = []

        def tick() -> None:
            calls.append(queue.monotonic_ms())
            if len(calls) < 3:
                queue.call_later(10, tick)

        queue.call_later(0, tick)
        queue.advance(100)

        assert calls == [0, 10, 20]

    def test_failing_callback_does_not_stop_queue(self) -> None:
        queue = ManualTimerQueue()
        calls: list[int] = []

        def fail() -> None:
            raise RuntimeError("boom")

        queue.call_later(1, fail)
        queue.call_later(2, lambda: calls.append(2))
        queue.advance(5)

        assert calls == [2]

    def test_shutdown_drops_pending(self) -> None:
        queue = ManualTimerQueue()
        queue.call_later(10, lambda: None)

        queue.shutdown()
        handle = queue.call_later(10, lambda: None)

        assert handle.cancelled
        assert queue.pending() == []


class TestThreadedTimerQueue:
    def test_runs_callback(self) -> None:
        queue = ThreadedTimerQueue()
        done = threading.Event()
        try:
            queue.call_later(5, done.set)
            assert done.wait(2.0)
        finally:
            queue.shutdown()

    def test_cancelled_callback_never_runs(self) -> None:
        queue = ThreadedTimerQueue()
        cancelled = threading.Event()
        done = threading.Event()
        try:
            handle = queue.call_later(20, cancelled.set)
            queue.cancel(handle)
            queue.call_later(40, done.set)
            assert done.wait(2.0)
            assert not cancelled.is_set()
        finally:
            queue.shutdown()


class TestLatestValueCell:
    def test_last_write_wins(self) -> None:
        cell: LatestValueCell[str] = LatestValueCell()

        cell.put("first")
        cell.put("second")

        assert cell.get() == "second"
        assert cell.version == 2

    def test_invalidate(self) -> None:
        cell: LatestValueCell[str] = LatestValueCell()
        cell.put("stale")

        cell.invalidate()

        assert cell.get() is None
        assert cell.version == 1
