"""Scheduling package - timer queue, latest-snapshot cell and refresh cadence."""

from .latest_value import LatestValueCell
from .refresh import calculate_refresh_delay
from .timer_queue import ThreadedTimerQueue, TimerHandle, TimerQueue

__all__ = [
    "LatestValueCell",
    "calculate_refresh_delay",
    "ThreadedTimerQueue",
    "TimerHandle",
    "TimerQueue",
]
