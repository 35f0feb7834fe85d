"""Mock implementations for testing without a device."""

from . import screens
from .manual_timer_queue import ManualTimerQueue
from .mock_device import MockDevice

__all__ = ["ManualTimerQueue", "MockDevice", "screens"]
