"""Shared context passed to every state handler.

Owned by the engine. Handlers may read and write it during their own
``handle`` call but must not keep a reference to it afterwards.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from ..config.filter_config import FilterConfig
from ..config.parsing_config import ParsingConfig
from ..config.providers import FilterConfigProvider
from ..config.settings import EngineSettings
from ..hal.interfaces.device_capabilities import IDeviceCapabilities
from ..logging.event_logger import EventLogger
from ..model.record import ExtractedRecord
from ..model.ui_node import UISnapshot
from .notifier import LogNotifier, Notifier


@dataclass
class SharedContext:
    """Cross-state data that survives transitions.

    Attributes:
        target: Record picked by the analysing state; cleared when a new cycle
            starts or the call turns out to be taken
        last_refresh_ms: Clock time of the last refresh click, None before the first
        refresh_elapsed_ms: Time since the previous refresh when the last one fired
        refresh_target_ms: Jittered interval that last refresh was waiting for
        item_click_failures: Item clicks that did not open the detail screen for
            the current target, whether the click failed or the screen never changed
        pause_on_fail: Pause the engine when a call is lost to someone else
        state_entered_ms: Clock time the current state was entered
    """

    settings: EngineSettings
    device: IDeviceCapabilities
    config_provider: FilterConfigProvider
    event_logger: EventLogger
    clock_ms: Callable[[], float]
    parsing_config: ParsingConfig = field(default_factory=ParsingConfig)
    notifier: Notifier = field(default_factory=LogNotifier)
    fresh_snapshot: Callable[[], UISnapshot | None] | None = None

    target: ExtractedRecord | None = None
    last_refresh_ms: float | None = None
    refresh_elapsed_ms: float = 0.0
    refresh_target_ms: float = 0.0
    item_click_failures: int = 0
    pause_on_fail: bool = False
    state_entered_ms: float = 0.0

    def now_ms(self) -> float:
        return self.clock_ms()

    def time_in_state_ms(self) -> float:
        return self.clock_ms() - self.state_entered_ms

    def filter_config(self) -> FilterConfig:
        """Current filter rules, read fresh on every call."""
        return self.config_provider.snapshot()

    def screen_size(self) -> tuple[int, int]:
        return self.device.screen_size()

    def latest_snapshot(self, fallback: UISnapshot) -> UISnapshot:
        """Newest snapshot available, for re-checking a screen mid-tick."""
        if self.fresh_snapshot is None:
            return fallback
        return self.fresh_snapshot() or fallback

    def clear_target(self) -> None:
        self.target = None
        self.item_click_failures = 0
