"""Acceptance engine: the scheduling loop that drives the state handlers.

Each tick takes the newest UI snapshot, runs the handler for the current
state, applies the decision it returns and schedules the next tick. Ticks
and the per-state timeout both run on one timer queue under one lock, so a
timeout can never interleave with a tick or fire against a newer state.
"""

import logging
import random
import threading
from collections.abc import Callable

from ..config.parsing_config import ParsingConfig
from ..config.providers import FilterConfigProvider
from ..config.settings import EngineSettings, get_settings
from ..exceptions import PrivilegedChannelDeniedException, SnapshotInvalidatedException
from ..hal.interfaces.device_capabilities import IDeviceCapabilities
from ..logging.event_logger import EventLogger, StructlogEventLogger
from ..model.control_state import (
    AUTO_RECOVER_STATES,
    CONTEXT_RESET_STATES,
    UNTIMED_STATES,
    ControlState,
)
from ..model.decision import Decision, Error, NoChange, PauseAndTransition, Transition
from ..model.record import ExtractedRecord
from ..model.ui_node import UISnapshot
from ..scheduling.latest_value import LatestValueCell
from ..scheduling.timer_queue import ThreadedTimerQueue, TimerHandle, TimerQueue
from ..state_machine.context import SharedContext
from ..state_machine.handler import HandlerRegistry, StateHandler
from ..state_machine.handlers import default_handlers
from ..state_machine.notifier import LogNotifier, Notifier

logger = logging.getLogger(__name__)

StateListener = Callable[[ControlState, ControlState, str], None]


class Engine:
    """Finite-state loop that finds, opens and accepts calls.

    Example:
        engine = Engine(device, InMemoryFilterStore(FilterConfig(min_amount=30000)))
        engine.start()
        ...
        engine.submit_snapshot(snapshot)  # from the accessibility feed
        ...
        engine.stop()
    """

    def __init__(
        self,
        device: IDeviceCapabilities,
        config_provider: FilterConfigProvider,
        settings: EngineSettings | None = None,
        event_logger: EventLogger | None = None,
        timer_queue: TimerQueue | None = None,
        handlers: list[StateHandler] | None = None,
        parsing_config: ParsingConfig | None = None,
        notifier: Notifier | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            device: UI observation and input capabilities
            config_provider: Source of filter configuration snapshots
            settings: Engine settings (default: the process-wide settings)
            event_logger: Structured event sink
            timer_queue: Queue ticks and timeouts run on (default: a worker thread)
            handlers: Handlers to use instead of the defaults
            parsing_config: Parsing rules (default: loaded from settings)
            notifier: Operator notifications
            rng: Random source for refresh jitter

        Raises:
            HandlerNotRegisteredException: If a state has no handler
        """
        self.settings = settings or get_settings()
        self.device = device
        self.timer_queue = timer_queue or ThreadedTimerQueue()
        self.event_logger = event_logger or StructlogEventLogger()

        self.registry = HandlerRegistry(handlers if handlers is not None else default_handlers(rng))
        self.registry.validate()

        self._snapshots: LatestValueCell[UISnapshot] = LatestValueCell()
        self.context = SharedContext(
            settings=self.settings,
            device=device,
            config_provider=config_provider,
            event_logger=self.event_logger,
            clock_ms=self.timer_queue.monotonic_ms,
            parsing_config=parsing_config or ParsingConfig.load(self.settings.parsing_config_path),
            notifier=notifier or LogNotifier(),
            fresh_snapshot=self._freshest_snapshot,
            pause_on_fail=self.settings.pause_on_fail,
        )

        self._lock = threading.RLock()
        self._state = ControlState.IDLE
        self._running = False
        self._paused = False
        self._tick_handle: TimerHandle | None = None
        self._timeout_handle: TimerHandle | None = None
        self._timeout_generation = 0
        self._state_entered_ms = self.timer_queue.monotonic_ms()
        self._call_started_ms: float | None = None
        self._listeners: list[StateListener] = []

        logger.info("Engine initialized")

    # Public API

    @property
    def state(self) -> ControlState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def target(self) -> ExtractedRecord | None:
        return self.context.target

    def add_state_listener(self, listener: StateListener) -> None:
        """Register ``listener(previous, current, reason)`` for every state change."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Leave idle and begin searching."""
        with self._lock:
            if self._running:
                logger.warning("Engine already running")
                return
            self._running = True
            self._paused = False
            self._enter_state(ControlState.AWAITING_OPPORTUNITY, "engine started")
            self._schedule_tick(0)
            logger.info("Engine started")

    def stop(self) -> None:
        """Halt the loop and return to idle.

        Idempotent. Once this returns no handler runs until the next start().
        """
        with self._lock:
            if not self._running and self._state is ControlState.IDLE:
                return
            self._running = False
            self._paused = False
            self.timer_queue.cancel(self._tick_handle)
            self._tick_handle = None
            self._disarm_timeout()
            self._enter_state(ControlState.IDLE, "engine stopped")
            logger.info("Engine stopped")

    def pause(self, reason: str = "paused by operator") -> None:
        """Stop running handlers without moving the state machine."""
        with self._lock:
            self._pause_locked(reason)

    def resume(self) -> None:
        """Clear the pause and start a new search cycle."""
        with self._lock:
            if not self._running:
                logger.warning("Cannot resume: engine not running")
                return
            self._paused = False
            self._enter_state(ControlState.AWAITING_OPPORTUNITY, "resumed", force=True)
            self.timer_queue.cancel(self._tick_handle)
            self._schedule_tick(0)
            logger.info("Engine resumed")

    def submit_snapshot(self, snapshot: UISnapshot) -> None:
        """Offer the newest observed UI tree; replaces any not yet used."""
        self._snapshots.put(snapshot)

    def close(self) -> None:
        """Stop and release the timer queue."""
        self.stop()
        self.timer_queue.shutdown()

    # Loop

    def _schedule_tick(self, delay_ms: float) -> None:
        self._tick_handle = self.timer_queue.call_later(delay_ms, self._tick, name="tick")

    def _tick(self) -> None:
        with self._lock:
            self._tick_handle = None
            if not self._running:
                return
            delay_ms = self._run_tick()
            if self._running and self._tick_handle is None:
                self._schedule_tick(delay_ms)

    def _run_tick(self) -> float:
        """One pass of the loop; returns the delay until the next one."""
        settings = self.settings
        try:
            snapshot = self._freshest_snapshot()
            if snapshot is None or not self._is_live(snapshot):
                return settings.no_snapshot_delay_ms
            if self._paused:
                return settings.paused_delay_ms

            if self._state in AUTO_RECOVER_STATES:
                self._enter_state(ControlState.TIMEOUT_RECOVERY, f"leaving {self._state.value}")
                return settings.tick_delay_ms(self._state)

            return self._run_handler(snapshot)
        except Exception as e:
            logger.exception(f"Tick failed in {self._state.name}: {e}")
            return settings.fault_delay_ms

    def _run_handler(self, snapshot: UISnapshot) -> float:
        """Run the current handler and apply its decision.

        Handler faults are converted here; the return value is the delay
        until the next tick, which is a backoff after a fault.
        """
        state = self._state
        handler = self.registry.get(state)
        if handler is None:
            raise RuntimeError(f"No handler for {state.name}")
        try:
            decision = handler.handle(snapshot, self.context)
        except SnapshotInvalidatedException as e:
            logger.info(f"Snapshot went stale in {state.name}, retrying: {e}")
            self._snapshots.invalidate()
            return self.settings.invalidated_snapshot_delay_ms
        except PrivilegedChannelDeniedException as e:
            self.event_logger.error("privileged_channel_denied", str(e), state.value)
            self._enter_state(ControlState.ERROR_UNKNOWN, f"privileged tap denied: {e}", error=True)
            return self.settings.privileged_denied_delay_ms
        except Exception as e:
            logger.exception(f"Handler for {state.name} raised {type(e).__name__}")
            self.event_logger.error(type(e).__name__, str(e), state.value)
            self._enter_state(ControlState.ERROR_UNKNOWN, f"handler fault: {e}", error=True)
            return self.settings.fault_delay_ms
        self._apply(decision)
        return self.settings.tick_delay_ms(self._state)

    def _apply(self, decision: Decision) -> None:
        if isinstance(decision, NoChange):
            return
        if isinstance(decision, PauseAndTransition):
            self._enter_state(decision.next_state, decision.reason)
            self._pause_locked(decision.reason)
        elif isinstance(decision, Error):
            self._enter_state(decision.error_state, decision.reason, error=True)
        elif isinstance(decision, Transition):
            self._enter_state(decision.next_state, decision.reason)
        else:
            raise TypeError(f"Unknown decision: {decision!r}")

    def _freshest_snapshot(self) -> UISnapshot | None:
        return self._snapshots.get() or self.device.current_snapshot()

    def _is_live(self, snapshot: UISnapshot) -> bool:
        return snapshot.package_name == self.settings.target_package

    def _pause_locked(self, reason: str) -> None:
        if not self._running or self._paused:
            return
        self._paused = True
        self._disarm_timeout()
        logger.info(f"Engine paused in {self._state.name}: {reason}")

    # State changes

    def _enter_state(
        self, new_state: ControlState, reason: str, error: bool = False, force: bool = False
    ) -> None:
        previous = self._state
        if new_state is previous and not force:
            return

        now = self.timer_queue.monotonic_ms()
        elapsed_ms = int(now - self._state_entered_ms)
        record = self.context.target

        self._state = new_state
        self._state_entered_ms = now
        self.context.state_entered_ms = now
        if new_state in CONTEXT_RESET_STATES:
            self.context.clear_target()

        self._disarm_timeout()
        if self._running and new_state not in UNTIMED_STATES:
            self._arm_timeout(new_state)

        log = logger.warning if error else logger.info
        log(f"{previous.name} -> {new_state.name}: {reason}")
        self.event_logger.state_changed(previous.value, new_state.value, reason, elapsed_ms)
        self._track_call(new_state, record, reason, now)

        handler = self.registry.get(new_state)
        if handler is not None:
            handler.on_enter()
        self._notify_listeners(previous, new_state, reason)

        if new_state is ControlState.ERROR_ALREADY_TAKEN and self.context.pause_on_fail:
            self._pause_locked("call lost and pause-on-fail is set")

    def _track_call(
        self, new_state: ControlState, record: ExtractedRecord | None, reason: str, now: float
    ) -> None:
        """Time each accept attempt from the detail screen to its outcome."""
        if new_state is ControlState.DETAIL_SCREEN_DETECTED:
            if self._call_started_ms is None:
                self._call_started_ms = now
            return
        if self._call_started_ms is None:
            return
        if new_state is ControlState.ACCEPTED or new_state.is_error:
            elapsed_ms = int(now - self._call_started_ms)
            success = new_state is ControlState.ACCEPTED
            self.event_logger.call_result(success, record, reason, elapsed_ms)
            self._call_started_ms = None
        elif new_state in (ControlState.IDLE, ControlState.AWAITING_OPPORTUNITY):
            self._call_started_ms = None

    def _notify_listeners(self, previous: ControlState, current: ControlState, reason: str) -> None:
        for listener in self._listeners:
            try:
                listener(previous, current, reason)
            except Exception:
                logger.exception(f"State listener {listener!r} failed")

    # Timeout

    def _arm_timeout(self, state: ControlState) -> None:
        self._timeout_generation += 1
        generation = self._timeout_generation
        armed_at = self.timer_queue.monotonic_ms()
        self._timeout_handle = self.timer_queue.call_later(
            self.settings.timeout_ms(state),
            lambda: self._on_timeout(generation, state, armed_at),
            name=f"timeout:{state.value}",
        )

    def _disarm_timeout(self) -> None:
        self._timeout_generation += 1
        self.timer_queue.cancel(self._timeout_handle)
        self._timeout_handle = None

    @property
    def timeout_armed(self) -> bool:
        return self._timeout_handle is not None and not self._timeout_handle.cancelled

    def _on_timeout(self, generation: int, state: ControlState, armed_at: float) -> None:
        with self._lock:
            if generation != self._timeout_generation or not self._running:
                return
            if self._state is not state or self._paused:
                return
            self._timeout_handle = None
            elapsed_ms = int(self.timer_queue.monotonic_ms() - armed_at)
            self.event_logger.timeout(state.value, elapsed_ms)
            self._enter_state(
                ControlState.ERROR_TIMEOUT,
                f"no progress in {state.value} for {elapsed_ms}ms",
                error=True,
            )
