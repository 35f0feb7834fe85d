"""Tests for the acceptance engine loop on a virtual clock."""

import pytest

from callwatch.config import EngineSettings
from callwatch.engine import Engine
from callwatch.mock import screens
from callwatch.model import NO_CHANGE, ControlState, UISnapshot
from callwatch.state_machine import StateHandler, default_handlers

S = ControlState


def call_list() -> UISnapshot:
    return screens.list_screen(
        [
            screens.call_item("서울역", "인천공항", 45000, index=0),
            screens.call_item("강남역", "김포공항", 52000, index=1),
        ]
    )


class StateRecorder:
    """Records state changes and swaps the device screen on entry."""

    def __init__(self, engine: Engine, device, screens_by_state=None) -> None:
        self.states: list[ControlState] = []
        self.reasons: list[str] = []
        self.device = device
        self.screens_by_state = screens_by_state or {}
        engine.add_state_listener(self)

    def __call__(self, previous: ControlState, current: ControlState, reason: str) -> None:
        self.states.append(current)
        self.reasons.append(reason)
        if current in self.screens_by_state:
            self.device.snapshot = self.screens_by_state[current]


class ExplodingHandler(StateHandler):
    state = ControlState.LIST_SCREEN_DETECTED

    def handle(self, snapshot, context):
        raise RuntimeError("boom")


@pytest.fixture
def make_engine(device, filter_store, event_logger, timer_queue, notifier, low_jitter):
    engines: list[Engine] = []

    def factory(settings: EngineSettings | None = None, handlers=None) -> Engine:
        engine = Engine(
            device,
            filter_store,
            settings=settings or EngineSettings(_env_file=None),
            event_logger=event_logger,
            timer_queue=timer_queue,
            handlers=handlers,
            notifier=notifier,
            rng=low_jitter,
        )
        engines.append(engine)
        return engine

    yield factory
    for engine in engines:
        engine.close()


@pytest.fixture
def engine(make_engine) -> Engine:
    return make_engine()


def next_tick_due(timer_queue) -> float:
    return next(h.due for h in timer_queue.pending() if h.name == "tick")


class TestAcceptFlow:
    """End-to-end runs through the state machine."""

    @pytest.fixture
    def recorder(self, engine, device) -> StateRecorder:
        device.snapshot = call_list()
        return StateRecorder(
            engine,
            device,
            {
                S.DETAIL_SCREEN_DETECTED: screens.detail_screen(),
                S.AWAITING_CONFIRMATION: screens.confirm_dialog(),
            },
        )

    def test_accepts_best_call(
        self, engine, recorder, timer_queue, event_logger, notifier
    ) -> None:
        engine.start()
        timer_queue.advance(5000)

        assert recorder.states == [
            S.AWAITING_OPPORTUNITY,
            S.LIST_SCREEN_DETECTED,
            S.REFRESHING,
            S.ANALYZING,
            S.TARGETING_ITEM,
            S.DETAIL_SCREEN_DETECTED,
            S.AWAITING_CONFIRMATION,
            S.ACCEPTED,
            S.AWAITING_OPPORTUNITY,
        ]
        assert engine.is_paused
        assert engine.target is None

        success, record, _, _ = event_logger.call_result.call_args.args
        assert success
        assert record.price == 52000
        messages = [c.args[0] for c in notifier.notify.call_args_list]
        assert any(m.startswith("Call accepted: 강남역 -> 김포공항") for m in messages)

    def test_stays_paused_without_timing_out(self, engine, recorder, timer_queue) -> None:
        engine.start()
        timer_queue.advance(5000)

        timer_queue.advance(20000)

        assert engine.state is S.AWAITING_OPPORTUNITY
        assert not engine.timeout_armed
        assert S.ERROR_TIMEOUT not in recorder.states

    def test_resume_starts_new_cycle(self, engine, recorder, device, timer_queue) -> None:
        engine.start()
        timer_queue.advance(5000)
        device.snapshot = call_list()

        engine.resume()
        assert engine.timeout_armed
        timer_queue.advance(15)

        assert not engine.is_paused
        assert recorder.reasons[-3] == "resumed"
        assert recorder.states[-3:] == [S.AWAITING_OPPORTUNITY, S.LIST_SCREEN_DETECTED, S.REFRESHING]


class TestTimeouts:
    """Tests for the per-state timeout."""

    def test_timeout_armed_for_timed_states(self, engine, timer_queue) -> None:
        engine.start()

        assert engine.timeout_armed
        assert "timeout:awaiting_opportunity" in timer_queue.pending_names()

    def test_stuck_state_times_out_and_recovers(
        self, engine, device, timer_queue, event_logger
    ) -> None:
        device.snapshot = screens.blank_screen()
        device.on_back = lambda: setattr(device, "snapshot", screens.list_screen())
        recorder = StateRecorder(engine, device)

        engine.start()
        timer_queue.advance(3000)

        event_logger.timeout.assert_called_once_with("list_screen_detected", 3000)
        assert S.ERROR_TIMEOUT in recorder.states

        timer_queue.advance(300)

        timed_out = recorder.states.index(S.ERROR_TIMEOUT)
        assert recorder.states[timed_out : timed_out + 3] == [
            S.ERROR_TIMEOUT,
            S.TIMEOUT_RECOVERY,
            S.LIST_SCREEN_DETECTED,
        ]
        assert len(device.actions_of_type("back")) == 1

    def test_no_timeout_while_progressing(self, engine, device, filter_store, timer_queue) -> None:
        """Refresh cycles faster than the timeout never trip it."""
        filter_store.update(min_amount=100000)
        device.snapshot = call_list()
        recorder = StateRecorder(engine, device)

        engine.start()
        timer_queue.advance(10000)

        assert S.ERROR_TIMEOUT not in recorder.states

    def test_stop_disarms(self, engine, timer_queue) -> None:
        engine.start()

        engine.stop()

        assert not engine.timeout_armed
        assert timer_queue.pending() == []


class TestRefreshCadence:
    def test_refreshes_at_jittered_interval(
        self, engine, device, filter_store, timer_queue
    ) -> None:
        """With the lowest jitter a 1 second base refreshes every 0.9 seconds or a little later."""
        filter_store.update(min_amount=100000)
        device.snapshot = call_list()
        refreshes: list[float] = []
        engine.add_state_listener(
            lambda prev, cur, reason: cur is S.ANALYZING
            and refreshes.append(engine.context.last_refresh_ms)
        )

        engine.start()
        timer_queue.advance(5000)

        gaps = [b - a for a, b in zip(refreshes, refreshes[1:])]
        assert len(gaps) >= 3
        assert all(900 <= gap <= 1000 for gap in gaps)


class TestLostCall:
    """Tests for calls taken by someone else."""

    @pytest.fixture
    def dead_detail(self, device):
        device.snapshot = call_list()
        device.on_back = lambda: setattr(device, "snapshot", call_list())
        return {S.DETAIL_SCREEN_DETECTED: screens.dead_call_dialog()}

    def test_recovers_to_list(self, engine, device, dead_detail, timer_queue, event_logger) -> None:
        recorder = StateRecorder(engine, device, dead_detail)

        engine.start()
        timer_queue.advance(900)

        taken = recorder.states.index(S.ERROR_ALREADY_TAKEN)
        assert recorder.states[taken + 1 : taken + 3] == [
            S.TIMEOUT_RECOVERY,
            S.LIST_SCREEN_DETECTED,
        ]
        success, record, reason, _ = event_logger.call_result.call_args_list[0].args
        assert not success
        assert record.price == 52000
        assert "이미 배차" in reason

    def test_target_cleared(self, engine, device, dead_detail, timer_queue) -> None:
        targets = []
        StateRecorder(engine, device, dead_detail)
        engine.add_state_listener(
            lambda prev, cur, reason: cur is S.ERROR_ALREADY_TAKEN and targets.append(engine.target)
        )

        engine.start()
        timer_queue.advance(900)

        assert targets == [None]

    def test_pause_on_fail(self, make_engine, device, dead_detail, timer_queue) -> None:
        engine = make_engine(EngineSettings(_env_file=None, pause_on_fail=True))
        StateRecorder(engine, device, dead_detail)

        engine.start()
        timer_queue.advance(5000)

        assert engine.state is S.ERROR_ALREADY_TAKEN
        assert engine.is_paused
        assert not engine.timeout_armed


class TestMissedItemClick:
    """Item clicks that report success while the list stays on screen."""

    def test_escalates_instead_of_bouncing(self, engine, device, timer_queue) -> None:
        device.snapshot = call_list()
        recorder = StateRecorder(engine, device)

        engine.start()
        timer_queue.advance(20000)

        first_error = recorder.states.index(S.ERROR_UNKNOWN)
        before = recorder.states[:first_error]
        assert before.count(S.DETAIL_SCREEN_DETECTED) == 4
        assert recorder.reasons[first_error] == "item click failed 4 times"
        assert recorder.states[first_error + 1] is S.AWAITING_OPPORTUNITY

    def test_clicks_bounded_per_cycle(self, engine, device, timer_queue) -> None:
        device.snapshot = call_list()
        recorder = StateRecorder(engine, device)

        engine.start()
        timer_queue.advance(20000)

        cycles = recorder.states.count(S.ANALYZING)
        assert recorder.states.count(S.ERROR_UNKNOWN) >= cycles - 1
        assert recorder.states.count(S.DETAIL_SCREEN_DETECTED) <= 4 * cycles
        assert len(device.actions_of_type("activate")) <= 5 * cycles


class TestFaults:
    """Tests for handler faults."""

    def test_handler_exception_becomes_error(
        self, make_engine, device, timer_queue, event_logger
    ) -> None:
        handlers = [h for h in default_handlers() if h.state is not S.LIST_SCREEN_DETECTED]
        engine = make_engine(handlers=[*handlers, ExplodingHandler()])

        engine.start()
        timer_queue.advance(10)

        assert engine.state is S.ERROR_UNKNOWN
        event_logger.error.assert_called_once_with("RuntimeError", "boom", "list_screen_detected")
        assert next_tick_due(timer_queue) == 1010

    def test_stale_snapshot_retried(self, engine, device, timer_queue, event_logger) -> None:
        """A tree replaced mid-click is retried after a short delay, not treated as an error."""
        device.stale = True

        engine.start()
        timer_queue.advance(40)

        assert engine.state is S.REFRESHING
        assert next_tick_due(timer_queue) == 240
        event_logger.error.assert_not_called()

        device.stale = False
        timer_queue.advance(200)

        assert engine.context.last_refresh_ms == 240

    def test_privileged_channel_denied(self, engine, device, timer_queue, event_logger) -> None:
        device.snapshot = call_list()
        device.privileged_denied = True
        StateRecorder(engine, device, {S.DETAIL_SCREEN_DETECTED: screens.detail_screen()})

        engine.start()
        timer_queue.advance(300)

        assert engine.state is S.ERROR_UNKNOWN
        assert event_logger.error.call_args.args[0] == "privileged_channel_denied"
        assert next_tick_due(timer_queue) - timer_queue.monotonic_ms() > 2500

    def test_listener_failure_ignored(self, engine, device, timer_queue) -> None:
        def broken(previous, current, reason):
            raise ValueError("listener bug")

        engine.add_state_listener(broken)
        engine.start()
        timer_queue.advance(20)

        assert engine.state is S.REFRESHING


class TestLifecycle:
    """Tests for start, stop and snapshot intake."""

    def test_stop_is_idempotent(self, engine, device, timer_queue, event_logger) -> None:
        engine.start()
        timer_queue.advance(20)

        engine.stop()
        engine.stop()
        calls = event_logger.state_changed.call_count
        history = device.get_action_history()
        timer_queue.advance(5000)

        assert engine.state is S.IDLE
        assert not engine.is_running
        assert event_logger.state_changed.call_count == calls
        assert device.get_action_history() == history

    def test_start_twice(self, engine, timer_queue) -> None:
        engine.start()
        engine.start()

        assert timer_queue.pending_names().count("tick") == 1

    def test_foreign_app_ignored(self, engine, device, timer_queue) -> None:
        """Nothing is done while another app is in front."""
        device.snapshot = screens.list_screen()
        device.snapshot.package_name = "com.example.other"

        engine.start()
        timer_queue.advance(100)

        assert engine.state is S.AWAITING_OPPORTUNITY
        assert device.get_action_history() == []

    def test_submitted_snapshot_used(self, engine, device, timer_queue) -> None:
        device.snapshot = None
        engine.start()
        timer_queue.advance(50)
        assert engine.state is S.AWAITING_OPPORTUNITY

        engine.submit_snapshot(call_list())
        timer_queue.advance(200)

        assert engine.context.last_refresh_ms is not None

    def test_operator_pause(self, engine, device, timer_queue) -> None:
        device.snapshot = call_list()
        engine.start()
        engine.pause()
        timer_queue.advance(1000)

        assert engine.state is S.AWAITING_OPPORTUNITY
        assert device.get_action_history() == []

    def test_idle_handler_never_acts(self, engine) -> None:
        handler = engine.registry.get(S.IDLE)

        assert handler.handle(screens.list_screen(), engine.context) is NO_CHANGE
