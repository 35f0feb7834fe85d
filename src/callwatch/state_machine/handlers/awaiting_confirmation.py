"""Awaiting-confirmation: confirms the accept dialog and waits for rejection.

The target app shows no explicit success message. After the confirm tap the
handler watches for an "already assigned" or "canceled" dialog for a fixed
number of ticks; if none appears, the call is considered accepted.
"""

import logging

from ...model.control_state import ControlState
from ...model.decision import NO_CHANGE, Decision, Error, Transition
from ...model.region import Region
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler
from ..screen import activate_node, dead_call_marker, dismiss_dialog, find_control, is_list_screen

logger = logging.getLogger(__name__)


class AwaitingConfirmationHandler(StateHandler):
    """Two phases: debounce and click the confirm control, then wait.

    Attributes:
        clicked: Whether the confirm tap has been delivered
        stable_ticks: Consecutive ticks the same confirm control was seen
        click_attempts: Failed confirm taps in this visit
        wait_ticks: Ticks waited since the confirm tap
    """

    state = ControlState.AWAITING_CONFIRMATION

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.clicked = False
        self.stable_ticks = 0
        self.click_attempts = 0
        self.wait_ticks = 0
        self._last_seen: tuple[str | None, Region] | None = None

    def on_enter(self) -> None:
        self.reset()

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        if self.clicked:
            return self._await_outcome(snapshot, context)

        marker = dead_call_marker(snapshot, context)
        if marker:
            dismiss_dialog(snapshot, context, self.state.value)
            self.reset()
            return Error(ControlState.ERROR_ALREADY_TAKEN, f"call unavailable: {marker}")

        settings = context.settings
        match = find_control(
            snapshot,
            context,
            settings.confirm_button_id,
            settings.confirm_button_texts,
            exclude_identifier=settings.accept_button_id,
        )
        if match is None:
            self.stable_ticks = 0
            self._last_seen = None
            if is_list_screen(snapshot, context):
                return Error(ControlState.ERROR_TIMEOUT, "back on the call list before confirming")
            context.event_logger.button_search_failed(
                self.state.value, settings.confirm_button_id, settings.confirm_button_texts
            )
            return NO_CHANGE

        seen = (match.node.identifier, match.node.bounds)
        self.stable_ticks = self.stable_ticks + 1 if seen == self._last_seen else 1
        self._last_seen = seen
        if self.stable_ticks < settings.confirm_stable_ticks:
            return NO_CHANGE

        clicked = activate_node(match.node, context, self.state.value)
        context.event_logger.accept_step(3, "confirm_button", match.node.identifier, True, clicked)
        if clicked:
            self.clicked = True
            self.wait_ticks = 0
            logger.info(f"Confirm tapped ({match.found_by}), watching for rejection")
            return NO_CHANGE

        self.click_attempts += 1
        self.stable_ticks = 0
        if self.click_attempts > settings.max_confirm_clicks:
            attempts = self.click_attempts
            self.reset()
            return Error(ControlState.ERROR_UNKNOWN, f"confirm tap failed {attempts} times")
        return NO_CHANGE

    def _await_outcome(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        latest = context.latest_snapshot(snapshot)
        marker = dead_call_marker(latest, context)
        if marker:
            dismiss_dialog(latest, context, self.state.value)
            self.reset()
            return Error(ControlState.ERROR_ALREADY_TAKEN, f"rejected after confirm: {marker}")

        self.wait_ticks += 1
        limit = context.settings.confirm_wait_ticks
        if self.wait_ticks >= limit:
            self.reset()
            return Transition(ControlState.ACCEPTED, f"no rejection within {limit} ticks")
        return NO_CHANGE
