"""Detail-screen-detected: taps the accept control of the opened call."""

import logging

from ...model.control_state import ControlState
from ...model.decision import NO_CHANGE, Decision, Error, Transition
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler
from ..screen import (
    dead_call_marker,
    dismiss_dialog,
    find_control,
    is_detail_screen,
    is_list_screen,
    tap_node,
)

logger = logging.getLogger(__name__)


class DetailScreenHandler(StateHandler):
    state = ControlState.DETAIL_SCREEN_DETECTED

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        settings = context.settings
        events = context.event_logger

        marker = dead_call_marker(snapshot, context)
        if marker:
            dismiss_dialog(snapshot, context, self.state.value)
            return Error(ControlState.ERROR_ALREADY_TAKEN, f"call unavailable: {marker}")

        if not is_detail_screen(snapshot, context):
            events.screen_check(self.state.value, settings.map_view_id, False, "detail not rendered")
            context.item_click_failures += 1
            where = "still on the list" if is_list_screen(snapshot, context) else "detail not shown"
            return Transition(ControlState.TARGETING_ITEM, f"{where}, item click missed")
        context.item_click_failures = 0

        if context.device.find_by_identifier(snapshot, settings.confirm_button_id) is not None:
            return Transition(
                ControlState.AWAITING_CONFIRMATION, "confirmation dialog already showing"
            )

        match = find_control(
            snapshot, context, settings.accept_button_id, settings.accept_button_texts
        )
        if match is None:
            events.button_search_failed(
                self.state.value, settings.accept_button_id, settings.accept_button_texts
            )
            events.accept_step(2, "accept_button", settings.accept_button_id, False, False)
            return NO_CHANGE

        clicked = tap_node(match.node, context, self.state.value)
        events.accept_step(2, "accept_button", match.node.identifier, True, clicked)
        if clicked:
            return Transition(
                ControlState.AWAITING_CONFIRMATION, f"accept tapped ({match.found_by})"
            )
        return Error(ControlState.ERROR_UNKNOWN, f"accept tap failed ({match.found_by})")
