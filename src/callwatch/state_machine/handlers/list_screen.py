"""List-screen-detected: waits out the refresh interval."""

import logging
import random

from ...model.control_state import ControlState
from ...model.decision import NO_CHANGE, Decision, Transition
from ...model.ui_node import UISnapshot
from ...scheduling.refresh import calculate_refresh_delay
from ..context import SharedContext
from ..handler import StateHandler
from ..screen import is_list_screen

logger = logging.getLogger(__name__)


class ListScreenHandler(StateHandler):
    """Triggers a refresh once the jittered interval since the last one has passed.

    The jittered target is drawn anew on every tick, so the interval is not
    fixed in advance.
    """

    state = ControlState.LIST_SCREEN_DETECTED

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        if not is_list_screen(snapshot, context):
            context.event_logger.screen_check(
                self.state.value, context.settings.list_screen_marker, False, "list marker absent"
            )
            return NO_CHANGE

        config = context.filter_config()
        target_ms = calculate_refresh_delay(config.refresh_delay_seconds, self.rng)
        now = context.now_ms()
        if context.last_refresh_ms is None:
            elapsed_ms = float("inf")
        else:
            elapsed_ms = now - context.last_refresh_ms

        if elapsed_ms < target_ms:
            return NO_CHANGE

        context.refresh_elapsed_ms = elapsed_ms
        context.refresh_target_ms = target_ms
        if context.last_refresh_ms is None:
            reason = "first refresh"
        else:
            reason = f"refresh due ({elapsed_ms:.0f}ms >= {target_ms:.0f}ms)"
        return Transition(ControlState.REFRESHING, reason)
