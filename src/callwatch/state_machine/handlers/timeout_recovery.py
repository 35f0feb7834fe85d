"""Timeout-recovery: backs out until the call list is visible again."""

import logging

from ...model.control_state import ControlState
from ...model.decision import NO_CHANGE, Decision, Transition
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler
from ..screen import is_list_screen

logger = logging.getLogger(__name__)


class TimeoutRecoveryHandler(StateHandler):
    """Presses back every tick until the list screen shows.

    Has no attempt limit of its own. If the list never shows, the state
    timeout moves the engine to error-timeout and recovery starts over with
    fresh counts, as it does after a stop in mid-recovery.
    """

    state = ControlState.TIMEOUT_RECOVERY

    def __init__(self) -> None:
        self.back_presses = 0
        self.started_ms: float | None = None

    def on_enter(self) -> None:
        self.back_presses = 0
        self.started_ms = None

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        now = context.now_ms()
        if is_list_screen(snapshot, context):
            presses = self.back_presses
            elapsed = now - self.started_ms if self.started_ms is not None else 0.0
            self.back_presses = 0
            self.started_ms = None
            context.clear_target()
            return Transition(
                ControlState.LIST_SCREEN_DETECTED,
                f"list visible after {presses} back presses ({elapsed:.0f}ms)",
            )

        if self.started_ms is None:
            self.started_ms = now
        delivered = context.device.navigate_back()
        self.back_presses += 1
        logger.info(
            f"Recovery back press #{self.back_presses} delivered={delivered} "
            f"after {now - self.started_ms:.0f}ms"
        )
        return NO_CHANGE
