"""Error state handlers.

The loop moves error-timeout and error-already-taken to recovery on its own;
their handlers only matter when invoked directly.
"""

import logging

from ...model.control_state import ControlState
from ...model.decision import Decision, Transition
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler

logger = logging.getLogger(__name__)


class ErrorAlreadyTakenHandler(StateHandler):
    state = ControlState.ERROR_ALREADY_TAKEN

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        return Transition(ControlState.TIMEOUT_RECOVERY, "call gone, returning to list")


class ErrorTimeoutHandler(StateHandler):
    state = ControlState.ERROR_TIMEOUT

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        return Transition(ControlState.TIMEOUT_RECOVERY, "timed out, returning to list")


class ErrorUnknownHandler(StateHandler):
    """Soft fault: start a new cycle, keeping the targeted call."""

    state = ControlState.ERROR_UNKNOWN

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        target = context.target.key if context.target else None
        logger.warning(f"Recovering from error, target kept: {target}")
        return Transition(ControlState.AWAITING_OPPORTUNITY, "recovering from error")
