"""Accepted: announces the call and parks the engine until resumed."""

from ...model.control_state import ControlState
from ...model.decision import Decision, PauseAndTransition
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler


class AcceptedHandler(StateHandler):
    state = ControlState.ACCEPTED

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        summary = context.target.summary() if context.target else "unknown call"
        context.notifier.notify(f"Call accepted: {summary}")
        return PauseAndTransition(ControlState.AWAITING_OPPORTUNITY, "call accepted")
