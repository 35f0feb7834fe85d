"""Awaiting-opportunity: start of every search cycle."""

from ...model.control_state import ControlState
from ...model.decision import Decision, Transition
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler


class AwaitingOpportunityHandler(StateHandler):
    """Moves straight on; refresh timing is decided on the list screen."""

    state = ControlState.AWAITING_OPPORTUNITY

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        return Transition(ControlState.LIST_SCREEN_DETECTED, "new search cycle")
