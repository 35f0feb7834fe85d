"""Idle: the engine is stopped; nothing to do."""

from ...model.control_state import ControlState
from ...model.decision import NO_CHANGE, Decision
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler


class IdleHandler(StateHandler):
    state = ControlState.IDLE

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        return NO_CHANGE
