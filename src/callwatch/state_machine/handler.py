"""State handler interface and registry."""

import logging
from abc import ABC, abstractmethod

from ..exceptions import HandlerNotRegisteredException
from ..model.control_state import ControlState
from ..model.decision import Decision
from ..model.ui_node import UISnapshot
from .context import SharedContext

logger = logging.getLogger(__name__)


class StateHandler(ABC):
    """Decision logic for one control state.

    ``handle`` looks at the snapshot, may act on the device through the
    context, and returns a decision. It never waits: anything that needs
    more time returns ``NoChange`` and is re-invoked on the next tick.
    Counters kept on the handler live across ticks of the same visit;
    ``on_enter`` resets them when the engine enters the state anew.
    """

    state: ControlState

    @abstractmethod
    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        """Decide what to do for this tick."""

    def on_enter(self) -> None:
        """Called by the engine when it enters this handler's state."""


class HandlerRegistry:
    """Map from control state to its handler."""

    def __init__(self, handlers: list[StateHandler] | None = None) -> None:
        self._handlers: dict[ControlState, StateHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: StateHandler) -> None:
        if handler.state in self._handlers:
            logger.warning(f"Replacing handler for {handler.state.name}")
        self._handlers[handler.state] = handler

    def get(self, state: ControlState) -> StateHandler | None:
        return self._handlers.get(state)

    def __contains__(self, state: ControlState) -> bool:
        return state in self._handlers

    def validate(self) -> None:
        """Check every state has a handler.

        Raises:
            HandlerNotRegisteredException: Listing the states without one
        """
        missing = [state.name for state in ControlState if state not in self._handlers]
        if missing:
            raise HandlerNotRegisteredException(missing)
