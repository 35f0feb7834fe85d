"""Decisions returned by state handlers.

A decision is one of four variants. The engine applies it after the handler
returns; handlers never change the engine state themselves.
"""

from dataclasses import dataclass

from .control_state import ControlState


@dataclass(frozen=True)
class Transition:
    """Move to ``next_state``."""

    next_state: ControlState
    reason: str = ""


@dataclass(frozen=True)
class NoChange:
    """Stay in the current state and be re-invoked on the next tick."""


@dataclass(frozen=True)
class Error:
    """Move to an error state.

    Behaves like :class:`Transition` but is logged as a failure.
    """

    error_state: ControlState
    reason: str = ""

    @property
    def next_state(self) -> ControlState:
        return self.error_state


@dataclass(frozen=True)
class PauseAndTransition:
    """Pause the engine and move to ``next_state`` in one step."""

    next_state: ControlState
    reason: str = ""


Decision = Transition | NoChange | Error | PauseAndTransition

NO_CHANGE = NoChange()
