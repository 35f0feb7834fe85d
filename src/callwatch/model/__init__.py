"""Model package - states, decisions, records and UI snapshots."""

from .control_state import (
    AUTO_RECOVER_STATES,
    CONTEXT_RESET_STATES,
    UNTIMED_STATES,
    ControlState,
)
from .decision import NO_CHANGE, Decision, Error, NoChange, PauseAndTransition, Transition
from .record import Confidence, ExtractedRecord
from .region import Region
from .ui_node import NodeRef, UINode, UISnapshot

__all__ = [
    "AUTO_RECOVER_STATES",
    "CONTEXT_RESET_STATES",
    "UNTIMED_STATES",
    "ControlState",
    "Decision",
    "Transition",
    "NoChange",
    "NO_CHANGE",
    "Error",
    "PauseAndTransition",
    "Confidence",
    "ExtractedRecord",
    "Region",
    "NodeRef",
    "UINode",
    "UISnapshot",
]
