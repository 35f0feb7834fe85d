"""Control states of the acceptance engine."""

from enum import Enum


class ControlState(Enum):
    """Fixed set of states governing engine behaviour.

    Exactly one state is current at any instant.
    """

    IDLE = "idle"
    AWAITING_OPPORTUNITY = "awaiting_opportunity"
    LIST_SCREEN_DETECTED = "list_screen_detected"
    REFRESHING = "refreshing"
    ANALYZING = "analyzing"
    TARGETING_ITEM = "targeting_item"
    DETAIL_SCREEN_DETECTED = "detail_screen_detected"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    ACCEPTED = "accepted"
    ERROR_ALREADY_TAKEN = "error_already_taken"
    ERROR_TIMEOUT = "error_timeout"
    ERROR_UNKNOWN = "error_unknown"
    TIMEOUT_RECOVERY = "timeout_recovery"

    @property
    def is_error(self) -> bool:
        return self in (
            ControlState.ERROR_ALREADY_TAKEN,
            ControlState.ERROR_TIMEOUT,
            ControlState.ERROR_UNKNOWN,
        )


# Entering one of these states does not arm a timeout.
UNTIMED_STATES = frozenset(
    {ControlState.IDLE, ControlState.ACCEPTED, ControlState.ERROR_ALREADY_TAKEN}
)

# Entering one of these states drops the targeted record.
CONTEXT_RESET_STATES = frozenset(
    {ControlState.AWAITING_OPPORTUNITY, ControlState.ERROR_ALREADY_TAKEN}
)

# States the loop advances to recovery without consulting a handler.
AUTO_RECOVER_STATES = frozenset({ControlState.ERROR_TIMEOUT, ControlState.ERROR_ALREADY_TAKEN})
