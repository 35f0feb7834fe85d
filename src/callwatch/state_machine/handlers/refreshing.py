"""Refreshing: taps the list's refresh control."""

import logging
import math

from ...model.control_state import ControlState
from ...model.decision import Decision, Error, Transition
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler
from ..screen import activate_node

logger = logging.getLogger(__name__)


class RefreshingHandler(StateHandler):
    state = ControlState.REFRESHING

    def __init__(self) -> None:
        self._last_log_ms: float | None = None

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        settings = context.settings
        node = context.device.find_by_identifier(snapshot, settings.refresh_button_id)
        found = node is not None
        actionable = node is not None and node.is_actionable
        success = actionable and activate_node(node, context, self.state.value)

        now = context.now_ms()
        self._log_attempt(context, now, found, actionable, success)

        if success:
            context.last_refresh_ms = now
            return Transition(ControlState.ANALYZING, "list refreshed")
        if not found:
            return Error(ControlState.ERROR_UNKNOWN, "refresh control not found")
        if not actionable:
            return Error(ControlState.ERROR_UNKNOWN, "refresh control not actionable")
        return Error(ControlState.ERROR_UNKNOWN, "refresh click failed")

    def _log_attempt(
        self, context: SharedContext, now: float, found: bool, actionable: bool, success: bool
    ) -> None:
        """Emit a refresh event at most once per configured log interval."""
        interval = context.settings.refresh_log_interval_ms
        if self._last_log_ms is not None and now - self._last_log_ms < interval:
            return
        self._last_log_ms = now
        elapsed = context.refresh_elapsed_ms
        context.event_logger.refresh_attempt(
            button_found=found,
            clickable=actionable,
            success=success,
            elapsed_ms=int(elapsed) if math.isfinite(elapsed) else -1,
            target_ms=int(context.refresh_target_ms),
        )
