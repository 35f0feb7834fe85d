"""Targeting-item: clicks the selected call in the list."""

import logging

from ...model.control_state import ControlState
from ...model.decision import NO_CHANGE, Decision, Error, Transition
from ...model.record import ExtractedRecord
from ...model.ui_node import UISnapshot
from ..context import SharedContext
from ..handler import StateHandler
from ..screen import activate_node

logger = logging.getLogger(__name__)


class TargetingHandler(StateHandler):
    """Opens the targeted call.

    The stored node reference is re-resolved against the current snapshot;
    if the list moved, the deepest actionable node under the call's centre is
    used, and as a last resort a plain tap at that point.

    Failures are counted on the context, not the handler: a click that
    reports success but leaves the list in place comes back here through the
    detail-screen state and counts the same as a failed click.
    """

    state = ControlState.TARGETING_ITEM

    def handle(self, snapshot: UISnapshot, context: SharedContext) -> Decision:
        if snapshot.has_text(context.settings.already_assigned_marker):
            context.item_click_failures = 0
            return Error(ControlState.ERROR_ALREADY_TAKEN, "call already assigned")

        target = context.target
        if target is None:
            return Error(ControlState.ERROR_UNKNOWN, "no targeted call in context")

        limit = context.settings.max_targeting_retries
        if context.item_click_failures > limit:
            return self._give_up(context, limit)

        clicked = self._click(target, snapshot, context)
        target_id = target.clickable.identifier if target.clickable else None
        context.event_logger.accept_step(1, "item_click", target_id, True, clicked)
        if clicked:
            return Transition(ControlState.DETAIL_SCREEN_DETECTED, f"opened {target.key}")

        context.item_click_failures += 1
        if context.item_click_failures > limit:
            return self._give_up(context, limit)
        logger.debug(f"Item click failed (attempt {context.item_click_failures}/{limit})")
        return NO_CHANGE

    def _give_up(self, context: SharedContext, limit: int) -> Decision:
        context.item_click_failures = 0
        return Error(ControlState.ERROR_UNKNOWN, f"item click failed {limit + 1} times")

    def _click(self, target: ExtractedRecord, snapshot: UISnapshot, context: SharedContext) -> bool:
        node = snapshot.resolve(target.clickable) if target.clickable is not None else None
        if node is None:
            node = snapshot.node_at_point(*target.bounds.center)
        if node is not None:
            return activate_node(node, context, self.state.value)

        x, y = target.bounds.center
        success = context.device.synthetic_tap(x, y)
        context.event_logger.node_clicked(None, success, self.state.value, "synthetic_tap")
        return success
