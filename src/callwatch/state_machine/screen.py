"""Screen recognition and control helpers shared by the handlers."""

import logging
from dataclasses import dataclass

from ..model.ui_node import UINode, UISnapshot
from .context import SharedContext

logger = logging.getLogger(__name__)

# Fraction of the screen height used when a control's centre is off-screen.
FALLBACK_TAP_HEIGHT = 0.89


@dataclass(frozen=True)
class ControlMatch:
    """A control found on screen and how it was found."""

    node: UINode
    found_by: str  # "identifier" or "text:<label>"


def is_list_screen(snapshot: UISnapshot, context: SharedContext) -> bool:
    return snapshot.has_text(context.settings.list_screen_marker)


def is_detail_screen(snapshot: UISnapshot, context: SharedContext) -> bool:
    """Detail view is open: its map, accept or close control, or a title marker."""
    settings = context.settings
    for identifier in (settings.map_view_id, settings.accept_button_id, settings.close_button_id):
        if snapshot.find_by_identifier(identifier) is not None:
            return True
    return any(snapshot.has_text(marker) for marker in settings.detail_screen_markers)


def dead_call_marker(snapshot: UISnapshot, context: SharedContext) -> str | None:
    """Text of an "already assigned" or "canceled" dialog, if one is showing."""
    settings = context.settings
    for marker in (settings.already_assigned_marker, settings.canceled_marker):
        if snapshot.has_text(marker):
            return marker
    return None


def find_control(
    snapshot: UISnapshot,
    context: SharedContext,
    identifier: str,
    texts: list[str],
    exclude_identifier: str | None = None,
) -> ControlMatch | None:
    """Locate a control by identifier, then by each fallback label in turn.

    A label match resolves to its nearest actionable ancestor, since labels are
    often plain text views inside the clickable container. Labels with no
    actionable ancestor are skipped: short labels such as "예" also occur in
    ordinary screen text.
    """
    device = context.device
    node = device.find_by_identifier(snapshot, identifier)
    if node is not None and node.visible and node.enabled:
        return ControlMatch(node, "identifier")

    for text in texts:
        node = device.find_by_text(snapshot, text)
        if node is None:
            continue
        target = snapshot.actionable_ancestor(node)
        if target is None:
            continue
        if exclude_identifier and target.identifier == exclude_identifier:
            continue
        return ControlMatch(target, f"text:{text}")
    return None


def tap_point(node: UINode, context: SharedContext) -> tuple[int, int]:
    """Centre of a node, or a safe point when the centre lies off-screen."""
    width, height = context.screen_size()
    x, y = node.bounds.center
    if 0 <= x <= width and 0 <= y <= height:
        return x, y
    fallback = width // 2, int(height * FALLBACK_TAP_HEIGHT)
    logger.warning(f"Centre ({x}, {y}) of {node.label()} is off-screen, tapping {fallback}")
    return fallback


def activate_node(node: UINode, context: SharedContext, state: str) -> bool:
    """Direct activation first, then a synthetic tap at the node's centre."""
    started = context.now_ms()
    if context.device.activate(node):
        method = "activate"
        success = True
    else:
        method = "synthetic_tap"
        success = context.device.synthetic_tap(*tap_point(node, context))
    context.event_logger.node_clicked(
        node.identifier, success, state, method, int(context.now_ms() - started)
    )
    return success


def tap_node(node: UINode, context: SharedContext, state: str) -> bool:
    """Tap a node's centre.

    Controls known to ignore ordinary synthetic input go through the
    privileged channel first. A denied privileged channel propagates.
    """
    started = context.now_ms()
    x, y = tap_point(node, context)
    success = False
    method = "synthetic_tap"
    if node.identifier in context.settings.privileged_tap_identifiers:
        method = "privileged_tap"
        success = context.device.privileged_tap(x, y)
    if not success:
        method = "synthetic_tap"
        success = context.device.synthetic_tap(x, y)
    context.event_logger.node_clicked(
        node.identifier, success, state, method, int(context.now_ms() - started)
    )
    return success


def dismiss_dialog(snapshot: UISnapshot, context: SharedContext, state: str) -> bool:
    """Close a dialog through its positive button, if one can be found."""
    settings = context.settings
    match = find_control(
        snapshot, context, settings.dialog_dismiss_id, settings.dismiss_button_texts
    )
    if match is None:
        logger.info("No dismiss button on dialog")
        return False
    return activate_node(match.node, context, state)
