"""Mock device for running the engine without a phone.

Based on the mock pattern used for input controllers: every operation
completes instantly, outcomes are scripted, and each call is recorded so
tests can assert on what the engine did.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..exceptions import PrivilegedChannelDeniedException, SnapshotInvalidatedException
from ..hal.interfaces.device_capabilities import IDeviceCapabilities
from ..model.ui_node import UINode, UISnapshot

logger = logging.getLogger(__name__)


class MockDevice(IDeviceCapabilities):
    """Scriptable implementation of the device capabilities.

    Attributes:
        snapshot: What ``current_snapshot`` returns
        activate_result: Result of ``activate``
        tap_result: Result of ``synthetic_tap``
        privileged_result: Result of ``privileged_tap``
        privileged_denied: Make ``privileged_tap`` raise
        stale: Make ``activate`` raise as if the tree had been replaced
        on_back: Called on ``navigate_back``, e.g. to swap in the previous screen
    """

    def __init__(
        self,
        snapshot: UISnapshot | None = None,
        width: int = 1080,
        height: int = 2340,
    ) -> None:
        self.snapshot = snapshot
        self.width = width
        self.height = height
        self.activate_result = True
        self.tap_result = True
        self.privileged_result = True
        self.back_result = True
        self.privileged_denied = False
        self.stale = False
        self.on_back: Callable[[], None] | None = None
        self._action_history: list[dict[str, Any]] = []
        logger.debug("MockDevice initialized")

    def _record_action(self, action_type: str, **kwargs: Any) -> None:
        """Record action for history tracking."""
        self._action_history.append({"type": action_type, "timestamp": datetime.now(), **kwargs})

    def activate(self, node: UINode) -> bool:
        if self.stale:
            raise SnapshotInvalidatedException(node_id=node.identifier)
        logger.debug(f"[MOCK] Activate {node.label()} -> {self.activate_result}")
        self._record_action("activate", node_id=node.identifier, text=node.text)
        return self.activate_result

    def synthetic_tap(self, x: int, y: int) -> bool:
        logger.debug(f"[MOCK] Tap at ({x}, {y}) -> {self.tap_result}")
        self._record_action("synthetic_tap", x=x, y=y)
        return self.tap_result

    def privileged_tap(self, x: int, y: int) -> bool:
        if self.privileged_denied:
            raise PrivilegedChannelDeniedException(x=x, y=y)
        self._record_action("privileged_tap", x=x, y=y)
        return self.privileged_result

    def navigate_back(self) -> bool:
        self._record_action("back")
        if self.on_back is not None:
            self.on_back()
        return self.back_result

    def screen_size(self) -> tuple[int, int]:
        return self.width, self.height

    def current_snapshot(self) -> UISnapshot | None:
        return self.snapshot

    # Test helpers

    def get_action_history(self) -> list[dict[str, Any]]:
        return self._action_history.copy()

    def actions_of_type(self, action_type: str) -> list[dict[str, Any]]:
        return [a for a in self._action_history if a["type"] == action_type]

    def clear_history(self) -> None:
        self._action_history.clear()
