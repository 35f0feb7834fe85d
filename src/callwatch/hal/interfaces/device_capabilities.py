"""Device capability interface definition.

Everything the engine needs from the device: reading the target app's UI
tree and injecting input into it. How the tree is captured and how taps are
delivered is up to the implementation.
"""

from abc import ABC, abstractmethod

from ...model.ui_node import UINode, UISnapshot


class IDeviceCapabilities(ABC):
    """Interface for UI observation and input synthesis on the device.

    Input methods return ``False`` when the input could not be delivered.
    Implementations may raise
    :class:`~callwatch.exceptions.SnapshotInvalidatedException` when a node
    handed to them belongs to a tree that no longer exists, and
    :class:`~callwatch.exceptions.PrivilegedChannelDeniedException` when the
    privileged channel is unavailable altogether.
    """

    def find_by_identifier(self, snapshot: UISnapshot, identifier: str) -> UINode | None:
        """Find the first node carrying a view identifier."""
        return snapshot.find_by_identifier(identifier)

    def find_by_text(self, snapshot: UISnapshot, text: str) -> UINode | None:
        """Find a node whose text or description contains ``text``.

        Actionable matches are preferred over plain labels.
        """
        matches = snapshot.find_all_by_text(text)
        for node in matches:
            if node.is_actionable:
                return node
        return matches[0] if matches else None

    @abstractmethod
    def activate(self, node: UINode) -> bool:
        """Perform the node's click action directly.

        Args:
            node: Node from the current snapshot

        Returns:
            True if the action was accepted
        """

    @abstractmethod
    def synthetic_tap(self, x: int, y: int) -> bool:
        """Inject a tap gesture at screen coordinates."""

    @abstractmethod
    def privileged_tap(self, x: int, y: int) -> bool:
        """Inject a tap through the privileged (system-level) channel."""

    @abstractmethod
    def navigate_back(self) -> bool:
        """Press the system back button."""

    @abstractmethod
    def screen_size(self) -> tuple[int, int]:
        """Get screen size as ``(width, height)``."""

    @abstractmethod
    def current_snapshot(self) -> UISnapshot | None:
        """Pull the latest observed UI tree, or None if none is available yet."""
