"""Snapshot exceptions.

Exception thrown when a UI snapshot, or a node taken from it, is no longer
valid because the target application re-rendered.
"""

from .base_exception import CallwatchException


class SnapshotInvalidatedException(CallwatchException):
    """The snapshot used by the current tick went stale.

    Transient: the engine drops its cached snapshot and retries shortly,
    without changing state.
    """

    def __init__(
        self,
        message: str = "UI snapshot invalidated",
        cause: Exception | None = None,
        node_id: str | None = None,
    ):
        """Initialize snapshot exception.

        Args:
            message: Error message
            cause: Underlying exception that caused this error
            node_id: Identifier of the stale node (if known)
        """
        super().__init__(message, cause)
        self.node_id = node_id
