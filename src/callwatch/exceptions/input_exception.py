"""Input channel exceptions."""

from .base_exception import CallwatchException


class PrivilegedChannelDeniedException(CallwatchException):
    """The privileged input channel refused to deliver a tap.

    Unlike an ordinary failed tap (which is reported as ``False``), this means
    the channel itself is unavailable, e.g. its permission was revoked. The
    engine moves to error-unknown and backs off before the next tick.
    """

    def __init__(
        self,
        message: str = "Privileged input channel denied",
        cause: Exception | None = None,
        x: int | None = None,
        y: int | None = None,
    ):
        super().__init__(message, cause)
        self.x = x
        self.y = y
