"""Extraction exception."""

from .base_exception import CallwatchException


class ExtractionException(CallwatchException):
    """Exception thrown when a strategy cannot run at all.

    Raised for broken configuration (e.g. a pattern that does not compile),
    not for items that simply do not contain the expected fields; those make
    the strategy return ``None``.
    """

    def __init__(
        self,
        message: str = "Extraction failed",
        cause: Exception | None = None,
        strategy: str | None = None,
    ):
        """Initialize extraction exception.

        Args:
            message: Error message
            cause: Underlying exception that caused this error
            strategy: Name of the strategy that failed
        """
        super().__init__(message, cause)
        self.strategy = strategy
