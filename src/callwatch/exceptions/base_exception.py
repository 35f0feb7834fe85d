"""Base exception for the callwatch engine."""


class CallwatchException(Exception):
    """Base exception for all callwatch exceptions.

    Everything the engine raises on purpose derives from this class so that
    the scheduling loop can tell its own fault classes apart from unexpected
    errors raised by collaborators.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize exception.

        Args:
            message: Exception message
            cause: Underlying cause exception
        """
        super().__init__(message)
        self.cause = cause
