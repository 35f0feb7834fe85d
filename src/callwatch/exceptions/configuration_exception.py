"""Configuration exceptions.

Raised when the engine is wired up with invalid or incomplete configuration.
"""

from .base_exception import CallwatchException


class ConfigurationException(CallwatchException):
    """Exception thrown when configuration is invalid or missing."""

    def __init__(
        self,
        message: str = "Configuration error",
        cause: Exception | None = None,
        config_key: str | None = None,
    ):
        """Initialize configuration exception.

        Args:
            message: Error message
            cause: Underlying exception that caused this error
            config_key: Configuration key that caused the error (if applicable)
        """
        super().__init__(message, cause)
        self.config_key = config_key


class HandlerNotRegisteredException(ConfigurationException):
    """A control state has no registered handler."""

    def __init__(self, states: list[str]):
        super().__init__(f"No handler registered for state(s): {', '.join(states)}")
        self.states = states
