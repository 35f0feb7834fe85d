"""State machine package - shared context, handler contract and handlers."""

from .context import SharedContext
from .handler import HandlerRegistry, StateHandler
from .handlers import default_handlers
from .notifier import LogNotifier, Notifier

__all__ = [
    "SharedContext",
    "HandlerRegistry",
    "StateHandler",
    "default_handlers",
    "LogNotifier",
    "Notifier",
]
