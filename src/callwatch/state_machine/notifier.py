"""Operator notifications (sound/toast on the device, a log line here)."""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Notifier(ABC):
    @abstractmethod
    def notify(self, message: str) -> None:
        """Tell the operator something happened."""


class LogNotifier(Notifier):
    """Notifier that writes to the log."""

    def notify(self, message: str) -> None:
        logger.info(f"[NOTIFY] {message}")
