"""Logging module for the acceptance engine."""

from .event_logger import EventLogger, StructlogEventLogger
from .logger import get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "EventLogger",
    "StructlogEventLogger",
]
