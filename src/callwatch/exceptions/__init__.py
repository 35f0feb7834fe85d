"""Exceptions package.

Engine-specific exceptions.
"""

from .base_exception import CallwatchException
from .configuration_exception import ConfigurationException, HandlerNotRegisteredException
from .extraction_exception import ExtractionException
from .input_exception import PrivilegedChannelDeniedException
from .snapshot_exception import SnapshotInvalidatedException

__all__ = [
    "CallwatchException",
    "ConfigurationException",
    "HandlerNotRegisteredException",
    "ExtractionException",
    "PrivilegedChannelDeniedException",
    "SnapshotInvalidatedException",
]
