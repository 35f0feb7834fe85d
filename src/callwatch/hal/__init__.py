"""Hardware abstraction layer for the device the engine drives."""

from .interfaces import IDeviceCapabilities

__all__ = ["IDeviceCapabilities"]
