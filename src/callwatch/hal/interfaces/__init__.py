"""HAL interface definitions.

These interfaces define the contracts that device implementations must follow.
"""

from .device_capabilities import IDeviceCapabilities

__all__ = ["IDeviceCapabilities"]
