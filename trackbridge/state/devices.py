"""Device discovery records (dataclasses only)."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    name: str
    serial_number: str
    provider_name: str
    index: int
    native: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class DeviceSelector:
    """Pick a device by list index or by serial number (serial wins when both are set)."""

    index: int | None = 0
    serial_number: str | None = None

    def matches(self, device: DeviceInfo) -> bool:
        if self.serial_number is not None:
            return device.serial_number == self.serial_number
        return device.index == self.index


__all__ = ["DeviceInfo", "DeviceSelector"]
