"""Native SDK seam: the backend protocol, its failure signals and a simulated SDK."""

from .event import NativeEvent
from .backend import NativeBackend
from .simulated import SimulatedBackend
from .errors import NativeError, NativeLicenseError, NativeTimeoutError, NativeReleasedError

__all__ = [
    "NativeBackend",
    "NativeError",
    "NativeEvent",
    "NativeLicenseError",
    "NativeReleasedError",
    "NativeTimeoutError",
    "SimulatedBackend",
]
