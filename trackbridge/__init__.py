"""Event and lifecycle bridge between a native tracking SDK and Python code."""

from .state import DeliveredFrame, DeviceInfo, DeviceSelector, SessionState
from .config import MODULE_EVENTS, ModuleKind
from .bridge import FrameEnvelope, ModuleHandle
from .native import NativeBackend, SimulatedBackend
from .session import AsyncSession, FrameStream, Session
from .errors import (
    BridgeError,
    ErrorKind,
    InitError,
    UpdateError,
    ConnectError,
    UnknownError,
    CreationError,
    DispatchError,
    NullHandleError,
    UnknownHandlerError,
    LicenseNotAcquiredError,
)

__all__ = [
    "MODULE_EVENTS",
    "AsyncSession",
    "BridgeError",
    "ConnectError",
    "CreationError",
    "DeliveredFrame",
    "DeviceInfo",
    "DeviceSelector",
    "DispatchError",
    "ErrorKind",
    "FrameEnvelope",
    "FrameStream",
    "InitError",
    "LicenseNotAcquiredError",
    "ModuleHandle",
    "ModuleKind",
    "NativeBackend",
    "NullHandleError",
    "Session",
    "SessionState",
    "SimulatedBackend",
    "UnknownError",
    "UnknownHandlerError",
    "UpdateError",
]
