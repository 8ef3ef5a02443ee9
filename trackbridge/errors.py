"""Foreign-visible error taxonomy for the tracking bridge."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar
from dataclasses import dataclass

LICENSE_REASON_CODE = "license_not_acquired"


class ErrorKind(str, Enum):
    INIT = "init_error"
    CREATION = "creation_error"
    CONNECT = "connect_error"
    UNKNOWN_HANDLER = "unknown_handler_error"
    NULL_HANDLE = "null_handle_error"
    UPDATE = "update_error"
    DISPATCH = "dispatch_error"
    UNKNOWN = "unknown"


@dataclass(slots=True, eq=False)
class BridgeError(Exception):
    """Base class for every error the bridge raises.

    `message` keeps the native diagnostic text; `reason_code` is a stable,
    machine-readable refinement of `kind` (for example `already_initialized`).
    """

    message: str
    reason_code: str | None = None

    kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN

    def __str__(self) -> str:
        if self.reason_code:
            return f"{self.message} [{self.reason_code}]"
        return self.message

    @property
    def is_license_error(self) -> bool:
        return self.reason_code == LICENSE_REASON_CODE


@dataclass(slots=True, eq=False)
class InitError(BridgeError):
    """Session could not be initialized or started."""

    kind: ClassVar[ErrorKind] = ErrorKind.INIT


@dataclass(slots=True, eq=False)
class CreationError(BridgeError):
    """A module (or device) could not be instantiated."""

    kind: ClassVar[ErrorKind] = ErrorKind.CREATION


@dataclass(slots=True, eq=False)
class ConnectError(BridgeError):
    kind: ClassVar[ErrorKind] = ErrorKind.CONNECT


@dataclass(slots=True, eq=False)
class UnknownHandlerError(BridgeError):
    kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN_HANDLER


@dataclass(slots=True, eq=False)
class NullHandleError(BridgeError):
    """Raised before any native call when a handle is empty or invalidated."""

    kind: ClassVar[ErrorKind] = ErrorKind.NULL_HANDLE


@dataclass(slots=True, eq=False)
class UpdateError(BridgeError):
    kind: ClassVar[ErrorKind] = ErrorKind.UPDATE


@dataclass(slots=True, eq=False)
class LicenseNotAcquiredError(UpdateError):
    """The native SDK refused to deliver data because no license is active."""

    reason_code: str | None = LICENSE_REASON_CODE


@dataclass(slots=True, eq=False)
class DispatchError(BridgeError):
    """One or more foreign deliveries failed during a driving call."""

    handler_id: int | None = None
    failures: int = 1

    kind: ClassVar[ErrorKind] = ErrorKind.DISPATCH


@dataclass(slots=True, eq=False)
class UnknownError(BridgeError):
    kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN


__all__ = [
    "LICENSE_REASON_CODE",
    "BridgeError",
    "ConnectError",
    "CreationError",
    "DispatchError",
    "ErrorKind",
    "InitError",
    "LicenseNotAcquiredError",
    "NullHandleError",
    "UnknownError",
    "UnknownHandlerError",
    "UpdateError",
]
