"""Map native SDK failures onto the bridge error taxonomy."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator

from trackbridge.config.session import REASON_WAIT_TIMEOUT, REASON_SESSION_RELEASED
from trackbridge.native.errors import NativeError, NativeLicenseError, NativeTimeoutError, NativeReleasedError
from trackbridge.errors import (
    LICENSE_REASON_CODE,
    BridgeError,
    UpdateError,
    UnknownError,
    LicenseNotAcquiredError,
)

# Some bindings only surface a generic exception; the SDK's exception type
# name still appears in its message.
_LICENSE_MARKER = "LicenseNotAcquired"


def is_license_failure(exc: BaseException) -> bool:
    if isinstance(exc, NativeLicenseError):
        return True
    return _LICENSE_MARKER in str(exc) or _LICENSE_MARKER in type(exc).__name__


def translate_native_error(exc: BaseException, *, operation: str, error_cls: type[BridgeError]) -> BridgeError:
    """Build the bridge error for `exc`, keeping the native diagnostic text."""
    message = f"{operation} failed: {exc}" if str(exc) else f"{operation} failed: {type(exc).__name__}"

    if is_license_failure(exc):
        if issubclass(error_cls, UpdateError):
            return LicenseNotAcquiredError(message)
        return error_cls(message, LICENSE_REASON_CODE)
    if isinstance(exc, NativeTimeoutError):
        return error_cls(message, REASON_WAIT_TIMEOUT)
    if isinstance(exc, NativeReleasedError):
        return error_cls(message, REASON_SESSION_RELEASED)
    if isinstance(exc, NativeError):
        return error_cls(message)
    return UnknownError(message) if error_cls is BridgeError else error_cls(message)


@contextlib.contextmanager
def native_call(operation: str, error_cls: type[BridgeError]) -> Iterator[None]:
    """Run a native call, re-raising anything it throws as `error_cls`.

    Bridge errors pass through untouched so the first translation wins.
    """
    try:
        yield
    except BridgeError:
        raise
    except Exception as exc:
        raise translate_native_error(exc, operation=operation, error_cls=error_cls) from exc


__all__ = ["is_license_failure", "native_call", "translate_native_error"]
