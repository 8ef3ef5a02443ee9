"""Failure signals raised by native SDK bindings.

Bindings may raise these directly or any other exception; the translation
layer in `trackbridge.bridge.translate` maps both onto the bridge taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, eq=False)
class NativeError(Exception):
    """Generic native SDK failure."""

    what: str

    def __str__(self) -> str:
        return self.what


@dataclass(slots=True, eq=False)
class NativeLicenseError(NativeError):
    """The SDK has no valid license (LicenseNotAcquired)."""


@dataclass(slots=True, eq=False)
class NativeTimeoutError(NativeError):
    """A blocking wait expired before data arrived."""


@dataclass(slots=True, eq=False)
class NativeReleasedError(NativeError):
    """The SDK was released (or the wait cancelled) while the call was blocked."""


__all__ = [
    "NativeError",
    "NativeLicenseError",
    "NativeReleasedError",
    "NativeTimeoutError",
]
