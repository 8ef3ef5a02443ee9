"""Reference-counted ownership token for native objects."""

from __future__ import annotations

import logging
import threading
from typing import Any
from collections.abc import Callable

from trackbridge.errors import NullHandleError
from trackbridge.config.session import REASON_NULL_HANDLE

logger = logging.getLogger(__name__)

ReleaseFn = Callable[[Any], None]


class NativeRef:
    """Shared ownership of one native object.

    Every side that keeps the object alive holds one count. The object is
    handed back to `on_release` exactly once, when the last count is dropped;
    after that `get()` raises `NullHandleError` instead of touching freed memory.
    """

    __slots__ = ("_lock", "_obj", "_count", "_on_release", "label")

    def __init__(self, obj: Any, *, on_release: ReleaseFn | None = None, label: str = "native") -> None:
        if obj is None:
            raise NullHandleError(f"cannot take ownership of a null {label} object", REASON_NULL_HANDLE)
        self._lock = threading.Lock()
        self._obj = obj
        self._count = 1
        self._on_release = on_release
        self.label = label

    @property
    def alive(self) -> bool:
        return self._count > 0

    @property
    def count(self) -> int:
        return self._count

    def acquire(self) -> NativeRef:
        with self._lock:
            if self._count <= 0:
                raise NullHandleError(f"{self.label} object was already released", REASON_NULL_HANDLE)
            self._count += 1
        return self

    def release(self) -> bool:
        """Drop one count. Returns True when this call freed the object."""
        with self._lock:
            if self._count <= 0:
                return False
            self._count -= 1
            if self._count > 0:
                return False
            obj, self._obj = self._obj, None
            on_release = self._on_release
        if on_release is not None:
            try:
                on_release(obj)
            except Exception:
                logger.exception("release hook for %s object failed", self.label)
        return True

    def get(self) -> Any:
        obj = self._obj
        if obj is None:
            raise NullHandleError(f"{self.label} object was already released", REASON_NULL_HANDLE)
        return obj

    def __repr__(self) -> str:
        return f"NativeRef(label={self.label!r}, count={self._count})"


__all__ = ["NativeRef"]
