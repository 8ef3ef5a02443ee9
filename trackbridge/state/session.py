"""Session lifecycle states."""

from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    RELEASED = "released"

    @property
    def is_active(self) -> bool:
        return self in (SessionState.INITIALIZED, SessionState.RUNNING)


__all__ = ["SessionState"]
