"""Skeleton tracker handle."""

from __future__ import annotations

from typing import Any

from trackbridge.bridge.handle import ModuleHandle
from trackbridge.bridge.envelope import FrameEnvelope
from trackbridge.bridge.delivery import FrameCallback
from trackbridge.config.modules import (
    EVENT_UPDATE,
    EVENT_NEW_USER,
    EVENT_LOST_USER,
    MAX_ACTIVE_USERS,
    ModuleKind,
)


class SkeletonTracker(ModuleHandle):
    """Per-user joint positions. `get_skeletons()` payloads are `SkeletonData`."""

    kind = ModuleKind.SKELETON_TRACKER

    def connect_on_update(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_UPDATE, context, callback=callback, **delivery)

    def connect_on_new_user(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_NEW_USER, context, callback=callback, **delivery)

    def connect_on_lost_user(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_LOST_USER, context, callback=callback, **delivery)

    def set_num_active_users(self, num_users: int) -> None:
        if not 0 <= num_users <= MAX_ACTIVE_USERS:
            raise ValueError(f"num_users must be between 0 and {MAX_ACTIVE_USERS}, got {num_users}")
        self._call("set_num_active_users", num_users)

    def is_auto_tracking(self) -> bool:
        return bool(self._call("is_auto_tracking"))

    def set_auto_tracking(self, enabled: bool) -> None:
        self._call("set_auto_tracking", bool(enabled))

    def start_tracking(self, user_id: int) -> None:
        self._call("start_tracking", user_id)

    def stop_tracking(self, user_id: int) -> None:
        self._call("stop_tracking", user_id)

    def is_tracking(self, user_id: int) -> bool:
        return bool(self._call("is_tracking", user_id))

    def get_skeletons(self) -> FrameEnvelope:
        return self._snapshot()


__all__ = ["SkeletonTracker"]
