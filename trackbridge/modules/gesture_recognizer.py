"""Gesture recognizer handle."""

from __future__ import annotations

from typing import Any

from trackbridge.bridge.handle import ModuleHandle
from trackbridge.bridge.delivery import FrameCallback
from trackbridge.config.modules import (
    EVENT_UPDATE,
    EVENT_NEW_GESTURES,
    EVENT_USER_STATE_CHANGE,
    ModuleKind,
)


class GestureRecognizer(ModuleHandle):
    """Event-only module: there is no latest-frame snapshot to read."""

    kind = ModuleKind.GESTURE_RECOGNIZER

    def connect_on_new_gestures(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_NEW_GESTURES, context, callback=callback, **delivery)

    def connect_on_user_state_change(
        self,
        callback: FrameCallback | None = None,
        context: Any = None,
        **delivery: Any,
    ) -> int:
        return self.connect(EVENT_USER_STATE_CHANGE, context, callback=callback, **delivery)

    def connect_on_update(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_UPDATE, context, callback=callback, **delivery)

    def set_control_gestures_status(self, enabled: bool) -> None:
        self._call("set_control_gestures_status", bool(enabled))


__all__ = ["GestureRecognizer"]
