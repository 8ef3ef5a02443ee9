"""User tracker handle."""

from __future__ import annotations

from typing import Any

from trackbridge.bridge.handle import ModuleHandle
from trackbridge.bridge.envelope import FrameEnvelope
from trackbridge.bridge.delivery import FrameCallback
from trackbridge.config.modules import EVENT_UPDATE, EVENT_NEW_USER, EVENT_LOST_USER, ModuleKind


class UserTracker(ModuleHandle):
    kind = ModuleKind.USER_TRACKER

    def connect_on_update(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_UPDATE, context, callback=callback, **delivery)

    def connect_on_new_user(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_NEW_USER, context, callback=callback, **delivery)

    def connect_on_lost_user(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_LOST_USER, context, callback=callback, **delivery)

    def get_user_frame(self) -> FrameEnvelope:
        return self._snapshot()


__all__ = ["UserTracker"]
