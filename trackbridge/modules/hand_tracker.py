"""Hand tracker handle."""

from __future__ import annotations

from typing import Any

from trackbridge.bridge.handle import ModuleHandle
from trackbridge.bridge.envelope import FrameEnvelope
from trackbridge.bridge.delivery import FrameCallback
from trackbridge.config.modules import EVENT_UPDATE, ModuleKind


class HandTracker(ModuleHandle):
    kind = ModuleKind.HAND_TRACKER

    def connect_on_update(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_UPDATE, context, callback=callback, **delivery)

    def get_data(self) -> FrameEnvelope:
        """Latest `HandData` (normalized hand positions per user)."""
        return self._snapshot()


__all__ = ["HandTracker"]
