"""Color sensor handle."""

from __future__ import annotations

from typing import Any

from trackbridge.errors import UpdateError
from trackbridge.bridge.handle import ModuleHandle
from trackbridge.state.frames import OutputMode
from trackbridge.bridge.envelope import FrameEnvelope
from trackbridge.bridge.delivery import FrameCallback
from trackbridge.config.modules import EVENT_NEW_FRAME, ModuleKind


class ColorSensor(ModuleHandle):
    kind = ModuleKind.COLOR_SENSOR

    def connect_on_new_frame(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_NEW_FRAME, context, callback=callback, **delivery)

    def get_color_frame(self) -> FrameEnvelope:
        return self._snapshot()

    def output_mode(self) -> OutputMode:
        return self._call("output_mode", error_cls=UpdateError)


__all__ = ["ColorSensor"]
