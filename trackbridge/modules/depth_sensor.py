"""Depth sensor handle."""

from __future__ import annotations

from typing import Any

from trackbridge.errors import UpdateError
from trackbridge.bridge.handle import ModuleHandle
from trackbridge.bridge.envelope import FrameEnvelope
from trackbridge.bridge.delivery import FrameCallback
from trackbridge.state.frames import Vector3, OutputMode
from trackbridge.config.modules import EVENT_NEW_FRAME, ModuleKind


def _as_vector(point: Vector3 | tuple[float, float, float]) -> Vector3:
    if isinstance(point, Vector3):
        return point
    x, y, z = point
    return Vector3(float(x), float(y), float(z))


class DepthSensor(ModuleHandle):
    """Depth map stream plus projective/real-world coordinate conversion.

    Projective points are (column, row, depth in mm); real-world points are
    millimetres in the sensor frame.
    """

    kind = ModuleKind.DEPTH_SENSOR

    def connect_on_new_frame(self, callback: FrameCallback | None = None, context: Any = None, **delivery: Any) -> int:
        return self.connect(EVENT_NEW_FRAME, context, callback=callback, **delivery)

    def get_depth_frame(self) -> FrameEnvelope:
        return self._snapshot()

    def output_mode(self) -> OutputMode:
        return self._call("output_mode", error_cls=UpdateError)

    def is_mirror(self) -> bool:
        return bool(self._call("is_mirror"))

    def set_mirror(self, mirror: bool) -> None:
        self._call("set_mirror", bool(mirror))

    def convert_proj_to_real(self, point: Vector3 | tuple[float, float, float]) -> Vector3:
        return self._call("convert_proj_to_real", _as_vector(point))

    def convert_real_to_proj(self, point: Vector3 | tuple[float, float, float]) -> Vector3:
        return self._call("convert_real_to_proj", _as_vector(point))


__all__ = ["DepthSensor"]
