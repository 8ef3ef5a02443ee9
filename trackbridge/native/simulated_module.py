"""Per-module bookkeeping for the simulated SDK (dataclasses only)."""

from __future__ import annotations

from typing import Any
from collections import deque
from dataclasses import dataclass, field

from trackbridge.bridge.ownership import NativeRef
from trackbridge.config.modules import DEFAULT_ACTIVE_USERS, ModuleKind
from trackbridge.state.frames import (
    RGBFrame,
    HandData,
    UserFrame,
    DepthFrame,
    OutputMode,
    GestureData,
    SkeletonData,
)

# 640x480 at 30 fps, ~58 degree horizontal field of view.
DEFAULT_OUTPUT_MODE = OutputMode(fps=30, xres=640, yres=480, hfov=1.0122)


def empty_payload(kind: ModuleKind) -> Any:
    """What the SDK reports before the first frame of a module is produced."""
    if kind is ModuleKind.DEPTH_SENSOR:
        return DepthFrame(rows=0, cols=0, frame_id=0, timestamp=0, data=memoryview(b""))
    if kind is ModuleKind.COLOR_SENSOR:
        return RGBFrame(rows=0, cols=0, frame_id=0, timestamp=0, data=memoryview(b""))
    if kind is ModuleKind.SKELETON_TRACKER:
        return SkeletonData(timestamp=0)
    if kind is ModuleKind.HAND_TRACKER:
        return HandData(timestamp=0)
    if kind is ModuleKind.USER_TRACKER:
        return UserFrame(rows=0, cols=0, timestamp=0)
    return GestureData(timestamp=0)


@dataclass(slots=True)
class PendingEvent:
    event: str
    ref: NativeRef
    sequence: int


@dataclass(slots=True, eq=False)
class SimulatedModule:
    kind: ModuleKind
    module_id: int
    connections: dict[int, tuple[str, Any]] = field(default_factory=dict)
    pending: deque[PendingEvent] = field(default_factory=deque)
    latest: NativeRef | None = None
    next_sequence: int = 1
    processing_time: float = 0.0
    timestamp: int = 0
    output_mode: OutputMode = DEFAULT_OUTPUT_MODE
    mirror: bool = False
    auto_tracking: bool = True
    num_active_users: int = DEFAULT_ACTIVE_USERS
    tracked_users: set[int] = field(default_factory=set)
    control_gestures: bool = True
    destroyed: bool = False


__all__ = [
    "DEFAULT_OUTPUT_MODE",
    "PendingEvent",
    "SimulatedModule",
    "empty_payload",
]
