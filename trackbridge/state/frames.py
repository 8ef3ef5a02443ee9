"""Payload shapes carried inside frame envelopes (dataclasses only).

These mirror what the native SDK hands out. Image-like frames keep a reference
to the native buffer and expose it as a numpy view, so no pixel data
is copied on the way to foreign code.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True, slots=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True, slots=True)
class OutputMode:
    fps: int
    xres: int
    yres: int
    hfov: float = 0.0


@dataclass(frozen=True, slots=True)
class DepthFrame:
    rows: int
    cols: int
    frame_id: int
    timestamp: int
    data: memoryview = field(repr=False)

    def as_array(self) -> np.ndarray:
        """Return the depth map in millimetres as a (rows, cols) uint16 view."""
        arr = np.frombuffer(self.data, dtype=np.uint16)
        return arr.reshape(self.rows, self.cols)


@dataclass(frozen=True, slots=True)
class RGBFrame:
    rows: int
    cols: int
    frame_id: int
    timestamp: int
    data: memoryview = field(repr=False)

    def as_array(self) -> np.ndarray:
        arr = np.frombuffer(self.data, dtype=np.uint8)
        return arr.reshape(self.rows, self.cols, 3)


@dataclass(frozen=True, slots=True)
class Joint:
    joint_type: int
    confidence: float
    real: Vector3 = field(default_factory=Vector3)
    proj: Vector3 = field(default_factory=Vector3)


@dataclass(frozen=True, slots=True)
class Skeleton:
    user_id: int
    joints: tuple[Joint, ...] = ()


@dataclass(frozen=True, slots=True)
class SkeletonData:
    timestamp: int
    skeletons: tuple[Skeleton, ...] = ()


@dataclass(frozen=True, slots=True)
class Hand:
    x: float
    y: float
    click: bool = False
    pressure: int = 0


@dataclass(frozen=True, slots=True)
class UserHands:
    user_id: int
    left: Hand | None = None
    right: Hand | None = None


@dataclass(frozen=True, slots=True)
class HandData:
    timestamp: int
    users: tuple[UserHands, ...] = ()


@dataclass(frozen=True, slots=True)
class User:
    user_id: int
    real: Vector3 = field(default_factory=Vector3)
    occlusion: float = 0.0


@dataclass(frozen=True, slots=True)
class UserFrame:
    rows: int
    cols: int
    timestamp: int
    users: tuple[User, ...] = ()
    floor: Vector3 = field(default_factory=Vector3)
    floor_normal: Vector3 = field(default_factory=Vector3)


@dataclass(frozen=True, slots=True)
class Gesture:
    user_id: int
    gesture_type: str


@dataclass(frozen=True, slots=True)
class GestureData:
    timestamp: int
    gestures: tuple[Gesture, ...] = ()


__all__ = [
    "DepthFrame",
    "Gesture",
    "GestureData",
    "Hand",
    "HandData",
    "Joint",
    "OutputMode",
    "RGBFrame",
    "Skeleton",
    "SkeletonData",
    "User",
    "UserFrame",
    "UserHands",
    "Vector3",
]
