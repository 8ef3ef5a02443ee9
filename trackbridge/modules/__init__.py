"""Typed handles, one per native module kind."""

from trackbridge.config.modules import ModuleKind

from .hand_tracker import HandTracker
from .user_tracker import UserTracker
from .color_sensor import ColorSensor
from .depth_sensor import DepthSensor
from .skeleton_tracker import SkeletonTracker
from .gesture_recognizer import GestureRecognizer

HANDLE_TYPES = {
    ModuleKind.SKELETON_TRACKER: SkeletonTracker,
    ModuleKind.HAND_TRACKER: HandTracker,
    ModuleKind.USER_TRACKER: UserTracker,
    ModuleKind.DEPTH_SENSOR: DepthSensor,
    ModuleKind.COLOR_SENSOR: ColorSensor,
    ModuleKind.GESTURE_RECOGNIZER: GestureRecognizer,
}

__all__ = [
    "HANDLE_TYPES",
    "ColorSensor",
    "DepthSensor",
    "GestureRecognizer",
    "HandTracker",
    "SkeletonTracker",
    "UserTracker",
]
