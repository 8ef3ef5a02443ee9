"""Module kinds offered by the tracking SDK and the events each one emits."""

from __future__ import annotations

from enum import Enum


class ModuleKind(str, Enum):
    SKELETON_TRACKER = "skeleton_tracker"
    HAND_TRACKER = "hand_tracker"
    USER_TRACKER = "user_tracker"
    DEPTH_SENSOR = "depth_sensor"
    COLOR_SENSOR = "color_sensor"
    GESTURE_RECOGNIZER = "gesture_recognizer"


# Event names
EVENT_UPDATE = "on_update"
EVENT_NEW_USER = "on_new_user"
EVENT_LOST_USER = "on_lost_user"
EVENT_NEW_FRAME = "on_new_frame"
EVENT_NEW_GESTURES = "on_new_gestures"
EVENT_USER_STATE_CHANGE = "on_user_state_change"

MODULE_EVENTS: dict[ModuleKind, tuple[str, ...]] = {
    ModuleKind.SKELETON_TRACKER: (EVENT_UPDATE, EVENT_NEW_USER, EVENT_LOST_USER),
    ModuleKind.HAND_TRACKER: (EVENT_UPDATE,),
    ModuleKind.USER_TRACKER: (EVENT_UPDATE, EVENT_NEW_USER, EVENT_LOST_USER),
    ModuleKind.DEPTH_SENSOR: (EVENT_NEW_FRAME,),
    ModuleKind.COLOR_SENSOR: (EVENT_NEW_FRAME,),
    ModuleKind.GESTURE_RECOGNIZER: (EVENT_NEW_GESTURES, EVENT_USER_STATE_CHANGE, EVENT_UPDATE),
}

# Events whose payload is a frame the SDK also keeps as its latest snapshot.
SNAPSHOT_EVENTS: dict[ModuleKind, str] = {
    ModuleKind.SKELETON_TRACKER: EVENT_UPDATE,
    ModuleKind.HAND_TRACKER: EVENT_UPDATE,
    ModuleKind.USER_TRACKER: EVENT_UPDATE,
    ModuleKind.DEPTH_SENSOR: EVENT_NEW_FRAME,
    ModuleKind.COLOR_SENSOR: EVENT_NEW_FRAME,
}

# Skeleton tracker supports 0..6 users; 2 by default.
MAX_ACTIVE_USERS = 6
DEFAULT_ACTIVE_USERS = 2

__all__ = [
    "DEFAULT_ACTIVE_USERS",
    "EVENT_LOST_USER",
    "EVENT_NEW_FRAME",
    "EVENT_NEW_GESTURES",
    "EVENT_NEW_USER",
    "EVENT_UPDATE",
    "EVENT_USER_STATE_CHANGE",
    "MAX_ACTIVE_USERS",
    "MODULE_EVENTS",
    "ModuleKind",
    "SNAPSHOT_EVENTS",
]
