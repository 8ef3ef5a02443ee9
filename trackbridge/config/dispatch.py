"""Dispatch adapter configuration (env names and defaults only)."""

from __future__ import annotations

# Drop a frame whose native sequence number was already delivered to a handler.
ENV_DROP_DUPLICATE_FRAMES = "TRACKBRIDGE_DROP_DUPLICATE_FRAMES"
DEFAULT_DROP_DUPLICATE_FRAMES = True

# Bound on the asyncio.Queue behind FrameStream. 0 means unbounded.
ENV_STREAM_QUEUE_MAX = "TRACKBRIDGE_STREAM_QUEUE_MAX"
DEFAULT_STREAM_QUEUE_MAX = 0

# Per-frame dispatch logs are DEBUG and very chatty.
ENV_SHOW_DISPATCH_LOGS = "SHOW_DISPATCH_LOGS"
DISPATCH_LOGGER_NAME = "trackbridge.bridge.dispatch"

REASON_CALLBACK_FAILED = "callback_failed"
REASON_QUEUE_FULL = "queue_full"
REASON_LOOP_CLOSED = "loop_closed"

__all__ = [
    "DEFAULT_DROP_DUPLICATE_FRAMES",
    "DEFAULT_STREAM_QUEUE_MAX",
    "DISPATCH_LOGGER_NAME",
    "ENV_DROP_DUPLICATE_FRAMES",
    "ENV_SHOW_DISPATCH_LOGS",
    "ENV_STREAM_QUEUE_MAX",
    "REASON_CALLBACK_FAILED",
    "REASON_LOOP_CLOSED",
    "REASON_QUEUE_FULL",
]
