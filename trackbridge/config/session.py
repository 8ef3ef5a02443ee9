"""Session coordinator configuration (env names and defaults only)."""

from __future__ import annotations

ENV_TRACKBRIDGE_CONFIG_PATH = "TRACKBRIDGE_CONFIG_PATH"
DEFAULT_TRACKBRIDGE_CONFIG_PATH = ""

# Upper bound on a single wait_update() block. <= 0 waits without a bound.
ENV_WAIT_UPDATE_TIMEOUT_S = "TRACKBRIDGE_WAIT_UPDATE_TIMEOUT_S"
DEFAULT_WAIT_UPDATE_TIMEOUT_S = 5.0

# How long release() waits for an in-flight update/wait_update to finish.
ENV_RELEASE_TIMEOUT_S = "TRACKBRIDGE_RELEASE_TIMEOUT_S"
DEFAULT_RELEASE_TIMEOUT_S = 10.0

# Reason codes (BridgeError.reason_code values)
REASON_ALREADY_INITIALIZED = "already_initialized"
REASON_SESSION_NOT_INITIALIZED = "session_not_initialized"
REASON_SESSION_RELEASED = "session_released"
REASON_INVALID_STATE = "invalid_state"
REASON_INVALID_CONFIG_PATH = "invalid_config_path"
REASON_INVALID_CONFIG = "invalid_config"
REASON_RUN_FAILED = "run_failed"
REASON_WAIT_TIMEOUT = "wait_timeout"
REASON_CONCURRENT_WAIT = "concurrent_wait"
REASON_REENTRANT_UPDATE = "reentrant_update"
REASON_RELEASE_DURING_DISPATCH = "release_during_dispatch"
REASON_DISPATCH_IN_PROGRESS = "dispatch_in_progress"
REASON_DEVICE_NOT_FOUND = "device_not_found"
REASON_HANDLE_CLOSED = "handle_closed"
REASON_NULL_HANDLE = "null_handle"
REASON_UNSUPPORTED_EVENT = "unsupported_event"

__all__ = [
    "DEFAULT_RELEASE_TIMEOUT_S",
    "DEFAULT_TRACKBRIDGE_CONFIG_PATH",
    "DEFAULT_WAIT_UPDATE_TIMEOUT_S",
    "ENV_RELEASE_TIMEOUT_S",
    "ENV_TRACKBRIDGE_CONFIG_PATH",
    "ENV_WAIT_UPDATE_TIMEOUT_S",
    "REASON_ALREADY_INITIALIZED",
    "REASON_CONCURRENT_WAIT",
    "REASON_DEVICE_NOT_FOUND",
    "REASON_DISPATCH_IN_PROGRESS",
    "REASON_HANDLE_CLOSED",
    "REASON_INVALID_CONFIG",
    "REASON_INVALID_CONFIG_PATH",
    "REASON_INVALID_STATE",
    "REASON_NULL_HANDLE",
    "REASON_REENTRANT_UPDATE",
    "REASON_RELEASE_DURING_DISPATCH",
    "REASON_RUN_FAILED",
    "REASON_SESSION_NOT_INITIALIZED",
    "REASON_SESSION_RELEASED",
    "REASON_UNSUPPORTED_EVENT",
    "REASON_WAIT_TIMEOUT",
]
