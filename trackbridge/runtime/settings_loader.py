"""Environment parsing for bridge settings."""

from __future__ import annotations

import os

from trackbridge.state.settings import BridgeSettings, SessionSettings, DispatchSettings
from trackbridge.config.dispatch import (
    ENV_STREAM_QUEUE_MAX,
    DEFAULT_STREAM_QUEUE_MAX,
    ENV_DROP_DUPLICATE_FRAMES,
    DEFAULT_DROP_DUPLICATE_FRAMES,
)
from trackbridge.config.session import (
    ENV_RELEASE_TIMEOUT_S,
    ENV_WAIT_UPDATE_TIMEOUT_S,
    DEFAULT_RELEASE_TIMEOUT_S,
    ENV_TRACKBRIDGE_CONFIG_PATH,
    DEFAULT_WAIT_UPDATE_TIMEOUT_S,
    DEFAULT_TRACKBRIDGE_CONFIG_PATH,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _load_session_settings() -> SessionSettings:
    release_timeout = _float_env(ENV_RELEASE_TIMEOUT_S, DEFAULT_RELEASE_TIMEOUT_S)
    if release_timeout <= 0:
        release_timeout = DEFAULT_RELEASE_TIMEOUT_S
    return SessionSettings(
        config_path=_str_env(ENV_TRACKBRIDGE_CONFIG_PATH, DEFAULT_TRACKBRIDGE_CONFIG_PATH),
        wait_update_timeout_s=_float_env(ENV_WAIT_UPDATE_TIMEOUT_S, DEFAULT_WAIT_UPDATE_TIMEOUT_S),
        release_timeout_s=release_timeout,
    )


def _load_dispatch_settings() -> DispatchSettings:
    return DispatchSettings(
        drop_duplicate_frames=_bool_env(ENV_DROP_DUPLICATE_FRAMES, DEFAULT_DROP_DUPLICATE_FRAMES),
        stream_queue_max=max(0, _int_env(ENV_STREAM_QUEUE_MAX, DEFAULT_STREAM_QUEUE_MAX)),
    )


def load_settings() -> BridgeSettings:
    return BridgeSettings(
        session=_load_session_settings(),
        dispatch=_load_dispatch_settings(),
    )


__all__ = ["load_settings"]
