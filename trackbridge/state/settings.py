"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SessionSettings:
    config_path: str = ""
    wait_update_timeout_s: float = 5.0
    release_timeout_s: float = 10.0


@dataclass(frozen=True, slots=True)
class DispatchSettings:
    drop_duplicate_frames: bool = True
    stream_queue_max: int = 0


@dataclass(frozen=True, slots=True)
class BridgeSettings:
    session: SessionSettings = field(default_factory=SessionSettings)
    dispatch: DispatchSettings = field(default_factory=DispatchSettings)


__all__ = [
    "BridgeSettings",
    "DispatchSettings",
    "SessionSettings",
]
