"""Callback registry entries (dataclasses only)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from dataclasses import dataclass

if TYPE_CHECKING:
    from trackbridge.bridge.delivery import Delivery


@dataclass(slots=True, eq=False)
class Registration:
    handler_id: int
    event: str
    context: Any
    delivery: Delivery
    native_id: int | None = None
    # Highest native sequence number delivered to this handler.
    last_sequence: int = 0
    active: bool = True
    dispatching: int = 0
    # Disconnected while a delivery was in flight; the native side still has to be told.
    native_disconnect_pending: bool = False


__all__ = ["Registration"]
