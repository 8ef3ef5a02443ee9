"""What a queue registration receives for every delivered frame."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from dataclasses import dataclass

if TYPE_CHECKING:
    from trackbridge.bridge.envelope import FrameEnvelope


@dataclass(frozen=True, slots=True)
class DeliveredFrame:
    handler_id: int
    event: str
    context: Any
    envelope: FrameEnvelope


__all__ = ["DeliveredFrame"]
