"""What the native SDK passes to a connected callback."""

from __future__ import annotations

from dataclasses import dataclass

from trackbridge.bridge.ownership import NativeRef


@dataclass(frozen=True, slots=True)
class NativeEvent:
    """One produced item: a counted reference plus its per-module sequence number.

    The native side keeps its own count on `ref` for as long as it needs the
    object (buffering, latest snapshot); the bridge acquires another one for
    every envelope it hands out.
    """

    ref: NativeRef
    sequence: int


__all__ = ["NativeEvent"]
