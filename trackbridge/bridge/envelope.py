"""Owning wrapper that carries one native frame across the boundary."""

from __future__ import annotations

import weakref
from typing import Any

from trackbridge.errors import NullHandleError
from trackbridge.config.modules import ModuleKind
from trackbridge.config.session import REASON_HANDLE_CLOSED

from .ownership import NativeRef


class FrameEnvelope:
    """One count on a native frame, handed to foreign code.

    The payload is the native object itself (no copy). The count is dropped by
    `close()`, by leaving a `with` block, or when the envelope is garbage
    collected, whichever comes first. Use `share()` to keep the frame beyond
    the lifetime of this envelope.
    """

    __slots__ = ("_ref", "_finalizer", "sequence", "event", "module_kind", "handler_id", "__weakref__")

    def __init__(
        self,
        ref: NativeRef,
        *,
        event: str,
        module_kind: ModuleKind,
        sequence: int | None = None,
        handler_id: int | None = None,
        adopt: bool = False,
    ) -> None:
        # With `adopt`, the caller already took the count this envelope owns.
        self._ref = ref if adopt else ref.acquire()
        self._finalizer = weakref.finalize(self, ref.release)
        self.sequence = sequence
        self.event = event
        self.module_kind = module_kind
        self.handler_id = handler_id

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    @property
    def payload(self) -> Any:
        if self.released:
            raise NullHandleError(f"{self.module_kind.value} envelope was closed", REASON_HANDLE_CLOSED)
        return self._ref.get()

    def share(self) -> FrameEnvelope:
        """Return a new envelope holding its own count on the same frame."""
        if self.released:
            raise NullHandleError(f"{self.module_kind.value} envelope was closed", REASON_HANDLE_CLOSED)
        return FrameEnvelope(
            self._ref,
            event=self.event,
            module_kind=self.module_kind,
            sequence=self.sequence,
            handler_id=self.handler_id,
        )

    def close(self) -> None:
        self._finalizer()

    def __enter__(self) -> FrameEnvelope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return (
            f"FrameEnvelope(module={self.module_kind.value}, event={self.event}, "
            f"sequence={self.sequence}, handler_id={self.handler_id}, {state})"
        )


__all__ = ["FrameEnvelope"]
