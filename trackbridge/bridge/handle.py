"""Bridge-side handle to one native tracking module."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, ClassVar
from collections.abc import Callable

from trackbridge.config.modules import MODULE_EVENTS, SNAPSHOT_EVENTS, ModuleKind
from trackbridge.errors import BridgeError, ConnectError, UpdateError, UnknownError, NullHandleError
from trackbridge.config.session import (
    REASON_NULL_HANDLE,
    REASON_HANDLE_CLOSED,
    REASON_SESSION_RELEASED,
    REASON_UNSUPPORTED_EVENT,
)

from .ownership import NativeRef
from .translate import native_call
from .envelope import FrameEnvelope
from .registry import CallbackRegistry
from .delivery import CallDelivery, FrameCallback, QueueDelivery

if TYPE_CHECKING:
    from trackbridge.session.coordinator import Session
    from trackbridge.state.delivered import DeliveredFrame
    from trackbridge.state.registration import Registration

logger = logging.getLogger(__name__)


class ModuleHandle:
    """Owns the bridge's count on a native module.

    A handle outlives nothing it depends on: once it is closed, or the session
    that created it is released, every operation raises `NullHandleError`
    before touching the native SDK.
    """

    kind: ClassVar[ModuleKind]

    def __init__(self, session: Session, module: Any) -> None:
        self._session = session
        self._generation = session.generation
        self._ref = NativeRef(module, label=self.kind.value)
        self._closed = False
        self.registry = CallbackRegistry(self.kind.value)
        self.wait_lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def valid(self) -> bool:
        return not self._closed and self._ref.alive and self._session.is_current(self._generation)

    @property
    def native(self) -> Any:
        """The native module object, for bindings and tests."""
        return self._require_live()

    @property
    def events(self) -> tuple[str, ...]:
        return MODULE_EVENTS[self.kind]

    def _require_live(self) -> Any:
        if not self._session.is_current(self._generation):
            raise NullHandleError(f"{self.kind.value} handle outlived its session", REASON_SESSION_RELEASED)
        if self._closed:
            raise NullHandleError(f"{self.kind.value} handle is closed", REASON_HANDLE_CLOSED)
        return self._ref.get()

    # ---- callbacks ----

    def connect(
        self,
        event: str,
        context: Any = None,
        *,
        callback: FrameCallback | None = None,
        queue: Any = None,
        loop: asyncio.AbstractEventLoop | None = None,
        on_drop: Callable[[DeliveredFrame], None] | None = None,
    ) -> int:
        """Register `callback(envelope, context)` or a queue for `event`; returns the handler id.

        `on_drop` is only used with `queue=` and `loop=`; it receives frames that
        no longer fit in the queue by the time the loop runs the put.
        """
        if (callback is None) == (queue is None):
            raise ValueError("connect() takes exactly one of callback= or queue=")
        try:
            module = self._require_live()
        except NullHandleError as exc:
            raise ConnectError(exc.message, exc.reason_code) from exc
        if event not in MODULE_EVENTS[self.kind]:
            raise ConnectError(f"{self.kind.value} does not offer {event!r}", REASON_UNSUPPORTED_EVENT)

        delivery = CallDelivery(callback) if callback is not None else QueueDelivery(queue, loop, on_drop)
        registration = self.registry.reserve(event, context, delivery)
        trampoline = self._session.dispatcher.make_trampoline(self, registration.handler_id)
        try:
            with native_call(f"connect {self.kind.value}.{event}", ConnectError):
                native_id = self._session.backend.connect(module, event, trampoline)
        except BridgeError:
            self.registry.discard(registration.handler_id)
            raise
        if not self.registry.bind(registration.handler_id, native_id):
            self._native_disconnect(module, native_id)
        logger.debug("%s handler %s connected to %s", self.kind.value, registration.handler_id, event)
        return registration.handler_id

    def disconnect(self, handler_id: int) -> None:
        module = self._require_live()
        registration = self.registry.disconnect(handler_id)
        if registration is not None and registration.native_id is not None:
            self._native_disconnect(module, registration.native_id)
        logger.debug("%s handler %s disconnected", self.kind.value, handler_id)

    def _native_disconnect(self, module: Any, native_id: int) -> None:
        with native_call(f"disconnect {self.kind.value}", UnknownError):
            self._session.backend.disconnect(module, native_id)

    def _finish_disconnect(self, registration: Registration) -> None:
        """Native unsubscription for a handler disconnected during its own delivery."""
        if registration.native_id is None or not self.valid:
            return
        try:
            self._native_disconnect(self._ref.get(), registration.native_id)
        except BridgeError:
            logger.exception("deferred disconnect of %s handler %s failed", self.kind.value, registration.handler_id)

    # ---- module state ----

    def processing_time(self) -> float:
        return float(self._call("processing_time", error_cls=UpdateError))

    def timestamp(self) -> int:
        return int(self._call("timestamp", error_cls=UpdateError))

    def can_update(self) -> bool:
        return bool(self._call("can_update", error_cls=UpdateError))

    def _call(self, operation: str, *args: Any, error_cls: type[BridgeError] = UnknownError) -> Any:
        module = self._require_live()
        with native_call(f"{self.kind.value}.{operation}", error_cls):
            return self._session.backend.call(module, operation, *args)

    def _snapshot(self) -> FrameEnvelope:
        """Take ownership of the count the SDK hands out with the module's latest frame."""
        ref = self._call("latest", error_cls=UpdateError)
        return FrameEnvelope(ref, event=SNAPSHOT_EVENTS[self.kind], module_kind=self.kind, adopt=True)

    # ---- teardown ----

    def close(self) -> None:
        """Disconnect every handler and drop the bridge's count on the module."""
        if self._closed:
            return
        registrations = self.registry.clear()
        if self.valid:
            module = self._ref.get()
            for registration in registrations:
                if registration.native_id is None:
                    continue
                try:
                    self._native_disconnect(module, registration.native_id)
                except BridgeError:
                    logger.exception("disconnect of %s handler %s failed", self.kind.value, registration.handler_id)
        self._closed = True
        self._ref.release()

    def _invalidate(self) -> None:
        """Called by the session on release: the native side is going away."""
        self.registry.clear()
        self._ref.release()

    def __enter__(self) -> ModuleHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "valid" if self.valid else "invalid"
        return f"{type(self).__name__}({state}, handlers={len(self.registry)})"


def require_handle(handle: ModuleHandle | None) -> ModuleHandle:
    """Reject a missing handle the same way an invalidated one is rejected."""
    if handle is None:
        raise NullHandleError("module handle is None", REASON_NULL_HANDLE)
    return handle


__all__ = ["ModuleHandle", "require_handle"]
