"""Routes native callbacks to foreign registrations during driving calls."""

from __future__ import annotations

import weakref
import logging
import threading
import contextlib
from typing import TYPE_CHECKING
from collections.abc import Callable, Iterator

from trackbridge.state.dispatch import DispatchReport
from trackbridge.state.delivered import DeliveredFrame

from .envelope import FrameEnvelope

if TYPE_CHECKING:
    from trackbridge.native.event import NativeEvent

    from .handle import ModuleHandle

logger = logging.getLogger(__name__)


class DispatchAdapter:
    """Turns native callback invocations into foreign deliveries.

    The adapter only accepts callbacks on the thread that is inside a driving
    call (`driving()`); anything else is dropped and logged. It never lets an
    exception escape into native code: delivery failures are collected on the
    current `DispatchReport` and raised by the session once the native call
    has returned.
    """

    def __init__(self, *, drop_duplicates: bool = True) -> None:
        self._drop_duplicates = drop_duplicates
        self._report: DispatchReport | None = None
        self._local = threading.local()

    @property
    def driving_thread(self) -> int | None:
        report = self._report
        return report.thread_id if report is not None else None

    def in_dispatch(self) -> bool:
        """True on a thread that is currently running a foreign delivery."""
        return getattr(self._local, "depth", 0) > 0

    @contextlib.contextmanager
    def driving(self, operation: str) -> Iterator[DispatchReport]:
        """Open the window in which native callbacks are delivered.

        Callers must already hold the session's driving lock.
        """
        report = DispatchReport(operation=operation, thread_id=threading.get_ident())
        self._report = report
        try:
            yield report
        finally:
            self._report = None
            for handle, registration in report.deferred:
                handle._finish_disconnect(registration)
            if report.dropped:
                logger.debug("%s: %d native callback(s) dropped", operation, report.dropped)

    def make_trampoline(self, handle: ModuleHandle, handler_id: int) -> Callable[[NativeEvent], None]:
        """The callable given to the native SDK for one registration.

        It captures only the handler id and a weak reference to the handle, so
        the foreign context stays owned by the registry.
        """
        handle_ref = weakref.ref(handle)

        def trampoline(event: NativeEvent) -> None:
            target = handle_ref()
            if target is None:
                return
            try:
                self.dispatch(target, handler_id, event)
            except Exception:
                logger.exception("dispatch for handler %s failed inside the bridge", handler_id)

        return trampoline

    def dispatch(self, handle: ModuleHandle, handler_id: int, event: NativeEvent) -> None:
        report = self._report
        if report is None or report.thread_id != threading.get_ident():
            logger.warning(
                "callback for %s handler %s arrived outside a driving call; dropped",
                handle.kind.value,
                handler_id,
            )
            return

        registry = handle.registry
        registration = registry.begin_dispatch(handler_id)
        if registration is None:
            report.dropped += 1
            return
        try:
            if self._drop_duplicates and event.sequence <= registration.last_sequence:
                logger.debug("handler %s already saw sequence %s; dropped", handler_id, event.sequence)
                report.dropped += 1
                return
            registration.last_sequence = event.sequence
            envelope = FrameEnvelope(
                event.ref,
                event=registration.event,
                module_kind=handle.kind,
                sequence=event.sequence,
                handler_id=handler_id,
            )
            frame = DeliveredFrame(
                handler_id=handler_id,
                event=registration.event,
                context=registration.context,
                envelope=envelope,
            )
            self._local.depth = getattr(self._local, "depth", 0) + 1
            try:
                registration.delivery.deliver(frame)
            except Exception as exc:
                logger.warning("delivery to %s handler %s failed: %r", handle.kind.value, handler_id, exc)
                envelope.close()
                report.record_failure(handler_id, exc)
            else:
                report.delivered += 1
                logger.debug("delivered %s seq=%s to handler %s", registration.event, event.sequence, handler_id)
            finally:
                self._local.depth -= 1
        finally:
            if registry.end_dispatch(registration):
                report.deferred.append((handle, registration))


__all__ = ["DispatchAdapter"]
