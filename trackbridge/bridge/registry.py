"""Handler table for one module handle."""

from __future__ import annotations

import logging
import threading
import itertools
from typing import Any

from trackbridge.errors import UnknownHandlerError
from trackbridge.state.registration import Registration

from .delivery import Delivery

logger = logging.getLogger(__name__)


class CallbackRegistry:
    """Maps bridge handler ids to registrations.

    Ids come from a monotonic counter starting at 1 and are never reused, even
    after disconnect. Every access goes through one lock, so connect and
    disconnect may race freely across threads.
    """

    def __init__(self, label: str = "module") -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._entries: dict[int, Registration] = {}
        self._label = label

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def reserve(self, event: str, context: Any, delivery: Delivery) -> Registration:
        with self._lock:
            registration = Registration(handler_id=next(self._ids), event=event, context=context, delivery=delivery)
            self._entries[registration.handler_id] = registration
        return registration

    def bind(self, handler_id: int, native_id: int) -> bool:
        """Attach the native subscription id. False if the handler was disconnected meanwhile."""
        with self._lock:
            registration = self._entries.get(handler_id)
            if registration is None:
                return False
            registration.native_id = native_id
            return True

    def discard(self, handler_id: int) -> None:
        with self._lock:
            registration = self._entries.pop(handler_id, None)
            if registration is not None:
                registration.active = False

    def disconnect(self, handler_id: int) -> Registration | None:
        """Remove a handler.

        Returns the registration when the caller should unsubscribe natively
        now, or None when that has to wait for an in-flight delivery (or the
        native id was never bound).
        """
        with self._lock:
            registration = self._entries.pop(handler_id, None)
            if registration is None:
                raise UnknownHandlerError(f"no handler {handler_id} on this {self._label}")
            registration.active = False
            if registration.dispatching > 0:
                registration.native_disconnect_pending = True
                logger.debug("handler %s disconnected during delivery; native unsubscribe deferred", handler_id)
                return None
            if registration.native_id is None:
                return None
            return registration

    def begin_dispatch(self, handler_id: int) -> Registration | None:
        with self._lock:
            registration = self._entries.get(handler_id)
            if registration is None or not registration.active:
                return None
            registration.dispatching += 1
            return registration

    def end_dispatch(self, registration: Registration) -> bool:
        """True when a disconnect arrived during the delivery and is now due natively."""
        with self._lock:
            registration.dispatching -= 1
            if registration.dispatching == 0 and registration.native_disconnect_pending:
                registration.native_disconnect_pending = False
                return registration.native_id is not None
            return False

    def clear(self) -> list[Registration]:
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
        for registration in entries:
            registration.active = False
        return entries

    def live_ids(self) -> list[int]:
        with self._lock:
            return sorted(self._entries)


__all__ = ["CallbackRegistry"]
