"""Delivery contracts a registration can choose (dataclasses only)."""

from __future__ import annotations

import queue
import asyncio
import logging
from typing import Any, Union
from dataclasses import dataclass
from collections.abc import Callable

from trackbridge.errors import DispatchError
from trackbridge.state.delivered import DeliveredFrame
from trackbridge.config.dispatch import REASON_QUEUE_FULL, REASON_LOOP_CLOSED

logger = logging.getLogger(__name__)

FrameCallback = Callable[[Any, Any], None]


@dataclass(frozen=True, slots=True)
class CallDelivery:
    """Invoke `fn(envelope, context)` on the driving thread."""

    fn: FrameCallback

    def deliver(self, frame: DeliveredFrame) -> None:
        self.fn(frame.envelope, frame.context)


@dataclass(frozen=True, slots=True)
class QueueDelivery:
    """Hand the frame to a queue without ever blocking the driving thread.

    `queue` is a `queue.Queue` or an `asyncio.Queue`. When `loop` is given the
    put is scheduled onto that loop with `call_soon_threadsafe`, which is the
    only safe way to feed an `asyncio.Queue` from the driving thread.

    The loop path checks `full()` on the driving thread, so the driving call
    counts the frame as delivered. If the queue fills up before the loop runs
    the put, the frame is closed and handed to `on_drop` on the loop thread.
    """

    queue: Any
    loop: asyncio.AbstractEventLoop | None = None
    on_drop: Callable[[DeliveredFrame], None] | None = None

    def deliver(self, frame: DeliveredFrame) -> None:
        if self.loop is None:
            self._put(frame)
            return
        if self.queue.full():
            raise DispatchError(f"queue for handler {frame.handler_id} is full", REASON_QUEUE_FULL)
        try:
            self.loop.call_soon_threadsafe(self._put_on_loop, frame)
        except RuntimeError as exc:
            raise DispatchError(f"event loop for handler {frame.handler_id} is closed", REASON_LOOP_CLOSED) from exc

    def _put(self, frame: DeliveredFrame) -> None:
        try:
            self.queue.put_nowait(frame)
        except (queue.Full, asyncio.QueueFull) as exc:
            raise DispatchError(f"queue for handler {frame.handler_id} is full", REASON_QUEUE_FULL) from exc

    def _put_on_loop(self, frame: DeliveredFrame) -> None:
        try:
            self.queue.put_nowait(frame)
        except asyncio.QueueFull:
            logger.warning("queue for handler %s filled up before delivery; frame dropped", frame.handler_id)
            frame.envelope.close()
            if self.on_drop is not None:
                self.on_drop(frame)


Delivery = Union[CallDelivery, QueueDelivery]

__all__ = ["CallDelivery", "Delivery", "FrameCallback", "QueueDelivery"]
