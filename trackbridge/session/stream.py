"""Async iterator over the frames one registration receives."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import TYPE_CHECKING, Any

from trackbridge.errors import BridgeError
from trackbridge.state.delivered import DeliveredFrame

if TYPE_CHECKING:
    from trackbridge.bridge.handle import ModuleHandle

logger = logging.getLogger(__name__)


class FrameStream:
    """Connects a queue registration on creation and disconnects it on `aclose()`.

    Must be created on the event loop that consumes it; deliveries from the
    driving thread are scheduled onto that loop.
    """

    def __init__(self, handle: ModuleHandle, event: str, context: Any = None, *, maxsize: int = 0) -> None:
        self._handle = handle
        self._queue: asyncio.Queue[DeliveredFrame | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._dropped = 0
        self.event = event
        self.handler_id = handle.connect(
            event,
            context,
            queue=self._queue,
            loop=asyncio.get_running_loop(),
            on_drop=self._count_drop,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped(self) -> int:
        """Frames the update call handed over but the full queue could not take."""
        return self._dropped

    def _count_drop(self, _frame: DeliveredFrame) -> None:
        self._dropped += 1

    def __aiter__(self) -> FrameStream:
        return self

    async def __anext__(self) -> DeliveredFrame:
        if self._closed:
            raise StopAsyncIteration
        frame = await self._queue.get()
        if frame is None:
            raise StopAsyncIteration
        return frame

    async def get(self, timeout: float | None = None) -> DeliveredFrame:
        """Next frame, or `asyncio.TimeoutError` after `timeout` seconds."""
        return await asyncio.wait_for(self.__anext__(), timeout)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._handle.disconnect(self.handler_id)
        except BridgeError as exc:
            # The handle may already be gone with its session; nothing left to unsubscribe.
            logger.debug("stream handler %s not disconnected: %s", self.handler_id, exc)
        while not self._queue.empty():
            frame = self._queue.get_nowait()
            if frame is not None:
                frame.envelope.close()
        with contextlib.suppress(asyncio.QueueFull):
            self._queue.put_nowait(None)

    async def __aenter__(self) -> FrameStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["FrameStream"]
