"""asyncio facade over `Session`: blocking calls run in worker threads."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from trackbridge.bridge.handle import ModuleHandle
from trackbridge.state.devices import DeviceInfo
from trackbridge.config.modules import ModuleKind
from trackbridge.state.session import SessionState
from trackbridge.errors import UpdateError, DispatchError, NullHandleError, LicenseNotAcquiredError
from trackbridge.config.session import (
    REASON_WAIT_TIMEOUT,
    REASON_SESSION_RELEASED,
    REASON_SESSION_NOT_INITIALIZED,
)

from .stream import FrameStream
from .coordinator import Session

logger = logging.getLogger(__name__)

_SESSION_GONE = {REASON_SESSION_RELEASED, REASON_SESSION_NOT_INITIALIZED}


class AsyncSession:
    """Awaitable wrapper around a `Session`.

    Driving calls run through `asyncio.to_thread`, so plain callbacks run on a
    worker thread; use `stream()` to receive frames on the event loop instead.
    """

    def __init__(self, session: Session | None = None, **session_kwargs: Any) -> None:
        self.session = session or Session(**session_kwargs)

    @property
    def state(self) -> SessionState:
        return self.session.state

    async def init(self, config_path: str = "") -> None:
        await asyncio.to_thread(self.session.init, config_path)

    async def run(self) -> None:
        await asyncio.to_thread(self.session.run)

    async def update(self) -> None:
        await asyncio.to_thread(self.session.update)

    async def wait_update(self, handle: ModuleHandle) -> None:
        await asyncio.to_thread(self.session.wait_update, handle)

    async def release(self) -> None:
        await asyncio.to_thread(self.session.release)

    async def set_config_value(self, key: str, value: str) -> None:
        await asyncio.to_thread(self.session.set_config_value, key, value)

    async def get_config_value(self, key: str) -> str:
        return await asyncio.to_thread(self.session.get_config_value, key)

    async def devices(self) -> list[DeviceInfo]:
        return await asyncio.to_thread(self.session.devices)

    async def select_device(self, selector: Any = 0) -> DeviceInfo:
        return await asyncio.to_thread(self.session.select_device, selector)

    async def create_module(self, kind: ModuleKind | str) -> ModuleHandle:
        return await asyncio.to_thread(self.session.create_module, kind)

    def stream(self, handle: ModuleHandle, event: str, context: Any = None, *, maxsize: int | None = None) -> FrameStream:
        """Frames for `event` on `handle` as an async iterator; call from the consuming loop."""
        if maxsize is None:
            maxsize = self.session.settings.dispatch.stream_queue_max
        return FrameStream(handle, event, context, maxsize=maxsize)

    async def drive(
        self,
        *,
        interval_s: float = 1 / 30,
        handle: ModuleHandle | None = None,
        stop: asyncio.Event | None = None,
    ) -> None:
        """Keep the SDK updating until `stop` is set or the session goes away.

        With `handle`, each step is `wait_update(handle)` instead of `update()`.
        Delivery failures and wait timeouts are logged and the loop continues;
        a license failure is logged and re-raised, which ends the loop.
        """
        while stop is None or not stop.is_set():
            try:
                if handle is None:
                    await self.update()
                else:
                    await self.wait_update(handle)
            except LicenseNotAcquiredError:
                logger.error("license not acquired; stopping the update loop")
                raise
            except DispatchError as exc:
                logger.warning("update loop: %s", exc)
            except UpdateError as exc:
                if exc.reason_code in _SESSION_GONE:
                    logger.info("update loop stopped: session is no longer active")
                    return
                if exc.reason_code != REASON_WAIT_TIMEOUT:
                    raise
                logger.debug("update loop: %s", exc)
            except NullHandleError as exc:
                if exc.reason_code not in _SESSION_GONE:
                    raise
                logger.info("update loop stopped: handle outlived its session")
                return
            if interval_s > 0:
                await asyncio.sleep(interval_s)

    async def __aenter__(self) -> AsyncSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self.session.state.is_active:
            await self.release()


__all__ = ["AsyncSession"]
