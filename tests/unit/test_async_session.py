from __future__ import annotations

import asyncio

import pytest

from trackbridge.native import SimulatedBackend
from trackbridge.state.session import SessionState
from trackbridge.state.frames import SkeletonData
from trackbridge.state.settings import BridgeSettings
from trackbridge.session import Session, AsyncSession
from trackbridge.errors import LicenseNotAcquiredError


@pytest.mark.asyncio
async def test_stream_receives_frames_on_the_loop(backend: SimulatedBackend, settings: BridgeSettings) -> None:
    async with AsyncSession(Session(backend, settings=settings)) as session:
        await session.init()
        await session.run()
        tracker = await session.create_module("skeleton_tracker")

        async with session.stream(tracker, "on_update", context="ctx") as stream:
            backend.emit(tracker.native, "on_update", SkeletonData(timestamp=1))
            backend.emit(tracker.native, "on_update", SkeletonData(timestamp=2))
            await session.update()

            first = await stream.get(timeout=1.0)
            second = await stream.get(timeout=1.0)
            assert [first.envelope.sequence, second.envelope.sequence] == [1, 2]
            assert first.context == "ctx"
            assert first.handler_id == stream.handler_id

        assert stream.closed
        assert backend.connection_count(tracker.native) == 0
    assert session.state is SessionState.RELEASED


@pytest.mark.asyncio
async def test_stream_iteration_ends_after_close(backend: SimulatedBackend, settings: BridgeSettings) -> None:
    async with AsyncSession(Session(backend, settings=settings)) as session:
        await session.init()
        tracker = await session.create_module("skeleton_tracker")
        stream = session.stream(tracker, "on_update")

        async def consume() -> list[int | None]:
            return [frame.envelope.sequence async for frame in stream]

        consumer = asyncio.create_task(consume())
        backend.emit(tracker.native, "on_update", SkeletonData(timestamp=1))
        await session.update()
        await asyncio.sleep(0.05)
        await stream.aclose()

        assert await asyncio.wait_for(consumer, timeout=1.0) == [1]


@pytest.mark.asyncio
async def test_drive_runs_until_stopped(backend: SimulatedBackend, settings: BridgeSettings) -> None:
    async with AsyncSession(Session(backend, settings=settings)) as session:
        await session.init()
        await session.run()
        tracker = await session.create_module("skeleton_tracker")
        seen: list[int | None] = []
        tracker.connect("on_update", callback=lambda env, ctx: seen.append(env.sequence))

        stop = asyncio.Event()
        loop_task = asyncio.create_task(session.drive(interval_s=0.01, stop=stop))
        for t in range(3):
            backend.emit(tracker.native, "on_update", SkeletonData(timestamp=t))
        for _ in range(200):
            if len(seen) == 3:
                break
            await asyncio.sleep(0.01)
        stop.set()
        await asyncio.wait_for(loop_task, timeout=1.0)

        assert seen == [1, 2, 3]


@pytest.mark.asyncio
async def test_drive_stops_on_license_failure(backend: SimulatedBackend, settings: BridgeSettings) -> None:
    async with AsyncSession(Session(backend, settings=settings)) as session:
        await session.init()
        await session.run()
        backend.revoke_license()
        with pytest.raises(LicenseNotAcquiredError):
            await asyncio.wait_for(session.drive(interval_s=0.01), timeout=1.0)


@pytest.mark.asyncio
async def test_drive_returns_when_session_is_released(backend: SimulatedBackend, settings: BridgeSettings) -> None:
    session = AsyncSession(Session(backend, settings=settings))
    await session.init()
    await session.run()
    loop_task = asyncio.create_task(session.drive(interval_s=0.01))
    await asyncio.sleep(0.03)
    await session.release()
    await asyncio.wait_for(loop_task, timeout=1.0)
    assert session.state is SessionState.RELEASED


@pytest.mark.asyncio
async def test_stream_counts_frames_the_full_queue_could_not_take(
    backend: SimulatedBackend, settings: BridgeSettings
) -> None:
    async with AsyncSession(Session(backend, settings=settings)) as session:
        await session.init()
        await session.run()
        tracker = await session.create_module("skeleton_tracker")

        async with session.stream(tracker, "on_update", maxsize=1) as stream:
            backend.emit(tracker.native, "on_update", SkeletonData(timestamp=1))
            backend.emit(tracker.native, "on_update", SkeletonData(timestamp=2))
            # Driven from the loop thread, both puts are scheduled before the loop runs either.
            session.session.update()
            await asyncio.sleep(0)
            await asyncio.sleep(0)

            assert stream.dropped == 1
            first = await stream.get(timeout=1.0)
            assert first.envelope.sequence == 1
