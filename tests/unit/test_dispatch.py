from __future__ import annotations

import queue
import threading

import pytest

from trackbridge.session import Session
from trackbridge.native import SimulatedBackend
from trackbridge.native.event import NativeEvent
from trackbridge.bridge.ownership import NativeRef
from trackbridge.bridge.envelope import FrameEnvelope
from trackbridge.errors import UpdateError, DispatchError
from trackbridge.config.dispatch import REASON_QUEUE_FULL, REASON_CALLBACK_FAILED
from trackbridge.state.frames import SkeletonData
from trackbridge.state.delivered import DeliveredFrame
from trackbridge.config.session import REASON_REENTRANT_UPDATE


@pytest.mark.parametrize("frames", [0, 1, 100])
def test_frames_are_delivered_once_in_native_order(running: Session, backend: SimulatedBackend, frames: int) -> None:
    tracker = running.create_skeleton_tracker()
    seen: list[tuple[int | None, int]] = []
    tracker.connect_on_update(lambda env, ctx: seen.append((env.sequence, env.payload.timestamp)))

    for i in range(frames):
        backend.emit(tracker.native, "on_update", SkeletonData(timestamp=i))
        running.update()
    running.update()

    assert seen == [(i + 1, i) for i in range(frames)]


def test_context_is_handed_back_untouched(running: Session, backend: SimulatedBackend) -> None:
    tracker = running.create_skeleton_tracker()
    context = object()
    received: list[object] = []
    tracker.connect_on_update(lambda env, ctx: received.append(ctx), context)

    backend.emit(tracker.native, "on_update", SkeletonData(timestamp=1))
    running.update()
    assert received == [context]


def test_callback_failure_surfaces_after_the_driving_call(running: Session, backend: SimulatedBackend) -> None:
    tracker = running.create_skeleton_tracker()
    good: list[int | None] = []
    boom = RuntimeError("foreign callback broke")

    def bad(_env: FrameEnvelope, _ctx: object) -> None:
        raise boom

    bad_id = tracker.connect_on_update(bad)
    tracker.connect_on_update(lambda env, ctx: good.append(env.sequence))

    backend.emit(tracker.native, "on_update", SkeletonData(timestamp=1))
    backend.emit(tracker.native, "on_update", SkeletonData(timestamp=2))
    with pytest.raises(DispatchError) as exc:
        running.update()

    # Other handlers still saw every frame; the native loop was not aborted.
    assert good == [1, 2]
    assert exc.value.failures == 2
    assert exc.value.handler_id == bad_id
    assert exc.value.reason_code == REASON_CALLBACK_FAILED
    assert exc.value.__cause__ is boom

    # The session is still usable.
    running.update()


def test_queue_delivery_and_full_queue(running: Session, backend: SimulatedBackend) -> None:
    tracker = running.create_skeleton_tracker()
    inbox: queue.Queue[DeliveredFrame] = queue.Queue(maxsize=1)
    handler_id = tracker.connect_on_update(context="ctx", queue=inbox)

    backend.emit(tracker.native, "on_update", SkeletonData(timestamp=1))
    backend.emit(tracker.native, "on_update", SkeletonData(timestamp=2))
    with pytest.raises(DispatchError) as exc:
        running.update()
    assert exc.value.reason_code == REASON_QUEUE_FULL

    delivered = inbox.get_nowait()
    assert delivered.handler_id == handler_id
    assert delivered.context == "ctx"
    assert delivered.envelope.sequence == 1
    assert delivered.envelope.payload.timestamp == 1


def test_duplicate_sequence_is_dropped(running: Session) -> None:
    tracker = running.create_skeleton_tracker()
    seen: list[int | None] = []
    handler_id = tracker.connect_on_update(lambda env, ctx: seen.append(env.sequence))
    ref = NativeRef(SkeletonData(timestamp=0))
    event = NativeEvent(ref=ref, sequence=5)

    with running.dispatcher.driving("test") as report:
        running.dispatcher.dispatch(tracker, handler_id, event)
        running.dispatcher.dispatch(tracker, handler_id, event)
        running.dispatcher.dispatch(tracker, handler_id, NativeEvent(ref=ref, sequence=4))

    assert seen == [5]
    assert report.delivered == 1
    assert report.dropped == 2


def test_callback_outside_driving_call_is_dropped(running: Session, caplog: pytest.LogCaptureFixture) -> None:
    tracker = running.create_skeleton_tracker()
    seen: list[object] = []
    handler_id = tracker.connect_on_update(lambda env, ctx: seen.append(env))
    trampoline = running.dispatcher.make_trampoline(tracker, handler_id)

    trampoline(NativeEvent(ref=NativeRef(SkeletonData(timestamp=0)), sequence=1))

    assert seen == []
    assert "outside a driving call" in caplog.text


def test_callback_from_foreign_thread_is_dropped(running: Session) -> None:
    tracker = running.create_skeleton_tracker()
    seen: list[object] = []
    handler_id = tracker.connect_on_update(lambda env, ctx: seen.append(env))
    trampoline = running.dispatcher.make_trampoline(tracker, handler_id)
    event = NativeEvent(ref=NativeRef(SkeletonData(timestamp=0)), sequence=1)

    with running.dispatcher.driving("test"):
        worker = threading.Thread(target=trampoline, args=(event,))
        worker.start()
        worker.join()

    assert seen == []


def test_disconnect_inside_own_callback(running: Session, backend: SimulatedBackend) -> None:
    tracker = running.create_skeleton_tracker()
    seen: list[int | None] = []
    ids: list[int] = []

    def once(env: FrameEnvelope, _ctx: object) -> None:
        seen.append(env.sequence)
        tracker.disconnect(ids[0])

    ids.append(tracker.connect_on_update(once))
    for t in range(3):
        backend.emit(tracker.native, "on_update", SkeletonData(timestamp=t))
    running.update()

    assert seen == [1]
    assert backend.connection_count(tracker.native) == 0
    assert tracker.registry.live_ids() == []


def test_update_from_callback_is_rejected(running: Session, backend: SimulatedBackend) -> None:
    tracker = running.create_skeleton_tracker()
    errors: list[UpdateError] = []

    def reenter(_env: FrameEnvelope, _ctx: object) -> None:
        try:
            running.update()
        except UpdateError as exc:
            errors.append(exc)

    tracker.connect_on_update(reenter)
    backend.emit(tracker.native, "on_update", SkeletonData(timestamp=1))
    running.update()

    assert [e.reason_code for e in errors] == [REASON_REENTRANT_UPDATE]
