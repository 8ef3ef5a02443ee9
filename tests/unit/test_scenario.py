from __future__ import annotations

from pathlib import Path

from trackbridge.session import Session
from trackbridge.native import SimulatedBackend
from trackbridge.state.session import SessionState
from trackbridge.state.frames import Joint, Skeleton, SkeletonData
from trackbridge.bridge.envelope import FrameEnvelope


def _frame(t: int) -> SkeletonData:
    return SkeletonData(timestamp=t, skeletons=(Skeleton(user_id=1, joints=(Joint(joint_type=1, confidence=0.9),)),))


def test_skeleton_tracker_end_to_end(session: Session, backend: SimulatedBackend, tmp_path: Path) -> None:
    config = tmp_path / "config.json"
    config.write_text('{"Skeletonization": {"Type": "CNN_HPE"}}')

    session.init(str(config))
    session.run()
    tracker = session.create_skeleton_tracker()

    received: list[tuple[FrameEnvelope, object]] = []
    handler_id = tracker.connect_on_update(lambda env, ctx: received.append((env, ctx)), "user-context")
    assert handler_id == 1

    for t in (100, 200, 300):
        backend.emit(tracker.native, "on_update", _frame(t))
        session.update()

    assert [env.sequence for env, _ in received] == [1, 2, 3]
    assert [env.payload.timestamp for env, _ in received] == [100, 200, 300]
    assert all(ctx == "user-context" for _, ctx in received)
    assert received[0][0].payload.skeletons[0].user_id == 1

    tracker.disconnect(handler_id)
    assert backend.connection_count(tracker.native) == 0
    backend.emit(tracker.native, "on_update", _frame(400))
    session.update()
    assert len(received) == 3

    session.release()
    assert session.state is SessionState.RELEASED

    # Envelopes still own their frames after the session is gone.
    assert received[2][0].payload.timestamp == 300
    for env, _ in received:
        env.close()
    # Three delivered frames, the undelivered fourth, and the initial empty snapshot.
    assert backend.freed_frames == 5
