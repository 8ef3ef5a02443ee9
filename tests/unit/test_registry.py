from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from trackbridge.errors import UnknownHandlerError
from trackbridge.bridge.delivery import CallDelivery
from trackbridge.bridge.registry import CallbackRegistry


def _noop(_envelope: object, _context: object) -> None:
    return None


def test_ids_start_at_one_and_are_never_reused() -> None:
    registry = CallbackRegistry()
    first = registry.reserve("on_update", None, CallDelivery(_noop))
    second = registry.reserve("on_update", None, CallDelivery(_noop))
    assert (first.handler_id, second.handler_id) == (1, 2)

    registry.discard(first.handler_id)
    third = registry.reserve("on_update", None, CallDelivery(_noop))
    assert third.handler_id == 3
    assert registry.live_ids() == [2, 3]


def test_disconnect_unknown_or_twice_raises() -> None:
    registry = CallbackRegistry("skeleton_tracker")
    registration = registry.reserve("on_update", "ctx", CallDelivery(_noop))
    registry.bind(registration.handler_id, 42)

    removed = registry.disconnect(registration.handler_id)
    assert removed is registration
    assert not registration.active

    with pytest.raises(UnknownHandlerError):
        registry.disconnect(registration.handler_id)
    with pytest.raises(UnknownHandlerError):
        registry.disconnect(99)


def test_disconnect_during_delivery_defers_native_unsubscribe() -> None:
    registry = CallbackRegistry()
    registration = registry.reserve("on_update", None, CallDelivery(_noop))
    registry.bind(registration.handler_id, 7)

    assert registry.begin_dispatch(registration.handler_id) is registration
    assert registry.disconnect(registration.handler_id) is None
    # Gone for every later lookup right away.
    assert registry.begin_dispatch(registration.handler_id) is None
    assert registry.end_dispatch(registration) is True
    assert registry.live_ids() == []


def test_bind_after_disconnect_reports_orphaned_native_subscription() -> None:
    registry = CallbackRegistry()
    registration = registry.reserve("on_update", None, CallDelivery(_noop))
    assert registry.disconnect(registration.handler_id) is None
    assert registry.bind(registration.handler_id, 5) is False


def test_concurrent_reserve_and_disconnect_never_duplicate_ids() -> None:
    registry = CallbackRegistry()

    def churn(_: int) -> list[int]:
        ids = []
        for _ in range(50):
            registration = registry.reserve("on_update", None, CallDelivery(_noop))
            ids.append(registration.handler_id)
            if registration.handler_id % 2 == 0:
                registry.disconnect(registration.handler_id)
        return ids

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(churn, range(8)))

    all_ids = [hid for ids in results for hid in ids]
    assert len(all_ids) == len(set(all_ids)) == 400
    assert registry.live_ids() == sorted(hid for hid in all_ids if hid % 2 == 1)
