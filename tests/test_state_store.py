from __future__ import annotations

from typing import Any

import pytest

from remotefetch.exceptions import UnknownLifecycleEventError
from remotefetch.state.events import Failed, Started, Success
from remotefetch.state.reducer import INITIAL_STATE, RequestState
from remotefetch.state.store import RequestStateStore


def test_events_apply_in_dispatch_order() -> None:
    store = RequestStateStore()
    seen: list[RequestState[Any]] = []
    store.subscribe(seen.append)

    store.dispatch(Started())
    store.dispatch(Success(payload={"x": 1}))
    store.dispatch(Started())
    store.dispatch(Failed(message="503 Service Unavailable"))

    assert [s.loaded for s in seen] == [True, False, False]
    assert seen[0].data == {"x": 1}
    assert store.state.error == "503 Service Unavailable"


def test_reentrant_dispatch_is_queued_not_interleaved() -> None:
    store = RequestStateStore()
    order: list[str] = []

    def _first(state: RequestState[Any]) -> None:
        order.append(f"first:{state.data}")
        if state.data == 1:
            store.dispatch(Success(payload=2))

    def _second(state: RequestState[Any]) -> None:
        order.append(f"second:{state.data}")

    store.subscribe(_first)
    store.subscribe(_second)

    store.dispatch(Success(payload=1))

    # Both listeners observe payload 1 before anyone observes payload 2.
    assert order == ["first:1", "second:1", "first:2", "second:2"]
    assert store.state.data == 2


def test_unchanged_state_does_not_notify() -> None:
    store = RequestStateStore()
    seen: list[RequestState[Any]] = []
    store.subscribe(seen.append)

    store.dispatch(Started())

    assert seen == []


def test_reset_returns_to_initial_state() -> None:
    store = RequestStateStore()
    store.dispatch(Success(payload={"x": 1}))

    store.reset()

    assert store.state == INITIAL_STATE


def test_unsubscribe_stops_notifications() -> None:
    store = RequestStateStore()
    seen: list[RequestState[Any]] = []
    unsubscribe = store.subscribe(seen.append)

    store.dispatch(Success(payload=1))
    unsubscribe()
    unsubscribe()
    store.dispatch(Success(payload=2))

    assert [s.data for s in seen] == [1]


def test_listener_error_does_not_drop_queued_events() -> None:
    store = RequestStateStore()
    seen: list[Any] = []

    def _failing(state: RequestState[Any]) -> None:
        if state.data == 1:
            store.dispatch(Success(payload=2))
            raise RuntimeError("listener failed")

    store.subscribe(_failing)
    store.subscribe(lambda state: seen.append(state.data))

    with pytest.raises(RuntimeError, match="listener failed"):
        store.dispatch(Success(payload=1))

    assert seen == [1, 2]
    assert store.state.data == 2

    store.dispatch(Success(payload=3))
    assert seen == [1, 2, 3]


def test_unknown_event_clears_queue_and_propagates() -> None:
    class _Bogus:
        kind = "bogus"

    store = RequestStateStore()

    with pytest.raises(UnknownLifecycleEventError):
        store.dispatch(_Bogus())  # type: ignore[arg-type]

    store.dispatch(Success(payload=1))
    assert store.state.data == 1
