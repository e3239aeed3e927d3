"""Deterministic request state store.

This is the only component allowed to replace the observed request state.
Events are applied through :func:`transition` strictly in dispatch order.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from remotefetch.exceptions import UnknownLifecycleEventError
from remotefetch.state.events import LifecycleEvent
from remotefetch.state.reducer import INITIAL_STATE, RequestState, transition

_logger = logging.getLogger(__name__)

StateListener = Callable[[RequestState[Any]], None]


class RequestStateStore:
    """Holds the current :class:`RequestState` of one observation.

    Given the same sequence of events the store produces the same states.
    A listener that dispatches while being notified does not interleave
    with the event being applied: its event is queued and applied once the
    current notification round has finished. A listener that raises does
    not stop the queue; the first such error is re-raised once every
    queued event has been applied.
    """

    def __init__(self, initial: RequestState[Any] = INITIAL_STATE) -> None:
        self._state = initial
        self._pending: deque[LifecycleEvent | None] = deque()
        self._draining = False
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> RequestState[Any]:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, event: LifecycleEvent) -> None:
        """Apply *event* to the current state."""
        self._pending.append(event)
        self._drain()

    def reset(self) -> None:
        """Return to the initial empty state, in order with pending events."""
        self._pending.append(None)
        self._drain()

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def _drain(self) -> None:
        if self._draining:
            return
        self._draining = True
        listener_error: Exception | None = None
        try:
            while self._pending:
                event = self._pending.popleft()
                previous = self._state
                try:
                    self._state = INITIAL_STATE if event is None else transition(previous, event)
                except UnknownLifecycleEventError:
                    self._pending.clear()
                    raise
                if self._state == previous:
                    continue
                _logger.debug("Request state -> loaded=%s error=%r", self._state.loaded, self._state.error)
                for listener in list(self._listeners):
                    try:
                        listener(self._state)
                    except Exception as exc:
                        _logger.debug("State listener raised", exc_info=True)
                        if listener_error is None:
                            listener_error = exc
        finally:
            self._draining = False
        if listener_error is not None:
            raise listener_error
