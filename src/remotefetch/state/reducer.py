"""Pure request lifecycle reducer.

``transition`` maps the current :class:`RequestState` and a lifecycle event
to the next state. It performs no I/O and touches no shared mutable state,
so it may be called from any context without synchronization.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from remotefetch.exceptions import UnknownLifecycleEventError
from remotefetch.state.events import EventKind, LifecycleEvent

T = TypeVar("T")


class RequestState(BaseModel, Generic[T]):
    """Externally observed value of a fetch.

    Parameters
    ----------
    data : T or None
        Last successfully decoded payload for the current identifier.
    loaded : bool
        ``True`` once the current cycle settled successfully.
    error : str or None
        Failure description for the current identifier.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: T | None = None
    loaded: bool = False
    error: str | None = None

    @model_validator(mode="after")
    def _data_xor_error(self) -> RequestState[T]:
        if self.error is not None and (self.data is not None or self.loaded):
            raise ValueError("a failed state carries no data")
        return self


INITIAL_STATE: RequestState[Any] = RequestState()


def transition(state: RequestState[Any], event: LifecycleEvent) -> RequestState[Any]:
    """Return the state that follows *state* after *event*.

    ``Started`` clears any prior result before the network call resolves so
    stale data is never presented as fresh. An event of unknown kind raises
    :class:`UnknownLifecycleEventError`.
    """
    kind = getattr(event, "kind", None)
    match kind:
        case EventKind.STARTED:
            return RequestState(data=None, loaded=False, error=None)
        case EventKind.SUCCESS:
            return RequestState(data=event.payload, loaded=True, error=None)  # type: ignore[union-attr]
        case EventKind.FAILED:
            return RequestState(data=None, loaded=False, error=event.message)  # type: ignore[union-attr]
        case _:
            raise UnknownLifecycleEventError(f"unknown lifecycle event kind: {kind!r}")
