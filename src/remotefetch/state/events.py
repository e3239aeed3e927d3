"""Lifecycle events dispatched by the orchestrator into the reducer."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class EventKind(StrEnum):
    STARTED = "started"
    SUCCESS = "success"
    FAILED = "failed"


class Started(BaseModel):
    """A new cycle began; any previous result is no longer current."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[EventKind.STARTED] = EventKind.STARTED


class Success(BaseModel):
    """The cycle settled with a decoded (and possibly extracted) payload."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[EventKind.SUCCESS] = EventKind.SUCCESS
    payload: Any = None


class Failed(BaseModel):
    """The cycle settled with a human-readable failure description."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[EventKind.FAILED] = EventKind.FAILED
    message: str


LifecycleEvent = Started | Success | Failed
