"""remotefetch - Cancellable async remote-fetch state machine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("remotefetch")
except PackageNotFoundError:
    __version__ = "0+local"
from remotefetch.cancellation import CancellationToken, FetchCancelledError
from remotefetch.client import RemoteFetchClient
from remotefetch.config import FetchConfig
from remotefetch.credentials import CredentialProvider, StaticTokenProvider
from remotefetch.exceptions import (
    AuthResolutionError,
    DecodeError,
    FetchConfigError,
    FetchTransportError,
    HttpStatusError,
    OrchestratorDisposedError,
    RemoteFetchError,
    UnknownLifecycleEventError,
)
from remotefetch.options import FetchOptions
from remotefetch.orchestrator import FetchCycle, FetchOrchestrator
from remotefetch.state.events import EventKind, Failed, LifecycleEvent, Started, Success
from remotefetch.state.reducer import INITIAL_STATE, RequestState, transition
from remotefetch.state.store import RequestStateStore

__all__ = [
    "__version__",
    "AuthResolutionError",
    "CancellationToken",
    "CredentialProvider",
    "DecodeError",
    "EventKind",
    "Failed",
    "FetchCancelledError",
    "FetchConfig",
    "FetchConfigError",
    "FetchCycle",
    "FetchOptions",
    "FetchOrchestrator",
    "FetchTransportError",
    "HttpStatusError",
    "INITIAL_STATE",
    "LifecycleEvent",
    "OrchestratorDisposedError",
    "RemoteFetchClient",
    "RemoteFetchError",
    "RequestState",
    "RequestStateStore",
    "Started",
    "StaticTokenProvider",
    "Success",
    "UnknownLifecycleEventError",
    "transition",
]
