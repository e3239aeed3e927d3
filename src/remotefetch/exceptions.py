"""Custom exception hierarchy for remotefetch."""

from __future__ import annotations


class RemoteFetchError(Exception):
    """Base exception for all remotefetch errors."""


class FetchConfigError(RemoteFetchError):
    """Invalid or missing configuration."""


class AuthResolutionError(RemoteFetchError):
    """The credential provider could not produce a session token."""


class FetchTransportError(RemoteFetchError):
    """Transport-level failure (connection error, timeout, aborted read)."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class HttpStatusError(RemoteFetchError):
    """Server answered with a non-success status.

    The message is ``"<status> <reason>"`` so it can be shown as-is.
    """

    def __init__(self, status: int, reason: str, *, url: str = "") -> None:
        self.status = status
        self.reason = reason
        self.url = url
        super().__init__(f"{status} {reason}")


class DecodeError(RemoteFetchError):
    """Response body is not valid JSON or the extract callable failed."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class OrchestratorDisposedError(RemoteFetchError):
    """An orchestrator was used after its owning scope ended."""


class UnknownLifecycleEventError(RemoteFetchError):
    """A lifecycle event with an unrecognized kind reached the reducer.

    This is a programming error inside the orchestrator, never the result
    of external input, and is not converted into a ``Failed`` event.
    """
