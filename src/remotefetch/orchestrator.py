"""Cancellable remote-fetch orchestrator.

A :class:`FetchOrchestrator` observes one resource identifier at a time.
Each time the identifier changes it cancels the live cycle, dispatches
``Started`` and runs a new cycle: resolve the session token (when ``auth``
is on), issue the request, decode the body and dispatch ``Success`` or
``Failed``. A cycle whose token was cancelled never dispatches anything.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from remotefetch._transport import Transport
from remotefetch.cancellation import CancellationToken
from remotefetch.config import FetchConfig
from remotefetch.credentials import CredentialProvider
from remotefetch.exceptions import (
    AuthResolutionError,
    DecodeError,
    FetchTransportError,
    HttpStatusError,
    OrchestratorDisposedError,
    RemoteFetchError,
)
from remotefetch.options import FetchOptions
from remotefetch.state.events import Failed, LifecycleEvent, Started, Success
from remotefetch.state.reducer import RequestState
from remotefetch.state.store import RequestStateStore, StateListener

_logger = logging.getLogger(__name__)

_cycle_ids = itertools.count(1)


def _failure_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


@dataclass(slots=True)
class FetchCycle:
    """One attempt to load an identifier, from ``Started`` to its outcome."""

    identifier: str
    url: str
    options: FetchOptions
    token: CancellationToken
    cycle_id: int = field(default_factory=lambda: next(_cycle_ids))
    task: asyncio.Task[None] | None = None


class FetchOrchestrator:
    """Owns the current fetch cycle of one observation.

    Usage::

        async with FetchOrchestrator(config, transport, credentials) as fetcher:
            fetcher.observe("/items/1")
            state = await fetcher.settled()

    Leaving the context (or calling :meth:`dispose`) cancels the live cycle;
    no state change happens after that.
    """

    def __init__(
        self,
        config: FetchConfig,
        transport: Transport,
        credentials: CredentialProvider | None = None,
        *,
        options: FetchOptions | None = None,
        on_change: StateListener | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._credentials = credentials
        self._options = options or FetchOptions()
        self._store = RequestStateStore()
        self._identifier: str | None = None
        self._do_load: bool | None = None
        self._current: FetchCycle | None = None
        self._disposed = False
        if on_change is not None:
            self._store.subscribe(on_change)

    # ------------------------------------------------------------------
    # Scope lifetime
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FetchOrchestrator:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Cancel the live cycle and stop publishing state. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._cancel_current()
        self._store.clear_listeners()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> RequestState[Any]:
        return self._store.state

    @property
    def identifier(self) -> str | None:
        return self._identifier

    @property
    def current_cycle(self) -> FetchCycle | None:
        return self._current

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._store.subscribe(listener)

    def observe(self, identifier: str, options: FetchOptions | None = None) -> RequestState[Any]:
        """Re-evaluate the observation for *identifier* and return the current state.

        A new cycle starts only when the identifier differs from the one
        observed last, or when ``do_load`` turns on. Other option changes are
        picked up by the next cycle. Must be called from a running event loop
        when a cycle may start.
        """
        if self._disposed:
            raise OrchestratorDisposedError("observe() called on a disposed orchestrator")

        if options is not None:
            self._options = options
        opts = self._options

        identifier_changed = identifier != self._identifier
        load_changed = opts.do_load != self._do_load
        loop: asyncio.AbstractEventLoop | None = None
        if opts.do_load and (identifier_changed or load_changed):
            # Raises without a running loop, before anything is committed.
            loop = asyncio.get_running_loop()
        self._identifier = identifier
        self._do_load = opts.do_load

        if not opts.do_load:
            if load_changed or identifier_changed:
                self._cancel_current()
                self._store.reset()
            return self._store.state

        if loop is not None:
            self._start_cycle(loop, identifier, opts)
        return self._store.state

    async def settled(self) -> RequestState[Any]:
        """Wait for the current cycle to finish and return the resulting state.

        Returns immediately when no cycle is live. A cycle superseded while
        waiting is followed to its successor.
        """
        while True:
            cycle = self._current
            if cycle is None or cycle.task is None or cycle.task.done():
                return self._store.state
            try:
                await asyncio.shield(cycle.task)
            except asyncio.CancelledError:
                if not cycle.task.cancelled():
                    raise
            if cycle is self._current or self._disposed:
                return self._store.state

    # ------------------------------------------------------------------
    # Cycle management
    # ------------------------------------------------------------------

    def _cancel_current(self) -> None:
        cycle = self._current
        self._current = None
        if cycle is not None and cycle.token.cancel():
            _logger.debug("Cancelled cycle %d for %s", cycle.cycle_id, cycle.identifier)

    def _start_cycle(self, loop: asyncio.AbstractEventLoop, identifier: str, options: FetchOptions) -> None:
        self._cancel_current()

        url = options.full_url(self._config.base_url, identifier)
        cycle = FetchCycle(
            identifier=identifier,
            url=url,
            options=options,
            token=CancellationToken(label=url),
        )
        cycle.task = loop.create_task(
            self._run_cycle(cycle),
            name=f"remotefetch-cycle-{cycle.cycle_id}",
        )
        cycle.token.attach(cycle.task)
        self._current = cycle

        # The task first runs on the next loop iteration, after Started.
        _logger.debug("Started cycle %d for %s", cycle.cycle_id, url)
        self._store.dispatch(Started())

    def _dispatch(self, cycle: FetchCycle, event: LifecycleEvent) -> None:
        """Publish *event* unless *cycle* was cancelled or superseded."""
        if cycle.token.cancelled or cycle is not self._current or self._disposed:
            _logger.debug("Suppressed %s from cancelled cycle %d", event.kind, cycle.cycle_id)
            return
        self._store.dispatch(event)

    async def _run_cycle(self, cycle: FetchCycle) -> None:
        try:
            payload = await self._load(cycle)
        except asyncio.CancelledError:
            if not cycle.token.cancelled:
                raise
            _logger.debug("Cycle %d aborted", cycle.cycle_id)
            return
        except RemoteFetchError as exc:
            _logger.debug("Cycle %d failed: %s", cycle.cycle_id, exc)
            self._dispatch(cycle, Failed(message=_failure_message(exc)))
            return
        self._dispatch(cycle, Success(payload=payload))

    async def _load(self, cycle: FetchCycle) -> Any:
        headers: dict[str, str] = {}
        if cycle.options.auth:
            token = await self._resolve_token()
            cycle.token.raise_if_cancelled()
            headers[self._config.auth_header] = self._config.authorization_value(token)

        try:
            response = await self._transport.request(cycle.url, headers=headers, cancellation=cycle.token)
        except RemoteFetchError:
            raise
        except Exception as exc:
            raise FetchTransportError(_failure_message(exc), url=cycle.url) from exc
        cycle.token.raise_if_cancelled()

        if not response.ok:
            raise HttpStatusError(response.status, response.reason, url=cycle.url)

        data = response.json()
        extract = cycle.options.extract
        if extract is None:
            return data
        try:
            return extract(data)
        except Exception as exc:
            raise DecodeError(_failure_message(exc), url=cycle.url) from exc

    async def _resolve_token(self) -> str:
        if self._credentials is None:
            raise AuthResolutionError("No credential provider configured")
        try:
            return await self._credentials.get_current_session_token()
        except Exception as exc:
            raise AuthResolutionError(_failure_message(exc)) from exc
