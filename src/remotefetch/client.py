"""High-level async client owning the HTTP session and its fetchers."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from remotefetch._transport import AiohttpTransport, Transport
from remotefetch.config import FetchConfig
from remotefetch.credentials import CredentialProvider
from remotefetch.exceptions import RemoteFetchError
from remotefetch.options import FetchOptions
from remotefetch.orchestrator import FetchOrchestrator
from remotefetch.state.reducer import RequestState
from remotefetch.state.store import StateListener

_logger = logging.getLogger(__name__)


class RemoteFetchClient:
    """Async client that hands out fetch orchestrators bound to its lifetime.

    Usage::

        async with RemoteFetchClient(config, credentials=provider) as client:
            fetcher = client.fetcher()
            fetcher.observe("/items/1")
            state = await fetcher.settled()

    Closing the client disposes every orchestrator it created, aborting any
    request still in flight.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        *,
        credentials: CredentialProvider | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or FetchConfig()
        self._credentials = credentials
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._fetchers: list[FetchOrchestrator] = []

    @property
    def config(self) -> FetchConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RemoteFetchClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = AiohttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        _logger.debug("Closing client, disposing %d fetchers", len(self._fetchers))
        for fetcher in self._fetchers:
            fetcher.dispose()
        self._fetchers.clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise RemoteFetchError("Client not initialized. Use 'async with RemoteFetchClient(...) as client:'")
        return self._transport

    def fetcher(
        self,
        options: FetchOptions | None = None,
        *,
        on_change: StateListener | None = None,
    ) -> FetchOrchestrator:
        """Create an orchestrator that lives until it or this client is disposed."""
        orchestrator = FetchOrchestrator(
            self._config,
            self._require_transport(),
            self._credentials,
            options=options,
            on_change=on_change,
        )
        self._fetchers = [f for f in self._fetchers if not f.disposed]
        self._fetchers.append(orchestrator)
        return orchestrator

    async def fetch(self, identifier: str, options: FetchOptions | None = None) -> RequestState[Any]:
        """Run a single cycle for *identifier* and return its settled state."""
        fetcher = self.fetcher(options)
        try:
            fetcher.observe(identifier)
            return await fetcher.settled()
        finally:
            fetcher.dispose()
