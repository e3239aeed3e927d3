"""HTTP transport used by fetch cycles."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from remotefetch._redact import redact_headers
from remotefetch.cancellation import CancellationToken
from remotefetch.config import FetchConfig
from remotefetch.exceptions import DecodeError, FetchTransportError

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class TransportResponse:
    """Fully read HTTP response."""

    url: str
    status: int
    reason: str
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON, raising :class:`DecodeError` on failure."""
        try:
            return json.loads(self.body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(
                f"Invalid JSON from {self.url}: {exc}",
                url=self.url,
            ) from exc


class Transport(Protocol):
    """Structural transport interface used by the orchestrator.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`AiohttpTransport`) concrete.
    """

    async def request(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        cancellation: CancellationToken,
    ) -> TransportResponse:
        ...


class AiohttpTransport:
    """GET transport backed by a shared :class:`aiohttp.ClientSession`."""

    def __init__(self, config: FetchConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def request(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        cancellation: CancellationToken,
    ) -> TransportResponse:
        cancellation.raise_if_cancelled()

        request_headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
        }
        request_headers.update(headers)

        _logger.debug("GET %s headers=%s", url, redact_headers(request_headers, (self._config.auth_header,)))

        try:
            async with self._http.get(url, headers=request_headers, timeout=self._timeout) as resp:
                body = await resp.read()
                return TransportResponse(
                    url=url,
                    status=resp.status,
                    reason=resp.reason or "",
                    body=body,
                )
        except TimeoutError as exc:
            raise FetchTransportError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise FetchTransportError(f"Request to {url} failed: {exc}", url=url) from exc
