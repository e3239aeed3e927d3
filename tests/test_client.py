from __future__ import annotations

import asyncio
from typing import Any

import pytest
from aiohttp import web
from aiohttp import test_utils

from remotefetch.client import RemoteFetchClient
from remotefetch.config import FetchConfig
from remotefetch.credentials import StaticTokenProvider
from remotefetch.exceptions import RemoteFetchError
from remotefetch.options import FetchOptions
from remotefetch.state.reducer import RequestState


def _app(slow_entered: asyncio.Event | None = None) -> web.Application:
    async def _item(request: web.Request) -> web.Response:
        if request.headers.get("Authorization") != "TOKEN":
            raise web.HTTPUnauthorized()
        return web.json_response({"x": int(request.match_info["item_id"])})

    async def _slow(request: web.Request) -> web.Response:
        if slow_entered is not None:
            slow_entered.set()
        await asyncio.sleep(1)
        return web.json_response({"x": -1})

    app = web.Application()
    app.router.add_get("/items/{item_id}", _item)
    app.router.add_get("/slow", _slow)
    return app


def _base(server: test_utils.TestServer) -> str:
    return f"http://{server.host}:{server.port}"


@pytest.mark.asyncio
async def test_fetch_returns_settled_state_with_auth() -> None:
    async with test_utils.TestServer(_app()) as server:
        config = FetchConfig(base_url=_base(server))
        async with RemoteFetchClient(config, credentials=StaticTokenProvider("TOKEN")) as client:
            state = await client.fetch("/items/1")

    assert state == RequestState(data={"x": 1}, loaded=True, error=None)


@pytest.mark.asyncio
async def test_fetch_not_found() -> None:
    async with test_utils.TestServer(_app()) as server:
        config = FetchConfig(base_url=_base(server))
        async with RemoteFetchClient(config, credentials=StaticTokenProvider("TOKEN")) as client:
            state = await client.fetch("/missing")

    assert state == RequestState(data=None, loaded=False, error="404 Not Found")


@pytest.mark.asyncio
async def test_fetch_without_auth_is_rejected_by_server() -> None:
    async with test_utils.TestServer(_app()) as server:
        config = FetchConfig(base_url=_base(server))
        async with RemoteFetchClient(config) as client:
            state = await client.fetch("/items/1", FetchOptions(auth=False))

    assert state.error == "401 Unauthorized"


@pytest.mark.asyncio
async def test_fetcher_with_extract_and_listener() -> None:
    seen: list[RequestState[Any]] = []
    async with test_utils.TestServer(_app()) as server:
        config = FetchConfig(base_url=_base(server))
        async with RemoteFetchClient(config, credentials=StaticTokenProvider("TOKEN")) as client:
            fetcher = client.fetcher(FetchOptions(extract=lambda d: d["x"]), on_change=seen.append)
            fetcher.observe("/items/42")
            state = await fetcher.settled()

    assert state.data == 42
    assert [s.data for s in seen] == [42]
    assert fetcher.disposed


@pytest.mark.asyncio
async def test_closing_client_aborts_in_flight_fetch() -> None:
    entered = asyncio.Event()
    async with test_utils.TestServer(_app(entered)) as server:
        config = FetchConfig(base_url=_base(server))
        async with RemoteFetchClient(config, credentials=StaticTokenProvider("TOKEN")) as client:
            fetcher = client.fetcher()
            fetcher.observe("/slow")
            await asyncio.wait_for(entered.wait(), timeout=2.0)
            cycle = fetcher.current_cycle

        assert cycle is not None and cycle.task is not None
        await asyncio.wait_for(asyncio.wait({cycle.task}), timeout=2.0)

    assert cycle.token.cancelled
    assert fetcher.state == RequestState()


@pytest.mark.asyncio
async def test_fetcher_requires_open_client() -> None:
    client = RemoteFetchClient(FetchConfig())
    with pytest.raises(RemoteFetchError, match="not initialized"):
        client.fetcher()
