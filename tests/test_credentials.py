from __future__ import annotations

import pytest

from remotefetch.credentials import StaticTokenProvider


@pytest.mark.asyncio
async def test_static_provider_returns_token() -> None:
    provider = StaticTokenProvider("TOKEN")
    assert await provider.get_current_session_token() == "TOKEN"


def test_static_provider_rejects_empty_token() -> None:
    with pytest.raises(ValueError):
        StaticTokenProvider("")
