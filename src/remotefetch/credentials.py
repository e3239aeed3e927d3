"""Credential provider contract.

Only the query side of a credential store is used: one call per fetch
cycle returning the token of the current session. Refresh and storage
are the provider's own business.
"""

from __future__ import annotations

from typing import Protocol


class CredentialProvider(Protocol):
    """Structural interface of a session credential source."""

    async def get_current_session_token(self) -> str:
        ...


class StaticTokenProvider:
    """Credential provider returning a fixed token."""

    def __init__(self, token: str) -> None:
        if not token:
            raise ValueError("token must be non-empty")
        self._token = token

    async def get_current_session_token(self) -> str:
        return self._token
