"""Client configuration for remotefetch."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from remotefetch._constants import AUTHORIZATION_HEADER, DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT, USER_AGENT
from remotefetch.exceptions import FetchConfigError


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise FetchConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FetchConfig:
    """Fetch configuration.

    Parameters
    ----------
    base_url : str
        Default API base address. Identifiers are appended to it verbatim
        unless a fetch overrides it with ``FetchOptions.api``.
    auth_header : str
        Header used to carry the session credential.
    auth_scheme : str or None
        Optional scheme prefix (e.g. ``"Bearer"``). When ``None`` the raw
        token is sent as the header value.
    request_timeout : float
        Total per-request timeout in seconds. A timeout surfaces as a
        transport failure.
    user_agent : str
        User-Agent header sent with every request.
    """

    base_url: str = DEFAULT_BASE_URL
    auth_header: str = AUTHORIZATION_HEADER
    auth_scheme: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if not self.base_url:
            raise FetchConfigError("base_url must be non-empty")
        if self.request_timeout <= 0:
            raise FetchConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    def authorization_value(self, token: str) -> str:
        """Header value for *token* according to ``auth_scheme``."""
        if self.auth_scheme:
            return f"{self.auth_scheme} {token}"
        return token

    @classmethod
    def from_env(cls, **overrides: Any) -> FetchConfig:
        """Create configuration from environment variables.

        Reads ``REMOTEFETCH_BASE_URL``, ``REMOTEFETCH_AUTH_HEADER``,
        ``REMOTEFETCH_AUTH_SCHEME``, ``REMOTEFETCH_REQUEST_TIMEOUT`` and
        ``REMOTEFETCH_USER_AGENT``. Explicit keyword arguments override
        environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "REMOTEFETCH_BASE_URL": "base_url",
            "REMOTEFETCH_AUTH_HEADER": "auth_header",
            "REMOTEFETCH_AUTH_SCHEME": "auth_scheme",
            "REMOTEFETCH_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("REMOTEFETCH_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("REMOTEFETCH_REQUEST_TIMEOUT", timeout_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
