"""Header redaction for debug logging.

Outgoing requests carry the session credential in a header; it must never
reach a log record.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

_SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "x-api-key",
    }
)


def redact_headers(headers: Mapping[str, str], extra: Iterable[str] = ()) -> dict[str, str]:
    """Copy of *headers* with credential-bearing values replaced.

    Header names are matched case-insensitively. *extra* adds names to hide,
    e.g. a custom ``FetchConfig.auth_header``.
    """
    hidden = _SENSITIVE_HEADERS | {name.lower() for name in extra}
    return {name: "<redacted>" if name.lower() in hidden else value for name, value in headers.items()}
