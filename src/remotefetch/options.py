"""Per-observation fetch options."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any


@dataclasses.dataclass(frozen=True)
class FetchOptions:
    """Options snapshot taken when a fetch cycle starts.

    Parameters
    ----------
    do_load : bool
        When ``False`` no request is made and the state stays empty.
    auth : bool
        Attach the current session token to the request.
    extract : callable or None
        Transform applied to the decoded JSON body before it is published.
    api : str or None
        Base address overriding ``FetchConfig.base_url``.
    """

    do_load: bool = True
    auth: bool = True
    extract: Callable[[Any], Any] | None = None
    api: str | None = None

    def full_url(self, default_base: str, identifier: str) -> str:
        return (self.api or default_base) + identifier
