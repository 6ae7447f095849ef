"""
Ambient cookie sources used to seed the browser before each navigation.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from domcrawl.models import http


class CookieSource(Protocol):
    """Read-only, process-wide cookie collection."""

    def cookies(self) -> Sequence[http.Cookie]: ...


class StaticCookieSource:
    """A cookie source backed by a fixed collection."""

    def __init__(self, cookies: Iterable[http.Cookie] = ()) -> None:
        self._cookies = list(cookies)

    def cookies(self) -> Sequence[http.Cookie]:
        return tuple(self._cookies)


EMPTY_COOKIE_SOURCE = StaticCookieSource()
