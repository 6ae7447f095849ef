"""Pydantic models for HTTP exchanges: requests, resource snapshots and cookies."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pydantic

# Fields copied from a stored snapshot into a live response when a
# request is satisfied without touching the network.
RESPONSE_FIELDS = (
    "code",
    "url",
    "body",
    "headers",
    "ip_address",
    "return_code",
    "return_message",
    "headers_string",
    "total_time",
    "time",
    "version",
)


class InterceptedRequest(pydantic.BaseModel):
    """A request issued by the rendering engine, as seen by the transport."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = pydantic.Field(default_factory=dict)
    body: bytes | None = None
    resource_type: str | None = None


class Cookie(pydantic.BaseModel):
    """A browser cookie, stamped with the URL it was read for."""

    name: str
    value: str = ""
    url: str | None = None
    domain: str | None = None
    path: str = "/"
    expires: float = -1
    http_only: bool = False
    secure: bool = False
    same_site: str | None = None

    @property
    def key(self) -> tuple[str, str | None, str]:
        """Identity used when merging cookie collections."""
        return (self.name, self.domain, self.path)

    @classmethod
    def from_browser(cls, data: dict[str, Any], url: str | None = None) -> Cookie:
        """Build a cookie from a Playwright cookie dict."""
        return cls(
            name=data.get("name", ""),
            value=data.get("value", ""),
            url=url,
            domain=data.get("domain") or None,
            path=data.get("path", "/"),
            expires=data.get("expires", -1),
            http_only=data.get("httpOnly", False),
            secure=data.get("secure", False),
            same_site=data.get("sameSite"),
        )

    def to_browser(self, fallback_url: str | None = None) -> dict[str, Any]:
        """Convert to the dict shape accepted by ``BrowserContext.add_cookies``.

        Playwright needs either a URL or a domain/path pair to scope
        the cookie; the cookie's own domain wins, then its URL, then
        *fallback_url*.
        """
        data: dict[str, Any] = {"name": self.name, "value": self.value}
        if self.domain:
            data["domain"] = self.domain
            data["path"] = self.path or "/"
        elif self.url or fallback_url:
            data["url"] = self.url or fallback_url
        if self.expires is not None and self.expires >= 0:
            data["expires"] = self.expires
        data["httpOnly"] = self.http_only
        data["secure"] = self.secure
        if self.same_site in ("Strict", "Lax", "None"):
            data["sameSite"] = self.same_site
        return data


def merge_cookies(*groups: Iterable[Cookie]) -> list[Cookie]:
    """Union cookie collections, later groups replacing same-key entries.

    Order of first appearance is kept, and no key present in any
    group is ever dropped.
    """
    merged: dict[tuple[str, str | None, str], Cookie] = {}
    for group in groups:
        for cookie in group:
            merged[cookie.key] = cookie
    return list(merged.values())


class Resource(pydantic.BaseModel):
    """Snapshot of one HTTP exchange."""

    url: str
    code: int = 0
    body: str | bytes = ""
    headers: dict[str, str] = pydantic.Field(default_factory=dict)
    ip_address: str | None = None
    return_code: str | None = None
    return_message: str | None = None
    headers_string: str = ""
    total_time: float = 0.0
    time: float = 0.0
    version: str = "1.1"
    request: InterceptedRequest | None = None
    cookies: list[Cookie] = pydantic.Field(default_factory=list)

    def copy_into(self, destination: Resource) -> Resource:
        """Overwrite *destination*'s response fields with this snapshot's."""
        for field in RESPONSE_FIELDS:
            value = getattr(self, field)
            if isinstance(value, dict):
                value = dict(value)
            setattr(destination, field, value)
        return destination
