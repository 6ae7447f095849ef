"""Shared fixtures and browser fakes for the test suite."""

from __future__ import annotations

from typing import Any

import pytest

from domcrawl import config
from domcrawl.browser import cookies, session as browser_session
from domcrawl.capture import buffer, interceptor, store
from domcrawl.models import http, page as page_models

# ── Browser Fakes ───────────────────────────────────────────────


class FakeRequest:
    """Stands in for ``playwright.async_api.Request``."""

    def __init__(self, url: str, method: str = "GET", body: bytes | None = None) -> None:
        self.url = url
        self.method = method
        self.headers = {"accept": "*/*"}
        self.post_data_buffer = body
        self.resource_type = "document"


class FakeRoute:
    """Stands in for ``playwright.async_api.Route`` and records the outcome."""

    def __init__(self, request: FakeRequest) -> None:
        self.request = request
        self.outcome: str | None = None
        self.fulfilled: dict[str, Any] = {}

    async def continue_(self) -> None:
        self.outcome = "continue"

    async def fulfill(self, **kwargs: Any) -> None:
        self.outcome = "fulfill"
        self.fulfilled = kwargs


class FakeContext:
    """Browser context holding at most one route handler."""

    def __init__(self, calls: list[str]) -> None:
        self._calls = calls
        self.handler: Any = None

    async def route(self, pattern: str, handler: Any) -> None:
        self._calls.append("route")
        self.handler = handler

    async def unroute(self, pattern: str, handler: Any) -> None:
        self._calls.append("unroute")
        self.handler = None

    async def dispatch(self, route: FakeRoute) -> None:
        if self.handler is None:
            route.outcome = "network"
            return
        await self.handler(route)


class FakeEngine:
    """Rendering engine that turns navigations into routed requests.

    ``subrequests`` maps a navigated URL to the extra requests
    (method, url, body) the page issues after the document itself.
    """

    def __init__(self, html: str = "<html><body>rendered</body></html>") -> None:
        self.calls: list[str] = []
        self.context = FakeContext(self.calls)
        self.html = html
        self.jar: list[dict[str, Any]] = []
        self.subrequests: dict[str, list[tuple[str, str, bytes | None]]] = {}
        self.routes: list[FakeRoute] = []
        self._page: object | None = None

    @property
    def page(self) -> object | None:
        return self._page

    async def launch(self) -> FakeContext:
        self.calls.append("launch")
        return self.context

    async def open_page(self) -> object:
        self.calls.append("open_page")
        self._page = object()
        return self._page

    async def close_page(self) -> None:
        self.calls.append("close_page")
        self._page = None

    async def close(self) -> None:
        self.calls.append("close")

    async def navigate(self, url: str) -> None:
        self.calls.append(f"navigate:{url}")
        await self.request(url)
        for method, sub_url, body in self.subrequests.get(url, []):
            await self.request(sub_url, method, body)

    async def request(self, url: str, method: str = "GET", body: bytes | None = None) -> FakeRoute:
        route = FakeRoute(FakeRequest(url, method, body))
        self.routes.append(route)
        await self.context.dispatch(route)
        return route

    async def rendered_html(self) -> str:
        return self.html

    async def add_cookies(self, cookies: list[dict[str, Any]]) -> None:
        self.jar.extend(cookies)

    async def cookies(self) -> list[dict[str, Any]]:
        return list(self.jar)


# ── Model Factories ─────────────────────────────────────────────


@pytest.fixture()
def resource() -> http.Resource:
    """A fully populated resource snapshot."""
    return http.Resource(
        url="http://ex.com/",
        code=200,
        body="<html><body>static</body></html>",
        headers={"Content-Type": "text/html", "Content-Length": "32"},
        ip_address="93.184.216.34",
        return_code="ok",
        return_message="No error",
        headers_string="HTTP/1.1 200 OK\r\nContent-Type: text/html\r\n\r\n",
        total_time=0.25,
        time=0.2,
        version="1.1",
    )


@pytest.fixture()
def snapshot_page(resource: http.Resource) -> page_models.Page:
    """A page snapshot with a cookie of its own."""
    return page_models.Page(
        response=resource,
        cookies=[http.Cookie(name="snap", value="1", domain="ex.com")],
    )


# ── Capture Components ──────────────────────────────────────────


@pytest.fixture()
def resources() -> store.ResourceStore:
    return store.ResourceStore()


@pytest.fixture()
def pages() -> buffer.PageBuffer:
    return buffer.PageBuffer()


@pytest.fixture()
def top_url() -> dict[str, str | None]:
    """Mutable holder for the current top-level URL."""
    return {"url": "http://ex.com"}


@pytest.fixture()
def traffic(
    resources: store.ResourceStore,
    pages: buffer.PageBuffer,
    top_url: dict[str, str | None],
) -> interceptor.TrafficInterceptor:
    return interceptor.TrafficInterceptor(resources, pages, lambda: top_url["url"])


# ── Session ─────────────────────────────────────────────────────


@pytest.fixture()
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture()
def ambient_cookies() -> cookies.StaticCookieSource:
    return cookies.StaticCookieSource([
        http.Cookie(name="sid", value="abc", domain="ex.com"),
        http.Cookie(name="", value="nameless"),
    ])


@pytest.fixture()
async def session(
    engine: FakeEngine, ambient_cookies: cookies.StaticCookieSource
) -> browser_session.BrowserSession:
    """A started session wired to the fake engine and the real route transport."""
    browser = browser_session.BrowserSession(
        settings=config.BrowserSettings(),
        cookie_source=ambient_cookies,
        engine=engine,
    )
    await browser.start()
    return browser
