"""
Browser session for crawling with DOM/JS/AJAX support.

A session drives one rendering engine whose traffic all passes through
a :class:`~domcrawl.capture.interceptor.TrafficInterceptor`.  Requests
can be answered from preloaded or cached resources, which lets a
crawler re-render content it already fetched without another network
round-trip, and, while capture is armed, the traffic a page generates
is assembled into pages of links and forms.
"""

from __future__ import annotations

import dataclasses
from types import TracebackType
from typing import Any, Protocol

from domcrawl import config
from domcrawl.browser import cookies as cookie_sources
from domcrawl.browser import engine as engine_mod
from domcrawl.browser import transport as transport_mod
from domcrawl.capture import buffer, interceptor, store
from domcrawl.exceptions import InvalidLoadTargetError
from domcrawl.models import http, page as page_models
from domcrawl.utils import logger

log = logger.create_logger("BrowserSession")


# ============================================================================
# Load Targets
# ============================================================================


@dataclasses.dataclass(frozen=True)
class NavigateToURL:
    """Navigate to a URL over the network."""

    url: str


@dataclasses.dataclass(frozen=True)
class ReplayResource:
    """Render an already-fetched resource without fetching it again."""

    resource: http.Resource


LoadTarget = NavigateToURL | ReplayResource


def as_resource(target: object) -> http.Resource:
    """Return the resource snapshot a Resource or Page stands for.

    A page contributes a copy of its top-level response carrying the
    page's cookies as well.
    """
    if isinstance(target, http.Resource):
        return target
    if isinstance(target, page_models.Page):
        resource = target.response.model_copy(deep=True)
        resource.cookies = http.merge_cookies(resource.cookies, target.cookies)
        return resource
    raise InvalidLoadTargetError(
        f"Expected a Resource or Page, got {type(target).__name__}"
    )


def as_load_target(target: object) -> LoadTarget:
    """Classify a :meth:`BrowserSession.load` argument."""
    if isinstance(target, (NavigateToURL, ReplayResource)):
        return target
    if isinstance(target, str):
        return NavigateToURL(target)
    if isinstance(target, (http.Resource, page_models.Page)):
        return ReplayResource(as_resource(target))
    raise InvalidLoadTargetError(
        f"Cannot load {type(target).__name__}; expected a URL, Resource or Page"
    )


# ============================================================================
# Collaborator Interfaces
# ============================================================================


class RenderingEngine(Protocol):
    """What the session needs from the browser it drives."""

    @property
    def context(self) -> Any: ...

    @property
    def page(self) -> Any: ...

    async def launch(self) -> Any: ...

    async def open_page(self) -> Any: ...

    async def close_page(self) -> None: ...

    async def close(self) -> None: ...

    async def navigate(self, url: str) -> Any: ...

    async def rendered_html(self) -> str: ...

    async def add_cookies(self, cookies: list[dict[str, Any]]) -> None: ...

    async def cookies(self) -> list[dict[str, Any]]: ...


class ProxyTransport(Protocol):
    """Interception layer that calls the session's handler per request."""

    async def start(self, context: Any) -> None: ...

    async def stop(self) -> None: ...


# ============================================================================
# Session
# ============================================================================


class BrowserSession:
    """
    Real browser driver with resource substitution and page capture.
    """

    def __init__(
        self,
        settings: config.BrowserSettings | None = None,
        cookie_source: cookie_sources.CookieSource | None = None,
        engine: RenderingEngine | None = None,
        transport: ProxyTransport | None = None,
    ) -> None:
        self._settings = settings or config.BrowserSettings()
        self._cookie_source = cookie_source or cookie_sources.EMPTY_COOKIE_SOURCE
        self._url: str | None = None

        self._resources = store.ResourceStore()
        self._pages = buffer.PageBuffer()
        self._interceptor = interceptor.TrafficInterceptor(
            self._resources, self._pages, lambda: self.url
        )

        self._engine: RenderingEngine = engine or engine_mod.PlaywrightEngine(self._settings)
        self._transport: ProxyTransport = transport or transport_mod.RouteTransport(
            self._interceptor.handle
        )

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def start(self) -> BrowserSession:
        """Launch the browser with request interception in place."""
        log.info("Starting browser session", {"headless": self._settings.headless})
        await self._engine.launch()
        # Interception is registered before the page exists, so no
        # request can slip past it.
        await self._transport.start(self._engine.context)
        await self._engine.open_page()
        return self

    async def close(self) -> None:
        """Stop the browser, then the interception layer."""
        log.debug("Closing browser session")
        await self._engine.close_page()
        await self._transport.stop()
        await self._engine.close()
        log.debug("Browser session closed")

    async def __aenter__(self) -> BrowserSession:
        return await self.start()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ==========================================================================
    # State Getters
    # ==========================================================================

    @property
    def url(self) -> str | None:
        """Current top-level URL, or the URL of the last served response."""
        if self._url:
            return self._url
        current = self._interceptor.current_response
        return current.url if current else None

    @property
    def page(self) -> Any:
        """The underlying Playwright page."""
        return self._engine.page

    # ==========================================================================
    # Navigation
    # ==========================================================================

    async def load(self, target: str | http.Resource | page_models.Page | LoadTarget) -> None:
        """Load a URL, or replay a Resource/Page through the browser.

        A Resource or Page is preloaded first so that the navigation to
        its URL is answered from the snapshot instead of the network.
        """
        resolved = as_load_target(target)
        if isinstance(resolved, ReplayResource):
            url = self.preload(resolved.resource).url
        else:
            url = resolved.url

        # Set before navigating: every request the navigation issues is
        # attributed to this URL.
        self._url = url

        await self._load_cookies(url)
        log.info("Loading", {"url": url, "replay": isinstance(resolved, ReplayResource)})
        await self._engine.navigate(url)

    async def _load_cookies(self, url: str) -> None:
        """Seed the browser's cookie jar from the ambient cookie source."""
        seeded = [
            cookie.to_browser(fallback_url=url)
            for cookie in self._cookie_source.cookies()
            if cookie.name
        ]
        if seeded:
            await self._engine.add_cookies(seeded)
            log.debug("Seeded cookies", {"count": len(seeded)})

    # ==========================================================================
    # Resource Substitution
    # ==========================================================================

    def preload(self, target: http.Resource | page_models.Page) -> http.Resource:
        """Make *target* available to the next request for its URL only.

        For a persistent substitute use :meth:`cache`.
        """
        return self._resources.preload(as_resource(target))

    def cache(
        self, target: http.Resource | page_models.Page | None = None
    ) -> http.Resource | list[http.Resource]:
        """Cache *target* for every request to its URL.

        Called without an argument, returns all cached resources.
        """
        if target is None:
            return self._resources.all_cached()
        return self._resources.cache(as_resource(target))

    # ==========================================================================
    # Capture
    # ==========================================================================

    def start_capture(self) -> None:
        """Start assembling intercepted requests into pages.

        See :meth:`flush_pages`.
        """
        self._interceptor.start_capture()
        log.debug("Capture started")

    def stop_capture(self) -> None:
        self._interceptor.stop_capture()
        log.debug("Capture stopped")

    def is_capturing(self) -> bool:
        return self._interceptor.is_capturing()

    def flush_pages(self) -> list[page_models.Page]:
        """Return the captured pages and empty the buffer."""
        return self._pages.flush()

    # ==========================================================================
    # Snapshots
    # ==========================================================================

    async def source(self) -> str:
        """HTML of the evaluated (DOM/JS/AJAX) page."""
        return await self._engine.rendered_html()

    async def cookies(self) -> list[http.Cookie]:
        """Browser cookies, stamped with the current URL."""
        url = self.url
        return [http.Cookie.from_browser(c, url=url) for c in await self._engine.cookies()]

    async def to_page(self) -> page_models.Page | None:
        """Convert the current browser window to a page.

        Returns ``None`` until a response has been served from a
        preload or cache entry.
        """
        current = self._interceptor.current_response
        if current is None:
            return None

        current.body = await self.source()
        page = page_models.Page.from_resource(current.model_copy(deep=True))
        page.cookies = http.merge_cookies(page.cookies, await self.cookies())
        return page
