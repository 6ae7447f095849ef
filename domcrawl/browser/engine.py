"""
Playwright-backed rendering engine.

Owns the Playwright driver, browser, context and page for one browser
session and exposes the small surface the session needs: navigation,
the evaluated HTML, and the context cookie jar.
"""

from __future__ import annotations

from typing import Any

from playwright import async_api

from domcrawl import config
from domcrawl.exceptions import BrowserNotStartedError
from domcrawl.utils import logger

log = logger.create_logger("RenderingEngine")

_LAUNCH_ARGS = [
    "--no-first-run",
    "--no-default-browser-check",
    "--disable-extensions",
]


class PlaywrightEngine:
    """A single Chromium page driven through Playwright."""

    def __init__(self, settings: config.BrowserSettings) -> None:
        self._settings = settings
        self._playwright: async_api.Playwright | None = None
        self._browser: async_api.Browser | None = None
        self._context: async_api.BrowserContext | None = None
        self._page: async_api.Page | None = None

    @property
    def context(self) -> async_api.BrowserContext:
        if not self._context:
            raise BrowserNotStartedError("No browser context active")
        return self._context

    @property
    def page(self) -> async_api.Page:
        if not self._page:
            raise BrowserNotStartedError("No browser page active")
        return self._page

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def launch(self) -> async_api.BrowserContext:
        """Start Playwright, launch Chromium and create the browser context."""
        await self.close()

        pw = await async_api.async_playwright().start()
        self._playwright = pw

        launch_kwargs: dict[str, Any] = {
            "headless": self._settings.headless,
            "args": _LAUNCH_ARGS,
        }
        if self._settings.channel:
            try:
                self._browser = await pw.chromium.launch(
                    channel=self._settings.channel, **launch_kwargs
                )
                log.info("Launched browser channel", {"channel": self._settings.channel})
            except async_api.Error:
                log.info(
                    "Browser channel not available, falling back to bundled Chromium",
                    {"channel": self._settings.channel},
                )
        if not self._browser:
            self._browser = await pw.chromium.launch(**launch_kwargs)

        context_kwargs: dict[str, Any] = {"java_script_enabled": True}
        if self._settings.user_agent:
            context_kwargs["user_agent"] = self._settings.user_agent
        self._context = await self._browser.new_context(**context_kwargs)
        self._context.set_default_navigation_timeout(self._settings.navigation_timeout_ms)

        log.debug("Browser context created", {
            "headless": self._settings.headless,
            "userAgent": self._settings.user_agent or None,
        })
        return self._context

    async def open_page(self) -> async_api.Page:
        """Open the page all navigations run in."""
        self._page = await self.context.new_page()
        return self._page

    async def close_page(self) -> None:
        """Close the page so no further requests are issued."""
        if self._page:
            try:
                await self._page.close()
            except async_api.Error as exc:
                log.debug("Page close error (non-fatal)", {"error": str(exc)})
            self._page = None

    async def close(self) -> None:
        """Close the page, context, browser and driver."""
        await self.close_page()

        if self._context:
            try:
                await self._context.close()
            except async_api.Error as exc:
                log.debug("Context close error (non-fatal)", {"error": str(exc)})
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except async_api.Error as exc:
                log.debug("Browser close error (non-fatal)", {"error": str(exc)})
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except async_api.Error as exc:
                log.debug("Playwright stop error (non-fatal)", {"error": str(exc)})
            self._playwright = None

    # ==========================================================================
    # Rendering Engine Contract
    # ==========================================================================

    async def navigate(self, url: str) -> async_api.Response | None:
        """Navigate the page to *url*."""
        log.debug("Navigating", {"url": url, "waitUntil": self._settings.wait_until})
        response = await self.page.goto(url, wait_until=self._settings.wait_until)
        final_url = self.page.url
        if final_url != url:
            log.info("Redirected", {"from": url, "to": final_url})
        return response

    async def rendered_html(self) -> str:
        """Return the HTML of the evaluated DOM."""
        return await self.page.content()

    async def add_cookies(self, cookies: list[dict[str, Any]]) -> None:
        await self.context.add_cookies(cookies)  # type: ignore[arg-type]

    async def cookies(self) -> list[dict[str, Any]]:
        return [dict(cookie) for cookie in await self.context.cookies()]
