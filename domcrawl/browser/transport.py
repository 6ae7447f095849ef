"""
Route-based interception of every request a browser context issues.

Playwright's request routing stands in for a man-in-the-middle proxy:
each request is handed to a single handler together with an empty
response.  The handler either asks for the request to be forwarded to
the network or fills in the response, which is then fulfilled locally.
"""

from __future__ import annotations

from collections.abc import Callable

from playwright import async_api

from domcrawl.models import http
from domcrawl.utils import logger
from domcrawl.utils.errors import get_error_message

log = logger.create_logger("RouteTransport")

RequestHandler = Callable[[http.InterceptedRequest, http.Resource], bool | None]

ROUTE_PATTERN = "**/*"

# Headers describing the original wire framing, not the stored body.
_FRAMING_HEADERS = frozenset({"content-length", "content-encoding", "transfer-encoding"})


def to_intercepted_request(request: async_api.Request) -> http.InterceptedRequest:
    """Describe a Playwright request for the handler."""
    return http.InterceptedRequest(
        url=request.url,
        method=request.method,
        headers=dict(request.headers),
        body=request.post_data_buffer,
        resource_type=request.resource_type,
    )


def fulfil_headers(headers: dict[str, str]) -> dict[str, str]:
    """Drop framing headers that no longer match a replayed body."""
    return {k: v for k, v in headers.items() if k.lower() not in _FRAMING_HEADERS}


class RouteTransport:
    """Feeds every request of a browser context through one handler."""

    def __init__(self, handler: RequestHandler) -> None:
        self._handler = handler
        self._context: async_api.BrowserContext | None = None

    @property
    def running(self) -> bool:
        return self._context is not None

    async def start(self, context: async_api.BrowserContext) -> None:
        """Begin intercepting requests issued by *context*."""
        await context.route(ROUTE_PATTERN, self._on_route)
        self._context = context
        log.debug("Request interception started")

    async def stop(self) -> None:
        """Stop intercepting; later requests go straight to the network."""
        if not self._context:
            return
        try:
            await self._context.unroute(ROUTE_PATTERN, self._on_route)
        except async_api.Error as exc:
            log.debug("Unroute error (non-fatal)", {"error": str(exc)})
        self._context = None
        log.debug("Request interception stopped")

    async def _on_route(self, route: async_api.Route) -> None:
        request = to_intercepted_request(route.request)
        response = http.Resource(url=request.url)
        try:
            forward = self._handler(request, response)
        except Exception as exc:
            log.error(
                "Request handler failed, forwarding request",
                {"url": request.url, "error": get_error_message(exc)},
            )
            forward = True

        if forward is True:
            await route.continue_()
            return

        await route.fulfill(
            status=response.code or 200,
            headers=fulfil_headers(response.headers),
            body=response.body,
        )
