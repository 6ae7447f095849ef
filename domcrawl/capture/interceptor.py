"""
Per-request decision function invoked by the proxy transport.

For every request the rendering engine issues, the interceptor either
satisfies it from the preload/cache stores (and tells the transport not
to forward it) or lets it through to the network.  While capture is
armed, requests that go to the network are also recorded as links and
forms on the page for the current top-level URL.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from domcrawl.capture import assembler, buffer, store
from domcrawl.models import http, page as page_models
from domcrawl.utils import logger

log = logger.create_logger("TrafficInterceptor")


class TrafficInterceptor:
    """Routes intercepted requests through substitution and capture."""

    def __init__(
        self,
        resources: store.ResourceStore,
        pages: buffer.PageBuffer,
        current_url: Callable[[], str | None],
    ) -> None:
        self._resources = resources
        self._pages = pages
        self._current_url = current_url
        self._capturing = threading.Event()
        self._response_lock = threading.Lock()
        self._current_response: http.Resource | None = None

    # ==========================================================================
    # Capture Control
    # ==========================================================================

    def start_capture(self) -> None:
        self._capturing.set()

    def stop_capture(self) -> None:
        self._capturing.clear()

    def is_capturing(self) -> bool:
        return self._capturing.is_set()

    @property
    def current_response(self) -> http.Resource | None:
        """The last response served from a store, if any."""
        with self._response_lock:
            return self._current_response

    # ==========================================================================
    # Request Handling
    # ==========================================================================

    def handle(self, request: http.InterceptedRequest, response: http.Resource) -> bool:
        """Decide how one request is served.

        Args:
            request: The request issued by the rendering engine.
            response: Live response to populate when the request is
                satisfied locally.

        Returns:
            ``True`` to forward the request to the network, ``False``
            when *response* already holds the answer.
        """
        resolution = self._resources.resolve(request.url)
        if resolution.resource is not None:
            resolution.resource.copy_into(response)
            with self._response_lock:
                self._current_response = resolution.resource.model_copy(deep=True)
            log.debug(
                "Request served from store",
                {"url": request.url, "source": resolution.kind.value},
            )
            return False

        if not self.is_capturing():
            return True

        self._record(request)
        return True

    __call__ = handle

    def _record(self, request: http.InterceptedRequest) -> None:
        """Attribute *request* to the page for the current top-level URL."""
        # Extension: with no navigation and no served response yet, the
        # request becomes its own page instead of being dropped.
        top_url = self._current_url() or request.url
        element = assembler.build_element(top_url, request)

        with self._pages.transaction():
            # The page exists even when the method yields no element.
            self._pages.ensure_page(top_url, request)
            if isinstance(element, page_models.Link):
                self._pages.append_link(top_url, element)
            elif isinstance(element, page_models.Form):
                self._pages.append_form(top_url, element)

        if element is None:
            log.debug(
                "No element for request method",
                {"url": request.url, "method": request.method},
            )
