"""Buffer of pages being assembled from captured traffic, keyed by top-level URL."""

from __future__ import annotations

import contextlib
import threading
from collections.abc import Iterator

from domcrawl.models import http, page as page_models
from domcrawl.utils import logger

log = logger.create_logger("PageBuffer")


class PageBuffer:
    """Thread-safe mapping of top-level URL to the page assembled for it.

    Every operation takes the same reentrant lock, and
    :meth:`transaction` holds it across several operations, so a
    :meth:`flush` either sees an ensure-and-append sequence completely
    or not at all.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._pages: dict[str, page_models.Page] = {}

    @contextlib.contextmanager
    def transaction(self) -> Iterator[PageBuffer]:
        """Hold the buffer lock for a group of operations."""
        with self._lock:
            yield self

    def ensure_page(
        self, url: str, request: http.InterceptedRequest | None = None
    ) -> page_models.Page:
        """Return the page for *url*, creating an empty one seeded with *request*."""
        with self._lock:
            page = self._pages.get(url)
            if page is None:
                page = page_models.Page.from_url(url, request)
                self._pages[url] = page
                log.debug("Page materialised", {"url": url})
            return page

    def append_link(self, url: str, link: page_models.Link) -> None:
        with self._lock:
            self._pages[url].links.append(link)

    def append_form(self, url: str, form: page_models.Form) -> None:
        with self._lock:
            self._pages[url].forms.append(form)

    def get(self, url: str) -> page_models.Page | None:
        with self._lock:
            return self._pages.get(url)

    def flush(self) -> list[page_models.Page]:
        """Return every buffered page and empty the buffer."""
        with self._lock:
            pages = list(self._pages.values())
            self._pages = {}
        if pages:
            log.debug("Flushed pages", {"count": len(pages)})
        return pages

    def __len__(self) -> int:
        with self._lock:
            return len(self._pages)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._pages
