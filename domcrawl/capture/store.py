"""Preload and cache stores for resource substitution.

A request can be satisfied from one of two URL-keyed stores instead
of the network:

* **preload** entries are one-shot: the first lookup removes them.
* **cache** entries persist until replaced.

When both hold the same URL the preload entry wins and is consumed,
leaving the cache entry in place for later requests.
"""

from __future__ import annotations

import dataclasses
import enum
import threading

from domcrawl.models import http
from domcrawl.utils import logger

log = logger.create_logger("ResourceStore")


class ResolutionKind(enum.Enum):
    """Outcome of resolving a request URL against the stores."""

    HIT_PRELOAD = "preload"
    HIT_CACHE = "cache"
    MISS = "miss"


@dataclasses.dataclass(frozen=True)
class Resolution:
    """A resolution outcome and the resource it produced, if any."""

    kind: ResolutionKind
    resource: http.Resource | None = None

    @property
    def hit(self) -> bool:
        return self.kind is not ResolutionKind.MISS


MISS = Resolution(ResolutionKind.MISS)


class ResourceStore:
    """URL-keyed preload and cache stores, safe to share across threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._preloads: dict[str, http.Resource] = {}
        self._cache: dict[str, http.Resource] = {}

    def preload(self, resource: http.Resource) -> http.Resource:
        """Store *resource* for a single substitution, replacing any previous preload."""
        with self._lock:
            self._preloads[resource.url] = resource
        log.debug("Preloaded resource", {"url": resource.url})
        return resource

    def consume_preload(self, url: str) -> http.Resource | None:
        """Remove and return the preload entry for *url* in one step."""
        with self._lock:
            return self._preloads.pop(url, None)

    def cache(self, resource: http.Resource) -> http.Resource:
        """Store *resource* for repeated substitution, replacing any previous entry."""
        with self._lock:
            self._cache[resource.url] = resource
        log.debug("Cached resource", {"url": resource.url})
        return resource

    def get_cache(self, url: str) -> http.Resource | None:
        """Return the cache entry for *url* without removing it."""
        with self._lock:
            return self._cache.get(url)

    def all_cached(self) -> list[http.Resource]:
        """Return the current cache contents, in no particular order."""
        with self._lock:
            return list(self._cache.values())

    def resolve(self, url: str) -> Resolution:
        """Find a substitute for a request to *url*.

        Preloads are tried first and consumed on a hit; the cache is
        only consulted when no preload exists.
        """
        preloaded = self.consume_preload(url)
        if preloaded is not None:
            return Resolution(ResolutionKind.HIT_PRELOAD, preloaded)

        cached = self.get_cache(url)
        if cached is not None:
            return Resolution(ResolutionKind.HIT_CACHE, cached)

        return MISS
