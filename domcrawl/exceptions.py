"""Exceptions raised to callers of the browser session."""


class DomCrawlError(Exception):
    """Base exception for domcrawl errors."""

    pass


class BrowserNotStartedError(DomCrawlError):
    """Raised when a browser operation runs before the session is started."""

    pass


class InvalidLoadTargetError(DomCrawlError):
    """Raised when a load, preload or cache target is not a URL, Resource or Page."""

    pass
