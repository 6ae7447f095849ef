"""Browser driver for crawlers: resource replay and traffic capture."""

from domcrawl.browser.session import BrowserSession as BrowserSession
from domcrawl.exceptions import (
    BrowserNotStartedError as BrowserNotStartedError,
    DomCrawlError as DomCrawlError,
    InvalidLoadTargetError as InvalidLoadTargetError,
)
