"""
Browser configuration.

Centralises environment variable names and default values for the
rendering engine.  Uses ``pydantic_settings.BaseSettings`` for
automatic environment variable binding, type coercion, and validation.
"""

from __future__ import annotations

from typing import Literal

import pydantic
import pydantic_settings

WaitUntil = Literal["commit", "domcontentloaded", "load", "networkidle"]


class BrowserSettings(pydantic_settings.BaseSettings):
    """Configuration for the Playwright-driven browser.

    Attributes:
        user_agent: User-agent string applied to the browser context;
            empty keeps the engine's own.
        headless: Run the browser without a visible window.
        channel: Optional browser channel (e.g. ``chrome``); bundled
            Chromium is used when the channel cannot be launched.
        navigation_timeout_ms: Navigation timeout in milliseconds.
        wait_until: Load state a navigation waits for.
    """

    user_agent: str = pydantic.Field(default="", validation_alias="USER_AGENT")
    headless: bool = pydantic.Field(default=True, validation_alias="BROWSER_HEADLESS")
    channel: str | None = pydantic.Field(default=None, validation_alias="BROWSER_CHANNEL")
    navigation_timeout_ms: int = pydantic.Field(
        default=30000, ge=0, validation_alias="NAVIGATION_TIMEOUT_MS"
    )
    wait_until: WaitUntil = pydantic.Field(
        default="load", validation_alias="NAVIGATION_WAIT_UNTIL"
    )
