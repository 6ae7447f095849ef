"""
Request body parsing for form submissions observed on the wire.
"""

from __future__ import annotations

from urllib import parse


def parse_form_body(raw: bytes | str | None) -> dict[str, str]:
    """Parse an ``application/x-www-form-urlencoded`` body into name/value pairs.

    Every ``&``-separated field is kept: empty fields are skipped and a
    field without ``=`` maps to ``""``.  When a name repeats, the last
    value wins.  Empty or undecodable input yields an empty mapping;
    this function never raises.

    Args:
        raw: The request body as sent by the browser.

    Returns:
        The decoded inputs, e.g. ``{"user": "a", "pass": "b"}``.
    """
    if not raw:
        return {}
    try:
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        pairs = parse.parse_qsl(text, keep_blank_values=True)
    except (ValueError, UnicodeError):
        return {}
    return dict(pairs)
