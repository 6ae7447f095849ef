"""
Turns intercepted requests into page elements.

GET requests become links and POST requests become forms whose inputs
are parsed from the request body.  Any other method yields nothing.
"""

from __future__ import annotations

from domcrawl.models import http, page as page_models
from domcrawl.utils import forms


def build_link(page_url: str, request: http.InterceptedRequest) -> page_models.Link:
    """Build the link a GET request represents on *page_url*."""
    return page_models.Link(page_url=page_url, action_url=request.url)


def build_form(page_url: str, request: http.InterceptedRequest) -> page_models.Form:
    """Build the form a POST request represents on *page_url*."""
    return page_models.Form(
        page_url=page_url,
        action_url=request.url,
        method="POST",
        inputs=forms.parse_form_body(request.body),
    )


def build_element(
    page_url: str, request: http.InterceptedRequest
) -> page_models.Link | page_models.Form | None:
    """Build the element for *request*, or ``None`` for methods that have none."""
    method = request.method.upper()
    if method == "GET":
        return build_link(page_url, request)
    if method == "POST":
        return build_form(page_url, request)
    return None

