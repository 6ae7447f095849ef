"""Pydantic models for pages and the elements discovered while assembling them."""

from __future__ import annotations

import pydantic

from domcrawl.models.http import Cookie, InterceptedRequest, Resource


class Link(pydantic.BaseModel):
    """A GET navigation discovered on a page."""

    page_url: str
    action_url: str


class Form(pydantic.BaseModel):
    """A POST submission discovered on a page."""

    page_url: str
    action_url: str
    method: str = "POST"
    inputs: dict[str, str] = pydantic.Field(default_factory=dict)


class Page(pydantic.BaseModel):
    """A top-level response plus the links, forms and cookies found for it."""

    response: Resource
    links: list[Link] = pydantic.Field(default_factory=list)
    forms: list[Form] = pydantic.Field(default_factory=list)
    cookies: list[Cookie] = pydantic.Field(default_factory=list)

    @property
    def url(self) -> str:
        """The top-level URL this page was produced for."""
        return self.response.url

    @property
    def body(self) -> str | bytes:
        """Body of the top-level response."""
        return self.response.body

    @classmethod
    def from_url(
        cls, url: str, request: InterceptedRequest | None = None
    ) -> Page:
        """Create an empty page whose response is a stub for *url*."""
        return cls(response=Resource(url=url, request=request))

    @classmethod
    def from_resource(cls, resource: Resource) -> Page:
        """Wrap a resource snapshot, carrying over its cookies."""
        return cls(response=resource, cookies=list(resource.cookies))
