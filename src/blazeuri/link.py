"""Typed web links (RFC 8288) and a builder for them."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urljoin

from pydantic import BaseModel, ConfigDict, Field

from blazeuri._uri import Uri, parse_uri
from blazeuri.builder import UriBuilder, relativize
from blazeuri.errors import IllegalArgumentError, MalformedUriError

REL = "rel"
TITLE = "title"
TYPE = "type"

_HEADER_RE = re.compile(r"\s*<([^>]*)>\s*(.*)", re.DOTALL)


class Link(BaseModel):
    """A target URI plus its link parameters.

    ``str(link)`` renders the ``Link`` header form::

        <http://example.com/users/1>; rel="self"
    """

    model_config = ConfigDict(frozen=True)

    uri: str
    params: dict[str, str] = Field(default_factory=dict)

    @property
    def rel(self) -> str | None:
        return self.params.get(REL)

    @property
    def rels(self) -> list[str]:
        rel = self.rel
        return rel.split() if rel else []

    @property
    def title(self) -> str | None:
        return self.params.get(TITLE)

    @property
    def type(self) -> str | None:
        return self.params.get(TYPE)

    def uri_builder(self) -> UriBuilder:
        return UriBuilder.from_template(self.uri)

    @classmethod
    def from_header(cls, value: str) -> Link:
        """Parse one ``<uri>; name="value"`` header entry."""
        m = _HEADER_RE.fullmatch(value or "")
        if m is None:
            raise MalformedUriError(value, "expected '<uri>' at the start of the link")
        params: dict[str, str] = {}
        for param in m.group(2).split(";"):
            name, sep, raw = param.partition("=")
            name = name.strip()
            if not name:
                continue
            if not sep:
                msg = f"Link parameter {name!r} has no value"
                raise IllegalArgumentError(msg)
            params[name] = raw.strip().strip('"')
        return cls(uri=m.group(1), params=params)

    def __str__(self) -> str:
        rendered = "".join(f'; {name}="{value}"' for name, value in self.params.items())
        return f"<{self.uri}>{rendered}"


class LinkBuilder:
    """Mutable builder for :class:`Link`.

    Relative URIs produced by :meth:`build` are resolved against
    :meth:`base_uri` when one is set.
    """

    __slots__ = ("_base_uri", "_builder", "_params")

    def __init__(self) -> None:
        self._builder: UriBuilder | None = None
        self._params: dict[str, str] = {}
        self._base_uri: str | None = None

    def link(self, link: Link | str) -> LinkBuilder:
        """Start from an existing link or a ``Link`` header entry."""
        if link is None:
            raise IllegalArgumentError("Link cannot be None")
        if isinstance(link, str):
            link = Link.from_header(link)
        self._builder = link.uri_builder()
        self._params = dict(link.params)
        return self

    def uri(self, uri: str | Uri) -> LinkBuilder:
        self._builder = UriBuilder.from_uri(uri)
        return self

    def uri_builder(self, builder: UriBuilder) -> LinkBuilder:
        if builder is None:
            raise IllegalArgumentError("UriBuilder cannot be None")
        self._builder = builder.clone()
        return self

    def base_uri(self, uri: str | Uri) -> LinkBuilder:
        if uri is None:
            raise IllegalArgumentError("Base URI cannot be None")
        self._base_uri = str(uri)
        return self

    def rel(self, rel: str) -> LinkBuilder:
        """Add a relation type; repeated calls space-join them."""
        if rel is None:
            raise IllegalArgumentError("Link relation cannot be None")
        existing = self._params.get(REL)
        self._params[REL] = f"{existing} {rel}" if existing else rel
        return self

    def title(self, title: str) -> LinkBuilder:
        return self.param(TITLE, title)

    def type(self, media_type: str) -> LinkBuilder:
        return self.param(TYPE, media_type)

    def param(self, name: str, value: str) -> LinkBuilder:
        if name is None or value is None:
            msg = f"Link parameter cannot be None: {name!r}={value!r}"
            raise IllegalArgumentError(msg)
        self._params[name] = value
        return self

    def build(self, *values: Any) -> Link:
        return Link(uri=self._resolve(values), params=dict(self._params))

    def build_relativized(self, uri: str | Uri, *values: Any) -> Link:
        """Build, then express the target relative to *uri*."""
        if uri is None:
            raise IllegalArgumentError("URI cannot be None")
        return Link(uri=relativize(uri, self._resolve(values)), params=dict(self._params))

    def _resolve(self, values: tuple[Any, ...]) -> str:
        if self._builder is None:
            raise IllegalArgumentError("Link URI has not been set")
        built = self._builder.build(*values)
        if self._base_uri is not None and not parse_uri(built).is_absolute:
            built = urljoin(self._base_uri, built)
        return built
