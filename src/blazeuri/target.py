"""Immutable client-side resource targets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from blazeuri.builder import UriBuilder
from blazeuri.errors import IllegalArgumentError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from blazeuri._uri import Uri


class WebTarget:
    """A resource URI that derives new targets instead of mutating.

    Every derivation works on a clone of the underlying :class:`UriBuilder`,
    so a target can be shared and extended freely::

        api = WebTarget("http://example.com/api")
        user = api.path("users/{id}").resolve_template("id", 7)
        request = user.request("GET")
    """

    __slots__ = ("_builder",)

    def __init__(self, uri: str | Uri | UriBuilder) -> None:
        if uri is None:
            raise IllegalArgumentError("Target URI cannot be None")
        self._builder = uri.clone() if isinstance(uri, UriBuilder) else UriBuilder.from_uri(uri)

    def _derive(self, change: Callable[[UriBuilder], Any]) -> WebTarget:
        builder = self._builder.clone()
        change(builder)
        return WebTarget(builder)

    @property
    def uri(self) -> str:
        return self._builder.build()

    def uri_builder(self) -> UriBuilder:
        return self._builder.clone()

    def path(self, path: str) -> WebTarget:
        return self._derive(lambda b: b.path(path))

    def matrix_param(self, name: str, *values: Any) -> WebTarget:
        """Append matrix parameters; a single ``None`` removes *name*."""
        if len(values) == 1 and values[0] is None:
            return self._derive(lambda b: b.replace_matrix_param(name))
        return self._derive(lambda b: b.matrix_param(name, *values))

    def query_param(self, name: str, *values: Any) -> WebTarget:
        """Append query parameters; a single ``None`` removes *name*."""
        if len(values) == 1 and values[0] is None:
            return self._derive(lambda b: b.replace_query_param(name))
        return self._derive(lambda b: b.query_param(name, *values))

    def resolve_template(self, name: str, value: Any, *, encode_slash_in_path: bool = True) -> WebTarget:
        return self._derive(lambda b: b.resolve_template(name, value, encode_slash_in_path=encode_slash_in_path))

    def resolve_template_from_encoded(self, name: str, value: Any) -> WebTarget:
        return self._derive(lambda b: b.resolve_template_from_encoded(name, value))

    def resolve_templates(self, values: Mapping[str, Any], *, encode_slash_in_path: bool = True) -> WebTarget:
        return self._derive(lambda b: b.resolve_templates(values, encode_slash_in_path=encode_slash_in_path))

    def resolve_templates_from_encoded(self, values: Mapping[str, Any]) -> WebTarget:
        return self._derive(lambda b: b.resolve_templates_from_encoded(values))

    def request(self, method: str = "GET", **kwargs: Any) -> httpx.Request:
        """Build an unsent :class:`httpx.Request` for this target.

        Keyword arguments (``headers``, ``json``, ``content``...) go straight
        to :class:`httpx.Request`.
        """
        return httpx.Request(method, self.uri, **kwargs)

    def __repr__(self) -> str:
        return f"WebTarget({self._builder.to_template()!r})"
