"""URI view of an incoming ASGI HTTP request."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple
from urllib.parse import urljoin

from blazeuri._encoding import decode_uri_component, encode_path_as_is, encode_path_segment_as_is
from blazeuri._types import MultiDict
from blazeuri._uri import parse_uri
from blazeuri.builder import UriBuilder, relativize

if TYPE_CHECKING:
    from blazeuri._types import Scope

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


class PathSegment(NamedTuple):
    """One ``/``-separated path segment with its matrix parameters."""

    path: str
    matrix_parameters: MultiDict


def _add(params: MultiDict, name: str, value: str) -> None:
    params.setdefault(name, []).append(value)


class UriInfo:
    """Request and base URIs of an ASGI *scope*.

    The base path defaults to the scope's ``root_path``.  The base URI
    always ends with ``/`` and :meth:`path` is relative to it.
    """

    __slots__ = ("_base_path", "_scope")

    def __init__(self, scope: Scope, *, base_path: str | None = None) -> None:
        self._scope = scope
        base = scope.get("root_path", "") if base_path is None else base_path
        self._base_path = base.rstrip("/")

    # ------------------------------------------------------------------
    # Raw request pieces
    # ------------------------------------------------------------------

    @property
    def _origin(self) -> str:
        scheme = self._scope.get("scheme", "http")
        for name, value in self._scope.get("headers", []):
            if name.lower() == b"host":
                return f"{scheme}://{value.decode('latin-1')}"
        server = self._scope.get("server")
        if not server:
            return f"{scheme}://localhost"
        host, port = server
        if port is None or _DEFAULT_PORTS.get(scheme) == port:
            return f"{scheme}://{host}"
        return f"{scheme}://{host}:{port}"

    @property
    def _raw_path(self) -> str:
        raw = self._scope.get("raw_path")
        if raw:
            return raw.decode("latin-1")
        return encode_path_as_is(self._scope.get("path", "/"))

    @property
    def _query_string(self) -> str:
        return self._scope.get("query_string", b"").decode("latin-1")

    # ------------------------------------------------------------------
    # Absolute URIs
    # ------------------------------------------------------------------

    @property
    def absolute_path(self) -> str:
        """Request URI without the query string."""
        return self._origin + self._raw_path

    @property
    def request_uri(self) -> str:
        query = self._query_string
        return f"{self.absolute_path}?{query}" if query else self.absolute_path

    @property
    def base_uri(self) -> str:
        return f"{self._origin}{self._base_path}/"

    def absolute_path_builder(self) -> UriBuilder:
        return UriBuilder.from_uri(parse_uri(self.absolute_path))

    def request_uri_builder(self) -> UriBuilder:
        return UriBuilder.from_uri(parse_uri(self.request_uri))

    def base_uri_builder(self) -> UriBuilder:
        return UriBuilder.from_uri(parse_uri(self.base_uri))

    # ------------------------------------------------------------------
    # Relative views
    # ------------------------------------------------------------------

    def path(self, decode: bool = True) -> str:
        """Request path relative to the base URI, without leading ``/``."""
        path = self._raw_path
        base = self._base_path
        if base and (path == base or path.startswith(base + "/")):
            path = path[len(base) :]
        path = path.lstrip("/")
        return decode_uri_component(path, plus=False) if decode else path

    def path_segments(self, decode: bool = True) -> list[PathSegment]:
        segments: list[PathSegment] = []
        for raw in self.path(decode=False).split("/"):
            name, *params = raw.split(";")
            matrix: MultiDict = {}
            for param in params:
                if not param:
                    continue
                key, _, value = param.partition("=")
                if decode:
                    key, value = decode_uri_component(key, plus=False), decode_uri_component(value, plus=False)
                _add(matrix, key, value)
            segments.append(PathSegment(decode_uri_component(name, plus=False) if decode else name, matrix))
        return segments

    def path_parameters(self, decode: bool = True) -> MultiDict:
        """Values the router matched for the current request.

        ASGI routers store these already decoded in ``scope["path_params"]``;
        ``decode=False`` re-encodes them as path segments.
        """
        params: MultiDict = {}
        for name, value in self._scope.get("path_params", {}).items():
            text = str(value)
            _add(params, name, text if decode else encode_path_segment_as_is(text))
        return params

    def query_parameters(self, decode: bool = True) -> MultiDict:
        params: MultiDict = {}
        for pair in self._query_string.split("&"):
            if not pair:
                continue
            name, _, value = pair.partition("=")
            if decode:
                name, value = decode_uri_component(name), decode_uri_component(value)
            _add(params, name, value)
        return params

    def resolve(self, uri: str) -> str:
        """Resolve *uri* against the base URI."""
        return urljoin(self.base_uri, uri)

    def relativize(self, uri: str) -> str:
        """Express *uri* relative to the request URI.

        A relative *uri* is first resolved against the base URI.
        """
        if not parse_uri(uri).is_absolute:
            uri = self.resolve(uri)
        return relativize(self.absolute_path, uri)
