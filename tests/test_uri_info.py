"""Tests for UriInfo over ASGI scopes."""

from __future__ import annotations

from typing import Any

import pytest

from blazeuri import MalformedUriError, PathSegment, UriInfo


def _scope(**overrides: Any) -> dict[str, Any]:
    scope: dict[str, Any] = {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": "/users/42",
        "raw_path": b"/users/42",
        "query_string": b"",
        "headers": [],
    }
    scope.update(overrides)
    return scope


# =====================================================================
# Absolute URIs
# =====================================================================


class TestAbsolute:
    def test_default_port_omitted(self) -> None:
        info = UriInfo(_scope())
        assert info.absolute_path == "http://testserver/users/42"
        assert info.base_uri == "http://testserver/"

    def test_explicit_port(self) -> None:
        info = UriInfo(_scope(server=("127.0.0.1", 8000)))
        assert info.absolute_path == "http://127.0.0.1:8000/users/42"

    def test_host_header_wins(self) -> None:
        info = UriInfo(_scope(headers=[(b"host", b"api.example.com:8443")], scheme="https"))
        assert info.absolute_path == "https://api.example.com:8443/users/42"

    def test_no_server(self) -> None:
        assert UriInfo(_scope(server=None)).base_uri == "http://localhost/"

    def test_request_uri_includes_query(self) -> None:
        info = UriInfo(_scope(query_string=b"a=1&b=x+y"))
        assert info.request_uri == "http://testserver/users/42?a=1&b=x+y"

    def test_path_without_raw_path(self) -> None:
        info = UriInfo(_scope(path="/a b", raw_path=None))
        assert info.absolute_path == "http://testserver/a%20b"

    def test_builders(self) -> None:
        info = UriInfo(_scope(query_string=b"a=1"))
        assert info.request_uri_builder().replace_query_param("a", "2").build() == "http://testserver/users/42?a=2"
        assert info.absolute_path_builder().path("posts").build() == "http://testserver/users/42/posts"
        assert info.base_uri_builder().path("health").build() == "http://testserver/health"


# =====================================================================
# Relative views
# =====================================================================


class TestRelative:
    def test_path_strips_base(self) -> None:
        info = UriInfo(_scope(root_path="/api", path="/api/users/a%20b", raw_path=b"/api/users/a%20b"))
        assert info.base_uri == "http://testserver/api/"
        assert info.path() == "users/a b"
        assert info.path(decode=False) == "users/a%20b"

    def test_base_path_argument(self) -> None:
        info = UriInfo(_scope(raw_path=b"/v1/items"), base_path="/v1/")
        assert info.path() == "items"

    def test_base_path_prefix_only_on_boundary(self) -> None:
        info = UriInfo(_scope(raw_path=b"/apix/items"), base_path="/api")
        assert info.path() == "apix/items"

    def test_path_segments_with_matrix(self) -> None:
        info = UriInfo(_scope(raw_path=b"/cars;color=red;color=blue/model%201;year=2020"))
        assert info.path_segments() == [
            PathSegment("cars", {"color": ["red", "blue"]}),
            PathSegment("model 1", {"year": ["2020"]}),
        ]
        assert info.path_segments(decode=False)[1].path == "model%201"

    def test_query_parameters(self) -> None:
        info = UriInfo(_scope(query_string=b"a=1&a=2&b=x+y%21&flag"))
        assert info.query_parameters() == {"a": ["1", "2"], "b": ["x y!"], "flag": [""]}
        assert info.query_parameters(decode=False)["b"] == ["x+y%21"]

    def test_malformed_query_escape(self) -> None:
        with pytest.raises(MalformedUriError):
            UriInfo(_scope(query_string=b"a=%zz")).query_parameters()

    def test_path_parameters(self) -> None:
        info = UriInfo(_scope(path_params={"id": 42, "name": "a/b"}))
        assert info.path_parameters() == {"id": ["42"], "name": ["a/b"]}
        assert info.path_parameters(decode=False)["name"] == ["a%2Fb"]

    def test_resolve_and_relativize(self) -> None:
        info = UriInfo(_scope(root_path="/api", raw_path=b"/api/users/42"))
        assert info.resolve("users/7") == "http://testserver/api/users/7"
        assert info.relativize("users/7") == "../7"
        assert info.relativize("http://other/x") == "http://other/x"
