"""Tests for WebTarget."""

from __future__ import annotations

import httpx
import pytest

from blazeuri import IllegalArgumentError, UriBuilder, WebTarget, parse_uri


class TestWebTarget:
    def test_derivations_do_not_mutate(self) -> None:
        api = WebTarget("http://example.com/api")
        users = api.path("users")
        assert api.uri == "http://example.com/api"
        assert users.uri == "http://example.com/api/users"

    def test_resolve_template(self) -> None:
        user = WebTarget("http://example.com/users/{id}").resolve_template("id", "a/b")
        assert user.uri == "http://example.com/users/a%2Fb"

    def test_resolve_template_keep_slash(self) -> None:
        target = WebTarget("http://example.com/files/{p}")
        assert target.resolve_template("p", "a/b", encode_slash_in_path=False).uri == "http://example.com/files/a/b"

    def test_resolve_templates(self) -> None:
        target = WebTarget("http://example.com/{a}/{b}").resolve_templates({"a": 1, "b": 2})
        assert target.uri == "http://example.com/1/2"

    def test_resolve_from_encoded(self) -> None:
        target = WebTarget("http://example.com/{a}/{b}")
        assert target.resolve_template_from_encoded("a", "%20").resolve_templates_from_encoded({"b": "x"}).uri == (
            "http://example.com/%20/x"
        )

    def test_query_params(self) -> None:
        target = WebTarget("http://example.com/s").query_param("q", "a b").query_param("p", 1, 2)
        assert target.uri == "http://example.com/s?q=a+b&p=1&p=2"

    def test_single_none_removes_query_param(self) -> None:
        target = WebTarget("http://example.com/s?q=1&r=2").query_param("q", None)
        assert target.uri == "http://example.com/s?r=2"

    def test_matrix_params(self) -> None:
        target = WebTarget("http://example.com/r").matrix_param("a", 1).matrix_param("b", 2)
        assert target.uri == "http://example.com/r;a=1;b=2"
        assert target.matrix_param("a", None).uri == "http://example.com/r;b=2"

    def test_from_builder_and_uri(self) -> None:
        builder = UriBuilder.from_path("/x")
        target = WebTarget(builder)
        builder.path("y")
        assert target.uri == "/x"
        assert WebTarget(parse_uri("http://a.com/b")).uri == "http://a.com/b"

    def test_uri_builder_is_a_copy(self) -> None:
        target = WebTarget("http://a.com/b")
        target.uri_builder().path("c")
        assert target.uri == "http://a.com/b"

    def test_none_rejected(self) -> None:
        with pytest.raises(IllegalArgumentError):
            WebTarget(None)

    def test_request(self) -> None:
        target = WebTarget("http://example.com/users/{id}").resolve_template("id", 7)
        request = target.request("POST", json={"name": "joe"})
        assert isinstance(request, httpx.Request)
        assert request.method == "POST"
        assert str(request.url) == "http://example.com/users/7"
        assert request.headers["content-type"] == "application/json"

    def test_request_defaults_to_get(self) -> None:
        request = WebTarget("http://example.com/s").query_param("q", "a b").request()
        assert request.method == "GET"
        assert request.url.params["q"] == "a b"

    def test_repr(self) -> None:
        assert repr(WebTarget("/users/{id}")) == "WebTarget('/users/{id}')"
