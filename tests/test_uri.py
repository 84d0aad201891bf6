"""Tests for strict URI parsing."""

from __future__ import annotations

import pytest

from blazeuri import MalformedUriError, parse_uri


class TestHierarchical:
    def test_full_uri(self) -> None:
        uri = parse_uri("http://user@example.com:8080/a/b?x=1#f")
        assert uri.scheme == "http"
        assert uri.authority == "user@example.com:8080"
        assert uri.user_info == "user"
        assert uri.host == "example.com"
        assert uri.port == 8080
        assert uri.path == "/a/b"
        assert uri.query == "x=1"
        assert uri.fragment == "f"
        assert uri.is_absolute
        assert not uri.is_opaque
        assert str(uri) == "http://user@example.com:8080/a/b?x=1#f"

    def test_relative_reference(self) -> None:
        uri = parse_uri("../a;m=1?q")
        assert uri.scheme is None
        assert uri.path == "../a;m=1"
        assert uri.query == "q"
        assert not uri.is_absolute

    def test_ipv6_host(self) -> None:
        uri = parse_uri("http://[::1]:80/")
        assert uri.host == "[::1]"
        assert uri.port == 80

    def test_empty_authority(self) -> None:
        uri = parse_uri("file:///tmp/x")
        assert uri.authority is None
        assert uri.host is None
        assert uri.path == "/tmp/x"

    def test_registry_authority(self) -> None:
        uri = parse_uri("http://exa_mple:x/p")
        assert uri.host is None
        assert uri.port == -1
        assert uri.authority == "exa_mple:x"

    def test_percent_escapes_allowed(self) -> None:
        assert parse_uri("/a%20b").path == "/a%20b"


class TestOpaque:
    def test_mailto(self) -> None:
        uri = parse_uri("mailto:joe@example.com")
        assert uri.is_opaque
        assert uri.path is None
        assert uri.scheme_specific_part == "joe@example.com"

    def test_fragment_not_in_ssp(self) -> None:
        uri = parse_uri("urn:isbn:123#p1")
        assert uri.scheme_specific_part == "isbn:123"
        assert uri.fragment == "p1"


class TestErrors:
    @pytest.mark.parametrize(
        ("value", "reason"),
        [
            ("/a b", "path"),
            ("/a%zz", "path"),
            ("/a?{q}", "query"),
            ("/a#x y", "fragment"),
            ("1http://x", "scheme"),
            ("http:", "scheme-specific part"),
        ],
    )
    def test_rejected(self, value: str, reason: str) -> None:
        with pytest.raises(MalformedUriError, match=reason) as info:
            parse_uri(value)
        assert info.value.uri == value
