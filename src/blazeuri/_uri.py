"""Strict RFC 3986 parsing of finished URI strings."""

from __future__ import annotations

import re
from dataclasses import dataclass

from blazeuri.errors import MalformedUriError

# RFC 3986, Appendix B
_SPLIT_RE = re.compile(r"^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$", re.DOTALL)

_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")

_PCT = r"%[0-9A-Fa-f]{2}"
_OTHER = r"[^\x00-\x7f\s]"
_UNRESERVED = r"A-Za-z0-9\-._~"
_SUB_DELIMS = r"!$&'()*+,;="


def _charset(extra: str) -> re.Pattern[str]:
    return re.compile(rf"(?:{_PCT}|[{_UNRESERVED}{_SUB_DELIMS}{extra}]|{_OTHER})*")


_PATH_CHARS = _charset(r":@/")
# plus "[" and "]" for array-style names (k[]=v)
_QUERY_CHARS = _charset(r":@/?\[\]")
_USERINFO_CHARS = _charset(r":")
_REG_NAME_CHARS = _charset(r":@\[\]")
_OPAQUE_CHARS = _charset(r":@/?\[\]")

_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?"
_HOSTNAME_RE = re.compile(rf"{_LABEL}(?:\.{_LABEL})*\.?")
_IPV4_RE = re.compile(r"(?:(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)\.){3}(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)")
_IPV6_RE = re.compile(r"\[[0-9A-Fa-f:.]+(?:%[^\]]+)?\]")
_SERVER_RE = re.compile(r"(?:([^@]*)@)?(\[[^\]]*\]|[^:]*)(?::(\d*))?")


@dataclass(frozen=True, slots=True)
class Uri:
    """Raw components of a parsed URI.

    ``authority`` is always the raw authority; ``host``, ``user_info`` and
    ``port`` are only split out when it is server-based.
    Opaque URIs (``mailto:x@y``) have ``path`` set to ``None``.
    """

    raw: str
    scheme: str | None
    scheme_specific_part: str
    authority: str | None
    user_info: str | None
    host: str | None
    port: int
    path: str | None
    query: str | None
    fragment: str | None

    @property
    def is_absolute(self) -> bool:
        return self.scheme is not None

    @property
    def is_opaque(self) -> bool:
        return self.path is None

    def __str__(self) -> str:
        return self.raw


def _check(raw: str, value: str | None, pattern: re.Pattern[str], component: str) -> None:
    if value is not None and pattern.fullmatch(value) is None:
        raise MalformedUriError(raw, f"illegal character in {component}")


def _parse_server_authority(authority: str) -> tuple[str | None, str, int] | None:
    m = _SERVER_RE.fullmatch(authority)
    if m is None:
        return None
    user_info, host, port = m.groups()
    if not (_HOSTNAME_RE.fullmatch(host) or _IPV4_RE.fullmatch(host) or _IPV6_RE.fullmatch(host)):
        return None
    if user_info is not None and _USERINFO_CHARS.fullmatch(user_info) is None:
        return None
    return user_info, host, int(port) if port else -1


def parse_uri(value: str) -> Uri:
    """Parse *value* as an RFC 3986 URI reference.

    Raises :class:`MalformedUriError` when a component contains characters
    its position does not allow or a percent escape is malformed.
    """
    m = _SPLIT_RE.match(value)
    if m is None:
        raise MalformedUriError(value, "unparseable")
    scheme, authority, path, query, fragment = m.groups()

    if scheme is not None and _SCHEME_RE.fullmatch(scheme) is None:
        raise MalformedUriError(value, "illegal character in scheme name")

    hash_at = value.find("#")
    ssp = value[len(scheme) + 1 if scheme is not None else 0 : hash_at if hash_at >= 0 else len(value)]
    _check(value, fragment, _QUERY_CHARS, "fragment")

    if scheme is not None and not ssp:
        raise MalformedUriError(value, "expected scheme-specific part")

    if scheme is not None and not ssp.startswith("/"):
        _check(value, ssp, _OPAQUE_CHARS, "opaque part")
        return Uri(
            raw=value,
            scheme=scheme,
            scheme_specific_part=ssp,
            authority=None,
            user_info=None,
            host=None,
            port=-1,
            path=None,
            query=None,
            fragment=fragment,
        )

    _check(value, path, _PATH_CHARS, "path")
    _check(value, query, _QUERY_CHARS, "query")

    user_info: str | None = None
    host: str | None = None
    port = -1
    if authority:
        server = _parse_server_authority(authority)
        if server is not None:
            user_info, host, port = server
        else:
            _check(value, authority, _REG_NAME_CHARS, "authority")
    elif authority is not None:
        authority = None

    return Uri(
        raw=value,
        scheme=scheme,
        scheme_specific_part=ssp,
        authority=authority,
        user_info=user_info,
        host=host,
        port=port,
        path=path,
        query=query,
        fragment=fragment,
    )
