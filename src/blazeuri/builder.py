"""Fluent, mutable URI builder with ``{name}`` template support."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from blazeuri import _encoding as enc
from blazeuri._braces import first_unbalanced_brace, hide_nested_braces, recover_braces
from blazeuri._logging import get_logger
from blazeuri._uri import Uri, parse_uri
from blazeuri.errors import BuildFailureError, IllegalArgumentError, MalformedUriError
from blazeuri.resource import class_path, function_path, method_path
from blazeuri.template import PositionalValues, TemplateVariable, find_variables, substitute, variable_names

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from blazeuri.link import Link

logger = get_logger(__name__)

_OPAQUE_RE = re.compile(r"([^:/?#{]+):([^/].*)", re.DOTALL)
_HIERARCHICAL_RE = re.compile(r"(([^:/?#{]+):)?(//([^/?#]*))?([^?#]*)(\?([^#]*))?(#(.*))?", re.DOTALL)
_HOST_PORT_RE = re.compile(r"([^/:]+):(\d+)")
_IPV6_HOST_PORT_RE = re.compile(r"(\[(([0-9A-Fa-f]{0,4}:){2,7})([0-9A-Fa-f]{0,4})%?.*\]):(\d+)")

_STASHED_RE = re.compile(r"\x00(\d+)\x00")


class QueryParamMode(str, Enum):
    """How several values passed in one ``query_param`` call are written."""

    MULTI_PAIRS = "multi-pairs"  # k=v1&k=v2
    COMMA_SEPARATED = "comma-separated"  # k=v1,v2
    ARRAY_PAIRS = "array-pairs"  # k[]=v1&k[]=v2


@dataclass(slots=True)
class UriComponents:
    """Component state owned by one :class:`UriBuilder`.

    ``scheme_specific_part`` set means an opaque URI; host, path and query
    are then ignored on build.  ``authority`` holds an authority that could
    not be split and is mutually exclusive with user-info, host and port.
    """

    scheme: str | None = None
    user_info: str | None = None
    host: str | None = None
    port: int = -1
    path: str | None = None
    query: str | None = None
    fragment: str | None = None
    scheme_specific_part: str | None = None
    authority: str | None = None
    encode: bool = True
    query_param_mode: QueryParamMode = QueryParamMode.MULTI_PAIRS


# ----------------------------------------------------------------------
# Module-level helpers
# ----------------------------------------------------------------------


def _require(value: Any, what: str) -> None:
    if value is None:
        msg = f"{what} cannot be None"
        raise IllegalArgumentError(msg)


def _require_values(values: Iterable[Any], what: str) -> None:
    if any(v is None for v in values):
        msg = f"{what} value cannot be None"
        raise IllegalArgumentError(msg)


def _join_paths(encode: bool, base: str | None, *segments: str) -> str:
    """Append *segments* to *base* with exactly one ``/`` between them."""
    path = base or ""
    for segment in segments:
        if segment == "":
            continue
        if path.endswith("/"):
            if segment.startswith("/"):
                segment = segment[1:]
                if not segment:
                    continue
            path += enc.encode_path(segment) if encode else segment
            continue
        if encode:
            segment = enc.encode_path(segment)
        if not path or segment.startswith("/"):
            path += segment
        else:
            path += "/" + segment
    return path


def _stash_templates(value: str) -> tuple[str, list[str]]:
    """Swap every placeholder in *value* for a numbered marker."""
    saved: list[str] = []

    def stash(m: re.Match[str]) -> str:
        saved.append(recover_braces(m.group()))
        return f"\x00{len(saved) - 1}\x00"

    return enc.TEMPLATE_RE.sub(stash, hide_nested_braces(value)), saved


def _restore_templates(value: str, saved: list[str]) -> str:
    if saved:
        value = _STASHED_RE.sub(lambda m: saved[int(m.group(1))], value)
    return recover_braces(value)


def _split_matrix(block: str) -> list[tuple[str, str | None]]:
    params = block.split(";")
    while params and params[-1] == "":
        params.pop()
    pairs: list[tuple[str, str | None]] = []
    for param in params:
        name, sep, value = param.partition("=")
        pairs.append((name, value if sep else None))
    return pairs


def _format_query(name: str, values: list[str], mode: QueryParamMode) -> str:
    if mode is QueryParamMode.COMMA_SEPARATED:
        return f"{name}={','.join(values)}"
    # ARRAY_PAIRS only marks the name when this call carries several values.
    if mode is QueryParamMode.ARRAY_PAIRS and len(values) != 1:
        connector = "[]="
    else:
        connector = "="
    return "&".join(f"{name}{connector}{value}" for value in values)


def _value_encoder(from_encoded: bool, encode_slash: bool) -> Callable[[str], str]:
    if from_encoded:
        return enc.encode_path_segment_save_encodings if encode_slash else enc.encode_path_save_encodings
    return enc.encode_path_segment_as_is if encode_slash else enc.encode_path_as_is


def _split_segments(path: str) -> list[str]:
    parts = path.removeprefix("/").split("/")
    while len(parts) > 1 and parts[-1] == "":
        parts.pop()
    return parts


def _as_uri(value: str | Uri) -> Uri:
    _require(value, "URI")
    return value if isinstance(value, Uri) else parse_uri(value)


def relativize(from_uri: str | Uri, to_uri: str | Uri) -> str:
    """Express *to_uri* relative to *from_uri* with ``..`` segments.

    *to_uri* is returned unchanged unless scheme, host and port match.
    """
    source = _as_uri(from_uri)
    target = _as_uri(to_uri)
    if source.scheme != target.scheme or source.host != target.host or source.port != target.port:
        logger.debug("Not relativizing %s against %s: different origin", target, source)
        return str(target)
    if source.path is None and target.path is None:
        return ""
    if source.path is None:
        return target.path or ""
    if target.path is None:
        return str(target)

    from_parts = _split_segments(source.path)
    to_parts = _split_segments(target.path)
    common = 0
    while common < len(from_parts) and common < len(to_parts) and from_parts[common] == to_parts[common]:
        common += 1

    builder = UriBuilder.from_path("")
    for _ in range(common, len(from_parts)):
        builder.path("..")
    for part in to_parts[common:]:
        builder.path(part)
    return builder.build()


# ----------------------------------------------------------------------
# Builder
# ----------------------------------------------------------------------


class UriBuilder:
    """Accumulates URI components and builds URI strings from them.

    Every mutator changes the builder in place and returns it.  Values
    passed to ``build*`` fill ``{name}`` placeholders; positional values
    are bound to variable names in first-seen order (see
    :meth:`path_param_names`).

    Parameters
    ----------
    encode:
        When ``False``, ``path``/``query_param`` store their arguments
        verbatim and path template values are spliced without encoding.
    query_param_mode:
        Serialization used by ``query_param`` for several values.
    """

    __slots__ = ("_c",)

    def __init__(
        self,
        *,
        encode: bool = True,
        query_param_mode: QueryParamMode | str = QueryParamMode.MULTI_PAIRS,
    ) -> None:
        self._c = UriComponents(encode=encode)
        self.query_param_mode(query_param_mode)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_template(cls, template: str) -> UriBuilder:
        return cls().uri_template(template)

    @classmethod
    def from_uri(cls, uri: str | Uri) -> UriBuilder:
        return cls().uri(uri)

    @classmethod
    def from_path(cls, path: str) -> UriBuilder:
        return cls().path(path)

    @classmethod
    def from_resource(cls, resource: type) -> UriBuilder:
        return cls().resource(resource)

    @classmethod
    def from_link(cls, link: Link) -> UriBuilder:
        _require(link, "Link")
        return cls().uri_template(link.uri)

    def clone(self) -> UriBuilder:
        """Return an independent copy of this builder."""
        other = type(self).__new__(type(self))
        other._c = replace(self._c)
        return other

    __copy__ = clone

    @property
    def components(self) -> UriComponents:
        """A snapshot of the current component state."""
        return replace(self._c)

    def __repr__(self) -> str:
        return f"UriBuilder({self.to_template()!r})"

    # ------------------------------------------------------------------
    # Whole-URI mutators
    # ------------------------------------------------------------------

    def uri_template(self, template: str) -> UriBuilder:
        """Parse *template* into this builder.

        Placeholders may appear anywhere except in the port.  Components
        absent from *template* keep their current value.
        """
        _require(template, "URI template")
        bad = first_unbalanced_brace(template)
        if bad >= 0:
            raise MalformedUriError(template, f"unbalanced {template[bad]!r} at index {bad}")

        c = self._c
        opaque = _OPAQUE_RE.fullmatch(template)
        if opaque is not None:
            c.authority = None
            c.host = None
            c.port = -1
            c.user_info = None
            c.path = None
            c.query = None
            c.scheme = opaque.group(1)
            c.scheme_specific_part = opaque.group(2)
            return self

        match = _HIERARCHICAL_RE.fullmatch(template)
        if match is None:
            raise MalformedUriError(template, "not a URI template")
        c.scheme_specific_part = None
        return self._parse_hierarchical(template, match)

    def _parse_hierarchical(self, template: str, match: re.Match[str]) -> UriBuilder:
        c = self._c
        has_scheme = match.group(2) is not None
        if has_scheme:
            c.scheme = match.group(2)

        authority = match.group(4)
        if authority == "":
            c.authority = ""
            c.user_info = None
            c.host = None
            c.port = -1
        elif authority is not None:
            c.authority = None
            host = authority
            at = host.find("@")
            if at > -1:
                c.user_info = host[:at]
                host = host[at + 1 :]

            host_port = _HOST_PORT_RE.fullmatch(host)
            if host_port is not None:
                c.host = host_port.group(1)
                c.port = int(host_port.group(2))
            else:
                if host.startswith("["):
                    # IPv6 literal with a port, optionally with a zone id
                    bracketed = _IPV6_HOST_PORT_RE.fullmatch(host)
                    if bracketed is not None:
                        host = bracketed.group(1)
                        c.port = int(bracketed.group(5))
                c.host = host or None

        path = match.group(5)
        if path:
            colon, slash = path.find(":"), path.find("/")
            if not has_scheme and not path.startswith("/") and -1 < colon < slash:
                raise MalformedUriError(template, "relative path has ':' in its first segment")
            self.replace_path(path)
        if match.group(7) is not None:
            self.replace_query(match.group(7))
        if match.group(9) is not None:
            self.fragment(match.group(9))
        return self

    def uri(self, uri: str | Uri) -> UriBuilder:
        """Merge *uri* into this builder.

        A string is treated as a template (see :meth:`uri_template`).  A
        parsed :class:`~blazeuri._uri.Uri` overwrites the scheme only when it
        has one, and the path and query only when they are non-empty.
        """
        _require(uri, "URI")
        if isinstance(uri, str):
            return self.uri_template(uri)

        c = self._c
        if uri.fragment is not None:
            c.fragment = uri.fragment

        if uri.is_opaque:
            c.authority = None
            c.user_info = None
            c.host = None
            c.port = -1
            c.path = None
            c.query = None
            c.scheme = uri.scheme
            c.scheme_specific_part = uri.scheme_specific_part
            return self

        if uri.scheme is None:
            if c.scheme_specific_part is not None:
                c.scheme_specific_part = uri.scheme_specific_part
                return self
        else:
            c.scheme = uri.scheme

        c.scheme_specific_part = None
        if uri.authority is not None:
            if uri.user_info is None and uri.host is None and uri.port == -1:
                c.authority = uri.authority
                c.user_info = None
                c.host = None
                c.port = -1
            else:
                c.authority = None
                if uri.user_info is not None:
                    c.user_info = uri.user_info
                if uri.host is not None:
                    c.host = uri.host
                if uri.port != -1:
                    c.port = uri.port

        if uri.path:
            c.path = uri.path
        if uri.query:
            c.query = uri.query
        return self

    def scheme_specific_part(self, ssp: str) -> UriBuilder:
        _require(ssp, "Scheme-specific part")
        c = self._c
        raw = ssp
        if c.scheme is not None:
            raw = f"{c.scheme}:{raw}"
        if c.fragment:
            raw = f"{raw}#{c.fragment}"
        parsed = parse_uri(raw)

        if parsed.is_opaque:
            c.scheme_specific_part = parsed.scheme_specific_part
        else:
            c.scheme_specific_part = None
            c.user_info = parsed.user_info
            c.host = parsed.host
            c.port = parsed.port
            c.authority = parsed.authority if parsed.host is None else None
            c.path = parsed.path
            c.query = parsed.query
        return self

    # ------------------------------------------------------------------
    # Component mutators
    # ------------------------------------------------------------------

    def scheme(self, scheme: str | None) -> UriBuilder:
        self._c.scheme = scheme
        return self

    def user_info(self, user_info: str | None) -> UriBuilder:
        self._c.user_info = user_info
        if user_info is not None:
            self._c.authority = None
        return self

    def host(self, host: str | None) -> UriBuilder:
        if host is not None and not host:
            raise IllegalArgumentError("Invalid host: empty string")
        self._c.host = host
        if host is not None:
            self._c.authority = None
        return self

    def port(self, port: int) -> UriBuilder:
        _require(port, "Port")
        if port < -1:
            msg = f"Invalid port: {port}"
            raise IllegalArgumentError(msg)
        self._c.port = port
        if port != -1:
            self._c.authority = None
        return self

    def encode(self, encode: bool) -> UriBuilder:
        self._c.encode = encode
        return self

    def query_param_mode(self, mode: QueryParamMode | str) -> UriBuilder:
        try:
            self._c.query_param_mode = QueryParamMode(mode)
        except ValueError as exc:
            msg = f"Unknown query parameter mode: {mode!r}"
            raise IllegalArgumentError(msg) from exc
        return self

    def path(self, segment: str) -> UriBuilder:
        """Append *segment* to the path, encoding it unless disabled."""
        _require(segment, "Path segment")
        self._c.path = _join_paths(self._c.encode, self._c.path, segment)
        return self

    def segment(self, *segments: str) -> UriBuilder:
        """Append each of *segments* as a single segment (``/`` is escaped)."""
        _require_values(segments, "Path segment")
        for segment in segments:
            self.path(enc.encode_path_segment(segment))
        return self

    def resource(self, resource: type) -> UriBuilder:
        """Append the ``@uri_path`` template declared on *resource*."""
        self._c.path = _join_paths(True, self._c.path, class_path(resource))
        return self

    def resource_method(self, resource: type, method: str) -> UriBuilder:
        """Append the ``@uri_path`` template of *resource*'s *method*."""
        self._c.path = _join_paths(self._c.encode, self._c.path, method_path(resource, method))
        return self

    def method(self, func: Callable[..., Any]) -> UriBuilder:
        self._c.path = _join_paths(self._c.encode, self._c.path, function_path(func))
        return self

    def replace_path(self, path: str | None) -> UriBuilder:
        self._c.path = None if path is None else enc.encode_path(path)
        return self

    def replace_query(self, query: str | None) -> UriBuilder:
        self._c.query = enc.encode_query_string(query) if query else None
        return self

    def fragment(self, fragment: str | None) -> UriBuilder:
        self._c.fragment = None if fragment is None else enc.encode_fragment(fragment)
        return self

    # ------------------------------------------------------------------
    # Matrix parameters
    # ------------------------------------------------------------------

    def matrix_param(self, name: str, *values: Any) -> UriBuilder:
        """Append ``;name=value`` to the path once per value."""
        _require(name, "Matrix parameter name")
        _require_values(values, "Matrix parameter")
        c = self._c
        encoded_name = enc.encode_matrix_param(name)
        c.path = (c.path or "") + "".join(f";{encoded_name}={enc.encode_matrix_param(str(v))}" for v in values)
        return self

    def replace_matrix_param(self, name: str, *values: Any) -> UriBuilder:
        """Drop every *name* pair from the last segment, then append *values*."""
        _require(name, "Matrix parameter name")
        _require_values(values, "Matrix parameter")
        c = self._c
        if c.path is None:
            return self.matrix_param(name, *values) if values else self

        # placeholders may carry ';' or '=' in their regex constraints
        path, saved = _stash_templates(c.path)
        start = max(path.rfind("/"), 0)
        matrix_at = path.find(";", start)
        if matrix_at > -1:
            pairs = _split_matrix(path[matrix_at + 1 :])
            path = path[:matrix_at]
            names = {name, enc.encode_matrix_param(name)}
            for key, value in pairs:
                if key in names:
                    continue
                path += f";{key}" if value is None else f";{key}={value}"
        c.path = _restore_templates(path, saved)

        if values:
            self.matrix_param(name, *values)
        return self

    def replace_matrix(self, matrix: str | None) -> UriBuilder:
        """Replace the whole matrix block of the last path segment."""
        matrix = matrix or ""
        if not matrix.startswith(";"):
            matrix = ";" + matrix
        matrix = enc.encode_path(matrix)
        c = self._c
        if c.path is None:
            c.path = matrix
            return self

        path, saved = _stash_templates(c.path)
        start = max(path.rfind("/"), 0)
        matrix_at = path.find(";", start)
        path = path[:matrix_at] if matrix_at > -1 else path
        c.path = _restore_templates(path, saved) + matrix
        return self

    # ------------------------------------------------------------------
    # Query parameters
    # ------------------------------------------------------------------

    def _append_query(self, name: str, values: tuple[Any, ...], encoder: Callable[[str], str] | None) -> None:
        c = self._c
        encoded_name = encoder(name) if encoder else name
        encoded = [encoder(str(v)) if encoder else str(v) for v in values]
        pairs = _format_query(encoded_name, encoded, c.query_param_mode)
        c.query = f"{c.query}&{pairs}" if c.query else pairs

    def query_param(self, name: str, *values: Any) -> UriBuilder:
        """Append *values* for *name* using the active :class:`QueryParamMode`.

        Placeholders and existing ``%XX`` sequences in *name* and *values*
        are preserved.  Without values nothing is appended.
        """
        _require(name, "Query parameter name")
        _require_values(values, "Query parameter")
        if values:
            self._append_query(name, values, enc.encode_query_param if self._c.encode else None)
        return self

    def client_query_param(self, name: str, *values: Any) -> UriBuilder:
        """Like :meth:`query_param`, but braces and ``%`` are always escaped."""
        _require(name, "Query parameter name")
        _require_values(values, "Query parameter")
        if values:
            self._append_query(name, values, enc.encode_query_param_as_is if self._c.encode else None)
        return self

    def replace_query_param(self, name: str, *values: Any) -> UriBuilder:
        """Remove every pair named *name*, then append *values* if any."""
        _require(name, "Query parameter name")
        _require_values(values, "Query parameter")
        c = self._c
        if not c.query:
            return self.query_param(name, *values)

        encoded_name = enc.encode_query_param(name)
        names = {encoded_name, encoded_name + "[]"}
        kept = [param for param in c.query.split("&") if param.partition("=")[0] not in names]
        c.query = "&".join(kept) or None
        return self.query_param(name, *values)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def template_variables(self) -> list[TemplateVariable]:
        c = self._c
        parts = [c.scheme, c.scheme_specific_part, c.user_info, c.host, c.authority, c.path, c.query, c.fragment]
        return variable_names(parts)

    def path_param_names(self) -> list[str]:
        """Distinct template variable names in declaration order.

        Components are scanned as scheme, scheme-specific part, user-info,
        host, path, query, fragment.
        """
        return [variable.name for variable in self.template_variables()]

    def substitute_path_param(self, name: str, value: Any, *, encoded: bool = False) -> UriBuilder:
        """Replace placeholder *name* in the path only, in place."""
        _require(name, "Name")
        _require(value, "Value")
        c = self._c
        if c.path is None:
            return self
        text = str(value)
        replacement = enc.encode_non_codes(text) if encoded else enc.encode_path_segment(text)
        parts: list[str] = []
        last_end = 0
        for match in find_variables(c.path):
            if match.name != name:
                continue
            parts.append(c.path[last_end : match.start])
            parts.append(replacement)
            last_end = match.end
        parts.append(c.path[last_end:])
        c.path = "".join(parts)
        return self

    def to_template(self) -> str:
        """Render the current state without resolving any placeholder."""
        return self._build_string({}, from_encoded=True, template_mode=True, encode_slash=True)

    def resolve_template(self, name: str, value: Any, *, encode_slash_in_path: bool = True) -> UriBuilder:
        _require(name, "Name")
        _require(value, "Value")
        return self._resolve({name: value}, from_encoded=False, encode_slash=encode_slash_in_path)

    def resolve_template_from_encoded(self, name: str, value: Any) -> UriBuilder:
        _require(name, "Name")
        _require(value, "Value")
        return self._resolve({name: value}, from_encoded=True, encode_slash=True)

    def resolve_templates(self, values: Mapping[str, Any], *, encode_slash_in_path: bool = True) -> UriBuilder:
        """Substitute the given placeholders in place, leaving the others."""
        self._check_template_values(values)
        return self._resolve(values, from_encoded=False, encode_slash=encode_slash_in_path)

    def resolve_templates_from_encoded(self, values: Mapping[str, Any]) -> UriBuilder:
        self._check_template_values(values)
        return self._resolve(values, from_encoded=True, encode_slash=True)

    @staticmethod
    def _check_template_values(values: Mapping[str, Any]) -> None:
        _require(values, "Template values")
        for key, value in values.items():
            _require(key, "Template name")
            if value is None:
                msg = f"Template value for {key!r} cannot be None"
                raise IllegalArgumentError(msg)

    def _resolve(self, values: Mapping[str, Any], *, from_encoded: bool, encode_slash: bool) -> UriBuilder:
        template = self._build_string(values, from_encoded=from_encoded, template_mode=True, encode_slash=encode_slash)
        logger.debug("Resolved %s into %s", sorted(values), template)
        return self.uri_template(template)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self, *values: Any, encode_slash_in_path: bool = True) -> str:
        """Build the URI, filling placeholders positionally with *values*."""
        return self._build(PositionalValues(values), from_encoded=False, encode_slash=encode_slash_in_path)

    def build_from_encoded(self, *values: Any) -> str:
        """Like :meth:`build`, but *values* are already percent-encoded."""
        return self._build(PositionalValues(values), from_encoded=True, encode_slash=False)

    def build_from_map(self, values: Mapping[str, Any], *, encode_slash_in_path: bool = True) -> str:
        _require(values, "Values")
        return self._build(values, from_encoded=False, encode_slash=encode_slash_in_path)

    def build_from_encoded_map(self, values: Mapping[str, Any]) -> str:
        _require(values, "Values")
        return self._build(values, from_encoded=True, encode_slash=False)

    def _build(self, values: Mapping[str, Any], *, from_encoded: bool, encode_slash: bool) -> str:
        result = self._build_string(values, from_encoded=from_encoded, template_mode=False, encode_slash=encode_slash)
        try:
            parse_uri(result)
        except MalformedUriError as exc:
            msg = f"Failed to create URI from {result!r}: {exc.reason}"
            raise BuildFailureError(msg) from exc
        logger.debug("Built URI %s", result)
        return result

    def _build_string(
        self,
        values: Mapping[str, Any],
        *,
        from_encoded: bool,
        template_mode: bool,
        encode_slash: bool,
    ) -> str:
        c = self._c
        segment_encoder = _value_encoder(from_encoded, encode_slash)
        string_encoder = enc.encode_query_string_save_encodings if from_encoded else enc.encode_query_string_as_is

        def fill(part: str, encoder: Callable[[str], str] | None) -> str:
            return substitute(part, values, encoder, template_mode=template_mode)

        out: list[str] = []
        if c.scheme is not None:
            out.append(fill(c.scheme, segment_encoder))
            out.append(":")

        if c.scheme_specific_part is not None:
            out.append(fill(c.scheme_specific_part, string_encoder))
        else:
            has_authority = True
            if c.user_info is not None or c.host is not None or c.port != -1:
                out.append("//")
                if c.user_info is not None:
                    out.append(fill(c.user_info, segment_encoder))
                    out.append("@")
                if c.host is not None:
                    out.append(fill(c.host, segment_encoder))
                if c.port != -1:
                    out.append(f":{c.port}")
            elif c.authority is not None:
                out.append("//")
                out.append(fill(c.authority, segment_encoder))
            else:
                has_authority = False

            if c.path is not None:
                path = fill(c.path, segment_encoder if c.encode else None)
                if has_authority and path and not path.startswith("/"):
                    out.append("/")
                out.append(path)

            if c.query is not None:
                query_encoder = enc.encode_query_param_save_encodings if from_encoded else enc.encode_query_param_as_is
                out.append("?")
                out.append(fill(c.query, query_encoder))

        if c.fragment is not None:
            out.append("#")
            out.append(fill(c.fragment, string_encoder))
        return "".join(out)
