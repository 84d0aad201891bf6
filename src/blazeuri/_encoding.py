"""Per-position percent-encoding tables and the escaper built on them.

Each table holds 128 entries indexed by ASCII code point: ``None`` when the
character may appear as-is in that URI position, otherwise its escaped form.
Characters outside ASCII are always percent-encoded as UTF-8.

Two flavours exist for every position:

``*_as_is``
    Escapes everything the table disallows, including ``%``.
``*_save_encodings``
    Leaves well-formed ``%XX`` sequences alone and escapes only stray ``%``.

The plain ``encode_<position>`` helpers additionally keep ``{name}`` template
placeholders untouched, which is what the builder needs when storing a
component that may still be substituted later.
"""

from __future__ import annotations

import re
from urllib.parse import quote

from blazeuri._braces import hide_nested_braces, recover_braces
from blazeuri.errors import IllegalArgumentError, MalformedUriError

EncodingTable = tuple[str | None, ...]

_UNRESERVED = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
_SUB_DELIMS = "!$&'()*+,;="

_NON_CODES_RE = re.compile(r"%(?![0-9a-fA-F]{2})")
TEMPLATE_RE = re.compile(r"\{[^}]+\}")


def _table(allowed: str, overrides: dict[str, str] | None = None) -> EncodingTable:
    entries: list[str | None] = [None if chr(i) in allowed else f"%{i:02X}" for i in range(128)]
    for ch, encoded in (overrides or {}).items():
        entries[ord(ch)] = encoded
    return tuple(entries)


# pchar plus "/"
PATH_TABLE = _table(_UNRESERVED + _SUB_DELIMS + ":@/")
PATH_SEGMENT_TABLE = _table(_UNRESERVED + _SUB_DELIMS + ":@")
MATRIX_PARAM_TABLE = _table(_UNRESERVED + _SUB_DELIMS.replace(";", "").replace("=", "") + ":@")
QUERY_NAME_VALUE_TABLE = _table(_UNRESERVED, {" ": "+"})
# query = *( pchar / "/" / "?" )
QUERY_STRING_TABLE = _table(_UNRESERVED + _SUB_DELIMS + ":@?/")

FRAGMENT_TABLE = QUERY_STRING_TABLE


def encode_from_table(value: str, table: EncodingTable, *, encode_percent: bool) -> str:
    """Escape every character of *value* that *table* disallows."""
    out: list[str] = []
    for ch in value:
        if ch == "%" and not encode_percent:
            out.append(ch)
            continue
        code = ord(ch)
        if code < 128:
            encoded = table[code]
            out.append(ch if encoded is None else encoded)
        else:
            try:
                out.append(quote(ch, safe=""))
            except UnicodeEncodeError as exc:
                msg = f"Cannot encode {value!r}: {ch!r} is not valid UTF-8"
                raise IllegalArgumentError(msg) from exc
    return "".join(out)


def encode_non_codes(value: str) -> str:
    """Escape each ``%`` that does not start a valid ``%XX`` sequence."""
    return _NON_CODES_RE.sub("%25", value)


def _encode_save_encodings(value: str, table: EncodingTable) -> str:
    return encode_non_codes(encode_from_table(value, table, encode_percent=False))


def encode_value(value: str, table: EncodingTable) -> str:
    """Encode *value*, keeping ``%XX`` sequences and template placeholders."""
    if "{" not in value:
        return _encode_save_encodings(value, table)

    hidden = hide_nested_braces(value)
    parts: list[str] = []
    last_end = 0
    for m in TEMPLATE_RE.finditer(hidden):
        parts.append(_encode_save_encodings(value[last_end : m.start()], table))
        parts.append(recover_braces(m.group()))
        last_end = m.end()
    parts.append(_encode_save_encodings(value[last_end:], table))
    return "".join(parts)


# ----------------------------------------------------------------------
# Template-preserving encoders
# ----------------------------------------------------------------------


def encode_path(value: str) -> str:
    return encode_value(value, PATH_TABLE)


def encode_path_segment(value: str) -> str:
    return encode_value(value, PATH_SEGMENT_TABLE)


def encode_matrix_param(value: str) -> str:
    return encode_value(value, MATRIX_PARAM_TABLE)


def encode_query_param(value: str) -> str:
    return encode_value(value, QUERY_NAME_VALUE_TABLE)


def encode_query_string(value: str) -> str:
    return encode_value(value, QUERY_STRING_TABLE)


def encode_fragment(value: str) -> str:
    return encode_value(value, FRAGMENT_TABLE)


# ----------------------------------------------------------------------
# Value encoders (no template handling)
# ----------------------------------------------------------------------


def encode_path_as_is(value: str) -> str:
    return encode_from_table(value, PATH_TABLE, encode_percent=True)


def encode_path_segment_as_is(value: str) -> str:
    return encode_from_table(value, PATH_SEGMENT_TABLE, encode_percent=True)


def encode_query_param_as_is(value: str) -> str:
    return encode_from_table(value, QUERY_NAME_VALUE_TABLE, encode_percent=True)


def encode_query_string_as_is(value: str) -> str:
    return encode_from_table(value, QUERY_STRING_TABLE, encode_percent=True)


def encode_path_save_encodings(value: str) -> str:
    return _encode_save_encodings(value, PATH_TABLE)


def encode_path_segment_save_encodings(value: str) -> str:
    return _encode_save_encodings(value, PATH_SEGMENT_TABLE)


def encode_query_param_save_encodings(value: str) -> str:
    return _encode_save_encodings(value, QUERY_NAME_VALUE_TABLE)


def encode_query_string_save_encodings(value: str) -> str:
    return _encode_save_encodings(value, QUERY_STRING_TABLE)


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------


def _hex_nibble(ch: str) -> int:
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    if "a" <= ch <= "f":
        return ord(ch) - ord("a") + 10
    if "A" <= ch <= "F":
        return ord(ch) - ord("A") + 10
    return -1


def decode_uri_component(value: str, *, plus: bool = True) -> str:
    """Decode ``%XX`` escapes (and ``+`` as space when *plus* is set).

    Decoded bytes are read as UTF-8; invalid sequences become U+FFFD.
    Raises :class:`MalformedUriError` on a truncated or non-hex escape.
    """
    if "%" not in value and not (plus and "+" in value):
        return value

    buf = bytearray()
    size = len(value)
    i = 0
    while i < size:
        ch = value[i]
        if ch == "%":
            if i == size - 1:
                raise MalformedUriError(value, "unterminated escape sequence at end of string")
            if i == size - 2:
                raise MalformedUriError(value, "partial escape sequence at end of string")
            hi, lo = _hex_nibble(value[i + 1]), _hex_nibble(value[i + 2])
            if hi < 0 or lo < 0:
                msg = f"invalid escape sequence '%{value[i + 1 : i + 3]}' at index {i}"
                raise MalformedUriError(value, msg)
            buf.append(hi * 16 + lo)
            i += 3
        else:
            buf.extend((" " if plus and ch == "+" else ch).encode("utf-8"))
            i += 1
    return buf.decode("utf-8", errors="replace")

