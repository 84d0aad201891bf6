"""URI template placeholders: discovery and substitution."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, NamedTuple

from blazeuri._braces import hide_nested_braces, recover_braces
from blazeuri.errors import MissingTemplateVariableError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

_NAME_RE = r"\w[\w.-]*"
_CONSTRAINT_RE = r"[^{}][^{}]*"

# ``{name}`` or ``{name:regex}``; nested braces must be hidden first.
PARAM_RE = re.compile(r"\{\s*(" + _NAME_RE + r")\s*(?::\s*(" + _CONSTRAINT_RE + r"))?\}", re.ASCII)


class TemplateMatch(NamedTuple):
    """One placeholder occurrence inside a string."""

    name: str
    constraint: str | None
    start: int
    end: int
    text: str


class TemplateVariable(NamedTuple):
    name: str
    ordinal: int


def find_variables(value: str) -> list[TemplateMatch]:
    """Return every placeholder in *value*, in order, duplicates included."""
    if "{" not in value:
        return []
    matches: list[TemplateMatch] = []
    for m in PARAM_RE.finditer(hide_nested_braces(value)):
        constraint = m.group(2)
        matches.append(
            TemplateMatch(
                name=m.group(1),
                constraint=recover_braces(constraint) if constraint is not None else None,
                start=m.start(),
                end=m.end(),
                text=value[m.start() : m.end()],
            )
        )
    return matches


def variable_names(parts: Iterable[str | None]) -> list[TemplateVariable]:
    """Distinct variable names across *parts*, in first-seen order."""
    seen: dict[str, TemplateVariable] = {}
    for part in parts:
        if part is None:
            continue
        for match in find_variables(part):
            if match.name not in seen:
                seen[match.name] = TemplateVariable(match.name, len(seen))
    return list(seen.values())


class PositionalValues(dict[str, Any]):
    """Name lookup backed by positional values.

    Each name not seen before is bound to the next unused value the first
    time it is looked up, so repeated placeholders share one value.
    """

    def __init__(self, values: Iterable[Any]) -> None:
        super().__init__()
        self._pending = iter(values)

    def __contains__(self, name: object) -> bool:
        if super().__contains__(name):
            return True
        for value in self._pending:
            self[name] = value  # type: ignore[index]
            return True
        return False

    def __missing__(self, name: str) -> Any:
        if name in self:
            return super().__getitem__(name)
        raise KeyError(name)


def substitute(
    value: str,
    values: Mapping[str, Any],
    encoder: Callable[[str], str] | None,
    *,
    template_mode: bool,
) -> str:
    """Replace every placeholder in *value* with its encoded value.

    Placeholders without a value are kept verbatim in *template_mode* and
    raise :class:`MissingTemplateVariableError` otherwise.  A ``None`` value
    always raises.  With *encoder* set to ``None`` values are spliced raw.
    """
    if "{" not in value:
        return value

    parts: list[str] = []
    last_end = 0
    for match in find_variables(value):
        parts.append(value[last_end : match.start])
        last_end = match.end
        if match.name not in values:
            if template_mode:
                parts.append(match.text)
                continue
            raise MissingTemplateVariableError(match.name)
        replacement = values[match.name]
        if replacement is None:
            raise MissingTemplateVariableError(match.name, f"Template parameter {match.name!r} is None")
        text = str(replacement)
        parts.append(encoder(text) if encoder is not None else text)
    parts.append(value[last_end:])
    return "".join(parts)
