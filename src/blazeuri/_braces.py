"""Hide nested curly braces from the template regex.

A placeholder such as ``{id:[0-9]{3}}`` carries its own braces inside the
regex constraint.  Only the outermost pair may be seen by the matcher, so
every brace that is not at depth one is swapped for a control character
before matching and swapped back afterwards.
"""

from __future__ import annotations

OPEN_SENTINEL = "\x06"
CLOSE_SENTINEL = "\x07"

_RECOVER = str.maketrans({OPEN_SENTINEL: "{", CLOSE_SENTINEL: "}"})


def hide_nested_braces(value: str) -> str:
    """Return *value* with nested braces replaced by sentinels.

    The input object itself is returned when there is nothing to hide.
    """
    if "{" not in value and "}" not in value:
        return value

    depth = 0
    chars: list[str] | None = None
    for i, ch in enumerate(value):
        if ch == "{":
            if depth != 0:
                if chars is None:
                    chars = list(value)
                chars[i] = OPEN_SENTINEL
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth != 0:
                if chars is None:
                    chars = list(value)
                chars[i] = CLOSE_SENTINEL

    if chars is None:
        return value
    return "".join(chars)


def recover_braces(value: str) -> str:
    """Undo :func:`hide_nested_braces` on *value* (or any slice of it)."""
    if OPEN_SENTINEL not in value and CLOSE_SENTINEL not in value:
        return value
    return value.translate(_RECOVER)


def first_unbalanced_brace(value: str) -> int:
    """Return the index of the first unbalanced brace, or ``-1``."""
    opened: list[int] = []
    for i, ch in enumerate(value):
        if ch == "{":
            opened.append(i)
        elif ch == "}":
            if not opened:
                return i
            opened.pop()
    return opened[0] if opened else -1
