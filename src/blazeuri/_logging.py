"""Logger naming and one-shot setup for the ``blazeuri`` namespace."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_BASE = "blazeuri"


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach a plain-text handler to the ``blazeuri`` logger and return it.

    Calling it again only adjusts the level.
    """
    base = logging.getLogger(_BASE)
    base.setLevel(level)
    if base.handlers:
        return base

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    base.addHandler(handler)
    base.propagate = False
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``blazeuri`` namespace."""
    if not name or name == _BASE:
        return logging.getLogger(_BASE)
    if name.startswith(_BASE + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_BASE}.{name}")
