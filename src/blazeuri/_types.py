"""ASGI type definitions."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

Scope = MutableMapping[str, Any]
MultiDict = dict[str, list[str]]
