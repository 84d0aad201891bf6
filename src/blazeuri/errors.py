"""Error kinds raised while building and parsing URIs."""

from __future__ import annotations


class UriBuilderError(Exception):
    """Base class for every error raised by :mod:`blazeuri`."""


class IllegalArgumentError(UriBuilderError, ValueError):
    """A required argument was ``None`` or otherwise invalid."""


class MissingTemplateVariableError(UriBuilderError, ValueError):
    """A template placeholder had no value, or its value was ``None``."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"Template parameter not provided: {name!r}")


class MalformedUriError(UriBuilderError, ValueError):
    """An input string does not follow the URI or URI-template grammar."""

    def __init__(self, uri: str, reason: str) -> None:
        self.uri = uri
        self.reason = reason
        super().__init__(f"Illegal URI {uri!r}: {reason}")


class BuildFailureError(UriBuilderError, RuntimeError):
    """The string produced by a ``build*`` call is not a valid URI."""
