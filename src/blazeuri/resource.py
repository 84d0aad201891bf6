"""Attach URI path templates to resource classes and their methods."""

from __future__ import annotations

from typing import Any, TypeVar

from blazeuri.errors import IllegalArgumentError

T = TypeVar("T")

_ATTR = "__uri_path__"


def uri_path(template: str):
    """Decorator recording *template* as the path of a class or function.

    ::

        @uri_path("/users")
        class Users:
            @uri_path("{id}")
            def get(self, id: int): ...
    """
    if template is None:
        raise IllegalArgumentError("Path template cannot be None")

    def decorator(target: T) -> T:
        setattr(target, _ATTR, template)
        return target

    return decorator


def class_path(resource: type) -> str:
    """Return the template declared directly on *resource*."""
    if resource is None:
        raise IllegalArgumentError("Resource cannot be None")
    template = vars(resource).get(_ATTR)
    if template is None:
        msg = f"Class {resource.__qualname__!r} has no @uri_path template"
        raise IllegalArgumentError(msg)
    return template


def function_path(func: Any) -> str:
    if func is None:
        raise IllegalArgumentError("Method cannot be None")
    template = getattr(func, _ATTR, None)
    if template is None:
        name = getattr(func, "__qualname__", repr(func))
        msg = f"Method {name!r} has no @uri_path template"
        raise IllegalArgumentError(msg)
    return template


def method_path(resource: type, method: str) -> str:
    """Return the template of the method called *method* on *resource*."""
    if resource is None:
        raise IllegalArgumentError("Resource cannot be None")
    if method is None:
        raise IllegalArgumentError("Method name cannot be None")
    func = getattr(resource, method, None)
    if func is None or getattr(func, _ATTR, None) is None:
        msg = f"No method annotated with @uri_path: {resource.__qualname__}.{method}"
        raise IllegalArgumentError(msg)
    return getattr(func, _ATTR)
