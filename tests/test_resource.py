"""Tests for @uri_path resource annotations and logger naming."""

from __future__ import annotations

import io
import logging

import pytest

from blazeuri import IllegalArgumentError, uri_path
from blazeuri._logging import get_logger, setup_logging
from blazeuri.resource import class_path, function_path, method_path


@uri_path("/orders")
class Orders:
    @uri_path("{id}/items")
    def items(self) -> None: ...


@uri_path("/health")
def health() -> None: ...


class TestResourcePaths:
    def test_class_path(self) -> None:
        assert class_path(Orders) == "/orders"

    def test_method_path(self) -> None:
        assert method_path(Orders, "items") == "{id}/items"

    def test_function_path(self) -> None:
        assert function_path(health) == "/health"

    def test_unknown_method(self) -> None:
        with pytest.raises(IllegalArgumentError, match="Orders.missing"):
            method_path(Orders, "missing")

    def test_unannotated_function(self) -> None:
        with pytest.raises(IllegalArgumentError, match="no @uri_path"):
            function_path(lambda: None)

    def test_none_template(self) -> None:
        with pytest.raises(IllegalArgumentError):
            uri_path(None)


class TestLogging:
    def test_names_are_namespaced(self) -> None:
        assert get_logger("builder").name == "blazeuri.builder"
        assert get_logger("blazeuri.link").name == "blazeuri.link"
        assert get_logger().name == "blazeuri"

    def test_setup_once(self) -> None:
        base = logging.getLogger("blazeuri")
        saved = (list(base.handlers), base.level, base.propagate)
        for handler in saved[0]:
            base.removeHandler(handler)
        stream = io.StringIO()
        try:
            setup_logging(logging.DEBUG, stream)
            setup_logging(logging.INFO, io.StringIO())
            assert len(base.handlers) == 1
            assert base.level == logging.INFO
            get_logger("builder").info("hello")
            assert stream.getvalue() == "INFO blazeuri.builder: hello\n"
        finally:
            for handler in list(base.handlers):
                base.removeHandler(handler)
            for handler in saved[0]:
                base.addHandler(handler)
            base.setLevel(saved[1])
            base.propagate = saved[2]
