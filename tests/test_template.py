"""Tests for brace hiding and template placeholder matching."""

from __future__ import annotations

import pytest

from blazeuri import MissingTemplateVariableError
from blazeuri._braces import (
    CLOSE_SENTINEL,
    OPEN_SENTINEL,
    first_unbalanced_brace,
    hide_nested_braces,
    recover_braces,
)
from blazeuri._encoding import encode_path_segment_as_is
from blazeuri.template import PositionalValues, TemplateVariable, find_variables, substitute, variable_names

# =====================================================================
# Brace hiding
# =====================================================================


class TestBraces:
    def test_no_nesting_returns_same_object(self) -> None:
        value = "/users/{id}/posts/{post}"
        assert hide_nested_braces(value) is value

    def test_nested_braces_hidden(self) -> None:
        hidden = hide_nested_braces("{id:[0-9]{3}}")
        assert hidden == "{id:[0-9]" + OPEN_SENTINEL + "3" + CLOSE_SENTINEL + "}"

    def test_recover_is_inverse(self) -> None:
        value = "/a/{id:[0-9]{3}}/{x:a{1,2}b}"
        assert recover_braces(hide_nested_braces(value)) == value

    def test_recover_without_sentinels(self) -> None:
        value = "/plain"
        assert recover_braces(value) is value

    def test_first_unbalanced_open(self) -> None:
        assert first_unbalanced_brace("/a/{b") == 3

    def test_first_unbalanced_close(self) -> None:
        assert first_unbalanced_brace("/a}") == 2

    def test_balanced(self) -> None:
        assert first_unbalanced_brace("{a}{b:{2}}") == -1


# =====================================================================
# Matching
# =====================================================================


class TestFindVariables:
    def test_duplicates_in_order(self) -> None:
        matches = find_variables("/{a}/{b:\\d+}/{a}")
        assert [m.name for m in matches] == ["a", "b", "a"]
        assert matches[1].constraint == "\\d+"
        assert matches[0].constraint is None

    def test_nested_constraint_recovered(self) -> None:
        (match,) = find_variables("/x/{id:[0-9]{3}}")
        assert match.name == "id"
        assert match.constraint == "[0-9]{3}"
        assert match.text == "{id:[0-9]{3}}"
        assert (match.start, match.end) == (3, 16)

    def test_whitespace_around_name(self) -> None:
        (match,) = find_variables("{ name }")
        assert match.name == "name"

    def test_dotted_and_dashed_names(self) -> None:
        assert [m.name for m in find_variables("{a.b}/{c-d}")] == ["a.b", "c-d"]

    def test_no_placeholders(self) -> None:
        assert find_variables("/plain/path") == []

    def test_variable_names_across_parts(self) -> None:
        names = variable_names(["{s}", None, "/{a}/{b}", "q={a}&r={c}"])
        assert names == [
            TemplateVariable("s", 0),
            TemplateVariable("a", 1),
            TemplateVariable("b", 2),
            TemplateVariable("c", 3),
        ]


# =====================================================================
# Substitution
# =====================================================================


class TestSubstitute:
    def test_template_mode_keeps_missing(self) -> None:
        result = substitute("/{a}/{b}", {"a": "x y"}, encode_path_segment_as_is, template_mode=True)
        assert result == "/x%20y/{b}"

    def test_build_mode_raises_on_missing(self) -> None:
        with pytest.raises(MissingTemplateVariableError, match="'b'") as info:
            substitute("/{a}/{b}", {"a": "x"}, encode_path_segment_as_is, template_mode=False)
        assert info.value.name == "b"

    def test_none_value_always_raises(self) -> None:
        with pytest.raises(MissingTemplateVariableError):
            substitute("/{a}", {"a": None}, encode_path_segment_as_is, template_mode=True)

    def test_no_encoder_splices_raw(self) -> None:
        assert substitute("/{a}", {"a": "x/y z"}, None, template_mode=False) == "/x/y z"

    def test_constraint_placeholder_replaced_whole(self) -> None:
        assert substitute("/{id:[0-9]{3}}", {"id": 123}, str, template_mode=False) == "/123"

    def test_positional_values_bind_first_seen(self) -> None:
        result = substitute("/{a}/{b}/{a}", PositionalValues([1, 2]), str, template_mode=False)
        assert result == "/1/2/1"

    def test_positional_values_run_out(self) -> None:
        with pytest.raises(MissingTemplateVariableError) as info:
            substitute("/{a}/{b}", PositionalValues(["x"]), str, template_mode=False)
        assert info.value.name == "b"
