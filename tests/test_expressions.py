"""Tests for the expression compiler and evaluator."""

from __future__ import annotations

import re
from dataclasses import dataclass

import pytest

from plantilla import (
    UNDEFINED,
    Context,
    ExecutionError,
    ExpressionSyntaxError,
    FilterError,
    UndefinedError,
    compile_expression,
    create_filters_with_defaults,
)
from plantilla.expressions import Pipeline
from plantilla.filters import escape


def evaluate(source: str, **context: object) -> object:
    return compile_expression(source).evaluate(Context(context))


@dataclass
class User:
    name: str
    tags: list[str]


class TestLiterals:
    @pytest.mark.parametrize(
        "source,expected",
        [
            ("42", 42),
            ("-7", -7),
            ("1.5", 1.5),
            ('"text"', "text"),
            ("'text'", "text"),
            ("true", True),
            ("False", False),
            ("none", None),
            ("None", None),
        ],
    )
    def test_literal(self, source: str, expected: object) -> None:
        assert evaluate(source) == expected

    def test_string_escapes(self) -> None:
        assert evaluate(r"'it\'s'") == "it's"
        assert evaluate(r'"a\"b"') == 'a"b'
        assert evaluate(r"'tab\there'") == "tab\there"
        assert evaluate(r"'back\\slash'") == "back\\slash"

    def test_unknown_escape_kept(self) -> None:
        assert evaluate(r"'\d'") == "\\d"


class TestVariables:
    def test_simple(self) -> None:
        assert evaluate("name", name="Ada") == "Ada"

    def test_mapping_path(self) -> None:
        assert evaluate("user.address.city", user={"address": {"city": "Lima"}}) == "Lima"

    def test_attribute_path(self) -> None:
        assert evaluate("user.name", user=User("Ada", [])) == "Ada"

    def test_index_path(self) -> None:
        assert evaluate("items.1", items=["a", "b"]) == "b"
        assert evaluate("user.tags.0", user=User("Ada", ["x"])) == "x"

    def test_missing_is_undefined(self) -> None:
        assert evaluate("nope") is UNDEFINED
        assert evaluate("user.nope", user={}) is UNDEFINED
        assert evaluate("items.5", items=[1]) is UNDEFINED

    def test_private_attributes_hidden(self) -> None:
        assert evaluate("user.__class__", user=User("Ada", [])) is UNDEFINED

    def test_strict_undefined(self) -> None:
        expr = compile_expression("missing.name")
        with pytest.raises(UndefinedError, match="'missing.name' is undefined"):
            expr.evaluate(Context(), strict_undefined=True)


class TestOperators:
    @pytest.mark.parametrize(
        "source,expected",
        [
            ("a == 1", True),
            ("a != 1", False),
            ("a < 2", True),
            ("a <= 1", True),
            ("a > 1", False),
            ("a >= 2", False),
            ("'x' in letters", True),
            ("'z' in letters", False),
            ("'z' not in letters", True),
        ],
    )
    def test_comparisons(self, source: str, expected: bool) -> None:
        assert evaluate(source, a=1, letters=["x", "y"]) is expected

    def test_and_or_return_operands(self) -> None:
        assert evaluate("a or b", a="", b="fallback") == "fallback"
        assert evaluate("a and b", a="x", b="y") == "y"
        assert evaluate("a and b", a=0, b="y") == 0

    def test_or_short_circuits(self) -> None:
        # Right side would raise on comparison
        assert evaluate("true or 1 < 'x'") is True

    def test_and_short_circuits(self) -> None:
        assert evaluate("false and 1 < 'x'") is False

    def test_not(self) -> None:
        assert evaluate("not a", a=[]) is True
        assert evaluate("not not a", a=[]) is False

    def test_precedence(self) -> None:
        # and binds tighter than or
        assert evaluate("a or b and c", a=True, b=False, c=False) is True
        assert evaluate("(a or b) and c", a=True, b=False, c=False) is False

    def test_pipeline_binds_tighter_than_comparison(self) -> None:
        assert evaluate("name|lower == 'ada'", name="ADA") is True

    def test_incomparable_values(self) -> None:
        with pytest.raises(ExecutionError, match="cannot evaluate 1 < 'x'"):
            evaluate("a < 'x'", a=1)


class TestFilterPipelines:
    def test_chain(self) -> None:
        assert evaluate("name|trim|upper", name="  ada ") == "ADA"

    def test_argument(self) -> None:
        assert evaluate('items|join:"-"', items=[1, 2, 3]) == "1-2-3"

    def test_argument_from_variable(self) -> None:
        assert evaluate("missing|default:fallback", fallback="fb") == "fb"

    def test_filters_property(self) -> None:
        assert compile_expression("a|lower|trim").filters == ("lower", "trim")
        assert compile_expression("a").filters == ()

    def test_filter_failure_is_filter_error(self) -> None:
        with pytest.raises(FilterError) as exc_info:
            evaluate("x|int", x="abc")
        assert exc_info.value.filter_name == "int"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_custom_registry(self) -> None:
        filters = create_filters_with_defaults().register("twice", lambda v: v * 2).build()
        assert compile_expression("n|twice", filters).evaluate(Context(n=4)) == 8

    def test_unknown_filter_is_a_syntax_error(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="unknown filter 'nope'"):
            compile_expression("a|nope")


class TestWithFilter:
    def test_appends_to_pipeline(self) -> None:
        expr = compile_expression("a|upper")
        escaped = expr.with_filter("escape", escape)
        assert escaped.filters == ("upper", "escape")
        assert expr.filters == ("upper",)

    def test_wraps_plain_expression(self) -> None:
        escaped = compile_expression("a == b").with_filter("escape", escape)
        assert isinstance(escaped.root, Pipeline)
        assert escaped.evaluate(Context(a=1, b=1)) == "True"

    def test_source_unchanged(self) -> None:
        expr = compile_expression("  a  ")
        assert expr.source == "a"
        assert expr.with_filter("escape", escape).source == "a"


class TestRender:
    def test_none_and_undefined_render_empty(self) -> None:
        assert compile_expression("none").render(Context()) == ""
        assert compile_expression("missing").render(Context()) == ""

    def test_values_use_str(self) -> None:
        assert compile_expression("n").render(Context(n=1.5)) == "1.5"
        assert compile_expression("flag").render(Context(flag=False)) == "False"


class TestSyntaxErrors:
    @pytest.mark.parametrize(
        "source,message",
        [
            ("", "empty expression"),
            ("   ", "empty expression"),
            ("(a", "expected ')'"),
            ("a b", "unexpected 'b'"),
            ("a ==", "unexpected end of expression"),
            ("a + b", "unexpected character '+'"),
            ("a|", "expected filter name after '|'"),
            ("a not b", "expected 'in' after 'not'"),
            ("and", "unexpected keyword 'and'"),
            ("'unterminated", "unexpected character"),
        ],
    )
    def test_malformed(self, source: str, message: str) -> None:
        with pytest.raises(ExpressionSyntaxError, match=re.escape(message)):
            compile_expression(source)

    def test_error_carries_position(self) -> None:
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            compile_expression("a b")
        assert exc_info.value.position == 2
        assert exc_info.value.expression == "a b"
