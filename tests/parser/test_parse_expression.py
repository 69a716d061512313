import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from ssc.exceptions import ParseError, ParseErrorCode
from ssc.lexer.core.classes import Position
from ssc.lexer.core.lexer import lex
from ssc.parser.core.classes import *
from ssc.parser.core.parser import parse_expression
from ssc.parser.utils.assertion_helper import assert_asts_equal
from ssc.parser.utils.factory_helpers import *

# This file focuses on the Pratt expression parser on its own:
# 1) atoms -> numbers, strings, identifiers
# 2) precedence between the product and sum operators
# 3) left associativity within a precedence level
# 4) unary minus, which binds tighter than any binary operator
# 5) grouping, which is kept as its own node


def parse(source: str) -> Expression:
    return parse_expression(lex(source))


n = get_number_literal
s = get_string_literal
i = get_identifier
b = get_binary


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("1", n(1), id="number"),
        pytest.param('"text"', s("text"), id="string"),
        pytest.param("width", i("width"), id="identifier"),
        pytest.param("1 + 2 * 3", b(n(1), "+", b(n(2), "*", n(3))), id="product_binds_tighter_than_sum"),
        pytest.param("1 * 2 + 3", b(b(n(1), "*", n(2)), "+", n(3)), id="product_first_then_sum"),
        pytest.param("1 - 2 - 3", b(b(n(1), "-", n(2)), "-", n(3)), id="subtraction_left_assoc"),
        pytest.param("8 / 4 / 2", b(b(n(8), "/", n(4)), "/", n(2)), id="division_left_assoc"),
        pytest.param("1 + 2 - 3", b(b(n(1), "+", n(2)), "-", n(3)), id="mixed_sum_left_assoc"),
        pytest.param("a * b / c", b(b(i("a"), "*", i("b")), "/", i("c")), id="mixed_product_left_assoc"),
        pytest.param("-1", get_negation(n(1)), id="negation"),
        pytest.param("--x", get_negation(get_negation(i("x"))), id="double_negation"),
        pytest.param("-a * b", b(get_negation(i("a")), "*", i("b")), id="negation_binds_tighter_than_product"),
        pytest.param("a - -b", b(i("a"), "-", get_negation(i("b"))), id="minus_then_negation"),
        pytest.param("(1 + 2) * 3", b(get_grouping(b(n(1), "+", n(2))), "*", n(3)), id="grouping_overrides_precedence"),
        pytest.param("((x))", get_grouping(get_grouping(i("x"))), id="nested_grouping"),
        pytest.param("-(x)", get_negation(get_grouping(i("x"))), id="negated_grouping"),
        pytest.param('"x=" + 3', b(s("x="), "+", n(3)), id="string_plus_number"),
    ],
)
def test_expression_structure(source, expected):
    assert_asts_equal(parse(source), expected)


def test_binary_expression_points_at_operator():
    expr = parse("a  +  b")
    assert expr.pos == Position(line=0, column=3)
    assert expr.span.start == Position(line=0, column=0)
    assert expr.span.end == Position(line=0, column=7)


def test_unary_expression_points_at_minus():
    expr = parse("-  x")
    assert expr.pos == Position(line=0, column=0)
    assert expr.operand.pos == Position(line=0, column=3)


def test_grouping_points_at_inner_expression():
    expr = parse("( 1 + 2 )")
    assert expr.pos == Position(line=0, column=4)
    assert expr.span.start == Position(line=0, column=0)
    assert expr.span.end == Position(line=0, column=9)


@pytest.mark.parametrize(
    "source, code, pos",
    [
        pytest.param("", ParseErrorCode.UNEXPECTED_END_OF_INPUT, Position(line=0, column=0), id="empty"),
        pytest.param("1 +", ParseErrorCode.UNEXPECTED_END_OF_INPUT, Position(line=0, column=3), id="dangling_operator"),
        pytest.param("(1", ParseErrorCode.UNBALANCED_PAREN, Position(line=0, column=0), id="unclosed_group"),
        pytest.param("1)", ParseErrorCode.EXPECTED, Position(line=0, column=1), id="stray_closing_paren"),
        pytest.param("* 2", ParseErrorCode.EXPECTED, Position(line=0, column=0), id="leading_operator"),
        pytest.param("1 2", ParseErrorCode.EXPECTED, Position(line=0, column=2), id="leftover_tokens"),
        pytest.param("()", ParseErrorCode.EXPECTED, Position(line=0, column=1), id="empty_group"),
    ],
)
def test_expression_errors(source, code, pos):
    with pytest.raises(ParseError) as excinfo:
        parse(source)
    assert excinfo.value.code == code
    assert excinfo.value.pos == pos
