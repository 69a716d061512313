import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from ssc.exceptions import InternalCompilerError, LexError, LexErrorCode
from ssc.lexer.core.classes import Position, TokenType
from ssc.lexer.core.lexer import Lexer, lex

T = TokenType


def token_types(source):
    return [token.type for token in lex(source)]


# --- 1. Token Kinds ---


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("(", [T.LPAREN], id="lparen"),
        pytest.param(")", [T.RPAREN], id="rparen"),
        pytest.param("{}", [T.LCURLY, T.RCURLY], id="braces"),
        pytest.param("* / + -", [T.TIMES, T.DIVIDE, T.PLUS, T.MINUS], id="operators"),
        pytest.param(":,", [T.COLON, T.COMMA], id="punctuation"),
        pytest.param("=", [T.EQUALS], id="equals"),
        pytest.param("==", [T.COMPARE], id="compare"),
        pytest.param("===", [T.COMPARE, T.EQUALS], id="compare_then_equals"),
        pytest.param("a == b", [T.IDENTIFIER, T.COMPARE, T.IDENTIFIER], id="compare_between_names"),
        pytest.param("", [], id="empty_input"),
        pytest.param("   \n\t  \r\n ", [], id="whitespace_only"),
    ],
)
def test_token_kinds(source, expected):
    assert token_types(source) == expected


def test_shape_declaration_token_stream():
    tokens = lex('shape main() { svg(value: "hi") }')
    assert [t.type for t in tokens] == [
        T.IDENTIFIER,
        T.IDENTIFIER,
        T.LPAREN,
        T.RPAREN,
        T.LCURLY,
        T.IDENTIFIER,
        T.LPAREN,
        T.IDENTIFIER,
        T.COLON,
        T.STRING,
        T.RPAREN,
        T.RCURLY,
    ]
    assert tokens[0].value == "shape"
    assert tokens[1].value == "main"
    assert tokens[9].value == "hi"


# --- 2. Literals ---


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("42", 42.0, id="integer"),
        pytest.param("3.14", 3.14, id="decimal"),
        pytest.param("7.", 7.0, id="trailing_dot"),
        pytest.param("0", 0.0, id="zero"),
    ],
)
def test_number_literals(source, expected):
    tokens = lex(source)
    assert len(tokens) == 1
    assert tokens[0].type == T.NUMBER
    assert tokens[0].value == expected


def test_number_stops_at_second_dot():
    with pytest.raises(LexError) as excinfo:
        lex("1.2.3")
    # "1.2" is a number, the lone "." after it is not a token.
    assert excinfo.value.code == LexErrorCode.UNEXPECTED_CHARACTER
    assert excinfo.value.details["char"] == "."
    assert excinfo.value.pos == Position(line=0, column=3)


def test_negative_number_is_minus_then_number():
    tokens = lex("-5")
    assert [t.type for t in tokens] == [T.MINUS, T.NUMBER]
    assert tokens[1].value == 5.0


def test_string_literal_keeps_content_verbatim():
    tokens = lex('"<rect x=\'1\'/>  spaced"')
    assert tokens[0].type == T.STRING
    assert tokens[0].value == "<rect x='1'/>  spaced"


def test_string_can_span_lines():
    tokens = lex('"a\nb" x')
    assert tokens[0].value == "a\nb"
    assert tokens[1].pos == Position(line=1, column=3)


def test_empty_string():
    tokens = lex('""')
    assert tokens[0].type == T.STRING
    assert tokens[0].value == ""


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("abc", "abc", id="letters"),
        pytest.param("strokeWidth", "strokeWidth", id="camel_case"),
        pytest.param("x1", "x1", id="trailing_digit"),
        pytest.param("A9b8", "A9b8", id="mixed"),
    ],
)
def test_identifiers(source, expected):
    tokens = lex(source)
    assert len(tokens) == 1
    assert tokens[0].type == T.IDENTIFIER
    assert tokens[0].value == expected


def test_number_followed_by_identifier_splits():
    tokens = lex("1abc")
    assert [t.type for t in tokens] == [T.NUMBER, T.IDENTIFIER]


# --- 3. Positions and Spans ---


def test_token_spans_are_half_open():
    tokens = lex("shape  foo")
    assert tokens[0].span.start == Position(line=0, column=0)
    assert tokens[0].span.end == Position(line=0, column=5)
    assert tokens[1].span.start == Position(line=0, column=7)
    assert tokens[1].span.end == Position(line=0, column=10)


def test_newline_resets_column():
    tokens = lex("a\n  b\n\nc")
    assert [t.pos for t in tokens] == [
        Position(line=0, column=0),
        Position(line=1, column=2),
        Position(line=3, column=0),
    ]


def test_crlf_is_a_single_line_break():
    tokens = lex("a\r\nb\r\n\r\nc")
    assert [t.pos for t in tokens] == [
        Position(line=0, column=0),
        Position(line=1, column=0),
        Position(line=3, column=0),
    ]


def test_leading_whitespace_is_stripped_before_positions():
    tokens = lex("\n\n   x")
    assert tokens[0].pos == Position(line=0, column=0)


def test_compare_span_covers_both_characters():
    token = lex("==")[0]
    assert token.span.start == Position(line=0, column=0)
    assert token.span.end == Position(line=0, column=2)


# --- 4. Errors ---


def test_unterminated_string_points_at_opening_quote():
    with pytest.raises(LexError) as excinfo:
        lex('x "never closed')
    assert excinfo.value.code == LexErrorCode.STRING_NEVER_TERMINATED
    assert excinfo.value.pos == Position(line=0, column=2)
    assert excinfo.value.message == "String literal is never terminated."


@pytest.mark.parametrize(
    "source, char, pos",
    [
        pytest.param("a ; b", ";", Position(line=0, column=2), id="semicolon"),
        pytest.param("x\n  @", "@", Position(line=1, column=2), id="at_sign_second_line"),
        pytest.param("_name", "_", Position(line=0, column=0), id="underscore"),
        pytest.param("café", "é", Position(line=0, column=3), id="non_ascii_letter"),
        pytest.param("'single'", "'", Position(line=0, column=0), id="single_quote"),
    ],
)
def test_unexpected_character(source, char, pos):
    with pytest.raises(LexError) as excinfo:
        lex(source)
    assert excinfo.value.code == LexErrorCode.UNEXPECTED_CHARACTER
    assert excinfo.value.details["char"] == char
    assert excinfo.value.pos == pos


def test_consume_identifier_rejects_non_letter_start():
    lexer = Lexer("9abc")
    with pytest.raises(LexError) as excinfo:
        lexer.consume_identifier()
    assert excinfo.value.code == LexErrorCode.INVALID_IDENTIFIER


def test_first_error_aborts_lexing():
    with pytest.raises(LexError) as excinfo:
        lex('# "unterminated')
    assert excinfo.value.code == LexErrorCode.UNEXPECTED_CHARACTER


def test_malformed_number_is_an_internal_error():
    lexer = Lexer(".")
    with pytest.raises(InternalCompilerError):
        lexer.consume_number()
