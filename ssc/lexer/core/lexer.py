"""
A hand-written, single-pass lexer for ShapeScript.

The lexer walks the (stripped) source one character at a time with a single
character of lookahead, tracking the 0-based line and column so every token
carries the exact span it was read from. The first error aborts the whole run.
"""

import string
from typing import List, Optional

from ssc.exceptions import InternalCompilerError, LexError, LexErrorCode

from .classes import Position, Span, Token, TokenType

SINGLE_CHAR_TOKENS = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LCURLY,
    "}": TokenType.RCURLY,
    "*": TokenType.TIMES,
    "/": TokenType.DIVIDE,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}

LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
ALPHANUMERIC = LETTERS | DIGITS


class Lexer:
    def __init__(self, text: str):
        self.text = text.strip()
        self.index = 0
        self.line = 0
        self.column = 0

    def pos(self) -> Position:
        return Position(line=self.line, column=self.column)

    def peek(self) -> Optional[str]:
        if self.index < len(self.text):
            return self.text[self.index]
        return None

    def forward(self) -> Optional[str]:
        """Consumes one character, keeping line and column in sync."""
        char = self.peek()
        if char is None:
            return None
        self.index += 1
        if char == "\r" and self.peek() == "\n":
            # \r\n is a single line break; the \n that follows does the work.
            return char
        if char in ("\n", "\r"):
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return char

    def _error(self, code: LexErrorCode, pos: Position, **kwargs) -> LexError:
        return LexError(code=code, pos=pos, **kwargs)

    def _token(self, token_type: TokenType, start: Position, value=None) -> Token:
        return Token(type=token_type, value=value, span=Span(start=start, end=self.pos()))

    def tokens(self) -> List[Token]:
        result = []
        while True:
            token = self.next_token()
            if token is None:
                return result
            result.append(token)

    def skip_whitespace(self):
        while self.peek() in (" ", "\t", "\n", "\r"):
            self.forward()

    def next_token(self) -> Optional[Token]:
        self.skip_whitespace()

        char = self.peek()
        if char is None:
            return None

        if char in SINGLE_CHAR_TOKENS:
            start = self.pos()
            self.forward()
            return self._token(SINGLE_CHAR_TOKENS[char], start)
        if char == "=":
            return self.consume_equals()
        if char == '"':
            return self.consume_string()
        if char in LETTERS:
            return self.consume_identifier()
        if char in DIGITS:
            return self.consume_number()

        raise self._error(LexErrorCode.UNEXPECTED_CHARACTER, self.pos(), char=char)

    def consume_equals(self) -> Token:
        start = self.pos()
        self.forward()
        if self.peek() == "=":
            self.forward()
            return self._token(TokenType.COMPARE, start)
        return self._token(TokenType.EQUALS, start)

    def consume_string(self) -> Token:
        start = self.pos()
        self.forward()  # opening quote

        chars = []
        while True:
            char = self.forward()
            if char is None:
                raise self._error(LexErrorCode.STRING_NEVER_TERMINATED, start)
            if char == '"':
                break
            chars.append(char)

        return self._token(TokenType.STRING, start, "".join(chars))

    def consume_identifier(self) -> Token:
        start = self.pos()
        if self.peek() not in LETTERS:
            raise self._error(LexErrorCode.INVALID_IDENTIFIER, start)

        chars = [self.forward()]
        while self.peek() is not None and self.peek() in ALPHANUMERIC:
            chars.append(self.forward())

        return self._token(TokenType.IDENTIFIER, start, "".join(chars))

    def consume_number(self) -> Token:
        start = self.pos()
        chars = []
        seen_dot = False

        while self.peek() is not None:
            char = self.peek()
            if char == "." and not seen_dot:
                seen_dot = True
            elif char not in DIGITS:
                break
            chars.append(self.forward())

        text = "".join(chars)
        try:
            value = float(text)
        except ValueError as e:
            raise InternalCompilerError(f"Lexer produced malformed number text '{text}'.") from e

        return self._token(TokenType.NUMBER, start, value)


def lex(text: str) -> List[Token]:
    """Converts ShapeScript source text into a list of positioned tokens."""
    return Lexer(text).tokens()
