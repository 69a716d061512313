"""
Defines the token model produced by the lexer stage, together with the
`Position` and `Span` types every later stage uses to locate diagnostics.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class Position(BaseModel):
    """A 0-based (line, column) location in the source code."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int


class Span(BaseModel):
    """The range of source code between two positions."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position


class TokenType(Enum):
    LPAREN = "("
    RPAREN = ")"
    LCURLY = "{"
    RCURLY = "}"
    TIMES = "*"
    DIVIDE = "/"
    PLUS = "+"
    MINUS = "-"
    EQUALS = "="
    COMPARE = "=="
    COLON = ":"
    COMMA = ","
    NUMBER = "number"
    IDENTIFIER = "identifier"
    STRING = "string"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: TokenType
    # float for NUMBER, str for IDENTIFIER and STRING, None for everything else
    value: Optional[Union[float, str]] = None
    span: Span

    @property
    def pos(self) -> Position:
        return self.span.start
