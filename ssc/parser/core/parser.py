"""
Recursive-descent parser for ShapeScript declarations with a top-down operator
precedence (Pratt) parser for expressions.

Statement-level grammar:

    program    := shape*
    shape      := "shape" ident "(" [ param ("," param)* ] ")" block
    param      := ident [ "=" expr ]
    block      := "{" funcall* "}"
    funcall    := ident "(" [ namedarg ("," namedarg)* ] ")"
    namedarg   := ident ":" expr
"""

from enum import IntEnum
from typing import List, Optional

from ssc.config.config import RESERVED_WORDS
from ssc.exceptions import ParseError, ParseErrorCode
from ssc.lexer.core.classes import Position, Span, Token, TokenType

from .classes import *


class Precedence(IntEnum):
    """Left binding powers, higher binds tighter."""

    NONE = 0
    SUM = 30
    PRODUCT = 40
    PREFIX = 60
    CALL = 80


BINARY_OPERATORS = {
    TokenType.TIMES: BinaryOperator.MUL,
    TokenType.DIVIDE: BinaryOperator.DIV,
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
}

LEFT_BINDING_POWERS = {
    TokenType.LPAREN: Precedence.CALL,
    TokenType.TIMES: Precedence.PRODUCT,
    TokenType.DIVIDE: Precedence.PRODUCT,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
}


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0
        self.end = tokens[-1].span.end if tokens else Position(line=0, column=0)

    # --- Token helpers ---

    def _peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _check(self, token_type: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.type == token_type

    def _advance(self) -> Token:
        """Consumes the next token; running out of input is an error."""
        token = self._peek()
        if token is None:
            raise ParseError(ParseErrorCode.UNEXPECTED_END_OF_INPUT, self.end)
        self.index += 1
        return token

    def _match(self, token_type: TokenType) -> Optional[Token]:
        if self._check(token_type):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, what: str) -> Token:
        token = self._advance()
        if token.type != token_type:
            raise ParseError(ParseErrorCode.EXPECTED, token.pos, what=what, found=token.type)
        return token

    def _expect_identifier(self) -> Token:
        token = self._advance()
        if token.type != TokenType.IDENTIFIER:
            raise ParseError(ParseErrorCode.EXPECTED, token.pos, what="an identifier", found=token.type)
        if token.value in RESERVED_WORDS:
            raise ParseError(ParseErrorCode.IDENTIFIER_CANNOT_BE_RESERVED_WORD, token.pos, name=token.value)
        return token

    # --- Declarations ---

    def program(self) -> Program:
        shapes = []
        while self._peek() is not None:
            shapes.append(self.shape())
        return Program(shapes=shapes, end=self.end)

    def shape(self) -> ShapeDefinition:
        keyword = self._advance()
        if keyword.type != TokenType.IDENTIFIER or keyword.value != "shape":
            raise ParseError(ParseErrorCode.EXPECTED, keyword.pos, what="the 'shape' keyword", found=keyword.type)

        name = self._expect_identifier()
        self._expect(TokenType.LPAREN, "'(' after the shape name")

        params = []
        if not self._check(TokenType.RPAREN):
            params.append(self.parameter())
            while self._match(TokenType.COMMA):
                params.append(self.parameter())

        self._expect(TokenType.RPAREN, "')' to close the parameter list")
        body = self.block()

        return ShapeDefinition(
            name=name.value,
            params=params,
            body=body,
            span=Span(start=keyword.span.start, end=body.span.end),
        )

    def parameter(self) -> Parameter:
        name = self._expect_identifier()
        default = None
        if self._match(TokenType.EQUALS):
            default = self.expression()
        end = default.span.end if default is not None else name.span.end
        return Parameter(name=name.value, default=default, span=Span(start=name.span.start, end=end))

    def block(self) -> Block:
        opening = self._expect(TokenType.LCURLY, "'{' to open the shape body")

        calls = []
        while True:
            if self._peek() is None:
                raise ParseError(ParseErrorCode.UNEXPECTED_END_OF_INPUT, self.end)
            closing = self._match(TokenType.RCURLY)
            if closing:
                break
            calls.append(self.function_call())

        return Block(calls=calls, span=Span(start=opening.span.start, end=closing.span.end))

    def function_call(self) -> FunctionCall:
        name = self._expect_identifier()
        self._expect(TokenType.LPAREN, f"'(' after '{name.value}'")

        args = []
        if not self._check(TokenType.RPAREN):
            args.append(self.named_argument())
            while self._match(TokenType.COMMA):
                args.append(self.named_argument())

        closing = self._expect(TokenType.RPAREN, "')' to close the call")
        return FunctionCall(function=name.value, args=args, span=Span(start=name.span.start, end=closing.span.end))

    def named_argument(self) -> NamedArgument:
        name = self._expect_identifier()
        self._expect(TokenType.COLON, "':' after the argument name, arguments look like `name: value`")
        value = self.expression()
        return NamedArgument(name=name.value, value=value, span=Span(start=name.span.start, end=value.span.end))

    # --- Expressions ---

    def expression(self, rbp: int = Precedence.NONE) -> Expression:
        left = self.nud(self._advance())
        while self._next_binds_tighter(rbp):
            left = self.led(self._advance(), left)
        return left

    def _next_binds_tighter(self, rbp: int) -> bool:
        token = self._peek()
        return token is not None and LEFT_BINDING_POWERS.get(token.type, Precedence.NONE) > rbp

    def nud(self, token: Token) -> Expression:
        """Null denotation: a token that starts an expression."""
        if token.type == TokenType.IDENTIFIER:
            if token.value in RESERVED_WORDS:
                raise ParseError(ParseErrorCode.IDENTIFIER_CANNOT_BE_RESERVED_WORD, token.pos, name=token.value)
            return Identifier(name=token.value, span=token.span)

        if token.type == TokenType.NUMBER:
            return NumberLiteral(value=token.value, span=token.span)

        if token.type == TokenType.STRING:
            return StringLiteral(value=token.value, span=token.span)

        if token.type == TokenType.MINUS:
            operand = self.expression(Precedence.PREFIX)
            return UnaryExpression(
                op=UnaryOperator.NEG,
                operand=operand,
                op_pos=token.pos,
                span=Span(start=token.span.start, end=operand.span.end),
            )

        if token.type == TokenType.LPAREN:
            inner = self.expression()
            closing = self._peek()
            if closing is None or closing.type != TokenType.RPAREN:
                raise ParseError(ParseErrorCode.UNBALANCED_PAREN, token.pos)
            self._advance()
            return Grouping(inner=inner, span=Span(start=token.span.start, end=closing.span.end))

        raise ParseError(ParseErrorCode.EXPECTED, token.pos, what="an expression", found=token.type)

    def led(self, token: Token, left: Expression) -> Expression:
        """Left denotation: a token that continues an expression."""
        if token.type in BINARY_OPERATORS:
            right = self.expression(LEFT_BINDING_POWERS[token.type])
            return BinaryExpression(
                left=left,
                op=BINARY_OPERATORS[token.type],
                right=right,
                op_pos=token.pos,
                span=Span(start=left.span.start, end=right.span.end),
            )

        # Calls are statements in a block, never part of an expression.
        raise ParseError(ParseErrorCode.EXPECTED, token.pos, what="an operator", found=token.type)


def parse_program(tokens: List[Token]) -> Program:
    """Parses a token list into a Program, failing on the first error."""
    return Parser(tokens).program()


def parse_expression(tokens: List[Token]) -> Expression:
    """Parses a token list that must form exactly one expression."""
    parser = Parser(tokens)
    expression = parser.expression()
    leftover = parser._peek()
    if leftover is not None:
        raise ParseError(ParseErrorCode.EXPECTED, leftover.pos, what="the end of the expression", found=leftover.type)
    return expression
