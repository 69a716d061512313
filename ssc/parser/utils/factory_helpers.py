from typing import List, Optional

from ssc.lexer.core.classes import Position, Span
from ssc.parser.core.classes import *


def get_pos(line: int = 0, column: int = 0):
    return Position(line=line, column=column)


def get_span(s_line: int = 0, s_col: int = 0, e_line: int = 0, e_col: int = 0):
    return Span(start=get_pos(s_line, s_col), end=get_pos(e_line, e_col))


def get_identifier(name: str):
    return Identifier(span=get_span(), name=name)


def get_number_literal(value: float):
    return NumberLiteral(span=get_span(), value=float(value))


def get_string_literal(value: str):
    return StringLiteral(span=get_span(), value=value)


def get_binary(left: Expression, op: str, right: Expression):
    return BinaryExpression(span=get_span(), left=left, op=BinaryOperator(op), right=right, op_pos=get_pos())


def get_negation(operand: Expression):
    return UnaryExpression(span=get_span(), op=UnaryOperator.NEG, operand=operand, op_pos=get_pos())


def get_grouping(inner: Expression):
    return Grouping(span=get_span(), inner=inner)


def get_named_arg(name: str, value: Expression):
    return NamedArgument(span=get_span(), name=name, value=value)


def get_function_call(function: str, args: Optional[List[NamedArgument]] = None):
    return FunctionCall(span=get_span(), function=function, args=args or [])


def get_param(name: str, default: Optional[Expression] = None):
    return Parameter(span=get_span(), name=name, default=default)


def get_shape_def(name: str, params: Optional[List[Parameter]] = None, calls: Optional[List[FunctionCall]] = None) -> ShapeDefinition:
    """
    A flexible factory to build ShapeDefinition nodes for tests.

    Args:
        name: The name of the shape.
        params: Parameter nodes, see `get_param`. Defaults to [].
        calls: The calls making up the body. Defaults to an empty body.
    """
    return ShapeDefinition(
        span=get_span(),
        name=name,
        params=params or [],
        body=Block(span=get_span(), calls=calls or []),
    )
