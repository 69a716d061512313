"""
A tree-walking evaluator that turns a parsed Program into an SVG document.

Every shape call gets a fresh, flat scope holding only its own parameters;
the caller's bindings are never visible inside the callee. Recursion is
bounded by an explicit call-stack counter so runaway recursion surfaces as
a regular `EvalError` instead of exhausting the interpreter stack.
"""

import math
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Union

from ssc.config.config import MAIN_SHAPE, STACK_LIMIT, SVG_BUILTIN, SVG_DOCUMENT_TEMPLATE, SVG_VALUE_ARG
from ssc.exceptions import EvalError, EvalErrorCode, InternalCompilerError
from ssc.parser.core.classes import *

from .registry import register_shapes
from .stdlib import load_stdlib_shapes

Value = Union[float, str]


def type_name(value: Value) -> str:
    return "number" if isinstance(value, float) else "string"


def display(value: Value) -> str:
    """The text a value contributes when concatenated with `+`."""
    if isinstance(value, str):
        return value
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        if value == 0.0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    # Positional notation, never an exponent: 1e-07 displays as 0.0000001.
    return format(Decimal(repr(value)), "f")


def _divide(lhs: float, rhs: float) -> float:
    if rhs == 0.0:
        if lhs == 0.0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs


class Evaluator:
    def __init__(self, shapes: Mapping[str, ShapeDefinition], stack_limit: int = STACK_LIMIT):
        self.shapes = shapes
        self.stack_limit = stack_limit
        self.stack: List[str] = []
        self.scope: Dict[str, Value] = {}

    # --- Calls and Blocks ---

    def eval_block(self, block: Block) -> str:
        out = []
        for call in block.calls:
            value = self.eval_call(call)
            if not isinstance(value, str):
                raise InternalCompilerError(f"Call to '{call.function}' did not produce a string.")
            out.append(value)
        return "".join(out)

    def eval_call(self, call: FunctionCall) -> str:
        self.stack.append(call.function)
        try:
            if len(self.stack) > self.stack_limit:
                raise EvalError(EvalErrorCode.STACK_OVERFLOW, call.pos, frames=list(self.stack))

            if call.function == SVG_BUILTIN:
                return self._eval_svg_call(call)

            shape = self.shapes.get(call.function)
            if shape is None:
                raise EvalError(EvalErrorCode.SHAPE_NOT_DEFINED, call.pos, name=call.function)

            scope = self._bind_arguments(shape, call)
            caller_scope = self.scope
            self.scope = scope
            try:
                return self.eval_block(shape.body)
            finally:
                self.scope = caller_scope
        finally:
            self.stack.pop()

    def _eval_svg_call(self, call: FunctionCall) -> str:
        if len(call.args) != 1:
            raise EvalError(EvalErrorCode.NUM_ARGS, call.pos, name=call.function, expected=1, received=len(call.args))

        arg = call.args[0]
        if arg.name != SVG_VALUE_ARG:
            raise EvalError(EvalErrorCode.MISSING_ARGS, call.pos, name=call.function, missing=[SVG_VALUE_ARG])

        value = self.eval_expression(arg.value)
        if not isinstance(value, str):
            raise EvalError(EvalErrorCode.SVG_EXPECTS_STRING, arg.value.pos, received=type_name(value))
        return value

    def _bind_arguments(self, shape: ShapeDefinition, call: FunctionCall) -> Dict[str, Value]:
        """
        Builds the callee's scope. Supplied arguments and defaults are both
        evaluated in the caller's scope, before the callee's scope is installed.
        """
        param_names = {param.name for param in shape.params}
        supplied: Dict[str, NamedArgument] = {}
        for arg in call.args:
            if arg.name not in param_names:
                raise EvalError(EvalErrorCode.INVALID_ARG_NAME, arg.pos, name=shape.name, arg=arg.name)
            if arg.name in supplied:
                raise EvalError(EvalErrorCode.UNEXPECTED_ARG, arg.pos, name=shape.name, arg=arg.name)
            supplied[arg.name] = arg

        scope: Dict[str, Value] = {}
        for param in shape.params:
            if param.name in supplied:
                scope[param.name] = self.eval_expression(supplied[param.name].value)
            elif param.default is not None:
                scope[param.name] = self.eval_expression(param.default)
            else:
                raise EvalError(EvalErrorCode.MISSING_REQUIRED_ARG, call.pos, name=shape.name, param=param.name)
        return scope

    # --- Expressions ---

    def eval_expression(self, expr: Expression) -> Value:
        if isinstance(expr, Identifier):
            if expr.name not in self.scope:
                raise EvalError(EvalErrorCode.VARIABLE_NOT_DEFINED, expr.pos, name=expr.name)
            return self.scope[expr.name]

        if isinstance(expr, (NumberLiteral, StringLiteral)):
            return expr.value

        if isinstance(expr, BinaryExpression):
            return self._eval_binary(expr)

        if isinstance(expr, UnaryExpression):
            operand = self._get_number(self.eval_expression(expr.operand), expr.operand)
            return -operand

        if isinstance(expr, Grouping):
            return self.eval_expression(expr.inner)

        raise InternalCompilerError(f"Unknown expression node '{type(expr).__name__}'.")

    def _get_number(self, value: Value, expr: Expression) -> float:
        if not isinstance(value, float):
            raise EvalError(EvalErrorCode.TYPE_MISMATCH, expr.pos, expected="number", received=type_name(value))
        return value

    def _eval_binary(self, expr: BinaryExpression) -> Value:
        """
        Evaluates a chain of binary expressions. The parser builds operator chains
        as left-leaning trees, so the left spine is walked with a loop and folded
        back up; only right operands and groupings recurse.
        """
        spine = []
        node = expr
        while isinstance(node, BinaryExpression):
            spine.append(node)
            node = node.left

        lhs = self.eval_expression(node)
        for binary in reversed(spine):
            rhs = self.eval_expression(binary.right)
            lhs = self._apply_binary(binary, lhs, rhs)
        return lhs

    def _apply_binary(self, expr: BinaryExpression, lhs: Value, rhs: Value) -> Value:
        if expr.op == BinaryOperator.ADD:
            if isinstance(lhs, float) and isinstance(rhs, float):
                return lhs + rhs
            return display(lhs) + display(rhs)

        lhs = self._get_number(lhs, expr.left)
        rhs = self._get_number(rhs, expr.right)

        if expr.op == BinaryOperator.MUL:
            return lhs * rhs
        if expr.op == BinaryOperator.DIV:
            return _divide(lhs, rhs)
        return lhs - rhs


def eval_expression(expr: Expression, scope: Optional[Dict[str, Value]] = None) -> Value:
    """Evaluates a standalone expression against an optional flat scope."""
    evaluator = Evaluator(shapes={})
    evaluator.scope = dict(scope or {})
    return evaluator.eval_expression(expr)


def eval_program(program: Program) -> str:
    """Evaluates the program's `main` shape and wraps the result in an SVG root element."""
    shapes = register_shapes(load_stdlib_shapes(), program)
    evaluator = Evaluator(shapes)
    body = evaluator.eval_block(shapes[MAIN_SHAPE].body)
    return SVG_DOCUMENT_TEMPLATE.format(body=body)
