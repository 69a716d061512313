"""
Defines the formal data structures (contracts) for the Abstract Syntax Tree (AST)
produced by the parser stage.

Each node is an immutable pydantic model and includes a `Span` object to track its
location in the source code, enabling precise error reporting in later stages.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ssc.lexer.core.classes import Position, Span

# --- Core Data Structures ---


class ASTNode(BaseModel):
    """A base class for all AST nodes, ensuring they have a span."""

    model_config = ConfigDict(frozen=True)

    span: Span

    @property
    def pos(self) -> Position:
        """The position diagnostics about this node point at."""
        return self.span.start


class BinaryOperator(str, Enum):
    MUL = "*"
    DIV = "/"
    ADD = "+"
    SUB = "-"


class UnaryOperator(str, Enum):
    NEG = "-"


# --- Literals and Identifiers ---


class NumberLiteral(ASTNode):
    kind: Literal["number"] = "number"
    value: float


class StringLiteral(ASTNode):
    kind: Literal["string"] = "string"
    value: str


class Identifier(ASTNode):
    kind: Literal["identifier"] = "identifier"
    name: str


# --- Expressions ---


class BinaryExpression(ASTNode):
    kind: Literal["binary"] = "binary"
    left: "Expression"
    op: BinaryOperator
    right: "Expression"
    op_pos: Position

    @property
    def pos(self) -> Position:
        return self.op_pos


class UnaryExpression(ASTNode):
    kind: Literal["unary"] = "unary"
    op: UnaryOperator
    operand: "Expression"
    op_pos: Position

    @property
    def pos(self) -> Position:
        return self.op_pos


class Grouping(ASTNode):
    kind: Literal["grouping"] = "grouping"
    inner: "Expression"

    @property
    def pos(self) -> Position:
        return self.inner.pos


Expression = Annotated[
    Union[NumberLiteral, StringLiteral, Identifier, BinaryExpression, UnaryExpression, Grouping],
    Field(discriminator="kind"),
]

BinaryExpression.model_rebuild()
UnaryExpression.model_rebuild()
Grouping.model_rebuild()


# --- Calls and Blocks ---


class NamedArgument(ASTNode):
    name: str
    value: Expression


class FunctionCall(ASTNode):
    """A call of a shape, or of the `svg` builtin, by name with named arguments."""

    function: str
    args: List[NamedArgument]


class Block(ASTNode):
    calls: List[FunctionCall]


# --- Top-level Structures ---


class Parameter(ASTNode):
    name: str
    default: Optional[Expression] = None


class ShapeDefinition(ASTNode):
    name: str
    params: List[Parameter]
    body: Block


class Program(BaseModel):
    """The root of the AST, representing a single source file."""

    model_config = ConfigDict(frozen=True)

    shapes: List[ShapeDefinition]
    # End of the last token; "missing thing" diagnostics point here.
    end: Position
