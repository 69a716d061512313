"""
Custom exception types for the ShapeScript compiler.

Each pipeline stage has its own error-code enum. The enum values are message
templates; the exceptions only carry the code, the source position and the
structured details, and render them to text on demand.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

from ssc.config.config import TOKEN_FRIENDLY_NAMES

if TYPE_CHECKING:
    from ssc.lexer.core.classes import Position


class LexErrorCode(Enum):
    INVALID_IDENTIFIER = "Invalid identifier."
    STRING_NEVER_TERMINATED = "String literal is never terminated."
    UNEXPECTED_CHARACTER = "Unexpected character '{char}'."


class ParseErrorCode(Enum):
    UNEXPECTED_END_OF_INPUT = "Unexpected end of input."
    IDENTIFIER_CANNOT_BE_RESERVED_WORD = "Identifier '{name}' cannot be a reserved word."
    UNBALANCED_PAREN = "Unbalanced parenthesis."
    # 'found' is optional, see ParseError.message
    EXPECTED = "Expected {what}. Found {found}."


class EvalErrorCode(Enum):
    VARIABLE_NOT_DEFINED = "Variable '{name}' is not defined."
    SHAPE_NOT_DEFINED = "Shape '{name}' is not defined."
    TYPE_MISMATCH = "Type mismatch. Expected: {expected}, Received: {received}."
    SVG_EXPECTS_STRING = "The svg value argument needs to be a string. Received: {received}."
    SHAPE_ALREADY_DEFINED = "Shape '{name}' is already defined."
    NUM_ARGS = "Incorrect number of arguments to '{name}'. Expected: {expected}, Received: {received}."
    MISSING_ARGS = "Missing arguments {missing} for '{name}'."
    MISSING_REQUIRED_ARG = "Missing required argument '{param}' to '{name}'."
    INVALID_ARG_NAME = "Shape '{name}' does not have an argument named '{arg}'."
    UNEXPECTED_ARG = "Unexpected argument '{arg}' to '{name}'."
    STACK_OVERFLOW = "Stack overflow\n    {frames}"
    MISSING_MAIN = "Missing a 'main' shape with no parameters."
    STDLIB_NOT_LOADED = "Error {stage} the builtin shape library."


def _display_detail(value: Any) -> Any:
    """Turns structured detail values into their display form."""
    if isinstance(value, Enum):
        return TOKEN_FRIENDLY_NAMES.get(value.name, value.name)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return value


class ShapeScriptError(Exception):
    def __init__(self, code: Enum, pos: "Position", **kwargs):
        self.code = code
        self.pos = pos
        self.details: Dict[str, Any] = kwargs
        super().__init__(code.name)

    @property
    def message(self) -> str:
        display = {key: _display_detail(value) for key, value in self.details.items()}
        return self.code.value.format(**display)

    def render(self, file_path: Optional[str] = None) -> str:
        """Formats the error for humans, with a 1-based location prefix."""
        location = f"(Line: {self.pos.line + 1}, Column: {self.pos.column + 1})"
        if file_path:
            return f"Error in '{file_path}' {location}:\n{self.message}"
        return f"Error {location}:\n{self.message}"

    def __str__(self) -> str:
        return f"[{self.pos.line}:{self.pos.column}]: {self.message}"


class LexError(ShapeScriptError):
    pass


class ParseError(ShapeScriptError):
    @property
    def message(self) -> str:
        if self.code is ParseErrorCode.EXPECTED and self.details.get("found") is None:
            return f"Expected {self.details['what']}."
        return super().message


class EvalError(ShapeScriptError):
    @property
    def message(self) -> str:
        if self.code is EvalErrorCode.STACK_OVERFLOW:
            return self.code.value.format(frames="\n    ".join(self.details["frames"]))
        return super().message


class InternalCompilerError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
