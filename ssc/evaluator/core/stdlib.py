from functools import lru_cache
from importlib.resources import files as pkg_files
from types import MappingProxyType
from typing import Mapping

from ssc.config.config import STDLIB_PACKAGE, STDLIB_RESOURCE
from ssc.exceptions import EvalError, EvalErrorCode, ShapeScriptError
from ssc.lexer.core.classes import Position
from ssc.lexer.core.lexer import lex
from ssc.parser.core.classes import ShapeDefinition
from ssc.parser.core.parser import parse_program

from .registry import register_shapes


def _not_loaded(stage: str) -> EvalError:
    return EvalError(EvalErrorCode.STDLIB_NOT_LOADED, Position(line=0, column=0), stage=stage)


def read_stdlib_source() -> str:
    return (pkg_files(STDLIB_PACKAGE) / STDLIB_RESOURCE).read_text(encoding="utf-8")


@lru_cache(maxsize=None)
def load_stdlib_shapes() -> Mapping[str, ShapeDefinition]:
    """
    Loads the builtin shape library through the same lexer and parser as user code.
    The result is computed once per process and is read-only.
    """
    try:
        source = read_stdlib_source()
    except OSError as e:
        raise _not_loaded("reading") from e

    try:
        tokens = lex(source)
    except ShapeScriptError as e:
        raise _not_loaded("lexing") from e

    try:
        program = parse_program(tokens)
    except ShapeScriptError as e:
        raise _not_loaded("parsing") from e

    try:
        return register_shapes(MappingProxyType({}), program, require_main=False)
    except ShapeScriptError as e:
        raise _not_loaded("registering shapes for") from e
