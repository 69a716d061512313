from types import MappingProxyType
from typing import Mapping

from ssc.config.config import MAIN_SHAPE
from ssc.exceptions import EvalError, EvalErrorCode
from ssc.parser.core.classes import Program, ShapeDefinition


def register_shapes(
    base: Mapping[str, ShapeDefinition],
    program: Program,
    require_main: bool = True,
) -> Mapping[str, ShapeDefinition]:
    """
    Merges the shapes declared by `program` into a copy of `base`.
    Names are unique across both sets; the returned registry is read-only.
    """
    shapes = dict(base)
    found_main = False

    for shape in program.shapes:
        if shape.name in shapes:
            raise EvalError(EvalErrorCode.SHAPE_ALREADY_DEFINED, shape.pos, name=shape.name)

        if shape.name == MAIN_SHAPE and not shape.params:
            found_main = True

        shapes[shape.name] = shape

    if require_main and not found_main:
        raise EvalError(EvalErrorCode.MISSING_MAIN, program.end)

    return MappingProxyType(shapes)
