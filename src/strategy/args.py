from __future__ import annotations

import re
from dataclasses import dataclass

from spatial.context import SpatialContext
from spatial.errors import ShapeParseError
from spatial.shapes import Shape
from strategy.operations import SpatialOperation

_ARGS = re.compile(r"^\s*(\w+)\s*\((.*)\)\s*$", re.DOTALL)


@dataclass(frozen=True)
class SpatialArgs:
    """
    A spatial predicate and the shape it is evaluated against.
    """

    operation: SpatialOperation
    shape: Shape

    def __str__(self) -> str:
        return f"{self.operation.value}({self.shape})"


def parse_spatial_args(ctx: SpatialContext, text: str) -> SpatialArgs:
    """
    Parse strings such as `Intersects(ENVELOPE(-10, 10, 20, -20))` or
    `IsWithin(POLYGON((0 0, 4 0, 4 4, 0 4, 0 0)))`.
    """
    m = _ARGS.match(text or "")
    if not m:
        raise ShapeParseError(f"Expected Operation(shape), got {text!r}")
    op = SpatialOperation.find(m.group(1))
    return SpatialArgs(operation=op, shape=ctx.read_shape(m.group(2)))
