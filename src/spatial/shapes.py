from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias, Union

from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import Point
from shapely.geometry import box as shapely_box
from shapely.geometry.base import BaseGeometry

from spatial.errors import ShapeParseError

if TYPE_CHECKING:
    from spatial.context import SpatialContext


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned rectangle in the context's coordinate system.

    Invariant: width and height are non-negative.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        coords = (self.min_x, self.min_y, self.max_x, self.max_y)
        if not all(math.isfinite(c) for c in coords):
            raise ValueError(f"Non-finite rectangle coordinate: {coords}")
        if self.max_x < self.min_x or self.max_y < self.min_y:
            raise ValueError(
                f"Invalid rectangle: ({self.min_x}, {self.min_y}, {self.max_x}, {self.max_y})"
            )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains_xy(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def to_geometry(self) -> BaseGeometry:
        return shapely_box(self.min_x, self.min_y, self.max_x, self.max_y)


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    # Radius in the context's distance unit.
    distance: float

    def __post_init__(self) -> None:
        if self.distance < 0:
            raise ValueError(f"Circle distance must be non-negative, got {self.distance}")


Shape: TypeAlias = Union[Rectangle, Circle, BaseGeometry]

# Longitude/latitude extent used when a geographic context has no explicit world bounds.
GEO_WORLD = Rectangle(-180.0, -90.0, 180.0, 90.0)

_NUMBER_SPLIT = re.compile(r"[\s,]+")
_ENVELOPE = re.compile(r"^ENVELOPE\s*\((.*)\)$", re.IGNORECASE | re.DOTALL)
_CIRCLE = re.compile(
    r"^CIRCLE\s*\(\s*([^\s,]+)[\s,]+([^\s,]+)\s+d\s*=\s*([^\s)]+)\s*\)$", re.IGNORECASE
)


def read_shape(ctx: "SpatialContext", text: str) -> Shape:
    """
    Parse a shape literal for `ctx`.

    Supported:
    - `x y` (point) and `minX minY maxX maxY` (rectangle), numbers split by spaces or commas
    - `ENVELOPE(minX, maxX, maxY, minY)`
    - `Circle(x y d=distance)`
    - any WKT understood by shapely

    Coordinates are checked against the context's world bounds (or the lon/lat extent for a
    geographic context without bounds).
    """
    s = (text or "").strip()
    if not s:
        raise ShapeParseError("Empty shape literal")

    if s[0].isdigit() or s[0] in "-+.":
        nums = _parse_numbers(s, text)
        if len(nums) == 2:
            shape: Shape = Point(nums[0], nums[1])
        elif len(nums) == 4:
            shape = _rectangle(nums[0], nums[1], nums[2], nums[3], text)
        else:
            raise ShapeParseError(f"Expected 2 or 4 numbers, got {len(nums)}: {text!r}")
        _verify(ctx, shape, text)
        return shape

    m = _ENVELOPE.match(s)
    if m:
        nums = _parse_numbers(m.group(1), text)
        if len(nums) != 4:
            raise ShapeParseError(f"ENVELOPE needs 4 numbers: {text!r}")
        min_x, max_x, max_y, min_y = nums
        shape = _rectangle(min_x, min_y, max_x, max_y, text)
        _verify(ctx, shape, text)
        return shape

    m = _CIRCLE.match(s)
    if m:
        x, y, d = _parse_numbers(" ".join(m.groups()), text)
        try:
            shape = Circle(x, y, d)
        except ValueError as e:
            raise ShapeParseError(f"{e}: {text!r}") from e
        _verify(ctx, shape, text)
        return shape

    try:
        geom = wkt.loads(s)
    except ShapelyError as e:
        raise ShapeParseError(f"Unable to parse shape {text!r}: {e}") from e
    _verify(ctx, geom, text)
    return geom


def _parse_numbers(s: str, text: str) -> list[float]:
    parts = [p for p in _NUMBER_SPLIT.split(s.strip()) if p]
    try:
        nums = [float(p) for p in parts]
    except ValueError as e:
        raise ShapeParseError(f"Bad number in shape {text!r}") from e
    if not all(math.isfinite(n) for n in nums):
        raise ShapeParseError(f"Non-finite number in shape {text!r}")
    return nums


def _rectangle(min_x: float, min_y: float, max_x: float, max_y: float, text: str) -> Rectangle:
    try:
        return Rectangle(min_x, min_y, max_x, max_y)
    except ValueError as e:
        raise ShapeParseError(f"{e}: {text!r}") from e


def _verify(ctx: "SpatialContext", shape: Shape, text: str) -> None:
    bounds = ctx.world_bounds
    if bounds is None and ctx.is_geo:
        bounds = GEO_WORLD
    if bounds is None:
        return

    if isinstance(shape, Rectangle):
        corners = [(shape.min_x, shape.min_y), (shape.max_x, shape.max_y)]
    elif isinstance(shape, Circle):
        corners = [(shape.x, shape.y)]
    elif shape.is_empty:
        return
    else:
        min_x, min_y, max_x, max_y = shape.bounds
        corners = [(min_x, min_y), (max_x, max_y)]

    for x, y in corners:
        if not bounds.contains_xy(x, y):
            raise ShapeParseError(f"Shape {text!r} is outside world bounds {bounds}")
