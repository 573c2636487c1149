from __future__ import annotations

from dataclasses import dataclass

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from distance.calculators import DistanceCalculator
from distance.registry import default_calculator
from distance.units import DistanceUnit
from spatial.shapes import Circle, Rectangle, Shape, read_shape


@dataclass(frozen=True)
class SpatialContext:
    """
    Immutable bundle of distance unit, calculator and optional world bounds.

    Built once (see `spatial.factory.make_spatial_context`) and shared read-only by every shape
    and geometry operation.

    `dist_calc` is what was configured and may be None; `calculator` is what callers should
    measure with.
    """

    unit: DistanceUnit = DistanceUnit.KILOMETERS
    dist_calc: DistanceCalculator | None = None
    world_bounds: Rectangle | None = None

    def __post_init__(self) -> None:
        if self.world_bounds is not None and not isinstance(self.world_bounds, Rectangle):
            raise TypeError(f"world_bounds must be a Rectangle, got {type(self.world_bounds)}")

    @property
    def is_geo(self) -> bool:
        return self.unit.is_geo

    @property
    def calculator(self) -> DistanceCalculator:
        if self.dist_calc is not None:
            return self.dist_calc
        return default_calculator(self.unit)

    def read_shape(self, text: str) -> Shape:
        return read_shape(self, text)

    def to_geometry(self, shape: Shape) -> BaseGeometry:
        if isinstance(shape, Rectangle):
            return shape.to_geometry()
        if isinstance(shape, Circle):
            # Buffer in coordinate units; geographic distances become degrees first.
            radius = self.calculator.distance_to_degrees(shape.distance)
            return Point(shape.x, shape.y).buffer(radius)
        if isinstance(shape, BaseGeometry):
            return shape
        raise TypeError(f"Not a shape: {type(shape)!r}")

    def distance(self, a: Point, b: Point) -> float:
        return self.calculator.distance(a, b)
