from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from shapely.geometry import Point


class DistanceCalculator(ABC):
    """
    Distance between two points on a model of the earth (sphere) or a plane.

    Points are shapely `Point`s; for geographic calculators x is longitude and y latitude, both
    in degrees. Distances are in the unit whose radius the calculator was built with.
    """

    radius: float | None = None

    @abstractmethod
    def distance_xy(self, x1: float, y1: float, x2: float, y2: float) -> float: ...

    @abstractmethod
    def point_on_bearing(self, origin: Point, distance: float, bearing_deg: float) -> Point: ...

    @abstractmethod
    def distance_to_degrees(self, distance: float) -> float: ...

    @abstractmethod
    def degrees_to_distance(self, degrees: float) -> float: ...

    def distance(self, a: Point, b: Point) -> float:
        return self.distance_xy(a.x, a.y, b.x, b.y)

    def within_distance(self, a: Point, b: Point, distance: float) -> bool:
        return self.distance(a, b) <= distance


@dataclass(frozen=True)
class CartesianDistCalc(DistanceCalculator):
    """
    Euclidean distance on the plane.

    With `squared=True` the calculator returns d² instead of d. That is only meaningful when
    every distance compared against it is squared as well.
    """

    squared: bool = False

    def distance_xy(self, x1: float, y1: float, x2: float, y2: float) -> float:
        dx = x1 - x2
        dy = y1 - y2
        d2 = dx * dx + dy * dy
        return d2 if self.squared else math.sqrt(d2)

    def point_on_bearing(self, origin: Point, distance: float, bearing_deg: float) -> Point:
        if distance == 0:
            return origin
        # Bearing is clockwise from north (+y).
        rad = math.radians(bearing_deg)
        return Point(origin.x + math.sin(rad) * distance, origin.y + math.cos(rad) * distance)

    def distance_to_degrees(self, distance: float) -> float:
        return distance

    def degrees_to_distance(self, degrees: float) -> float:
        return degrees


@dataclass(frozen=True)
class GeodesicSphereDistCalc(DistanceCalculator):
    radius: float

    def __post_init__(self) -> None:
        if not self.radius > 0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")

    def distance_xy(self, x1: float, y1: float, x2: float, y2: float) -> float:
        if x1 == x2 and y1 == y2:
            return 0.0
        return self.radians_between(
            math.radians(y1), math.radians(x1), math.radians(y2), math.radians(x2)
        ) * self.radius

    @abstractmethod
    def radians_between(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float: ...

    def point_on_bearing(self, origin: Point, distance: float, bearing_deg: float) -> Point:
        if distance == 0:
            return origin
        lat1 = math.radians(origin.y)
        lon1 = math.radians(origin.x)
        ang = distance / self.radius
        brg = math.radians(bearing_deg)

        lat2 = math.asin(
            math.sin(lat1) * math.cos(ang) + math.cos(lat1) * math.sin(ang) * math.cos(brg)
        )
        lon2 = lon1 + math.atan2(
            math.sin(brg) * math.sin(ang) * math.cos(lat1),
            math.cos(ang) - math.sin(lat1) * math.sin(lat2),
        )
        lon_deg = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
        return Point(lon_deg, math.degrees(lat2))

    def distance_to_degrees(self, distance: float) -> float:
        return math.degrees(distance / self.radius)

    def degrees_to_distance(self, degrees: float) -> float:
        return math.radians(degrees) * self.radius


@dataclass(frozen=True)
class Haversine(GeodesicSphereDistCalc):
    def radians_between(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        hsin_x = math.sin((lon1 - lon2) * 0.5)
        hsin_y = math.sin((lat1 - lat2) * 0.5)
        h = hsin_y * hsin_y + math.cos(lat1) * math.cos(lat2) * hsin_x * hsin_x
        # Rounding can push h slightly past 1 for antipodal points.
        h = min(1.0, h)
        return 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))


@dataclass(frozen=True)
class LawOfCosines(GeodesicSphereDistCalc):
    def radians_between(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        cos_b = math.sin(lat1) * math.sin(lat2) + math.cos(lat1) * math.cos(lat2) * math.cos(
            lon2 - lon1
        )
        return math.acos(max(-1.0, min(1.0, cos_b)))


@dataclass(frozen=True)
class VincentySphere(GeodesicSphereDistCalc):
    def radians_between(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        cos_lat1 = math.cos(lat1)
        cos_lat2 = math.cos(lat2)
        sin_lat1 = math.sin(lat1)
        sin_lat2 = math.sin(lat2)
        d_lon = lon2 - lon1
        cos_d_lon = math.cos(d_lon)
        sin_d_lon = math.sin(d_lon)

        a = cos_lat2 * sin_d_lon
        b = cos_lat1 * sin_lat2 - sin_lat1 * cos_lat2 * cos_d_lon
        c = sin_lat1 * sin_lat2 + cos_lat1 * cos_lat2 * cos_d_lon
        return math.atan2(math.sqrt(a * a + b * b), c)
