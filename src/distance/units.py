from __future__ import annotations

import math
from enum import Enum
from functools import lru_cache

from pyproj import Geod

from spatial.errors import ConfigurationError

MILES_TO_KM = 1.609344


@lru_cache(maxsize=1)
def earth_mean_radius_km() -> float:
    """
    IUGG mean radius R1 = (2a + b) / 3 of the WGS84 ellipsoid, in kilometers.
    """
    g = Geod(ellps="WGS84")
    return (2.0 * g.a + g.b) / 3.0 / 1000.0


class DistanceUnit(Enum):
    """
    Distance units a context measures in.

    The value is the short name used in configuration (`units: km`). Geographic units carry the
    radius of the reference sphere expressed in that unit.
    """

    KILOMETERS = "km"
    MILES = "miles"
    RADIANS = "radians"
    CARTESIAN = "u"

    @property
    def earth_radius(self) -> float | None:
        if self is DistanceUnit.KILOMETERS:
            return earth_mean_radius_km()
        if self is DistanceUnit.MILES:
            return earth_mean_radius_km() / MILES_TO_KM
        if self is DistanceUnit.RADIANS:
            return 1.0
        return None

    @property
    def is_geo(self) -> bool:
        return self.earth_radius is not None

    @property
    def earth_circumference(self) -> float | None:
        r = self.earth_radius
        if r is None:
            return None
        return 2.0 * math.pi * r

    def convert(self, distance: float, from_unit: "DistanceUnit") -> float:
        """
        Convert `distance` expressed in `from_unit` into this unit.
        """
        if from_unit is self:
            return distance
        src = from_unit.earth_radius
        dst = self.earth_radius
        if src is None or dst is None:
            raise ConfigurationError(
                f"Can not convert between {from_unit.name} and {self.name}"
            )
        return distance / src * dst

    @classmethod
    def find(cls, name: str) -> "DistanceUnit":
        key = (name or "").strip().lower()
        for unit in cls:
            if key in (unit.value, unit.name.lower()):
                return unit
        raise ConfigurationError(f"Unknown distance unit: {name!r}")
