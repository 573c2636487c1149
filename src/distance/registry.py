from __future__ import annotations

from typing import Callable

from distance.calculators import (
    CartesianDistCalc,
    DistanceCalculator,
    Haversine,
    LawOfCosines,
    VincentySphere,
)
from distance.units import DistanceUnit
from spatial.errors import ConfigurationError

# Keys are lower-cased; lookups are case-insensitive.
_SPHERE_CALCULATORS: dict[str, Callable[[float], DistanceCalculator]] = {
    "haversine": Haversine,
    "lawofcosines": LawOfCosines,
    "vincentysphere": VincentySphere,
}

_PLANE_CALCULATORS: dict[str, Callable[[], DistanceCalculator]] = {
    "cartesian": CartesianDistCalc,
    "cartesian^2": lambda: CartesianDistCalc(squared=True),
}

CALCULATOR_NAMES = ("haversine", "lawOfCosines", "vincentySphere", "cartesian", "cartesian^2")


def resolve_calculator(name: str | None, unit: DistanceUnit) -> DistanceCalculator | None:
    """
    Map a configured calculator name to a calculator for `unit`.

    `None` means "not configured": nothing is resolved and the context picks its default at the
    point of use.
    """
    if name is None:
        return None
    key = name.strip().lower()

    sphere = _SPHERE_CALCULATORS.get(key)
    if sphere is not None:
        radius = unit.earth_radius
        if radius is None:
            raise ConfigurationError(
                f"Calculator {name!r} needs a geographic unit, got {unit.name}"
            )
        return sphere(radius)

    plane = _PLANE_CALCULATORS.get(key)
    if plane is not None:
        return plane()

    raise ConfigurationError(
        f"Unknown calculator: {name!r} (expected one of {', '.join(CALCULATOR_NAMES)})"
    )


def default_calculator(unit: DistanceUnit) -> DistanceCalculator:
    radius = unit.earth_radius
    if radius is None:
        return CartesianDistCalc()
    return Haversine(radius)
