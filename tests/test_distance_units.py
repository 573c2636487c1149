from __future__ import annotations

import pytest

from distance.units import MILES_TO_KM, DistanceUnit, earth_mean_radius_km
from spatial.errors import ConfigurationError


@pytest.mark.parametrize(
    "name,expected",
    [
        ("km", DistanceUnit.KILOMETERS),
        ("KM", DistanceUnit.KILOMETERS),
        ("Kilometers", DistanceUnit.KILOMETERS),
        ("miles", DistanceUnit.MILES),
        ("MILES", DistanceUnit.MILES),
        ("radians", DistanceUnit.RADIANS),
        ("u", DistanceUnit.CARTESIAN),
        ("cartesian", DistanceUnit.CARTESIAN),
    ],
)
def test_find_unit_is_case_insensitive(name, expected):
    assert DistanceUnit.find(name) is expected


@pytest.mark.parametrize("name", ["furlongs", "", "kilo meters", "mi"])
def test_find_unknown_unit_fails(name):
    with pytest.raises(ConfigurationError):
        DistanceUnit.find(name)


def test_earth_radius_comes_from_wgs84_mean_radius():
    assert earth_mean_radius_km() == pytest.approx(6371.0087714, abs=1e-6)
    assert DistanceUnit.KILOMETERS.earth_radius == pytest.approx(6371.0087714, abs=1e-6)
    assert DistanceUnit.MILES.earth_radius == pytest.approx(6371.0087714 / MILES_TO_KM)
    assert DistanceUnit.RADIANS.earth_radius == 1.0
    assert DistanceUnit.CARTESIAN.earth_radius is None
    assert DistanceUnit.CARTESIAN.is_geo is False
    assert DistanceUnit.MILES.is_geo is True


def test_convert_between_geo_units():
    assert DistanceUnit.MILES.convert(MILES_TO_KM, DistanceUnit.KILOMETERS) == pytest.approx(1.0)
    r = DistanceUnit.KILOMETERS.earth_radius
    assert DistanceUnit.RADIANS.convert(r, DistanceUnit.KILOMETERS) == pytest.approx(1.0)
    assert DistanceUnit.KILOMETERS.convert(5.0, DistanceUnit.KILOMETERS) == 5.0


def test_convert_to_cartesian_fails():
    with pytest.raises(ConfigurationError):
        DistanceUnit.CARTESIAN.convert(1.0, DistanceUnit.KILOMETERS)


def test_earth_circumference():
    r = DistanceUnit.MILES.earth_radius
    assert DistanceUnit.MILES.earth_circumference == pytest.approx(2.0 * 3.141592653589793 * r)
    assert DistanceUnit.CARTESIAN.earth_circumference is None
