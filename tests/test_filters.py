from __future__ import annotations

import pytest
from shapely.geometry import Point, Polygon
from shapely.geometry import box as shapely_box

from distance.units import DistanceUnit
from spatial.context import SpatialContext
from spatial.errors import (
    ConfigurationError,
    EncodingTooLargeError,
    ShapeParseError,
    UnsupportedOperationError,
)
from spatial.shapes import Rectangle
from strategy.args import SpatialArgs, parse_spatial_args
from strategy.encode import to_wkb
from strategy.filters import build_filter, build_query, build_value_source
from strategy.operations import SpatialOperation, geometry_test
from strategy.strategy import GeometryStrategy

CTX = SpatialContext(unit=DistanceUnit.CARTESIAN)
QUERY = Rectangle(0.0, 0.0, 10.0, 10.0)

CANDIDATES = {
    "touching": shapely_box(10.0, 0.0, 12.0, 2.0),
    "disjoint": shapely_box(20.0, 20.0, 21.0, 21.0),
    "inside": shapely_box(2.0, 2.0, 3.0, 3.0),
    "covering": shapely_box(-5.0, -5.0, 15.0, 15.0),
    "crossing": shapely_box(8.0, 8.0, 12.0, 12.0),
}

REFERENCE = {
    "Intersects": lambda g, q: g.intersects(q),
    "IsWithin": lambda g, q: g.within(q),
    "Contains": lambda g, q: g.contains(q),
    "IsDisjointTo": lambda g, q: g.disjoint(q),
}


@pytest.mark.parametrize("operation", sorted(REFERENCE))
@pytest.mark.parametrize("candidate", sorted(CANDIDATES))
def test_filter_agrees_with_reference_relation(operation, candidate):
    f = build_filter("geo", operation, QUERY, CTX)
    geom = CANDIDATES[candidate]
    expected = REFERENCE[operation](geom, QUERY.to_geometry())
    assert f.matches(to_wkb(geom)) is expected


def test_boundary_disjoint_and_contained_cases():
    def check(op: str, name: str) -> bool:
        return build_filter("geo", op, QUERY, CTX).matches(to_wkb(CANDIDATES[name]))

    assert check("Intersects", "touching") is True
    assert check("IsWithin", "touching") is False
    assert check("IsDisjointTo", "touching") is False
    assert check("IsDisjointTo", "disjoint") is True
    assert check("Intersects", "disjoint") is False
    assert check("IsWithin", "inside") is True
    assert check("Contains", "covering") is True
    assert check("Contains", "inside") is False


def test_operation_names_are_case_insensitive():
    assert SpatialOperation.find("intersects") is SpatialOperation.INTERSECTS
    assert SpatialOperation.find("ISWITHIN") is SpatialOperation.IS_WITHIN
    assert SpatialOperation.find(SpatialOperation.OVERLAPS) is SpatialOperation.OVERLAPS


@pytest.mark.parametrize("operation", ["Near", "", "Intersect", "Distance"])
def test_unsupported_operation_fails(operation):
    with pytest.raises(ConfigurationError):
        build_filter("geo", operation, QUERY, CTX)


def test_bbox_operations_use_envelopes():
    triangle = Polygon([(0.0, 0.0), (10.0, 0.0), (0.0, 10.0)])
    corner = shapely_box(8.0, 8.0, 9.0, 9.0)

    assert geometry_test("Intersects", triangle)(corner) is False
    assert geometry_test("BBoxIntersects", triangle)(corner) is True
    assert geometry_test("IsWithin", triangle)(corner) is False
    assert geometry_test("BBoxWithin", triangle)(corner) is True


def test_equal_and_overlaps():
    q = shapely_box(0.0, 0.0, 2.0, 2.0)
    assert geometry_test("IsEqualTo", q)(Polygon([(2, 0), (2, 2), (0, 2), (0, 0)])) is True
    assert geometry_test("Overlaps", q)(shapely_box(1.0, 1.0, 3.0, 3.0)) is True
    assert geometry_test("Overlaps", q)(shapely_box(0.5, 0.5, 1.0, 1.0)) is False


def test_empty_candidate_is_only_disjoint():
    empty = Polygon()
    assert geometry_test("Intersects", shapely_box(0, 0, 1, 1))(empty) is False
    assert geometry_test("IsDisjointTo", shapely_box(0, 0, 1, 1))(empty) is True


def test_filter_apply_selects_matching_docs():
    f = build_filter("geo", "Intersects", QUERY, CTX)
    docs = [(i, to_wkb(CANDIDATES[name])) for i, name in enumerate(sorted(CANDIDATES))]
    matched = f.apply(docs)
    names = [sorted(CANDIDATES)[i] for i in matched]
    assert names == ["covering", "crossing", "inside", "touching"]


def test_invalid_wkb_is_a_parse_error():
    f = build_filter("geo", "Intersects", QUERY, CTX)
    with pytest.raises(ShapeParseError):
        f.matches(b"\x00\x01nope")


def test_query_scores_are_constant():
    q = build_query("geo", "Intersects", QUERY, CTX, boost=2.5)
    docs = [(1, to_wkb(Point(1.0, 1.0))), (2, to_wkb(Point(50.0, 50.0))), (3, to_wkb(Point(9.0, 9.0)))]
    assert list(q.apply(docs)) == [(1, 2.5), (3, 2.5)]
    assert q.field_name == "geo"


@pytest.mark.parametrize(
    "args",
    [(), ("geo",), ("geo", "Intersects", QUERY, CTX), (None, None)],
)
def test_value_source_is_unsupported(args):
    with pytest.raises(UnsupportedOperationError):
        build_value_source(*args)


def test_parse_spatial_args():
    args = parse_spatial_args(CTX, "Intersects(ENVELOPE(0, 10, 10, 0))")
    assert args == SpatialArgs(operation=SpatialOperation.INTERSECTS, shape=QUERY)
    args = parse_spatial_args(CTX, "IsWithin(POLYGON((0 0, 4 0, 4 4, 0 4, 0 0)))")
    assert args.operation is SpatialOperation.IS_WITHIN
    assert args.shape.area == pytest.approx(16.0)


def test_parse_spatial_args_errors():
    with pytest.raises(ConfigurationError):
        parse_spatial_args(CTX, "Near(1 2)")
    with pytest.raises(ShapeParseError):
        parse_spatial_args(CTX, "no parens here")


def test_strategy_round_trip():
    strategy = GeometryStrategy(CTX)
    field = strategy.create_field("geo", Rectangle(1.0, 1.0, 2.0, 2.0))
    assert field.geometry().equals(shapely_box(1.0, 1.0, 2.0, 2.0))

    args = parse_spatial_args(CTX, "IsWithin(0 0 10 10)")
    assert strategy.make_filter(args, "geo").matches(field.value) is True
    assert strategy.make_query(args, "geo").score(field.value) == 1.0
    with pytest.raises(UnsupportedOperationError):
        strategy.make_value_source(args, "geo")


def test_strategy_budget_applies_to_fields():
    strategy = GeometryStrategy(CTX, max_wkb_length=10)
    with pytest.raises(EncodingTooLargeError):
        strategy.create_field("geo", Point(1.0, 1.0))
