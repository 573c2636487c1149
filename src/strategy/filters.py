from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator

from shapely import wkb
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry

from spatial.context import SpatialContext
from spatial.errors import ShapeParseError, UnsupportedOperationError
from spatial.shapes import Shape
from strategy.operations import GeometryTest, SpatialOperation, geometry_test


@dataclass(frozen=True)
class GeometryOperationFilter:
    """
    Boolean match on the WKB stored under `field_name`.

    Documents are `(doc_id, wkb)` pairs; a filter only includes or excludes them.
    """

    field_name: str
    tester: GeometryTest
    ctx: SpatialContext

    def matches_geometry(self, geometry: BaseGeometry) -> bool:
        return self.tester(geometry)

    def matches(self, value: bytes) -> bool:
        try:
            geom = wkb.loads(value)
        except ShapelyError as e:
            raise ShapeParseError(f"Invalid WKB in field {self.field_name!r}") from e
        return self.matches_geometry(geom)

    def apply(self, docs: Iterable[tuple[Hashable, bytes]]) -> list[Hashable]:
        return [doc_id for doc_id, value in docs if self.matches(value)]


@dataclass(frozen=True)
class ConstantScoreQuery:
    """
    Wraps a filter; every match scores `boost`, nothing is ranked by proximity.
    """

    filter: GeometryOperationFilter
    boost: float = 1.0

    @property
    def field_name(self) -> str:
        return self.filter.field_name

    def score(self, value: bytes) -> float | None:
        return self.boost if self.filter.matches(value) else None

    def apply(self, docs: Iterable[tuple[Hashable, bytes]]) -> Iterator[tuple[Hashable, float]]:
        for doc_id, value in docs:
            s = self.score(value)
            if s is not None:
                yield doc_id, s


def build_filter(
    field_name: str,
    operation: str | SpatialOperation,
    shape: Shape,
    ctx: SpatialContext,
) -> GeometryOperationFilter:
    tester = geometry_test(operation, ctx.to_geometry(shape))
    return GeometryOperationFilter(field_name=field_name, tester=tester, ctx=ctx)


def build_query(
    field_name: str,
    operation: str | SpatialOperation,
    shape: Shape,
    ctx: SpatialContext,
    *,
    boost: float = 1.0,
) -> ConstantScoreQuery:
    """Matches of the filter built for the same arguments, each scored `boost`."""
    return ConstantScoreQuery(filter=build_filter(field_name, operation, shape, ctx), boost=boost)


def build_value_source(*args, **kwargs):
    raise UnsupportedOperationError("Spatial value sources are not supported for WKB fields")
