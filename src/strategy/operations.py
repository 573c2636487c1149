from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from shapely.geometry import box as shapely_box
from shapely.geometry.base import BaseGeometry
from shapely.prepared import PreparedGeometry, prep

from spatial.errors import ConfigurationError


class SpatialOperation(str, Enum):
    """
    Supported predicates, read as "indexed geometry OP query shape".
    """

    INTERSECTS = "Intersects"
    IS_WITHIN = "IsWithin"
    CONTAINS = "Contains"
    IS_DISJOINT_TO = "IsDisjointTo"
    IS_EQUAL_TO = "IsEqualTo"
    OVERLAPS = "Overlaps"
    BBOX_INTERSECTS = "BBoxIntersects"
    BBOX_WITHIN = "BBoxWithin"

    @classmethod
    def find(cls, name: "str | SpatialOperation") -> "SpatialOperation":
        if isinstance(name, SpatialOperation):
            return name
        key = (name or "").strip().lower()
        for op in cls:
            if op.value.lower() == key:
                return op
        raise ConfigurationError(f"Unknown spatial operation: {name!r}")


Predicate = Callable[[PreparedGeometry, BaseGeometry, BaseGeometry], bool]

# (prepared query, raw query, candidate) -> bool
_PREDICATES: dict[SpatialOperation, Predicate] = {
    SpatialOperation.INTERSECTS: lambda pq, q, g: pq.intersects(g),
    SpatialOperation.IS_WITHIN: lambda pq, q, g: pq.contains(g),
    SpatialOperation.CONTAINS: lambda pq, q, g: g.contains(q),
    SpatialOperation.IS_DISJOINT_TO: lambda pq, q, g: pq.disjoint(g),
    SpatialOperation.IS_EQUAL_TO: lambda pq, q, g: g.equals(q),
    SpatialOperation.OVERLAPS: lambda pq, q, g: pq.overlaps(g),
    SpatialOperation.BBOX_INTERSECTS: lambda pq, q, g: pq.intersects(shapely_box(*g.bounds)),
    SpatialOperation.BBOX_WITHIN: lambda pq, q, g: pq.covers(shapely_box(*g.bounds)),
}


@dataclass(frozen=True)
class GeometryTest:
    """
    Relation test bound to a query geometry; call it with a candidate geometry.
    """

    operation: SpatialOperation
    query: BaseGeometry
    _prepared: PreparedGeometry = field(repr=False, compare=False)

    def __call__(self, candidate: BaseGeometry) -> bool:
        if candidate.is_empty:
            return self.operation is SpatialOperation.IS_DISJOINT_TO
        return bool(_PREDICATES[self.operation](self._prepared, self.query, candidate))


def geometry_test(operation: str | SpatialOperation, query: BaseGeometry) -> GeometryTest:
    op = SpatialOperation.find(operation)
    # The BBox variants compare against the query's envelope.
    if op in (SpatialOperation.BBOX_INTERSECTS, SpatialOperation.BBOX_WITHIN):
        query = shapely_box(*query.bounds)
    return GeometryTest(operation=op, query=query, _prepared=prep(query))
