from __future__ import annotations

from dataclasses import dataclass

from spatial.context import SpatialContext
from spatial.shapes import Shape
from strategy.args import SpatialArgs
from strategy.encode import DEFAULT_MAX_WKB_BYTES, EncodedField, encode_shape, make_field
from strategy.filters import (
    ConstantScoreQuery,
    GeometryOperationFilter,
    build_filter,
    build_query,
    build_value_source,
)


@dataclass(frozen=True)
class GeometryStrategy:
    """
    Stores raw WKB per document and matches it with geometry predicates.

    `max_wkb_length <= 0` stores geometries unsimplified regardless of size.
    """

    ctx: SpatialContext
    max_wkb_length: int = DEFAULT_MAX_WKB_BYTES

    def create_field(self, field_name: str, shape: Shape, *, sorted: bool = False) -> EncodedField:
        value = encode_shape(self.ctx, shape, self.max_wkb_length)
        return make_field(field_name, value, sorted=sorted)

    def make_filter(self, args: SpatialArgs, field_name: str) -> GeometryOperationFilter:
        return build_filter(field_name, args.operation, args.shape, self.ctx)

    def make_query(self, args: SpatialArgs, field_name: str) -> ConstantScoreQuery:
        return build_query(field_name, args.operation, args.shape, self.ctx)

    def make_value_source(self, args: SpatialArgs, field_name: str):
        return build_value_source(args, field_name)
