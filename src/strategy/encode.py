from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator

from shapely import wkb
from shapely.geometry.base import BaseGeometry

from spatial.context import SpatialContext
from spatial.errors import EncodingTooLargeError
from spatial.shapes import Shape

logger = logging.getLogger(__name__)

DEFAULT_MAX_WKB_BYTES = 32_000
# Hard ceiling on simplification attempts, on top of the no-progress check.
MAX_SHRINK_ITERATIONS = 64

INITIAL_DIVISOR = 1000.0
DIVISOR_STEP = 0.70


@dataclass(frozen=True)
class EncodedField:
    """
    A named WKB value ready to hand to an index as variable-length binary doc values.
    """

    name: str
    value: bytes
    sorted: bool = False

    def __len__(self) -> int:
        return len(self.value)

    def geometry(self) -> BaseGeometry:
        return wkb.loads(self.value)


def to_wkb(geometry: BaseGeometry) -> bytes:
    return wkb.dumps(geometry)


def simplification_tolerances(geometry: BaseGeometry) -> Iterator[float]:
    """
    Endless tolerance schedule: min(bbox width, bbox height) / divisor, with the divisor
    starting at 1000 and multiplied by 0.70 each round.

    Tolerances are in the geometry's own coordinate units.
    """
    min_x, min_y, max_x, max_y = geometry.bounds
    mins = min(max_x - min_x, max_y - min_y)
    div = INITIAL_DIVISOR
    while True:
        yield mins / div
        div *= DIVISOR_STEP


def encode_geometry(
    geometry: BaseGeometry,
    max_bytes: int = DEFAULT_MAX_WKB_BYTES,
    *,
    max_iterations: int = MAX_SHRINK_ITERATIONS,
) -> bytes:
    """
    WKB-encode `geometry`, simplifying it until the encoding is shorter than `max_bytes`.

    `max_bytes <= 0` disables the limit. Each round simplifies the original geometry
    (topology-preserving) at a coarser tolerance. Raises EncodingTooLargeError when a round
    produces exactly the same length as the previous one, or after `max_iterations` rounds.
    An empty geometry over the limit is not reducible and raises at once.
    """
    data = to_wkb(geometry)
    if max_bytes <= 0 or len(data) < max_bytes:
        return data

    if geometry.is_empty or not all(math.isfinite(b) for b in geometry.bounds):
        raise EncodingTooLargeError(len(data), max_bytes, "no further reduction")

    last = len(data)
    tolerances = simplification_tolerances(geometry)
    for _ in range(max_iterations):
        tolerance = next(tolerances)
        logger.info(
            "Simplifying long geometry: WKB.length=%d tolerance=%s", len(data), tolerance
        )
        simple = geometry.simplify(tolerance, preserve_topology=True)
        data = to_wkb(simple)
        if len(data) < max_bytes:
            return data
        if len(data) == last:
            raise EncodingTooLargeError(last, max_bytes, "no further reduction")
        last = len(data)

    raise EncodingTooLargeError(last, max_bytes, f"gave up after {max_iterations} rounds")


def encode_shape(
    ctx: SpatialContext,
    shape: Shape,
    max_bytes: int = DEFAULT_MAX_WKB_BYTES,
    *,
    max_iterations: int = MAX_SHRINK_ITERATIONS,
) -> bytes:
    return encode_geometry(ctx.to_geometry(shape), max_bytes, max_iterations=max_iterations)


def make_field(name: str, value: bytes, *, sorted: bool = False) -> EncodedField:
    return EncodedField(name=name, value=value, sorted=sorted)
