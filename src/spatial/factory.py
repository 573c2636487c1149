from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from distance.calculators import DistanceCalculator
from distance.registry import resolve_calculator
from distance.units import DistanceUnit
from spatial.config import ContextArgs, env_factory_lookup, load_context_args
from spatial.context import SpatialContext
from spatial.errors import ConfigurationError
from spatial.shapes import Rectangle

logger = logging.getLogger(__name__)


class SpatialContextFactory:
    """
    Builds a `SpatialContext` from configuration, in fixed stages:

    1. units (`units`, default kilometers)
    2. calculator (`distCalculator`, left unresolved when absent)
    3. world bounds (`worldBounds`, parsed by a provisional context)
    4. `new_spatial_context()`

    Subclasses override any stage and are selected by name through `register_factory`.
    An instance is single-use.
    """

    def __init__(self) -> None:
        self.args: ContextArgs | None = None
        self.units: DistanceUnit | None = None
        self.calculator: DistanceCalculator | None = None
        self.world_bounds: Rectangle | None = None

    def init(self, args: ContextArgs) -> None:
        if self.args is not None:
            raise RuntimeError("SpatialContextFactory instances are single-use")
        self.args = args
        self.init_units()
        self.init_calculator()
        self.init_world_bounds()

    def init_units(self) -> None:
        name = self.args.units
        self.units = DistanceUnit.find(name) if name is not None else DistanceUnit.KILOMETERS
        logger.debug("spatial context units=%s", self.units.name)

    def init_calculator(self) -> None:
        self.calculator = resolve_calculator(self.args.dist_calculator, self.units)
        logger.debug("spatial context calculator=%r", self.calculator)

    def init_world_bounds(self) -> None:
        literal = self.args.world_bounds
        if literal is None:
            return
        # Parsing needs a context; the bounds are part of the context being built. A provisional
        # context without bounds does the parse and is then dropped.
        provisional = SpatialContext(unit=self.units, dist_calc=self.calculator)
        shape = provisional.read_shape(literal)
        if not isinstance(shape, Rectangle):
            raise ConfigurationError(
                f"worldBounds: expected rectangle, got {type(shape).__name__} from {literal!r}"
            )
        self.world_bounds = shape
        logger.debug("spatial context world_bounds=%s", shape)

    def new_spatial_context(self) -> SpatialContext:
        return SpatialContext(
            unit=self.units, dist_calc=self.calculator, world_bounds=self.world_bounds
        )


FactoryConstructor = Callable[[], SpatialContextFactory]

DEFAULT_FACTORY = "default"

_FACTORIES: dict[str, FactoryConstructor] = {
    DEFAULT_FACTORY: SpatialContextFactory,
    "SpatialContextFactory": SpatialContextFactory,
}


def register_factory(name: str, constructor: FactoryConstructor) -> None:
    _FACTORIES[name] = constructor


def unregister_factory(name: str) -> None:
    if name == DEFAULT_FACTORY:
        raise ValueError("The default factory can not be unregistered")
    _FACTORIES.pop(name, None)


def registered_factories() -> list[str]:
    return sorted(_FACTORIES.keys())


def _select_factory(name: str | None) -> SpatialContextFactory:
    if name is None:
        return SpatialContextFactory()
    ctor = _FACTORIES.get(name)
    if ctor is None:
        raise ConfigurationError(
            f"Unknown spatialContextFactory: {name!r} (registered: {registered_factories()})"
        )
    try:
        instance = ctor()
    except Exception as e:
        raise ConfigurationError(f"Unable to create spatialContextFactory {name!r}") from e
    if not isinstance(instance, SpatialContextFactory):
        raise ConfigurationError(
            f"spatialContextFactory {name!r} produced {type(instance).__name__}, "
            "not a SpatialContextFactory"
        )
    return instance


def make_spatial_context(
    args: Mapping[str, Any] | ContextArgs | None = None,
    *,
    fallback: Callable[[], str | None] = env_factory_lookup,
) -> SpatialContext:
    """
    Resolve configuration into a SpatialContext.

    The factory is named by `spatialContextFactory` in `args`; when absent, `fallback()` is
    consulted (by default the SPATIAL_CONTEXT_FACTORY environment variable); when that is empty
    too, the default factory is used.
    """
    parsed = ContextArgs.parse(args)
    name = parsed.spatial_context_factory
    if name is None:
        name = fallback()
    factory = _select_factory(name)
    logger.debug("spatial context factory=%s", type(factory).__name__)
    factory.init(parsed)
    return factory.new_spatial_context()


def context_from_yaml(
    path: Path | str, *, fallback: Callable[[], str | None] = env_factory_lookup
) -> SpatialContext:
    return make_spatial_context(load_context_args(path), fallback=fallback)
