from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from spatial.errors import ConfigurationError

# Fallback for `spatialContextFactory` when the arguments don't name one.
FACTORY_ENV = "SPATIAL_CONTEXT_FACTORY"
# YAML file the HTTP app builds its context from.
CONFIG_PATH_ENV = "SPATIAL_CONTEXT_CONFIG"


class ContextArgs(BaseModel):
    """
    Recognized context configuration keys.

    Keys are case-sensitive camelCase (as written in config files); anything else is ignored so
    newer configs keep working with older code.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, strict=True)

    spatial_context_factory: str | None = Field(default=None, alias="spatialContextFactory")
    units: str | None = None
    dist_calculator: str | None = Field(default=None, alias="distCalculator")
    world_bounds: str | None = Field(default=None, alias="worldBounds")

    @classmethod
    def parse(cls, args: Mapping[str, Any] | "ContextArgs" | None) -> "ContextArgs":
        if isinstance(args, ContextArgs):
            return args
        try:
            return cls.model_validate(dict(args or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid spatial context arguments: {e}") from e


def env_factory_lookup() -> str | None:
    v = (os.getenv(FACTORY_ENV) or "").strip()
    return v or None


def load_context_args(path: Path | str) -> dict[str, Any]:
    """
    Read a flat YAML mapping of context arguments, e.g.:

        units: miles
        distCalculator: vincentySphere
        worldBounds: -180 -90 180 90
    """
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Unable to read spatial context config: {p}") from e
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid spatial context config root: {p}")
    return data


def config_path_from_env() -> Path | None:
    v = (os.getenv(CONFIG_PATH_ENV) or "").strip()
    return Path(v) if v else None
