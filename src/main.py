from __future__ import annotations

from functools import lru_cache

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from spatial.config import config_path_from_env
from spatial.context import SpatialContext
from spatial.errors import ConfigurationError, EncodingTooLargeError, ShapeParseError
from spatial.factory import context_from_yaml, make_spatial_context
from strategy.encode import DEFAULT_MAX_WKB_BYTES, encode_shape, to_wkb
from strategy.filters import build_filter

app = FastAPI()


@lru_cache(maxsize=1)
def get_context() -> SpatialContext:
    path = config_path_from_env()
    if path is None:
        return make_spatial_context({})
    return context_from_yaml(path)


def clear_context_cache() -> None:
    """
    Drop the cached context so the next request rebuilds it (e.g. after changing
    SPATIAL_CONTEXT_CONFIG in tests).
    """
    get_context.cache_clear()


class ApiEncodeRequest(BaseModel):
    shape: str
    maxBytes: int = DEFAULT_MAX_WKB_BYTES


class ApiEncodeResponse(BaseModel):
    length: int
    simplified: bool
    wkbHex: str


class ApiRelateRequest(BaseModel):
    operation: str
    shape: str
    candidates: list[str] = Field(default_factory=list)


@app.get("/context")
def context_info():
    ctx = get_context()
    b = ctx.world_bounds
    return {
        "units": ctx.unit.value,
        "isGeo": ctx.is_geo,
        "distCalculator": None if ctx.dist_calc is None else repr(ctx.dist_calc),
        "calculator": repr(ctx.calculator),
        "worldBounds": None
        if b is None
        else {"minX": b.min_x, "minY": b.min_y, "maxX": b.max_x, "maxY": b.max_y},
    }


@app.post("/encode", response_model=ApiEncodeResponse)
def encode(body: ApiEncodeRequest):
    ctx = get_context()
    try:
        shape = ctx.read_shape(body.shape)
        full = to_wkb(ctx.to_geometry(shape))
        data = encode_shape(ctx, shape, body.maxBytes)
    except ShapeParseError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except EncodingTooLargeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return ApiEncodeResponse(length=len(data), simplified=data != full, wkbHex=data.hex())


@app.post("/relate")
def relate(body: ApiRelateRequest):
    ctx = get_context()
    try:
        f = build_filter("shape", body.operation, ctx.read_shape(body.shape), ctx)
        candidates = [ctx.to_geometry(ctx.read_shape(c)) for c in body.candidates]
    except (ConfigurationError, ShapeParseError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return {"matches": [i for i, g in enumerate(candidates) if f.matches_geometry(g)]}
