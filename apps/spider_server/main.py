"""FastAPI service exposing spider layouts for clients without a local solver."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from spidercluster.layout import CoordinateBridge, WebMercatorProjection, compute_layout
from spidercluster.state import make_stick
from spidercluster.tools import SpiderClusterOptions, load_options

from .schemas.models import LatLng, SpiderLayoutRequest, SpiderLayoutResponse, SpiderLeg

logger = logging.getLogger(__name__)

app = FastAPI(title="Spider Cluster Layout Server", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _wrap_lng(lng: float) -> float:
    return ((lng + 180.0) % 360.0) - 180.0


def _load_options(profile: Optional[str]) -> SpiderClusterOptions:
    try:
        return load_options(profile)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.get("/health")
async def health_check() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/options")
async def options_action(profile: Optional[str] = None) -> Dict[str, Any]:
    return _load_options(profile).to_dict()


@app.post("/actions/spider_layout", response_model=SpiderLayoutResponse, response_model_by_alias=True)
async def spider_layout_action(request: SpiderLayoutRequest) -> SpiderLayoutResponse:
    options = _load_options(request.profile)
    if request.options is not None:
        options.update(request.options.model_dump(exclude_none=True))

    count = min(request.count, options.max_features_in_web)
    if count < request.count:
        logger.debug("Truncating spider layout from %d to %d members", request.count, count)

    center = (request.center.lng, request.center.lat)
    projection = WebMercatorProjection(
        center,
        request.zoom,
        width=request.viewport.width,
        height=request.viewport.height,
    )
    bridge = CoordinateBridge(projection)

    layout = compute_layout(bridge.to_pixel(center), count, options)
    positions = bridge.to_geo_many(layout.pixels)

    legs = []
    sticks = []
    for i, (offset, pixel, position) in enumerate(zip(layout.offsets, layout.pixels, positions)):
        legs.append(
            SpiderLeg(
                stick_id=str(i),
                offset=[float(offset[0]), float(offset[1])],
                pixel=[float(pixel[0]), float(pixel[1])],
                position=LatLng(lat=position[1], lng=_wrap_lng(position[0])),
            )
        )
        sticks.append(make_stick(i, center, position).to_geojson())

    return SpiderLayoutResponse(
        mode=layout.mode,
        center_pixel=[layout.center[0], layout.center[1]],
        legs=legs,
        sticks={"type": "FeatureCollection", "features": sticks},
        options=options.to_dict(),
    )
