"""Pydantic models for the spider layout service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class LatLng(BaseModel):
    """Simple latitude/longitude container."""

    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")


class Viewport(BaseModel):
    width: int = Field(1024, ge=1, le=8192)
    height: int = Field(768, ge=1, le=8192)


class SpiderOptionsModel(BaseModel):
    """Option overrides; omitted fields keep their profile value."""

    circle_spiral_switchover: Optional[int] = Field(default=None, alias="circleSpiralSwitchover")
    min_circle_length: Optional[float] = Field(default=None, alias="minCircleLength")
    min_spiral_angle_separation: Optional[float] = Field(
        default=None, alias="minSpiralAngleSeparation"
    )
    spiral_distance_factor: Optional[float] = Field(default=None, alias="spiralDistanceFactor")
    max_features_in_web: Optional[int] = Field(default=None, alias="maxFeaturesInWeb")
    close_web_on_point_click: Optional[bool] = Field(default=None, alias="closeWebOnPointClick")
    stick_style: Optional[Dict[str, Any]] = Field(default=None, alias="stickStyle")
    visible: Optional[bool] = None

    model_config = {"populate_by_name": True}


class SpiderLayoutRequest(BaseModel):
    center: LatLng
    zoom: float = Field(..., ge=0, le=24)
    count: int = Field(..., ge=0, le=10000, description="Number of cluster members")
    viewport: Viewport = Field(default_factory=Viewport)
    options: Optional[SpiderOptionsModel] = None
    profile: Optional[str] = Field(default=None, description="Option profile name")


class SpiderLeg(BaseModel):
    stick_id: str = Field(..., alias="stickId")
    offset: List[float]
    pixel: List[float]
    position: LatLng

    model_config = {"populate_by_name": True}


class SpiderLayoutResponse(BaseModel):
    mode: str
    center_pixel: List[float] = Field(..., alias="centerPixel")
    legs: List[SpiderLeg]
    sticks: Dict[str, Any] = Field(..., description="GeoJSON FeatureCollection of sticks")
    options: Dict[str, Any]

    model_config = {"populate_by_name": True}
