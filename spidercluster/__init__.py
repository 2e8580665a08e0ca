"""
spidercluster: Expand map point clusters into spider (circle / spiral) layouts.
"""

from .interaction import (
    FEATURE_SELECTED,
    FEATURE_UNSELECTED,
    ClusterDataSource,
    FeatureSelectedEvent,
    Layer,
    MapMouseEvent,
    SpiderClusterConfigError,
    SpiderClusterLayers,
    SpiderClusterManager,
)
from .layout import CoordinateBridge, SpiderLayout, WebMercatorProjection, compute_layout
from .state import Feature, SpiderState
from .tools import SpiderClusterOptions, load_options

__version__ = "0.1.0"

__all__ = [
    "FEATURE_SELECTED",
    "FEATURE_UNSELECTED",
    "ClusterDataSource",
    "FeatureSelectedEvent",
    "Layer",
    "MapMouseEvent",
    "SpiderClusterConfigError",
    "SpiderClusterLayers",
    "SpiderClusterManager",
    "CoordinateBridge",
    "SpiderLayout",
    "WebMercatorProjection",
    "compute_layout",
    "Feature",
    "SpiderState",
    "SpiderClusterOptions",
    "load_options",
]
