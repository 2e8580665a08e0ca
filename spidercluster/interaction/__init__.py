"""
spidercluster/interaction: Cluster manager, host contracts and notifications.
"""

from .events import (
    FEATURE_SELECTED,
    FEATURE_UNSELECTED,
    EventEmitter,
    FeatureSelectedEvent,
)
from .host import (
    BUBBLE,
    LINE,
    SYMBOL,
    CameraOptions,
    ClusterDataSource,
    FeatureSurface,
    Layer,
    MapHost,
    MapMouseEvent,
)
from .manager import (
    SpiderClusterConfigError,
    SpiderClusterLayers,
    SpiderClusterManager,
)

__all__ = [
    "FEATURE_SELECTED",
    "FEATURE_UNSELECTED",
    "EventEmitter",
    "FeatureSelectedEvent",
    "BUBBLE",
    "LINE",
    "SYMBOL",
    "CameraOptions",
    "ClusterDataSource",
    "FeatureSurface",
    "Layer",
    "MapHost",
    "MapMouseEvent",
    "SpiderClusterConfigError",
    "SpiderClusterLayers",
    "SpiderClusterManager",
]
