"""
spidercluster/layout: Spider layout geometry and coordinate conversion.

Provides the circle/spiral solver and the geo <-> pixel bridge it is used with.
"""

from .solver import (
    CIRCLE,
    SPIRAL,
    SpiderLayout,
    circle_leg_length,
    compute_layout,
    use_spiral,
)
from .projection import CoordinateBridge, WebMercatorProjection

__all__ = [
    "CIRCLE",
    "SPIRAL",
    "SpiderLayout",
    "circle_leg_length",
    "compute_layout",
    "use_spiral",
    "CoordinateBridge",
    "WebMercatorProjection",
]
