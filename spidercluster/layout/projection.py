"""Geographic <-> screen pixel conversion."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np

Position = Tuple[float, float]
Pixel = Tuple[float, float]

MAX_LATITUDE = 85.0511287798


class CoordinateBridge:
    """
    Thin wrapper over a host projection.

    ``projection`` must offer ``positions_to_pixels`` and
    ``pixels_to_positions``, each taking and returning a sequence of pairs.
    Positions are (lng, lat); pixels are (x, y). Forward and inverse calls
    used to build one layout must happen without a camera change in between.
    """

    def __init__(self, projection):
        self._projection = projection

    def to_pixel(self, position: Sequence[float]) -> Pixel:
        x, y = self._projection.positions_to_pixels([position])[0]
        return (float(x), float(y))

    def to_geo(self, pixel: Sequence[float]) -> Position:
        lng, lat = self._projection.pixels_to_positions([pixel])[0]
        return (float(lng), float(lat))

    def to_geo_many(self, pixels: Iterable[Sequence[float]]) -> List[Position]:
        pixels = [tuple(p) for p in pixels]
        if not pixels:
            return []
        return [(float(lng), float(lat)) for lng, lat in self._projection.pixels_to_positions(pixels)]


class WebMercatorProjection:
    """
    Spherical Web Mercator viewport.

    Pixels are measured from the top-left corner of a ``width`` x ``height``
    viewport centred on ``center`` at ``zoom``. The world is
    ``tile_size * 2 ** zoom`` pixels wide.
    """

    def __init__(
        self,
        center: Sequence[float],
        zoom: float,
        width: int = 1024,
        height: int = 768,
        tile_size: int = 512,
    ):
        self.center = (float(center[0]), float(center[1]))
        self.zoom = float(zoom)
        self.width = width
        self.height = height
        self.tile_size = tile_size

    @property
    def world_size(self) -> float:
        return self.tile_size * 2.0 ** self.zoom

    def _world_xy(self, positions: np.ndarray) -> np.ndarray:
        lng = positions[:, 0]
        lat = np.clip(positions[:, 1], -MAX_LATITUDE, MAX_LATITUDE)
        sin_lat = np.sin(np.radians(lat))
        x = (lng + 180.0) / 360.0
        y = 0.5 - np.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)
        return np.column_stack((x, y)) * self.world_size

    def _origin(self) -> np.ndarray:
        center_xy = self._world_xy(np.array([self.center], dtype=float))[0]
        return center_xy - np.array([self.width / 2.0, self.height / 2.0])

    def positions_to_pixels(self, positions: Iterable[Sequence[float]]) -> List[Pixel]:
        arr = np.asarray(list(positions), dtype=float).reshape(-1, 2)
        if len(arr) == 0:
            return []
        pixels = self._world_xy(arr) - self._origin()
        return [(float(x), float(y)) for x, y in pixels]

    def pixels_to_positions(self, pixels: Iterable[Sequence[float]]) -> List[Position]:
        arr = np.asarray(list(pixels), dtype=float).reshape(-1, 2)
        if len(arr) == 0:
            return []
        world = (arr + self._origin()) / self.world_size
        lng = world[:, 0] * 360.0 - 180.0
        lat = np.degrees(np.arctan(np.sinh(math.pi * (1 - 2 * world[:, 1]))))
        return [(float(a), float(b)) for a, b in zip(lng, lat)]
