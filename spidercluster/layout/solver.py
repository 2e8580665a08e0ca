"""
Spider layout solver.

Converts a member count into pixel offsets around a cluster center:
1. Circle mode for small clusters (all members share one radius)
2. Spiral mode once the count exceeds ``circle_spiral_switchover``

The spiral is Archimedean-style: the angular step shrinks as the radius
grows, so the arc length between consecutive members stays roughly constant.

Pure functions only. Same inputs always produce the same offsets, which the
cluster manager relies on when re-showing an unchanged cluster.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from ..tools.options import SpiderClusterOptions

CIRCLE = "circle"
SPIRAL = "spiral"

# Per-index angle increment that keeps spiral arms from lining up across turns.
SPIRAL_ANGLE_JITTER = 0.0005

Pixel = Tuple[float, float]


@dataclass(frozen=True)
class SpiderLayout:
    """Pixel offsets for every member of one spider web."""

    center: Pixel
    """Pixel position of the cluster."""

    mode: str
    """Either ``"circle"`` or ``"spiral"``."""

    offsets: np.ndarray
    """Array of shape (count, 2), index aligned with the member order."""

    def __len__(self) -> int:
        return len(self.offsets)

    @property
    def pixels(self) -> np.ndarray:
        """Absolute pixel position of each member."""
        return np.asarray(self.center, dtype=float) + self.offsets

    def stick_endpoints(self) -> List[Tuple[Pixel, Pixel]]:
        """(center, member) pixel pairs, one per stick."""
        center = (float(self.center[0]), float(self.center[1]))
        return [(center, (float(x), float(y))) for x, y in self.pixels]


def use_spiral(count: int, options: SpiderClusterOptions) -> bool:
    """Whether ``count`` members are laid out as a spiral."""
    return count > options.circle_spiral_switchover


def circle_leg_length(count: int, options: SpiderClusterOptions) -> float:
    """
    Radius shared by all members in circle mode.

    Chosen so the arc between neighbours approximates
    ``spiral_distance_factor``, but never shorter than ``min_circle_length``.
    """
    if count <= 0:
        return float(options.min_circle_length)

    step_angle = 2 * math.pi / count
    leg = options.spiral_distance_factor / step_angle / math.pi / 2 * count
    return float(max(leg, options.min_circle_length))


def _circle_offsets(count: int, options: SpiderClusterOptions) -> np.ndarray:
    step_angle = 2 * math.pi / count
    leg = circle_leg_length(count, options)
    angles = step_angle * np.arange(count)
    return np.column_stack((leg * np.cos(angles), leg * np.sin(angles)))


def _spiral_offsets(count: int, options: SpiderClusterOptions) -> np.ndarray:
    # Each step depends on the previous radius, so this stays a loop.
    leg = options.min_circle_length / math.pi
    growth = 2 * math.pi * options.spiral_distance_factor
    angle = 0.0

    offsets = np.empty((count, 2), dtype=float)
    for i in range(count):
        angle += options.min_spiral_angle_separation / leg + i * SPIRAL_ANGLE_JITTER
        leg += growth / angle
        offsets[i, 0] = leg * math.cos(angle)
        offsets[i, 1] = leg * math.sin(angle)
    return offsets


def compute_layout(
    center: Sequence[float],
    count: int,
    options: SpiderClusterOptions,
) -> SpiderLayout:
    """
    Compute the spider layout for ``count`` members around ``center``.

    Args:
        center: Pixel position (x, y) of the cluster
        count: Number of members to place
        options: Layout options

    Returns:
        SpiderLayout with one offset per member

    Raises:
        ValueError: If ``count`` is negative
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")

    center_px = (float(center[0]), float(center[1]))
    mode = SPIRAL if use_spiral(count, options) else CIRCLE

    if count == 0:
        offsets = np.empty((0, 2), dtype=float)
    elif mode == SPIRAL:
        offsets = _spiral_offsets(count, options)
    else:
        offsets = _circle_offsets(count, options)

    return SpiderLayout(center=center_px, mode=mode, offsets=offsets)
