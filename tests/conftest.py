"""
Pytest configuration and shared fixtures for spidercluster tests.

This file provides:
- Mock host collaborators (cluster source, feature surfaces, map)
- Sample clusters and leaves
- Common test utilities
"""

import asyncio
import inspect
from typing import Any, Dict, List, Optional

import pytest

from spidercluster.interaction.host import (
    BUBBLE,
    SYMBOL,
    CameraOptions,
    ClusterDataSource,
    Layer,
    MapMouseEvent,
)
from spidercluster.interaction.manager import SpiderClusterManager
from spidercluster.layout.projection import WebMercatorProjection
from spidercluster.state.features import Feature, point_feature


TOKYO = (139.7671, 35.6812)
OSAKA = (135.5023, 34.6937)


# ==============================================================================
# Mock Collaborators
# ==============================================================================

class MockClusterSource(ClusterDataSource):
    """
    In-memory cluster source.

    ``clusters`` maps cluster id -> leaves, ``zooms`` maps cluster id ->
    expansion zoom. With ``hold=True`` leaf fetches wait until the test
    calls ``release(cluster_id)``.
    """

    def __init__(self, clusters: Dict[Any, List[Feature]], zooms: Dict[Any, float], hold: bool = False):
        self.clusters = clusters
        self.zooms = zooms
        self.hold = hold
        self.leaf_requests: List[tuple] = []
        self._gates: Dict[Any, asyncio.Event] = {}
        self.fail_with: Optional[Exception] = None

    def _gate(self, cluster_id) -> asyncio.Event:
        if cluster_id not in self._gates:
            self._gates[cluster_id] = asyncio.Event()
        return self._gates[cluster_id]

    def release(self, cluster_id) -> None:
        self._gate(cluster_id).set()

    async def get_cluster_leaves(self, cluster_id, limit, offset=0):
        self.leaf_requests.append((cluster_id, limit, offset))
        if self.hold:
            await self._gate(cluster_id).wait()
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.clusters.get(cluster_id, []))[offset:offset + limit]

    async def get_cluster_expansion_zoom(self, cluster_id):
        await asyncio.sleep(0)
        return self.zooms[cluster_id]

    def get_shape_by_id(self, shape_id):
        for leaves in self.clusters.values():
            for leaf in leaves:
                if leaf.id == shape_id:
                    return leaf
        return None


class MockSurface:
    """Feature surface that records what the manager renders."""

    def __init__(self, surface_id: str):
        self.surface_id = surface_id
        self.features: List[Feature] = []
        self.feature_state: Dict[str, Dict[str, Any]] = {}

    def set_features(self, features):
        self.features = list(features)

    def clear(self):
        self.features = []
        self.feature_state = {}

    def get_features(self):
        return list(self.features)

    def set_feature_state(self, feature_id, state):
        self.feature_state.setdefault(feature_id, {}).update(state)


class MockMap:
    """Headless map: Web Mercator projection, layers, surfaces and events."""

    def __init__(self, center=TOKYO, zoom: float = 18, max_zoom: float = 24):
        self.camera = CameraOptions(center=center, zoom=zoom, max_zoom=max_zoom)
        self.projection = WebMercatorProjection(center, zoom)
        self.sources: Dict[str, Any] = {}
        self.surfaces: List[MockSurface] = []
        self.layers: List[Layer] = []
        self.handlers: List[tuple] = []
        self.camera_calls: List[Dict[str, Any]] = []
        self.cursor = "grab"
        self._next_surface = 0

    # MapHost contract

    def get_source(self, source_id):
        return self.sources.get(source_id)

    def add_surface(self, surface_id=None):
        self._next_surface += 1
        surface = MockSurface(surface_id or f"spider-surface-{self._next_surface}")
        self.surfaces.append(surface)
        return surface

    def remove_surface(self, surface):
        self.surfaces.remove(surface)

    def add_layer(self, layer):
        self.layers.append(layer)

    def remove_layer(self, layer):
        self.layers.remove(layer)

    def add_event(self, event_type, callback, target=None):
        self.handlers.append((event_type, callback, target))

    def remove_event(self, event_type, callback, target=None):
        self.handlers.remove((event_type, callback, target))

    def get_camera(self):
        return self.camera

    def set_camera(self, **camera):
        self.camera_calls.append(camera)

    def positions_to_pixels(self, positions):
        return self.projection.positions_to_pixels(positions)

    def pixels_to_positions(self, pixels):
        return self.projection.pixels_to_positions(pixels)

    def set_cursor(self, cursor):
        self.cursor = cursor

    # Event dispatch helpers

    async def _dispatch(self, event, target):
        for event_type, callback, handler_target in list(self.handlers):
            if event_type == event.type and handler_target is target:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result

    async def click(self, shapes=None, layer=None):
        """Click ``shapes`` on ``layer`` (or the bare map)."""
        event = MapMouseEvent(type="click", shapes=list(shapes or []))
        if layer is not None:
            await self._dispatch(event, layer)
        if not event.default_prevented:
            await self._dispatch(event, None)
        return event

    async def move_start(self):
        await self._dispatch(MapMouseEvent(type="movestart"), None)

    async def mouse_move(self, layer, shapes):
        await self._dispatch(MapMouseEvent(type="mousemove", shapes=list(shapes)), layer)

    async def mouse_leave(self, layer):
        await self._dispatch(MapMouseEvent(type="mouseleave"), layer)


# ==============================================================================
# Sample Data
# ==============================================================================

def make_leaves(prefix: str, count: int, center=TOKYO) -> List[Feature]:
    """``count`` leaves named ``{prefix}-{i}`` scattered near ``center``."""
    return [
        point_feature(
            (center[0] + i * 1e-6, center[1] + i * 1e-6),
            {"name": f"{prefix} {i}", "rank": i},
            id=f"{prefix}-{i}",
        )
        for i in range(count)
    ]


def make_cluster(cluster_id, count: int, center=TOKYO) -> Feature:
    return point_feature(
        center,
        {"cluster": True, "cluster_id": cluster_id, "point_count": count},
    )


@pytest.fixture
def leaves_a() -> List[Feature]:
    return make_leaves("a", 3)


@pytest.fixture
def leaves_b() -> List[Feature]:
    return make_leaves("b", 10)


@pytest.fixture
def cluster_a() -> Feature:
    return make_cluster(1, 3)


@pytest.fixture
def cluster_b() -> Feature:
    return make_cluster(2, 10)


@pytest.fixture
def zoomable_cluster() -> Feature:
    return make_cluster(3, 4, center=OSAKA)


@pytest.fixture
def plain_point() -> Feature:
    return point_feature(OSAKA, {"name": "Lone cafe"}, id="plain-1")


@pytest.fixture
def cluster_source(leaves_a, leaves_b) -> MockClusterSource:
    return MockClusterSource(
        clusters={1: leaves_a, 2: leaves_b, 3: make_leaves("c", 4, center=OSAKA)},
        zooms={1: 25, 2: 25, 3: 12},
    )


@pytest.fixture
def mock_map(cluster_source) -> MockMap:
    host = MockMap()
    host.sources["clusters"] = cluster_source
    return host


@pytest.fixture
def cluster_layer() -> Layer:
    return Layer(layer_id="cluster-layer", kind=BUBBLE, source="clusters", options={"color": "purple"})


@pytest.fixture
def unclustered_layer() -> Layer:
    return Layer(
        layer_id="point-layer",
        kind=SYMBOL,
        source="clusters",
        options={"icon_options": {"image": "pin-red"}, "filter": ["!", ["has", "point_count"]]},
    )


@pytest.fixture
def manager(mock_map, cluster_layer, unclustered_layer) -> SpiderClusterManager:
    return SpiderClusterManager(mock_map, cluster_layer, unclustered_layer)


class Recorder:
    """Collects notification payloads."""

    def __init__(self):
        self.calls: List[Any] = []

    def __call__(self, payload=None):
        self.calls.append(payload)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
