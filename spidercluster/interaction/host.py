"""
Contracts between the cluster manager and the host map.

The manager never talks to a concrete map runtime. A host binding supplies:
- a ``ClusterDataSource`` behind the cluster layer (leaves, expansion zoom,
  shape lookup)
- ``FeatureSurface`` objects the manager renders spider members and sticks into
- a ``MapHost`` with camera, projection, layers and event subscription
"""

from __future__ import annotations

import abc
import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from ..state.features import Feature

Position = Tuple[float, float]
Pixel = Tuple[float, float]

BUBBLE = "bubble"
SYMBOL = "symbol"
LINE = "line"


class ClusterDataSource(abc.ABC):
    """Clustered point source backing a cluster layer."""

    @abc.abstractmethod
    async def get_cluster_leaves(self, cluster_id: Any, limit: int, offset: int = 0) -> List[Feature]:
        """Return up to ``limit`` leaves of ``cluster_id`` starting at ``offset``."""

    @abc.abstractmethod
    async def get_cluster_expansion_zoom(self, cluster_id: Any) -> float:
        """Zoom level at which ``cluster_id`` breaks apart."""

    @abc.abstractmethod
    def get_shape_by_id(self, shape_id: Any) -> Optional[Feature]:
        """Look up an original leaf, or None if it no longer exists."""


class FeatureSurface(Protocol):
    """A host data source the manager owns and renders features into."""

    surface_id: str

    def set_features(self, features: Sequence[Feature]) -> None: ...

    def clear(self) -> None: ...

    def get_features(self) -> List[Feature]: ...

    def set_feature_state(self, feature_id: str, state: Dict[str, Any]) -> None: ...


@dataclass
class Layer:
    """A rendering layer: what ``source`` holds and how it is drawn."""

    layer_id: str
    kind: str
    """``"bubble"``, ``"symbol"`` or ``"line"``."""

    source: Any = None
    """A data source / surface object, or the id of one registered with the map."""

    options: Dict[str, Any] = field(default_factory=dict)

    def get_options(self) -> Dict[str, Any]:
        return copy.deepcopy(self.options)

    def set_options(self, **options: Any) -> None:
        self.options.update(options)


@dataclass
class CameraOptions:
    center: Position
    zoom: float
    min_zoom: float = 0
    max_zoom: float = 24


@dataclass
class MapMouseEvent:
    """Mouse event dispatched by the host."""

    type: str
    shapes: List[Feature] = field(default_factory=list)
    """Hit features, topmost first."""

    position: Optional[Position] = None
    pixel: Optional[Pixel] = None
    default_prevented: bool = False

    def prevent_default(self) -> None:
        """Stop the host from running map-level handlers for this event."""
        self.default_prevented = True


EventCallback = Callable[[Optional[MapMouseEvent]], Any]


class MapHost(Protocol):
    """The subset of a map runtime the cluster manager uses."""

    def get_source(self, source_id: str) -> Any: ...

    def add_surface(self, surface_id: Optional[str] = None) -> FeatureSurface: ...

    def remove_surface(self, surface: FeatureSurface) -> None: ...

    def add_layer(self, layer: Layer) -> None: ...

    def remove_layer(self, layer: Layer) -> None: ...

    def add_event(self, event_type: str, callback: EventCallback, target: Optional[Layer] = None) -> None: ...

    def remove_event(self, event_type: str, callback: EventCallback, target: Optional[Layer] = None) -> None: ...

    def get_camera(self) -> CameraOptions: ...

    def set_camera(self, **camera: Any) -> None: ...

    def positions_to_pixels(self, positions: Sequence[Sequence[float]]) -> List[Pixel]: ...

    def pixels_to_positions(self, pixels: Sequence[Sequence[float]]) -> List[Position]: ...

    def set_cursor(self, cursor: str) -> None: ...


def resolve_source(host: MapHost, layer: Layer) -> Union[ClusterDataSource, Any]:
    """Return the object behind ``layer.source``, looking ids up on the host."""
    source = layer.source
    if isinstance(source, str):
        source = host.get_source(source)
    return source
