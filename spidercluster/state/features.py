"""
GeoJSON-like features exchanged with the host map.

Clusters, leaves, spider members and sticks are all ``Feature`` instances;
what distinguishes them is their geometry and a few reserved properties.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

Position = Tuple[float, float]

# Reserved properties added to every spider member.
STICK_ID = "_stick_id"
PARENT_ID = "_parent_id"
CLUSTER_ID = "_cluster_id"


@dataclass
class Feature:
    """A point or line feature with free-form properties."""

    geometry: Dict[str, Any]
    """GeoJSON geometry: ``{"type": ..., "coordinates": ...}``."""

    properties: Dict[str, Any] = field(default_factory=dict)

    id: Optional[str] = None

    source_id: Optional[str] = None
    """Id of the rendering surface that owns this feature, if any."""

    @property
    def geometry_type(self) -> str:
        return self.geometry.get("type", "")

    @property
    def coordinates(self) -> Any:
        return self.geometry.get("coordinates")

    def to_geojson(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": "Feature",
            "geometry": {
                "type": self.geometry_type,
                "coordinates": _as_lists(self.coordinates),
            },
            "properties": dict(self.properties),
        }
        if self.id is not None:
            data["id"] = self.id
        return data


def _as_lists(coords: Any) -> Any:
    if isinstance(coords, (list, tuple)):
        return [_as_lists(c) for c in coords]
    return coords


def point_feature(
    position: Sequence[float],
    properties: Optional[Dict[str, Any]] = None,
    id: Optional[str] = None,
    source_id: Optional[str] = None,
) -> Feature:
    return Feature(
        geometry={"type": "Point", "coordinates": (float(position[0]), float(position[1]))},
        properties=properties if properties is not None else {},
        id=id,
        source_id=source_id,
    )


def line_feature(
    positions: Sequence[Sequence[float]],
    id: Optional[str] = None,
    source_id: Optional[str] = None,
) -> Feature:
    coords = [(float(p[0]), float(p[1])) for p in positions]
    return Feature(
        geometry={"type": "LineString", "coordinates": coords},
        id=id,
        source_id=source_id,
    )


def is_cluster(feature: Optional[Feature]) -> bool:
    """Whether ``feature`` is a cluster produced by the clustering source."""
    return feature is not None and bool(feature.properties.get("cluster"))


def cluster_id_of(feature: Feature) -> Any:
    return feature.properties.get("cluster_id")


def stick_id_of(feature: Feature) -> Optional[str]:
    return feature.properties.get(STICK_ID)


def make_spider_member(
    leaf: Feature,
    index: int,
    position: Sequence[float],
    cluster_id: Any,
    source_id: Optional[str] = None,
) -> Feature:
    """
    Copy ``leaf`` into a spider member placed at ``position``.

    The leaf's properties are shallow copied; only the three reserved keys
    are added.
    """
    props = dict(leaf.properties)
    props[STICK_ID] = str(index)
    props[PARENT_ID] = leaf.id
    props[CLUSTER_ID] = cluster_id
    return point_feature(position, props, source_id=source_id)


def make_stick(
    index: int,
    center: Sequence[float],
    position: Sequence[float],
    source_id: Optional[str] = None,
) -> Feature:
    """Line from the cluster center to the member at ``index``."""
    return line_feature([center, position], id=str(index), source_id=source_id)


__all__: List[str] = [
    "Feature",
    "STICK_ID",
    "PARENT_ID",
    "CLUSTER_ID",
    "point_feature",
    "line_feature",
    "is_cluster",
    "cluster_id_of",
    "stick_id_of",
    "make_spider_member",
    "make_stick",
]
