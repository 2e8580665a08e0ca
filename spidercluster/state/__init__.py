"""
spidercluster/state: Features and the open spider web state.
"""

from .features import (
    CLUSTER_ID,
    PARENT_ID,
    STICK_ID,
    Feature,
    cluster_id_of,
    is_cluster,
    line_feature,
    make_spider_member,
    make_stick,
    point_feature,
    stick_id_of,
)
from .spider_state import SpiderState

__all__ = [
    "CLUSTER_ID",
    "PARENT_ID",
    "STICK_ID",
    "Feature",
    "cluster_id_of",
    "is_cluster",
    "line_feature",
    "make_spider_member",
    "make_stick",
    "point_feature",
    "stick_id_of",
    "SpiderState",
]
