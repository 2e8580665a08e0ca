"""
Spider cluster manager.

Expands a clicked cluster into a circle or spiral of its leaves ("spider
web"), draws sticks from each leaf to the cluster, and routes clicks and
hovers on the web. The manager:
1. Owns the single SpiderState of its map (at most one open web)
2. Zooms into clusters that still break apart within the camera's range
3. Opens a web in place for clusters that cannot be resolved by zooming
4. Publishes ``feature_selected`` / ``feature_unselected`` notifications

All work happens on the host's event timeline. The only suspension points
are the leaf fetch and expansion zoom requests; completions that arrive after
the web was collapsed or replaced are discarded.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from ..layout.projection import CoordinateBridge
from ..layout.solver import compute_layout
from ..state.features import (
    PARENT_ID,
    Feature,
    cluster_id_of,
    is_cluster,
    make_spider_member,
    make_stick,
    stick_id_of,
)
from ..state.spider_state import SpiderState
from ..tools.options import SpiderClusterOptions
from .events import FEATURE_SELECTED, FEATURE_UNSELECTED, EventEmitter, FeatureSelectedEvent
from .host import (
    BUBBLE,
    LINE,
    SYMBOL,
    ClusterDataSource,
    EventCallback,
    Layer,
    MapHost,
    MapMouseEvent,
    resolve_source,
)

logger = logging.getLogger(__name__)

POINT_FILTER = [
    "any",
    ["==", ["geometry-type"], "Point"],
    ["==", ["geometry-type"], "MultiPoint"],
]

CAMERA_ANIMATION = "ease"
CAMERA_DURATION_MS = 200


class SpiderClusterConfigError(ValueError):
    """The cluster layer is not backed by a supported data source."""


class SpiderClusterLayers(NamedTuple):
    """All layers involved in rendering a spider cluster manager."""

    cluster_layer: Layer
    unclustered_layer: Layer
    spider_feature_layer: Layer
    spider_line_layer: Layer


def _spider_feature_layer(layer_id: str, unclustered_layer: Layer, surface) -> Layer:
    """Derive the spider member layer from the unclustered layer's style."""
    options = unclustered_layer.get_options()
    options.pop("source", None)
    options["filter"] = list(POINT_FILTER)

    if unclustered_layer.kind == BUBBLE:
        kind = BUBBLE
    else:
        kind = SYMBOL
        icon_options = dict(options.get("icon_options") or {})
        icon_options.update(allow_overlap=True, ignore_placement=True)
        options["icon_options"] = icon_options

    return Layer(layer_id=layer_id, kind=kind, source=surface, options=options)


class SpiderClusterManager(EventEmitter):
    """Expands clusters into a spider layout when they are selected."""

    EVENT_TYPES = (FEATURE_SELECTED, FEATURE_UNSELECTED)

    def __init__(
        self,
        map: MapHost,
        cluster_layer: Layer,
        unclustered_layer: Layer,
        options: Optional[Union[SpiderClusterOptions, Mapping[str, Any]]] = None,
    ):
        """
        Initialize the manager and register it with ``map``.

        Args:
            map: Host map the layers live on
            cluster_layer: Layer rendering the clusters
            unclustered_layer: Layer rendering individual (unclustered) features
            options: Partial options applied over the defaults

        Raises:
            SpiderClusterConfigError: If the cluster layer's source is not a
                ClusterDataSource
        """
        super().__init__()

        datasource = resolve_source(map, cluster_layer)
        if not isinstance(datasource, ClusterDataSource):
            raise SpiderClusterConfigError(
                f"Data source on cluster layer '{cluster_layer.layer_id}' is not supported: "
                f"{type(datasource).__name__}"
            )

        self._map = map
        self._datasource = datasource
        self._cluster_layer = cluster_layer
        self._unclustered_layer = unclustered_layer
        self._bridge = CoordinateBridge(map)
        self._options = SpiderClusterOptions()
        self._state = SpiderState()
        self._current_cluster: Optional[Feature] = None
        self._click_generation = 0
        self._disposed = False

        self._spider_surface = map.add_surface()
        self._stick_surface = map.add_surface()

        self._spider_line_layer = Layer(
            layer_id=f"{self._stick_surface.surface_id}-sticks",
            kind=LINE,
            source=self._stick_surface,
            options=dict(self._options.stick_style),
        )
        map.add_layer(self._spider_line_layer)

        self._spider_feature_layer = _spider_feature_layer(
            f"{self._spider_surface.surface_id}-features",
            unclustered_layer,
            self._spider_surface,
        )
        map.add_layer(self._spider_feature_layer)

        self.set_options(options)

        self._subscriptions: List[Tuple[str, EventCallback, Optional[Layer]]] = [
            ("click", self.hide_spider_cluster, None),
            ("movestart", self.hide_spider_cluster, None),
            ("mouseleave", self._unhighlight_stick, self._spider_feature_layer),
            ("mousemove", self._highlight_stick, self._spider_feature_layer),
            ("click", self._layer_click_event, cluster_layer),
            ("click", self._layer_click_event, self._spider_feature_layer),
            ("click", self._layer_click_event, unclustered_layer),
        ]
        for event_type, callback, target in self._subscriptions:
            map.add_event(event_type, callback, target)

        logger.info("Spider cluster manager attached to layer '%s'", cluster_layer.layer_id)

    # -----------------------------
    # Public API
    # -----------------------------

    @property
    def state(self) -> SpiderState:
        """The open web. Read only: mutate it through the manager."""
        return self._state

    def dispose(self) -> None:
        """Release events, layers and surfaces. The manager is single use."""
        self._collapse()
        self._disposed = True

        for event_type, callback, target in self._subscriptions:
            self._map.remove_event(event_type, callback, target)
        self._subscriptions = []

        self._map.remove_layer(self._spider_feature_layer)
        self._map.remove_layer(self._spider_line_layer)

        for surface in (self._spider_surface, self._stick_surface):
            surface.clear()
            self._map.remove_surface(surface)

        logger.info("Spider cluster manager for layer '%s' disposed", self._cluster_layer.layer_id)

    def get_options(self) -> SpiderClusterOptions:
        """Independent copy of the current options."""
        return self._options.copy()

    def get_layers(self) -> SpiderClusterLayers:
        return SpiderClusterLayers(
            cluster_layer=self._cluster_layer,
            unclustered_layer=self._unclustered_layer,
            spider_feature_layer=self._spider_feature_layer,
            spider_line_layer=self._spider_line_layer,
        )

    def set_options(self, options: Optional[Union[SpiderClusterOptions, Mapping[str, Any]]]) -> None:
        """
        Merge ``options`` into the current options.

        Any open web is collapsed first. Unknown, wrong-typed or out-of-range
        fields are ignored.
        """
        self.hide_spider_cluster()

        if isinstance(options, SpiderClusterOptions):
            options = options.to_dict()

        changed = self._options.update(options)

        if "stick_style" in changed:
            self._spider_line_layer.set_options(**self._options.stick_style)

        if "visible" in changed:
            visible = self._options.visible
            self._spider_line_layer.set_options(visible=visible)
            self._spider_feature_layer.set_options(visible=visible)

    def hide_spider_cluster(self, event: Optional[MapMouseEvent] = None) -> None:
        """
        Collapse the open web.

        Called without an event it always collapses. As a map click/movestart
        handler it collapses unless ``close_web_on_point_click`` is off and
        the click landed on the web itself.
        """
        if event is None or self._options.close_web_on_point_click or not self._hits_spider(event):
            self._collapse()

    async def show_spider_cluster(self, cluster: Feature) -> None:
        """Expand ``cluster`` into its spider layout."""
        if self._disposed or not is_cluster(cluster):
            return

        cluster_id = cluster_id_of(cluster)
        if self._state.is_showing(cluster_id):
            return

        self.hide_spider_cluster()
        token = self._state.begin(cluster)

        try:
            leaves = await self._datasource.get_cluster_leaves(
                cluster_id, self._options.max_features_in_web, 0
            )
        except Exception:
            if self._state.is_current(token):
                self._state.clear()
            raise

        if not self._state.is_current(token):
            logger.debug("Discarding leaves of cluster %s: web changed while fetching", cluster_id)
            return

        if not leaves:
            self._state.clear()
            return

        self._open(token, cluster, leaves)

    # -----------------------------
    # Internals
    # -----------------------------

    def _open(self, token: int, cluster: Feature, leaves: Sequence[Feature]) -> None:
        """Lay out ``leaves`` and install them. Must not await: the camera may move."""
        cluster_id = cluster_id_of(cluster)
        center = cluster.coordinates
        layout = compute_layout(self._bridge.to_pixel(center), len(leaves), self._options)
        positions = self._bridge.to_geo_many(layout.pixels)

        spider_id = self._spider_surface.surface_id
        stick_source_id = self._stick_surface.surface_id
        members = []
        sticks = []
        for i, (leaf, position) in enumerate(zip(leaves, positions)):
            sticks.append(make_stick(i, center, position, source_id=stick_source_id))
            members.append(make_spider_member(leaf, i, position, cluster_id, source_id=spider_id))

        if not self._state.populate(token, members, sticks):
            return

        self._current_cluster = cluster
        self._stick_surface.set_features(sticks)
        self._spider_surface.set_features(members)
        logger.debug(
            "Opened %s web for cluster %s with %d members", layout.mode, cluster_id, len(members)
        )

    def _collapse(self) -> None:
        # A pending expansion zoom must not reopen a collapsed web.
        self._click_generation += 1
        self._current_cluster = None
        if self._state.hovered_stick_id is not None:
            self._map.set_cursor("grab")
        self._state.clear()
        self._spider_surface.clear()
        self._stick_surface.clear()

    def _hits_spider(self, event: MapMouseEvent) -> bool:
        if not event.shapes:
            return False
        return event.shapes[0].source_id == self._spider_surface.surface_id

    async def _layer_click_event(self, event: Optional[MapMouseEvent]) -> None:
        if event is None or not event.shapes:
            return

        feature = event.shapes[0]
        event.prevent_default()

        if is_cluster(feature):
            await self._cluster_clicked(feature)
        else:
            self._point_clicked(feature, event)

    async def _cluster_clicked(self, cluster: Feature) -> None:
        self._invoke_event(FEATURE_UNSELECTED, None)
        self._current_cluster = cluster

        self._click_generation += 1
        generation = self._click_generation

        zoom = await self._datasource.get_cluster_expansion_zoom(cluster_id_of(cluster))

        if self._disposed or generation != self._click_generation:
            logger.debug("Discarding expansion zoom of cluster %s", cluster_id_of(cluster))
            return

        if zoom <= self._map.get_camera().max_zoom:
            self._map.set_camera(
                center=cluster.coordinates,
                zoom=zoom,
                type=CAMERA_ANIMATION,
                duration=CAMERA_DURATION_MS,
            )
        else:
            await self.show_spider_cluster(cluster)

    def _point_clicked(self, feature: Feature, event: MapMouseEvent) -> None:
        if PARENT_ID in feature.properties:
            parent_id = feature.properties[PARENT_ID]
            shape = self._datasource.get_shape_by_id(parent_id)
            if shape is None:
                logger.debug("Spider member parent %s no longer exists", parent_id)
        else:
            self._current_cluster = None
            shape = feature

        if shape is not None:
            self._invoke_event(FEATURE_SELECTED, FeatureSelectedEvent(cluster=self._current_cluster, shape=shape))

        # Same policy as a map click: members honour close_web_on_point_click,
        # anything else is off the web and always collapses it.
        self.hide_spider_cluster(event)

    def _highlight_stick(self, event: Optional[MapMouseEvent]) -> None:
        if event is None or not event.shapes:
            return

        stick_id = stick_id_of(event.shapes[0])
        previous = self._state.hovered_stick_id
        if stick_id is None or stick_id == previous:
            return

        if previous is not None:
            self._stick_surface.set_feature_state(previous, {"hover": False})

        self._state.hovered_stick_id = stick_id
        self._stick_surface.set_feature_state(stick_id, {"hover": True})
        self._map.set_cursor("pointer")

    def _unhighlight_stick(self, event: Optional[MapMouseEvent] = None) -> None:
        previous = self._state.hovered_stick_id
        if previous is None:
            return

        self._stick_surface.set_feature_state(previous, {"hover": False})
        self._state.hovered_stick_id = None
        self._map.set_cursor("grab")
