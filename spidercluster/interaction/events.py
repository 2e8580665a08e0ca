"""Notifications published by the cluster manager."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..state.features import Feature

FEATURE_SELECTED = "feature_selected"
FEATURE_UNSELECTED = "feature_unselected"


@dataclass(frozen=True)
class FeatureSelectedEvent:
    """Payload of ``feature_selected``."""

    cluster: Optional[Feature]
    """Cluster the feature was expanded from; None for unclustered features."""

    shape: Feature
    """The original feature that was selected."""


class EventEmitter:
    """Minimal listener registry with ``add``/``add_once``/``remove``."""

    EVENT_TYPES: Tuple[str, ...] = ()

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[Callable[[Any], Any], bool]]] = {
            name: [] for name in self.EVENT_TYPES
        }

    def _listeners_for(self, event_type: str) -> List[Tuple[Callable[[Any], Any], bool]]:
        try:
            return self._listeners[event_type]
        except KeyError:
            raise ValueError(
                f"Unknown event type '{event_type}'. Supported: {', '.join(self.EVENT_TYPES)}"
            ) from None

    def add(self, event_type: str, callback: Callable[[Any], Any]) -> None:
        self._listeners_for(event_type).append((callback, False))

    def add_once(self, event_type: str, callback: Callable[[Any], Any]) -> None:
        self._listeners_for(event_type).append((callback, True))

    def remove(self, event_type: str, callback: Callable[[Any], Any]) -> None:
        listeners = self._listeners_for(event_type)
        listeners[:] = [entry for entry in listeners if entry[0] != callback]

    def _invoke_event(self, event_type: str, payload: Any = None) -> None:
        listeners = self._listeners_for(event_type)
        current = list(listeners)
        listeners[:] = [entry for entry in listeners if not entry[1]]
        for callback, _once in current:
            callback(payload)
