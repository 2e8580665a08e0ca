"""
Options used to customize how spider clusters are laid out and rendered.

The options record is partially updatable: ``update`` applies only the fields
it recognises and silently skips anything of the wrong type or out of range,
so a host can forward loosely validated settings without risking an error
in the middle of user interaction.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Callable, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


def _default_stick_style() -> Dict[str, Any]:
    return {
        "stroke_color": [
            "case",
            ["boolean", ["feature-state", "hover"], False],
            "red",
            "black",
        ],
    }


@dataclass
class SpiderClusterOptions:
    """Configuration consumed by the layout solver and the cluster manager."""

    circle_spiral_switchover: int = 6
    """Point count above which the web is drawn as a spiral instead of a circle."""

    min_circle_length: float = 30
    """Minimum pixel distance between the cluster center and a circle member."""

    min_spiral_angle_separation: float = 25
    """Minimum angular separation between consecutive spiral members."""

    spiral_distance_factor: float = 5
    """Factor used to grow the pixel distance of each spiral member."""

    max_features_in_web: int = 100
    """Maximum number of leaves fetched and rendered in one web."""

    close_web_on_point_click: bool = True
    """Collapse the web after a point feature has been clicked."""

    stick_style: Dict[str, Any] = field(default_factory=_default_stick_style)
    """Layer options for the sticks connecting members to the cluster."""

    visible: bool = True
    """Whether the expanded web is displayed."""

    def update(self, partial: Optional[Mapping[str, Any]]) -> List[str]:
        """
        Merge ``partial`` into these options, field by field.

        Unknown keys, wrong-typed values and out-of-range values are ignored.

        Returns:
            Names of the fields whose value changed.
        """
        if not partial:
            return []

        changed = []
        for name, value in partial.items():
            check = _VALIDATORS.get(name)
            if check is None or not check(value):
                logger.debug("Ignoring spider option %s=%r", name, value)
                continue

            if name == "stick_style":
                value = copy.deepcopy(dict(value))

            if getattr(self, name) != value:
                setattr(self, name, value)
                changed.append(name)

        return changed

    def copy(self) -> "SpiderClusterOptions":
        """Return a deep, independent copy."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary (deep copy)."""
        return asdict(self)

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "SpiderClusterOptions":
        """Build options from defaults updated with ``values``."""
        options = cls()
        options.update(values)
        return options


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _positive_number(value: Any) -> bool:
    return _is_number(value) and value > 0


def _count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _flag(value: Any) -> bool:
    return isinstance(value, bool)


_VALIDATORS: Dict[str, Callable[[Any], bool]] = {
    "circle_spiral_switchover": _count,
    "min_circle_length": _positive_number,
    "min_spiral_angle_separation": _positive_number,
    "spiral_distance_factor": _positive_number,
    "max_features_in_web": _count,
    "close_web_on_point_click": _flag,
    "stick_style": lambda value: isinstance(value, Mapping),
    "visible": _flag,
}

OPTION_NAMES = tuple(f.name for f in fields(SpiderClusterOptions))
