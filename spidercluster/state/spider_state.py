"""
Single source of truth for the open spider web.

At most one web is open at a time. Every ``begin``/``clear`` bumps a
generation counter; a leaf fetch started under an older generation is stale
and ``populate`` refuses it, so a collapsed or replaced web cannot be
resurrected by a late completion.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from .features import Feature, stick_id_of

logger = logging.getLogger(__name__)


class SpiderState:
    """Mutable state of one cluster manager's spider web."""

    def __init__(self):
        self.cluster_id: Any = None
        self.cluster: Optional[Feature] = None
        self.members: List[Feature] = []
        self.sticks: List[Feature] = []
        self.hovered_stick_id: Optional[str] = None
        self._generation = 0
        self._pending = False

    @property
    def is_open(self) -> bool:
        return bool(self.members)

    @property
    def is_pending(self) -> bool:
        return self._pending

    def is_showing(self, cluster_id: Any) -> bool:
        """Whether ``cluster_id`` is open or its leaves are being fetched."""
        if self.cluster is None or self.cluster_id != cluster_id:
            return False
        return self.is_open or self._pending

    def begin(self, cluster: Feature) -> int:
        """Make ``cluster`` current and return the token for its fetch."""
        self.clear()
        self.cluster = cluster
        self.cluster_id = cluster.properties.get("cluster_id")
        self._pending = True
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation and self._pending

    def populate(self, token: int, members: Sequence[Feature], sticks: Sequence[Feature]) -> bool:
        """
        Install the laid out members and sticks.

        Returns:
            False, without touching the state, if ``token`` is stale.

        Raises:
            ValueError: If members and sticks do not pair up by stick id
        """
        if not self.is_current(token):
            logger.debug("Discarding stale spider layout for cluster token %s", token)
            return False

        _check_pairs(members, sticks)

        self.members = list(members)
        self.sticks = list(sticks)
        self._pending = False
        return True

    def clear(self) -> None:
        self.cluster_id = None
        self.cluster = None
        self.members = []
        self.sticks = []
        self.hovered_stick_id = None
        self._pending = False
        self._generation += 1

    def snapshot(self) -> Tuple[Any, Tuple[Feature, ...], Tuple[Feature, ...]]:
        """Immutable view: (cluster_id, members, sticks)."""
        return self.cluster_id, tuple(self.members), tuple(self.sticks)


def _check_pairs(members: Sequence[Feature], sticks: Sequence[Feature]) -> None:
    if len(members) != len(sticks):
        raise ValueError(
            f"Spider members and sticks must pair up: {len(members)} members, {len(sticks)} sticks"
        )
    for member, stick in zip(members, sticks):
        if stick_id_of(member) != stick.id:
            raise ValueError(
                f"Member stick id {stick_id_of(member)!r} does not match stick {stick.id!r}"
            )
