"""Derived lookups over a cluster list.

`TimelineIndex` bundles the reverse index (identity -> cluster/slot) and the
flat chronological sequence. Both are built in one pass from the same clusters
and the object is immutable, so callers can never observe one without the
other; a rebuild produces a new instance that replaces the old one wholesale.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from core.models import Cluster, Item


@dataclass(frozen=True, eq=False)
class TimelineIndex:
    clusters: tuple[Cluster, ...] = ()
    flat: tuple[Item, ...] = ()
    _reverse: Mapping[str, tuple[int, int]] = field(default_factory=lambda: MappingProxyType({}))
    _positions: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(cls, clusters: Sequence[Cluster]) -> TimelineIndex:
        """Build the reverse index and flat sequence for `clusters`."""
        reverse: dict[str, tuple[int, int]] = {}
        for i, cluster in enumerate(clusters):
            for j, item in enumerate(cluster.items):
                reverse[item.identity] = (i, j)

        flat = sorted(
            (item for cluster in clusters for item in cluster.items),
            key=lambda it: it.sequence_index,
        )
        positions = {item.identity: pos for pos, item in enumerate(flat)}
        return cls(
            clusters=tuple(clusters),
            flat=tuple(flat),
            _reverse=MappingProxyType(reverse),
            _positions=MappingProxyType(positions),
        )

    def __len__(self) -> int:
        return len(self.flat)

    def __contains__(self, identity: object) -> bool:
        return identity in self._reverse

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)

    def locate(self, identity: str | None) -> tuple[int, int] | None:
        """Return ``(cluster_index, index_within_cluster)`` or None if absent."""
        if identity is None:
            return None
        return self._reverse.get(identity)

    def cluster_of(self, identity: str | None) -> int | None:
        """Cluster index holding `identity`, None when unknown."""
        loc = self.locate(identity)
        return loc[0] if loc is not None else None

    def item_at(self, cluster_index: int, index_in_cluster: int) -> Item:
        return self.clusters[cluster_index].items[index_in_cluster]

    def get(self, identity: str | None) -> Item | None:
        loc = self.locate(identity)
        if loc is None:
            return None
        return self.item_at(*loc)

    def flat_position(self, identity: str | None) -> int | None:
        """Position of `identity` within the flat sequence."""
        if identity is None:
            return None
        return self._positions.get(identity)

    def identities(self) -> list[str]:
        return [item.identity for item in self.flat]
