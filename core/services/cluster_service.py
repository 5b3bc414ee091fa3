"""Time-gap clustering of a chronologically ordered item sequence.

Gaps are measured between consecutive *surviving* items, so filtering can merge
clusters that were only separated by items the filter removed.
"""

from __future__ import annotations

from collections.abc import Iterable, Set

from loguru import logger

from core.models import Cluster, Item, TagFilter

GAP_THRESHOLD_MS = 3_600_000


def cluster_items(
    items: Iterable[Item],
    required: Set[str] = frozenset(),
    excluded: Set[str] = frozenset(),
    gap_threshold_ms: int = GAP_THRESHOLD_MS,
) -> list[Cluster]:
    """Group `items` (sorted by timestamp) into clusters.

    Args:
        items: Items in ascending timestamp order.
        required: Tags every surviving item must carry.
        excluded: Tags no surviving item may carry.
        gap_threshold_ms: A new cluster starts when the delta to the previous
            surviving item is strictly greater than this.

    Returns:
        Clusters in ascending timestamp order; empty when nothing survives.
    """
    tag_filter = TagFilter(frozenset(required), frozenset(excluded))
    result: list[Cluster] = []
    current: list[Item] = []
    last = 0

    for item in items:
        if not tag_filter.matches(item.tags):
            continue
        if current and item.timestamp - last > gap_threshold_ms:
            result.append(Cluster(timestamp=current[0].timestamp, items=tuple(current)))
            current = []
        current.append(item)
        last = item.timestamp

    if current:
        result.append(Cluster(timestamp=current[0].timestamp, items=tuple(current)))

    logger.debug(
        "Clustered {} items into {} clusters (required={}, excluded={})",
        sum(len(c) for c in result),
        len(result),
        sorted(required),
        sorted(excluded),
    )
    return result


class ClusterService:
    """Applies a `TagFilter` and a configurable gap threshold to item lists."""

    def __init__(self, gap_threshold_ms: int = GAP_THRESHOLD_MS) -> None:
        if gap_threshold_ms < 0:
            raise ValueError(f"gap threshold must be non-negative: {gap_threshold_ms}")
        self._gap = int(gap_threshold_ms)

    @property
    def gap_threshold_ms(self) -> int:
        return self._gap

    def cluster(self, items: Iterable[Item], tag_filter: TagFilter | None = None) -> list[Cluster]:
        """Cluster `items`, keeping only those accepted by `tag_filter`."""
        tag_filter = tag_filter or TagFilter()
        return cluster_items(items, tag_filter.required, tag_filter.excluded, self._gap)
