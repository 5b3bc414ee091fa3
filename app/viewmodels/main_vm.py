"""ViewModel for orchestrating feed IO and clustering/filtering logic."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from loguru import logger

from core.models import Item, TagFilter
from core.services.cluster_service import ClusterService
from core.services.tag_filter import encode_tag_filter, parse_tag_filter
from core.services.timeline_index import TimelineIndex


class MainVM:
    """Main application view-model.

    Holds the loaded items and the active tag filter, and derives the cluster
    set and its lookups. Clusters are recomputed from scratch whenever the
    items or the filter change.
    """

    def __init__(self, repo, cluster_service: ClusterService | None = None) -> None:
        """Create a MainVM.

        Args:
            repo: Repository with a `load(path) -> list[Item]` method.
            cluster_service: Clustering service (defaults to `ClusterService`).
        """
        self._repo = repo
        self._clusterer = cluster_service or ClusterService()
        self.items: list[Item] = []
        self.tag_filter = TagFilter()
        self.index = TimelineIndex()
        self._source_path: str | None = None

    def load_feed(self, path: str | Path) -> None:
        """Load the feed at `path` and rebuild clusters with the current filter."""
        self.items = list(self._repo.load(path))
        self._source_path = str(path)
        self._rebuild()

    def set_items(self, items: list[Item]) -> None:
        self.items = list(items)
        self._rebuild()

    def set_filter_query(self, query: str | None) -> bool:
        """Apply a filter query string; return True if the filter changed."""
        tag_filter = parse_tag_filter(query)
        if tag_filter == self.tag_filter:
            return False
        self.tag_filter = tag_filter
        self._rebuild()
        return True

    @property
    def filter_query(self) -> str:
        return encode_tag_filter(self.tag_filter)

    def get_source_path(self) -> str | None:
        """Return the last-loaded feed path, if available."""
        return self._source_path

    def tag_counts(self) -> Counter[str]:
        """Occurrences of each tag across all loaded items (ignores the filter)."""
        counts: Counter[str] = Counter()
        for item in self.items:
            counts.update(item.tags)
        return counts

    @property
    def cluster_count(self) -> int:
        return self.index.cluster_count

    @property
    def visible_item_count(self) -> int:
        return len(self.index)

    def _rebuild(self) -> None:
        clusters = self._clusterer.cluster(self.items, self.tag_filter)
        self.index = TimelineIndex.build(clusters)
        logger.info(
            "Rebuilt timeline | items={} visible={} clusters={} filter={!r}",
            len(self.items),
            len(self.index),
            self.index.cluster_count,
            self.filter_query,
        )
