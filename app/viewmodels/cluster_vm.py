from __future__ import annotations

from dataclasses import dataclass, field

from app.viewmodels.item_vm import ItemVM
from core.models import Cluster
from infrastructure.utils import format_cluster_label


@dataclass
class ClusterVM:
    index: int
    cluster: Cluster
    items: list[ItemVM] = field(default_factory=list)
    is_expanded: bool = False

    @classmethod
    def from_cluster(cls, index: int, cluster: Cluster) -> ClusterVM:
        items = [ItemVM(item, j) for j, item in enumerate(cluster.items)]
        return cls(index=index, cluster=cluster, items=items)

    @property
    def label(self) -> str:
        items = self.cluster.items
        return format_cluster_label(items[0].timestamp, items[-1].timestamp, len(items))

    def tile_widths(self, thumb_height: int, collapsed_slice: int, collapsed_max: int) -> list[int]:
        """Pixel width of each item tile for the current expand state.

        Expanded tiles follow the item's aspect ratio at `thumb_height`.
        Collapsed tiles are thin slices whose total stays within `collapsed_max`.
        """
        n = len(self.items)
        if self.is_expanded:
            return [max(1, round(thumb_height * vm.item.aspect_ratio)) for vm in self.items]
        slice_px = collapsed_slice
        if n * slice_px > collapsed_max:
            slice_px = max(1, collapsed_max // n)
        return [slice_px] * n
