"""Lightweight view model wrapper around `Item`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from core.models import Item
from infrastructure.media_locator import is_video
from infrastructure.utils import format_timestamp


@dataclass
class ItemVM:
    """Expose convenient properties for bindings/templates."""

    item: Item
    index_in_cluster: int
    is_selected: bool = False

    @property
    def identity(self) -> str:
        return self.item.identity

    @property
    def file_name(self) -> str:
        """Base name of the identity path."""
        return PurePosixPath(self.item.identity).name

    @property
    def is_video(self) -> bool:
        return is_video(self.item.identity)

    @property
    def tooltip(self) -> str:
        """File name, capture time and tags for hover text."""
        parts = [self.file_name, format_timestamp(self.item.timestamp)]
        if self.item.tags:
            parts.append(" ".join(sorted(self.item.tags)))
        return "\n".join(p for p in parts if p)
