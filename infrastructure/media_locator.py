"""Resolve item identities to files on disk.

Full-size media lives at ``<root>/<identity>``; pre-rendered thumbnails, when
present, at ``<root>/<thumbnail_dir>/<identity>.png``.
"""

from __future__ import annotations

from pathlib import Path
import re

VIDEO_PATTERN = re.compile(r"[.](mov|mp4)$", re.IGNORECASE)


def is_video(identity: str) -> bool:
    return bool(VIDEO_PATTERN.search(identity))


class MediaLocator:
    def __init__(self, root: str | Path, thumbnail_dir: str = "i") -> None:
        self._root = Path(root)
        self._thumb_dir = thumbnail_dir

    @property
    def root(self) -> Path:
        return self._root

    def full_path(self, identity: str) -> Path:
        return self._root / identity

    def thumbnail_path(self, identity: str) -> Path:
        """Pre-rendered thumbnail if it exists, otherwise the full-size file."""
        if self._thumb_dir:
            candidate = self._root / self._thumb_dir / f"{identity}.png"
            if candidate.exists():
                return candidate
        return self.full_path(identity)
