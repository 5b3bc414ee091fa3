"""Image loading, thumbnailing, and caching utilities.

Qt-based decoding with a Pillow fallback for formats Qt cannot read, and a
small in-memory LRU cache keyed by path, mtime and requested size.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import hashlib
import os
from typing import Any

from PIL import Image, ImageOps
from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QImage, QImageReader
from loguru import logger

PLACEHOLDER_SIDE = 64


def _compute_cache_key(path: str, size_key: int, mode: str) -> str:
    """Compute a stable cache key from path, mtime, size, and requested bound."""
    try:
        st = os.stat(path)
        sig = f"{path}|{int(st.st_mtime_ns)}|{int(st.st_size)}|{mode}{int(size_key)}"
    except OSError:
        sig = f"{path}|0|0|{mode}{int(size_key)}"
    return hashlib.sha1(sig.encode("utf-8", errors="ignore")).hexdigest()


def _fit_size(w: int, h: int, max_w: int | None, max_h: int | None) -> tuple[int, int]:
    """Scale (w, h) down to fit the given bounds, keeping aspect ratio."""
    scale = 1.0
    if max_w and w > max_w:
        scale = min(scale, max_w / w)
    if max_h and h > max_h:
        scale = min(scale, max_h / h)
    return max(1, int(w * scale)), max(1, int(h * scale))


@dataclass
class _MemCacheItem:
    key: str
    image: QImage


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> QImage | None:
        """Return cached QImage for key, moving it to the MRU position."""
        item = self._data.get(key)
        if not item:
            return None
        self._data.move_to_end(key)
        return item.image

    def put(self, key: str, image: QImage) -> None:
        """Insert or update `key` with `image`, evicting LRU when over capacity."""
        self._data[key] = _MemCacheItem(key, image)
        self._data.move_to_end(key)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)


class ImageService:
    """Decodes thumbnails (height-bound) and previews (side-bound) with caching."""

    def __init__(self, settings: object | None = None) -> None:
        """Initialize the memory cache from `images.mem_cache` in settings."""
        self._mem_cap = 512
        if settings is not None:
            try:
                self._mem_cap = int(settings.get("images.mem_cache", 512) or 512)
            except (ValueError, TypeError):
                self._mem_cap = 512
        self._mem_cache = _LRUCache(self._mem_cap)

    # Public API
    def get_thumbnail(self, path: str, height: int) -> Any:
        """Return an image for `path` scaled to at most `height` pixels tall."""
        return self._get_image(path, None, height, "h")

    def get_preview(self, path: str, max_side: int) -> Any:
        """Return preview image for `path` bounded by `max_side` (0 = full size)."""
        bound = max_side if max_side and max_side > 0 else None
        return self._get_image(path, bound, bound, "s")

    # Internal helpers
    def _get_image(self, path: str, max_w: int | None, max_h: int | None, mode: str) -> QImage:
        key = _compute_cache_key(path, max_h or 0, mode)
        img = self._mem_cache.get(key)
        if img is not None and not img.isNull():
            return img

        img = self._load_via_qt(path, max_w, max_h)
        if img is None or img.isNull():
            img = self._load_via_pillow(path, max_w, max_h)
        if img is None or img.isNull():
            logger.debug("No decoder could read {}; using placeholder", path)
            img = QImage(PLACEHOLDER_SIDE, PLACEHOLDER_SIDE, QImage.Format_ARGB32)
            img.fill(QColor(220, 220, 220))

        self._mem_cache.put(key, img)
        return img

    def _load_via_qt(self, path: str, max_w: int | None, max_h: int | None) -> QImage | None:
        try:
            reader = QImageReader(path)
            reader.setAutoTransform(True)
            size = reader.size()
            if size.isValid() and size.width() > 0 and size.height() > 0:
                nw, nh = _fit_size(size.width(), size.height(), max_w, max_h)
                reader.setScaledSize(QSize(nw, nh))
            img = reader.read()
            if img is None or img.isNull():
                logger.debug("QImageReader failed for {}: {}", path, reader.errorString())
                return None
            if max_h and img.height() > max_h:
                img = img.scaledToHeight(max_h, Qt.SmoothTransformation)
            return img
        except (OSError, ValueError) as ex:
            logger.debug("QImageReader failed for {}: {}", path, ex)
            return None

    def _load_via_pillow(self, path: str, max_w: int | None, max_h: int | None) -> QImage | None:
        try:
            with Image.open(path) as im:
                try:
                    im = ImageOps.exif_transpose(im)
                except (OSError, ValueError, AttributeError):
                    pass
                nw, nh = _fit_size(im.width, im.height, max_w, max_h)
                if (nw, nh) != (im.width, im.height):
                    im = im.resize((nw, nh), Image.Resampling.LANCZOS)
                return self._pil_to_qimage(im)
        except (OSError, ValueError) as ex:
            logger.debug("Pillow load failed for {}: {}", path, ex)
            return None

    def _pil_to_qimage(self, pil_img: Any) -> QImage | None:
        """Convert a Pillow image to `QImage` and detach from the source buffer."""
        try:
            if pil_img.mode != "RGBA":
                pil_img = pil_img.convert("RGBA")
            data = pil_img.tobytes("raw", "RGBA")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format_RGBA8888
            )
            if qimg.isNull():
                return None
            return qimg.copy()
        except (ValueError, TypeError) as ex:
            logger.debug("PIL->QImage convert failed: {}", ex)
            return None
