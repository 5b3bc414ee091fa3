from PIL import Image

from infrastructure.image_service import PLACEHOLDER_SIDE, ImageService, _fit_size, _LRUCache


class _Settings:
    def __init__(self, data):
        self._data = data

    def get(self, key, default=None):
        return self._data.get(key, default)


def _png(tmp_path, name="p.png", size=(400, 200)):
    path = tmp_path / name
    Image.new("RGB", size, (200, 10, 10)).save(path)
    return str(path)


def test_fit_size():
    assert _fit_size(400, 200, None, 100) == (200, 100)
    assert _fit_size(400, 200, 100, 100) == (100, 50)
    assert _fit_size(40, 20, 100, 100) == (40, 20)


def test_lru_eviction():
    cache = _LRUCache(2)
    cache.put("a", "A")
    cache.put("b", "B")
    assert cache.get("a") == "A"
    cache.put("c", "C")
    assert cache.get("b") is None
    assert len(cache) == 2


def test_thumbnail_is_height_bound(qapp, tmp_path):
    service = ImageService(_Settings({"images.mem_cache": 4}))
    img = service.get_thumbnail(_png(tmp_path), 50)
    assert (img.width(), img.height()) == (100, 50)


def test_preview_full_size_and_cached(qapp, tmp_path):
    service = ImageService()
    path = _png(tmp_path)
    first = service.get_preview(path, 0)
    assert (first.width(), first.height()) == (400, 200)
    assert service.get_preview(path, 0) is first


def test_unreadable_file_gives_placeholder(qapp, tmp_path):
    bad = tmp_path / "broken.jpg"
    bad.write_bytes(b"not an image")
    img = ImageService().get_thumbnail(str(bad), 80)
    assert img.width() == PLACEHOLDER_SIDE
