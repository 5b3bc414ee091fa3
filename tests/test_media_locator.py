from infrastructure.media_locator import MediaLocator, is_video
from infrastructure.utils import format_cluster_label, format_timestamp


def test_thumbnail_prefers_prerendered(tmp_path):
    (tmp_path / "i" / "2022").mkdir(parents=True)
    (tmp_path / "i" / "2022" / "a.jpg.png").write_bytes(b"")
    locator = MediaLocator(tmp_path)
    assert locator.thumbnail_path("2022/a.jpg") == tmp_path / "i" / "2022" / "a.jpg.png"
    assert locator.thumbnail_path("2022/b.jpg") == tmp_path / "2022" / "b.jpg"
    assert MediaLocator(tmp_path, "").thumbnail_path("2022/a.jpg") == tmp_path / "2022" / "a.jpg"


def test_is_video():
    assert is_video("x/clip.MOV")
    assert is_video("clip.mp4")
    assert not is_video("photo.jpg")


def test_labels_never_raise():
    assert format_timestamp(10**20) == ""
    assert format_cluster_label(10**20, 10**20, 3) == "(3)"
    assert format_cluster_label(0, 0, 1).endswith("(1)")
