import json

import pytest

from infrastructure.settings import JsonSettings


def _write(tmp_path, data):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_dotted_access(tmp_path):
    s = JsonSettings(_write(tmp_path, {"timeline": {"thumb_height": 120, "smooth_scroll": False}}))
    assert s.get("timeline.thumb_height") == 120
    assert s.get("timeline.missing", 7) == 7
    assert s.get("timeline.thumb_height.deeper") is None
    assert s.get_int("timeline.thumb_height", 160) == 120
    assert s.get_int("timeline.other", 160) == 160
    assert s.get_bool("timeline.smooth_scroll", True) is False


def test_typed_getters_reject_bad_values(tmp_path):
    s = JsonSettings(_write(tmp_path, {"a": "tall", "b": True, "c": "yes"}))
    with pytest.raises(ValueError):
        s.get_int("a", 1)
    with pytest.raises(ValueError):
        s.get_int("b", 1)
    with pytest.raises(ValueError):
        s.get_bool("c", False)


def test_resolve_path_relative_to_file(tmp_path):
    data = {"feed": {"path": "samples/meta.txt"}, "media": {"root": ""}}
    s = JsonSettings(_write(tmp_path, data))
    assert s.resolve_path("feed.path") == tmp_path / "samples" / "meta.txt"
    assert s.resolve_path("media.root") is None


def test_missing_or_invalid_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonSettings(tmp_path / "nope.json")
    with pytest.raises(ValueError):
        JsonSettings(_write(tmp_path, [1, 2]))
