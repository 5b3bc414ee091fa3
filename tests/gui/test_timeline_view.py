from PySide6.QtCore import Qt
from PySide6.QtTest import QTest
import pytest

from app.viewmodels.timeline_vm import TimelineVM
from app.views.timeline_view import TimelineView
from core.models import Item
from core.services.cluster_service import cluster_items
from core.services.navigator import WheelModifiers
from core.services.timeline_index import TimelineIndex

HOUR = 3_600_000


def _index(clusters=4, per_cluster=5):
    items = []
    for c in range(clusters):
        for j in range(per_cluster):
            seq = len(items)
            items.append(Item(seq, c * 2 * HOUR + j * 1000, f"c{c}_{j}.jpg", 4, 3))
    return TimelineIndex.build(cluster_items(items))


@pytest.fixture
def view(qapp):
    widget = TimelineView(TimelineVM(), thumb_height=60, smooth_scroll=False)
    widget.resize(300, 120)
    widget.show()
    qapp.processEvents()
    yield widget
    widget.close()
    widget.deleteLater()
    qapp.processEvents()


def _record(signal):
    seen = []
    signal.connect(seen.append)
    return seen


def _cluster_width(view, i):
    return view.cluster_widget(i).width()


def test_select_expands_cluster(view):
    view.set_index(_index())
    view.select("c1_2.jpg")
    assert view.vm.expanded_clusters() == {1}
    assert _cluster_width(view, 1) > _cluster_width(view, 0)
    assert view.tile("c1_2.jpg").property("selected") is True


def test_compensation_delta_equals_width_change(view):
    view.set_index(_index())
    view.select("c0_0.jpg")
    bar = view.horizontalScrollBar()
    bar.setValue(bar.maximum() // 2)
    before = _cluster_width(view, 0)

    delta = view.select("c3_0.jpg")

    after = _cluster_width(view, 0)
    assert after < before
    assert delta == pytest.approx(after - before)


def test_step_emits_navigation_request(view):
    view.set_index(_index())
    view.select("c0_4.jpg")
    seen = _record(view.navigateRequested)
    assert view.step(1) == "c1_0.jpg"
    assert seen == ["c1_0.jpg"]


def test_step_past_end_is_noop(view):
    view.set_index(_index())
    view.select("c3_4.jpg")
    seen = _record(view.navigateRequested)
    assert view.step(1) is None
    assert seen == []


def test_wheel_with_modifier_falls_through(view):
    view.set_index(_index())
    view.select("c0_0.jpg")
    seen = _record(view.navigateRequested)
    assert view.handle_wheel(120, WheelModifiers(shift=True)) is False
    assert view.handle_wheel(120, WheelModifiers()) is True
    assert seen == ["c0_1.jpg"]


def test_click_requests_navigation(view, qapp):
    view.set_index(_index())
    tile = view.tile("c2_0.jpg")
    view.ensureWidgetVisible(tile)
    qapp.processEvents()
    seen = _record(view.navigateRequested)
    QTest.mouseClick(tile, Qt.LeftButton)
    assert seen == ["c2_0.jpg"]


def test_rebuild_keeps_selection(view):
    index = _index()
    view.set_index(index)
    view.select("c2_1.jpg")
    smaller = TimelineIndex.build(index.clusters[2:])
    view.set_index(smaller)
    assert view.vm.selected_identity == "c2_1.jpg"
    assert view.vm.expanded_clusters() == {0}
    assert view.cluster_widget(2) is None


def test_empty_index(view):
    view.set_index(TimelineIndex())
    assert view.select("anything.jpg") == 0.0
    assert view.step(1) is None


def test_focus_in_compensates_with_a_single_scroll(view, qapp):
    view.set_index(_index())
    view.select("c2_0.jpg")
    # Anchor the focus in the selected cluster, as a Tab focus-in would
    view.tile("c2_0.jpg").focused.emit("c2_0.jpg")
    qapp.processEvents()

    tile = view.tile("c0_4.jpg")
    view.ensureWidgetVisible(tile, 0, 0)
    qapp.processEvents()
    bar = view.horizontalScrollBar()
    start = bar.value()
    before = _cluster_width(view, 0)
    values = _record(bar.valueChanged)

    tile.focused.emit("c0_4.jpg")
    qapp.processEvents()

    after = _cluster_width(view, 0)
    assert view.vm.expanded_clusters() == {0, 2}
    assert after > before
    assert values == [start + (after - before)]
