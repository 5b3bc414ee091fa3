import pytest

from core.services.cluster_service import cluster_items
from core.services.interfaces import IExtentMeasurer, IScrollPort
from core.services.scroll_compensation import ScrollCompensator, should_compensate
from core.services.selection_state import NO_TRANSITION, SelectionState, Transition, TransitionKind
from core.services.timeline_index import TimelineIndex


class FakeMeasurer(IExtentMeasurer):
    def __init__(self, sizes):
        self.sizes = dict(sizes)
        self.calls = []

    def measure_cluster(self, cluster_index):
        self.calls.append(cluster_index)
        return self.sizes.get(cluster_index)


class FakeScroller(IScrollPort):
    def __init__(self):
        self.deltas = []

    def scroll_by(self, delta):
        self.deltas.append(delta)


@pytest.fixture
def index(items_three_clusters):
    return TimelineIndex.build(cluster_items(items_three_clusters))


def _select_right_of_focus(index):
    # Selected in cluster 1, cluster 0 expanded by focus; then select into cluster 2
    state = SelectionState.initial("b0.jpg").with_focus(0).settled()
    return state.with_selection("c0.jpg", index).pending_transition(index)


def test_collapsing_left_cluster_scrolls_back_by_shrinkage(index):
    transition = _select_right_of_focus(index)
    assert transition.kind is TransitionKind.SELECTION
    assert should_compensate(transition, 0, True, False)

    measurer = FakeMeasurer({0: 200.0, 1: 150.0, 2: 30.0})
    scroller = FakeScroller()
    compensator = ScrollCompensator(measurer, scroller)

    pending = compensator.begin_transition(transition)
    assert compensator.has_pending
    assert [c.cluster_index for c in pending.captured] == [0, 1]

    # layout commit
    measurer.sizes.update({0: 80.0, 1: 150.0, 2: 400.0})

    delta = compensator.commit_transition(pending)
    assert delta == -120.0
    assert scroller.deltas == [-120.0]
    assert not compensator.has_pending


@pytest.mark.parametrize(
    "old_cluster,new_cluster,old_expanded,new_expanded,expected",
    [
        (2, 0, False, True, True),  # expanding, new anchor on the left
        (0, 2, False, True, False),  # expanding, new anchor on the right
        (0, 2, True, False, True),  # collapsing, new anchor on the right
        (2, 0, True, False, False),  # collapsing, new anchor on the left
        (1, 1, False, True, False),  # anchor did not move
    ],
)
def test_decision_table(old_cluster, new_cluster, old_expanded, new_expanded, expected):
    transition = Transition(TransitionKind.FOCUS, old_cluster, new_cluster, ())
    assert should_compensate(transition, 1, old_expanded, new_expanded) is expected


def test_unclassifiable_or_anchorless_never_compensates():
    assert not should_compensate(Transition(TransitionKind.NONE, 0, 2, ()), 0, True, False)
    assert not should_compensate(Transition(TransitionKind.SELECTION, None, 2, ()), 0, True, False)
    assert not should_compensate(NO_TRANSITION, 0, False, True)
    # no flip at all
    assert not should_compensate(Transition(TransitionKind.FOCUS, 0, 2, ()), 0, True, True)


def test_nothing_to_compensate_does_not_scroll(index):
    state = SelectionState.initial("a0.jpg").with_selection("c0.jpg", index)
    transition = state.pending_transition(index)
    measurer = FakeMeasurer({0: 100.0, 2: 10.0})
    scroller = FakeScroller()
    compensator = ScrollCompensator(measurer, scroller)

    # cluster 0 collapses with the new anchor on the right: measured
    pending = compensator.begin_transition(transition)
    measurer.sizes[0] = 100.0
    assert compensator.commit_transition(pending) == 0.0
    assert scroller.deltas == []


def test_unmeasurable_cluster_skipped(index):
    transition = _select_right_of_focus(index)
    compensator = ScrollCompensator(FakeMeasurer({}), FakeScroller())
    pending = compensator.begin_transition(transition)
    assert pending.is_empty
    assert compensator.commit_transition(pending) == 0.0


def test_protocol_misuse_raises(index):
    transition = _select_right_of_focus(index)
    compensator = ScrollCompensator(FakeMeasurer({0: 1.0}), FakeScroller())
    pending = compensator.begin_transition(transition)
    with pytest.raises(RuntimeError):
        compensator.begin_transition(transition)
    compensator.abort()
    assert not compensator.has_pending
    with pytest.raises(RuntimeError):
        compensator.commit_transition(pending)


def test_both_collapsing_clusters_sum_into_one_scroll(index):
    # Cluster 0 loses focus and cluster 1 loses the selection in the same step
    transition = _select_right_of_focus(index)
    measurer = FakeMeasurer({0: 200.0, 1: 150.0})
    scroller = FakeScroller()
    compensator = ScrollCompensator(measurer, scroller)

    pending = compensator.begin_transition(transition)
    measurer.sizes.update({0: 80.0, 1: 40.0})

    assert compensator.commit_transition(pending) == -230.0
    assert scroller.deltas == [-230.0]
