import pytest

from core.services.cluster_service import cluster_items
from core.services.selection_state import (
    NO_TRANSITION,
    SelectionState,
    TransitionKind,
    detect_transition,
)
from core.services.timeline_index import TimelineIndex


@pytest.fixture
def index(items_three_clusters):
    return TimelineIndex.build(cluster_items(items_three_clusters))


def test_initial_state(index):
    state = SelectionState.initial("b0.jpg")
    assert state.focused_cluster is None
    assert state.expanded_clusters(index) == {1}
    assert state.is_cluster_expanded(1, index)
    assert not state.is_cluster_expanded(0, index)
    assert state.pending_transition(index) == NO_TRANSITION


def test_selection_and_focus_expand_at_most_two(index):
    state = SelectionState.initial("a0.jpg").with_focus(2)
    assert state.expanded_clusters(index) == {0, 2}
    same = SelectionState.initial("a0.jpg").with_focus(0)
    assert same.expanded_clusters(index) == {0}


def test_selection_change_clears_focus_elsewhere(index):
    state = SelectionState.initial("a0.jpg").with_focus(2).settled()
    moved = state.with_selection("b0.jpg", index)
    assert moved.focused_cluster is None
    kept = state.with_selection("c1.jpg", index)
    assert kept.focused_cluster == 2


def test_selection_transition_classified(index):
    state = SelectionState.initial("a0.jpg").with_selection("c0.jpg", index)
    transition = state.pending_transition(index)
    assert transition.kind is TransitionKind.SELECTION
    assert (transition.cluster_old, transition.cluster_new) == (0, 2)
    assert [(f.index, f.expanding) for f in transition.flipped] == [(0, False), (2, True)]
    assert transition.is_compensable


def test_focus_transition_classified(index):
    state = SelectionState.initial("a0.jpg").with_focus(1).settled().with_focus(2)
    transition = state.pending_transition(index)
    assert transition.kind is TransitionKind.FOCUS
    assert (transition.cluster_old, transition.cluster_new) == (1, 2)
    assert [f.index for f in transition.flipped] == [1, 2]


def test_first_selection_is_not_compensable(index):
    transition = SelectionState.initial(None).with_selection("b0.jpg", index).pending_transition(
        index
    )
    assert transition.kind is TransitionKind.SELECTION
    assert transition.cluster_old is None
    assert transition.occurred
    assert not transition.is_compensable


def test_no_flip_no_transition(index):
    state = SelectionState.initial("a0.jpg").with_selection("a1.jpg", index)
    assert state.pending_transition(index) == NO_TRANSITION


def test_cancelling_changes_are_not_a_transition(index):
    old = SelectionState(selected_identity="a0.jpg", focused_cluster=2)
    new = SelectionState(selected_identity="c0.jpg", focused_cluster=0)
    assert detect_transition(old, new, index) == NO_TRANSITION


def test_settled_drops_history(index):
    state = SelectionState.initial("a0.jpg").with_selection("c0.jpg", index).settled()
    assert state.previous() == state
    assert state.pending_transition(index) == NO_TRANSITION


def test_unknown_selection_expands_nothing(index):
    state = SelectionState.initial("gone.jpg")
    assert state.expanded_clusters(index) == frozenset()
    assert not state.is_item_selected("gone.jpg", index)
    assert state.selected_cluster(index) is None


def test_stale_focus_out_of_range_ignored():
    empty = TimelineIndex.build([])
    assert SelectionState(focused_cluster=3).expanded_clusters(empty) == frozenset()
