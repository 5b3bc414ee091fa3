"""Selection/focus state and expand-predicate transition detection.

The state is an immutable snapshot. Every input produces a new snapshot that
remembers the one before it (single-step memory) until `settled()` is called
once the resulting layout change has been fully processed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from loguru import logger

from core.services.timeline_index import TimelineIndex


class TransitionKind(Enum):
    NONE = "none"
    SELECTION = "selection"
    FOCUS = "focus"


@dataclass(frozen=True)
class FlippedCluster:
    """A cluster whose expand predicate differs between two snapshots."""

    index: int
    was_expanded: bool
    is_expanded: bool

    @property
    def expanding(self) -> bool:
        return self.is_expanded and not self.was_expanded


@dataclass(frozen=True)
class Transition:
    """Classified change between two selection snapshots.

    Attributes:
        kind: What drove the change.
        cluster_old: Cluster tied to the previous selected-or-focused value.
        cluster_new: Cluster tied to the new selected-or-focused value.
        flipped: Clusters whose expand predicate flips, in index order.
    """

    kind: TransitionKind = TransitionKind.NONE
    cluster_old: int | None = None
    cluster_new: int | None = None
    flipped: tuple[FlippedCluster, ...] = ()

    @property
    def occurred(self) -> bool:
        return bool(self.flipped)

    @property
    def is_compensable(self) -> bool:
        return (
            self.kind is not TransitionKind.NONE
            and self.cluster_old is not None
            and self.cluster_new is not None
            and self.cluster_old != self.cluster_new
        )


NO_TRANSITION = Transition()


@dataclass(frozen=True)
class SelectionState:
    selected_identity: str | None = None
    focused_cluster: int | None = None
    previous_selected_identity: str | None = None
    previous_focused_cluster: int | None = None

    @classmethod
    def initial(cls, selected_identity: str | None) -> SelectionState:
        return cls(selected_identity, None, selected_identity, None)

    def previous(self) -> SelectionState:
        """The snapshot this one was derived from."""
        return SelectionState(
            self.previous_selected_identity,
            self.previous_focused_cluster,
            self.previous_selected_identity,
            self.previous_focused_cluster,
        )

    def settled(self) -> SelectionState:
        """Drop the one-step history once a transition has been processed."""
        return replace(
            self,
            previous_selected_identity=self.selected_identity,
            previous_focused_cluster=self.focused_cluster,
        )

    def with_selection(self, identity: str | None, index: TimelineIndex) -> SelectionState:
        """Apply an external selection change.

        Focus is cleared when it points at a cluster other than the newly
        selected one, so that selection and focus never expand two clusters
        because of the same input.
        """
        focused = self.focused_cluster
        if focused is not None and index.cluster_of(identity) != focused:
            focused = None
        return SelectionState(identity, focused, self.selected_identity, self.focused_cluster)

    def with_focus(self, cluster_index: int | None) -> SelectionState:
        """Apply a focus-in event on an item of `cluster_index`."""
        return SelectionState(
            self.selected_identity, cluster_index, self.selected_identity, self.focused_cluster
        )

    # predicates

    def selected_cluster(self, index: TimelineIndex) -> int | None:
        return index.cluster_of(self.selected_identity)

    def is_selected(self, cluster_index: int, index: TimelineIndex) -> bool:
        return self.selected_cluster(index) == cluster_index

    def is_focused(self, cluster_index: int) -> bool:
        return self.focused_cluster == cluster_index

    def is_cluster_expanded(self, cluster_index: int, index: TimelineIndex) -> bool:
        return self.is_selected(cluster_index, index) or self.is_focused(cluster_index)

    def expanded_clusters(self, index: TimelineIndex) -> frozenset[int]:
        """Indices of all expanded clusters (at most two)."""
        result = set()
        selected = self.selected_cluster(index)
        if selected is not None:
            result.add(selected)
        if self.focused_cluster is not None and 0 <= self.focused_cluster < index.cluster_count:
            result.add(self.focused_cluster)
        return frozenset(result)

    def is_item_selected(self, identity: str, index: TimelineIndex) -> bool:
        return identity == self.selected_identity and identity in index

    def pending_transition(self, index: TimelineIndex) -> Transition:
        """Transition from `previous()` to this snapshot."""
        return detect_transition(self.previous(), self, index)


def detect_transition(
    old: SelectionState, new: SelectionState, index: TimelineIndex
) -> Transition:
    """Classify the change from `old` to `new` over the clusters of `index`."""
    was = old.expanded_clusters(index)
    now = new.expanded_clusters(index)
    flipped = tuple(
        FlippedCluster(i, i in was, i in now) for i in sorted(was.symmetric_difference(now))
    )

    selected_old = old.selected_cluster(index)
    selected_new = new.selected_cluster(index)
    selection_changed = selected_old != selected_new
    focus_changed = old.focused_cluster != new.focused_cluster

    if not flipped:
        if selection_changed and focus_changed:
            logger.info(
                "Selection/focus changes cancel out "
                "(selected {}->{}, focused {}->{}); no transition",
                selected_old,
                selected_new,
                old.focused_cluster,
                new.focused_cluster,
            )
        return NO_TRANSITION

    if selection_changed:
        transition = Transition(TransitionKind.SELECTION, selected_old, selected_new, flipped)
    elif focus_changed:
        transition = Transition(
            TransitionKind.FOCUS, old.focused_cluster, new.focused_cluster, flipped
        )
    else:
        logger.warning("Unclassifiable expand transition: flipped={}", flipped)
        transition = Transition(TransitionKind.NONE, None, None, flipped)

    logger.debug(
        "Transition {}: cluster {} -> {} flipped={}",
        transition.kind.value,
        transition.cluster_old,
        transition.cluster_new,
        [f.index for f in flipped],
    )
    return transition
