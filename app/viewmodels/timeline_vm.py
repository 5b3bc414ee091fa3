"""ViewModel for the timeline strip: selection, focus, navigation, centering.

Toolkit-free. The view feeds it input events and asks it which clusters are
expanded; it answers with `Transition` objects that the view turns into a
measured layout change.
"""

from __future__ import annotations

from loguru import logger

from app.viewmodels.cluster_vm import ClusterVM
from core.services.navigator import Navigator, WheelModifiers
from core.services.selection_state import NO_TRANSITION, SelectionState, Transition
from core.services.timeline_index import TimelineIndex


class TimelineVM:
    def __init__(self, index: TimelineIndex | None = None, selected: str | None = None) -> None:
        self._index = index or TimelineIndex()
        self._state = SelectionState.initial(selected)
        self._navigator = Navigator(self._index)
        self._center_ticket = 0
        self._center_target: str | None = None

    @property
    def index(self) -> TimelineIndex:
        return self._index

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected_identity(self) -> str | None:
        return self._state.selected_identity

    def reset(self, index: TimelineIndex) -> None:
        """Swap in a rebuilt index.

        The selected identity survives; focus does not, because cluster
        indices of the old index mean nothing in the new one.
        """
        self._index = index
        self._navigator = Navigator(index)
        self._state = SelectionState.initial(self._state.selected_identity)
        self._center_target = None
        if self._state.selected_identity is not None and self._state.selected_identity not in index:
            logger.info("Selected item {} not in current clusters", self._state.selected_identity)

    def cluster_vms(self) -> list[ClusterVM]:
        """Build cluster view models with expand/selected flags applied."""
        result = []
        for i, cluster in enumerate(self._index.clusters):
            vm = ClusterVM.from_cluster(i, cluster)
            vm.is_expanded = self.is_cluster_expanded(i)
            for item_vm in vm.items:
                item_vm.is_selected = self.is_item_selected(item_vm.identity)
            result.append(vm)
        return result

    # input events

    def select(self, identity: str | None) -> Transition:
        """External selection change; returns the transition to lay out."""
        if identity == self._state.selected_identity:
            return NO_TRANSITION
        self._state = self._state.with_selection(identity, self._index)
        return self._state.pending_transition(self._index)

    def focus_in(self, identity: str) -> Transition:
        """Input focus entered the tile of `identity`."""
        cluster_index = self._index.cluster_of(identity)
        if cluster_index is None or cluster_index == self._state.focused_cluster:
            return NO_TRANSITION
        self._state = self._state.with_focus(cluster_index)
        return self._state.pending_transition(self._index)

    def settle(self) -> None:
        """Forget the previous snapshot once its transition is fully laid out."""
        self._state = self._state.settled()

    # predicates

    def is_cluster_expanded(self, cluster_index: int) -> bool:
        return self._state.is_cluster_expanded(cluster_index, self._index)

    def expanded_clusters(self) -> frozenset[int]:
        return self._state.expanded_clusters(self._index)

    def is_item_selected(self, identity: str) -> bool:
        return self._state.is_item_selected(identity, self._index)

    def selected_cluster(self) -> int | None:
        return self._state.selected_cluster(self._index)

    # navigation

    def step(self, delta: int) -> str | None:
        return self._navigator.step(self._state.selected_identity, delta)

    def wheel(self, delta: float, modifiers: WheelModifiers | None = None) -> str | None:
        return self._navigator.wheel(self._state.selected_identity, delta, modifiers)

    # centering

    def request_center(self, identity: str) -> int:
        """Queue centering on `identity`; a newer request supersedes this one."""
        self._center_ticket += 1
        self._center_target = identity
        return self._center_ticket

    def claim_center(self, ticket: int) -> str | None:
        """Identity to center for `ticket`, or None if it was superseded."""
        if ticket != self._center_ticket or self._center_target is None:
            return None
        target = self._center_target
        self._center_target = None
        if target not in self._index:
            return None
        return target
