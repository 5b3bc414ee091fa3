"""Scroll compensation around expand/collapse layout changes.

When a cluster on the near side of the anchor changes width, everything after
it shifts. The compensator measures the affected clusters before the layout
commits, measures again afterwards and scrolls by the difference so that the
anchor stays still on screen. The protocol is strictly
``begin_transition`` -> layout commit -> ``commit_transition`` with nothing
interleaved.
"""

from __future__ import annotations

from loguru import logger

from core.services.interfaces import (
    CapturedExtent,
    IExtentMeasurer,
    IScrollPort,
    PendingCompensation,
)
from core.services.selection_state import Transition


def should_compensate(
    transition: Transition, cluster_index: int, old_expanded: bool, new_expanded: bool
) -> bool:
    """Decide whether the flip of `cluster_index` displaces the anchor.

    Compensates only when the cluster grows while the new anchor lies to the
    left of the old one, or shrinks while the new anchor lies to the right.
    Unclassifiable transitions and transitions without both an old and a new
    anchor are never compensated.
    """
    if old_expanded == new_expanded or not transition.is_compensable:
        return False
    new_is_left = transition.cluster_new < transition.cluster_old  # type: ignore[operator]
    expanding = new_expanded and not old_expanded
    if expanding:
        return new_is_left
    return not new_is_left


class ScrollCompensator:
    """Two-phase measure/commit/measure scroll corrector."""

    def __init__(self, measurer: IExtentMeasurer, scroller: IScrollPort) -> None:
        self._measurer = measurer
        self._scroller = scroller
        self._pending: PendingCompensation | None = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def should_compensate(
        self, transition: Transition, cluster_index: int, old_expanded: bool, new_expanded: bool
    ) -> bool:
        return should_compensate(transition, cluster_index, old_expanded, new_expanded)

    def begin_transition(self, transition: Transition) -> PendingCompensation:
        """Capture pre-commit extents of every cluster needing compensation.

        Must be called before the expand flags of `transition` reach the
        layout. Raises RuntimeError if a previous capture was never committed.
        """
        if self._pending is not None:
            raise RuntimeError("begin_transition called while a compensation is pending")

        pending = PendingCompensation(transition)
        for flip in transition.flipped:
            if not self.should_compensate(
                transition, flip.index, flip.was_expanded, flip.is_expanded
            ):
                continue
            size = self._measurer.measure_cluster(flip.index)
            if size is None:
                logger.debug("Cluster {} not measurable before commit; skipped", flip.index)
                continue
            pending.captured.append(CapturedExtent(flip.index, size))

        logger.debug(
            "begin_transition {} old={} new={} captured={}",
            transition.kind.value,
            transition.cluster_old,
            transition.cluster_new,
            [(c.cluster_index, c.pre_size) for c in pending.captured],
        )
        self._pending = pending
        return pending

    def commit_transition(self, pending: PendingCompensation) -> float:
        """Measure again after the layout commit and apply one corrective scroll.

        Returns the applied delta (0.0 when nothing was compensated).
        """
        if pending is not self._pending:
            raise RuntimeError("commit_transition called with a capture that is not pending")
        self._pending = None

        delta = 0.0
        for captured in pending.captured:
            post = self._measurer.measure_cluster(captured.cluster_index)
            if post is None:
                continue
            logger.debug(
                "Cluster {} was {} now {} delta {}",
                captured.cluster_index,
                captured.pre_size,
                post,
                post - captured.pre_size,
            )
            delta += post - captured.pre_size

        if delta:
            self._scroller.scroll_by(delta)
        return delta

    def abort(self) -> None:
        """Discard a pending capture (e.g. the layout was torn down)."""
        self._pending = None
