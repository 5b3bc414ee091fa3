"""Core service interfaces and shared data structures.

The compensation and navigation services talk to the rendering layer only
through the small interfaces below, so they can be driven by any toolkit (or
by fakes in tests).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.services.selection_state import Transition


@dataclass(frozen=True)
class CapturedExtent:
    """Pre-commit measurement of one cluster.

    Attributes:
        cluster_index: Index of the measured cluster.
        pre_size: Rendered extent along the scroll axis before the commit.
    """

    cluster_index: int
    pre_size: float


@dataclass
class PendingCompensation:
    """Captured metrics for a transition awaiting its layout commit.

    Attributes:
        transition: The transition being processed.
        captured: One entry per cluster that needs compensation.
    """

    transition: Transition
    captured: list[CapturedExtent] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.captured


class IExtentMeasurer:
    """Interface for reading the real rendered extent of a cluster."""

    def measure_cluster(self, cluster_index: int) -> float | None:
        """Return the on-screen extent of the cluster, None if not rendered."""
        raise NotImplementedError


class IScrollPort:
    """Interface for the single viewport scroll-position register."""

    def scroll_by(self, delta: float) -> None:
        """Shift the viewport along the scroll axis by `delta`."""
        raise NotImplementedError
