"""Core domain models for timeline items, clusters and tag filters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Item:
    """A single photo/video record from the metadata feed.

    `identity` is the join key used by every lookup (a relative file path).
    """

    sequence_index: int
    timestamp: int  # epoch millis
    identity: str
    width: int
    height: int
    tags: frozenset[str] = frozenset()

    @property
    def aspect_ratio(self) -> float:
        """Width over height, 1.0 when the dimensions are unknown."""
        if self.width <= 0 or self.height <= 0:
            return 1.0
        return self.width / self.height


@dataclass(frozen=True)
class Cluster:
    """A run of chronologically adjacent items.

    `timestamp` is the timestamp of the first item.
    """

    timestamp: int
    items: tuple[Item, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class TagFilter:
    """Required/excluded tag sets parsed from a filter query."""

    required: frozenset[str] = frozenset()
    excluded: frozenset[str] = frozenset()

    @classmethod
    def from_terms(cls, terms: Iterable[str]) -> TagFilter:
        """Build a filter from words like ``["cat", "-dog"]``."""
        required: set[str] = set()
        excluded: set[str] = set()
        for term in terms:
            term = term.strip()
            if term.startswith("-"):
                if term[1:]:
                    excluded.add(term[1:])
            elif term:
                required.add(term)
        return cls(frozenset(required), frozenset(excluded))

    @property
    def is_empty(self) -> bool:
        return not self.required and not self.excluded

    def matches(self, tags: Iterable[str]) -> bool:
        """True iff `tags` holds every required tag and no excluded tag."""
        present = tags if isinstance(tags, (set, frozenset)) else frozenset(tags)
        return self.required <= present and not (self.excluded & present)
