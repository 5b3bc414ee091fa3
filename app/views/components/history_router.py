"""HistoryRouter: in-memory owner of the current selection/filter location.

Stands in for a URL router. The timeline only reads the location and asks
for navigation; back/forward semantics live here.
"""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal
from loguru import logger


@dataclass(frozen=True)
class Location:
    identity: str | None = None
    query: str = ""


class HistoryRouter(QObject):
    """Back/forward location stack with a change signal."""

    locationChanged = Signal(object, str)  # identity (str | None), filter query

    def __init__(self, initial: Location | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._current = initial or Location()
        self._back: list[Location] = []
        self._forward: list[Location] = []

    @property
    def location(self) -> Location:
        return self._current

    @property
    def identity(self) -> str | None:
        return self._current.identity

    @property
    def query(self) -> str:
        return self._current.query

    def can_go_back(self) -> bool:
        return bool(self._back)

    def can_go_forward(self) -> bool:
        return bool(self._forward)

    def push(self, identity: str) -> None:
        """Navigate to `identity`, keeping the current filter."""
        self._navigate(Location(identity, self._current.query))

    def set_filter(self, query: str) -> None:
        """Navigate to the same identity under a different filter query."""
        self._navigate(Location(self._current.identity, query))

    def replace(self, location: Location) -> None:
        """Change the location without recording history (e.g. on load)."""
        self._current = location
        self._emit()

    def back(self) -> bool:
        if not self._back:
            return False
        self._forward.append(self._current)
        self._current = self._back.pop()
        self._emit()
        return True

    def forward(self) -> bool:
        if not self._forward:
            return False
        self._back.append(self._current)
        self._current = self._forward.pop()
        self._emit()
        return True

    def _navigate(self, location: Location) -> None:
        if location == self._current:
            return
        self._back.append(self._current)
        self._forward.clear()
        self._current = location
        self._emit()

    def _emit(self) -> None:
        logger.debug("Location -> {} ?{}", self._current.identity, self._current.query)
        self.locationChanged.emit(self._current.identity, self._current.query)

