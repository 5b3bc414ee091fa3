"""LayoutManager: Manages main window layout and splitter behavior."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QMainWindow, QSplitter, QVBoxLayout, QWidget
from loguru import logger


class LayoutManager:
    """Manages main window layout and splitter behavior.

    The window is a vertical splitter: display pane on top, timeline strip
    below it.
    """

    # Layout constants
    DISPLAY_STRETCH_FACTOR = 8
    TIMELINE_STRETCH_FACTOR = 2
    WINDOW_SIZE_RATIO = 0.6

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to manage layout for
        """
        self.window = main_window
        self.splitter: QSplitter | None = None

    def setup_main_layout(self, display_widget: QWidget, timeline_widget: QWidget) -> QWidget:
        """Create the main vertical splitter layout.

        Args:
            display_widget: Widget showing the selected item
            timeline_widget: The horizontal timeline strip

        Returns:
            Central widget configured with the layout
        """
        central = QWidget(self.window)
        root = QVBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)

        self.splitter = QSplitter(Qt.Vertical)
        self.splitter.addWidget(display_widget)
        self.splitter.addWidget(timeline_widget)
        self.splitter.setStretchFactor(0, self.DISPLAY_STRETCH_FACTOR)
        self.splitter.setStretchFactor(1, self.TIMELINE_STRETCH_FACTOR)
        self.splitter.setCollapsible(1, False)

        root.addWidget(self.splitter)
        return central

    def connect_splitter_signals(self, display_refit_callback: Callable[[], None]) -> None:
        """Refit the display whenever the splitter handle moves."""
        if self.splitter:
            self.splitter.splitterMoved.connect(lambda *_: display_refit_callback())

    def setup_initial_window_size(self) -> None:
        """Setup initial window size based on screen dimensions."""
        screen = QApplication.primaryScreen()
        if screen is None:
            logger.debug("No primary screen; keeping default window size")
            return
        rect = screen.availableGeometry()
        width = int(rect.width() * self.WINDOW_SIZE_RATIO)
        height = int(rect.height() * self.WINDOW_SIZE_RATIO)
        self.window.resize(width, height)

    def get_splitter(self) -> QSplitter | None:
        return self.splitter
