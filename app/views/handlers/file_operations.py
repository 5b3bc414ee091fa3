"""FileOperationsHandler: Handles opening metadata feeds."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from PySide6.QtCore import QObject
from PySide6.QtWidgets import QFileDialog, QMessageBox
from loguru import logger


class UIUpdateCallback(Protocol):
    """Protocol for UI update callbacks."""

    def on_feed_loaded(self, path: str) -> None:
        """Rebuild the timeline after a new feed was loaded."""
        ...


class StatusReporter(Protocol):
    """Protocol for status reporting callback."""

    def show_status(self, message: str, timeout: int = 3000) -> None:
        """Show status message."""
        ...


class FileOperationsHandler:
    """Handles the open-feed workflow: file dialog, loading, error reporting."""

    FEED_FILTER = "Metadata Feeds (*.txt *.tsv);;All Files (*)"

    def __init__(
        self,
        vm: Any,
        parent_widget: QObject,
        ui_updater: UIUpdateCallback,
        status_reporter: StatusReporter,
    ) -> None:
        """Initialize with required services and callbacks.

        Args:
            vm: ViewModel with `load_feed(path)` and `get_source_path()`
            parent_widget: Parent widget for dialogs
            ui_updater: Callback for UI updates
            status_reporter: Callback for status messages
        """
        self.vm = vm
        self.parent = parent_widget
        self.ui_updater = ui_updater
        self.status_reporter = status_reporter

    def open_feed(self) -> None:
        """Ask for a feed file and load it."""
        start_dir = ""
        current = self.vm.get_source_path()
        if current:
            start_dir = str(Path(current).parent)
        path, _ = QFileDialog.getOpenFileName(self.parent, "Open Feed", start_dir, self.FEED_FILTER)
        if not path:
            return
        self.load_feed(path)

    def load_feed(self, path: str) -> bool:
        """Load `path` into the view-model; report failures in a message box."""
        try:
            self.vm.load_feed(path)
        except Exception as ex:
            logger.exception("Load feed failed: {}", ex)
            QMessageBox.critical(self.parent, "Open Error", str(ex))
            self.status_reporter.show_status("Open failed")
            return False

        logger.info(
            "Loaded feed: {} | items={} clusters={}",
            path,
            len(self.vm.items),
            self.vm.cluster_count,
        )
        self.ui_updater.on_feed_loaded(path)
        self.status_reporter.show_status(f"Loaded {len(self.vm.items)} items")
        return True
