"""MainWindow: display pane above a clustered timeline strip.

The window owns no selection state of its own. Clicks, keys and wheel
notches on the timeline become navigation requests to the `HistoryRouter`;
the router's location change is the single place where the filter and the
selected item are applied.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QMainWindow, QMessageBox
from loguru import logger

from app.viewmodels.timeline_vm import TimelineVM
from app.views.components.history_router import HistoryRouter, Location
from app.views.components.menu_controller import MenuController
from app.views.constants import (
    DEFAULT_COLLAPSED_MAX_PX,
    DEFAULT_COLLAPSED_SLICE_PX,
    DEFAULT_THUMB_HEIGHT,
)
from app.views.display_pane import DisplayPane
from app.views.handlers.dialog_handler import DialogHandler
from app.views.handlers.file_operations import FileOperationsHandler
from app.views.image_tasks import DISPLAY_PREFIX, THUMB_PREFIX, ImageTaskRunner
from app.views.layout.layout_manager import LayoutManager
from app.views.timeline_view import TimelineView
from infrastructure.logging import open_latest_log, open_log_directory
from infrastructure.media_locator import MediaLocator

WINDOW_TITLE = "Photo Timeline"


class MainWindow(QMainWindow):
    """Main application window."""

    # Delivery channel for ImageTaskRunner results
    imageLoaded = Signal(str, str, object)  # token, path, QImage

    def __init__(
        self,
        vm: Any,
        image_service: Any | None = None,
        settings: Any | None = None,
        router: HistoryRouter | None = None,
    ) -> None:
        """Initialize MainWindow with all services and components.

        Args:
            vm: MainVM instance owning items, filter and clusters
            image_service: Image service for loading/scaling images
            settings: JsonSettings instance for configuration
            router: Location history; a fresh one is created when omitted
        """
        super().__init__()

        self._initialize_services(vm, image_service, settings, router)
        self._setup_components()
        self._setup_ui()
        self._connect_signals()
        self.statusBar().showMessage("Ready", 3000)

    def _initialize_services(
        self,
        vm: Any,
        image_service: Any | None,
        settings: Any | None,
        router: HistoryRouter | None,
    ) -> None:
        self._vm = vm
        self._img = image_service
        self._settings = settings
        self.router = router or HistoryRouter(parent=self)

        self._thumb_height = DEFAULT_THUMB_HEIGHT
        self._collapsed_slice = DEFAULT_COLLAPSED_SLICE_PX
        self._collapsed_max = DEFAULT_COLLAPSED_MAX_PX
        self._smooth_scroll = True
        if self._settings is not None:
            self._thumb_height = self._settings.get_int(
                "timeline.thumb_height", DEFAULT_THUMB_HEIGHT
            )
            self._collapsed_slice = self._settings.get_int(
                "timeline.collapsed_slice", DEFAULT_COLLAPSED_SLICE_PX
            )
            self._collapsed_max = self._settings.get_int(
                "timeline.collapsed_max_width", DEFAULT_COLLAPSED_MAX_PX
            )
            self._smooth_scroll = self._settings.get_bool("timeline.smooth_scroll", True)

    def _setup_components(self) -> None:
        self.menu_controller = MenuController(self)
        self.layout_manager = LayoutManager(self)

        self.status_reporter = StatusReporterImpl(self)
        self.ui_updater = UIUpdaterImpl(self)

        self.file_operations = FileOperationsHandler(
            vm=self._vm,
            parent_widget=self,
            ui_updater=self.ui_updater,
            status_reporter=self.status_reporter,
        )
        self.dialog_handler = DialogHandler(
            parent_widget=self,
            vm=self._vm,
            filter_handler=self.router.set_filter,
        )

    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)

        self._runner = ImageTaskRunner(service=self._img, receiver=self)
        self.display = DisplayPane(None, self._runner)
        self.timeline = TimelineView(
            TimelineVM(),
            runner=self._runner,
            thumb_height=self._thumb_height,
            collapsed_slice=self._collapsed_slice,
            collapsed_max=self._collapsed_max,
            smooth_scroll=self._smooth_scroll,
        )

        central = self.layout_manager.setup_main_layout(self.display, self.timeline)
        self.setCentralWidget(central)
        self.layout_manager.connect_splitter_signals(self.display.refit)
        self.layout_manager.setup_initial_window_size()

        self.menu_controller.setup_menus()
        self._update_history_actions()

    def _connect_signals(self) -> None:
        handlers = {
            "open_feed": self.file_operations.open_feed,
            "exit": self.close,
            "filter": self.dialog_handler.show_filter_dialog,
            "clear_filter": self.on_clear_filter,
            "back": self.router.back,
            "forward": self.router.forward,
            "open_latest_log": self.on_open_latest_log,
            "open_log_directory": self.on_open_log_directory,
        }
        self.menu_controller.connect_actions(handlers)

        self.imageLoaded.connect(self._on_image_loaded)
        self.router.locationChanged.connect(self._on_location_changed)
        self.timeline.navigateRequested.connect(self.router.push)

    # Public API

    def refresh_timeline(self) -> None:
        """Re-render the timeline from the view-model's current clusters."""
        self.timeline.set_index(self._vm.index)
        self._show_counts()

    def on_feed_loaded(self, path: str) -> None:
        """Point media lookups at the new feed and select its newest item."""
        locator = self._locator_for(path)
        self.timeline.set_locator(locator)
        self.display.set_locator(locator)
        self.refresh_timeline()
        flat = self._vm.index.flat
        newest = flat[-1].identity if flat else None
        self.router.replace(Location(newest, self._vm.filter_query))

    def on_clear_filter(self) -> None:
        self.router.set_filter("")

    def on_open_latest_log(self) -> None:
        if not open_latest_log():
            QMessageBox.information(self, "Log", "No log file found.")

    def on_open_log_directory(self) -> None:
        if not open_log_directory():
            QMessageBox.information(self, "Log", "Log directory could not be opened.")

    # Slots

    def _on_location_changed(self, identity: str | None, query: str) -> None:
        if self._vm.set_filter_query(query):
            self.refresh_timeline()
        self.timeline.select(identity)
        self.display.show_item(identity)
        self._update_history_actions()
        if identity:
            self.setWindowTitle(f"{identity} - {WINDOW_TITLE}")
        else:
            self.setWindowTitle(WINDOW_TITLE)

    def _on_image_loaded(self, token: str, path: str, image: Any) -> None:
        if token.startswith(THUMB_PREFIX):
            self.timeline.on_image_loaded(token, path, image)
        elif token.startswith(DISPLAY_PREFIX):
            self.display.on_image_loaded(token, path, image)

    # Private methods

    def _locator_for(self, feed_path: str) -> MediaLocator:
        root: Path | None = None
        thumb_dir = "i"
        if self._settings is not None:
            root = self._settings.resolve_path("media.root")
            thumb_dir = str(self._settings.get("media.thumbnail_dir", "i") or "")
        if root is None:
            root = Path(feed_path).resolve().parent
        logger.info("Media root: {} (thumbnails in {!r})", root, thumb_dir)
        return MediaLocator(root, thumb_dir)

    def _update_history_actions(self) -> None:
        self.menu_controller.enable_action("back", self.router.can_go_back())
        self.menu_controller.enable_action("forward", self.router.can_go_forward())

    def _show_counts(self) -> None:
        query = self._vm.filter_query
        text = f"{self._vm.visible_item_count} items in {self._vm.cluster_count} clusters"
        if query:
            text += f" | filter: {query}"
        self.status_reporter.show_status(text, 0)


# Helper implementation classes


class StatusReporterImpl:
    """Implementation of StatusReporter protocol."""

    def __init__(self, main_window: QMainWindow):
        self.window = main_window

    def show_status(self, message: str, timeout: int = 3000) -> None:
        self.window.statusBar().showMessage(message, timeout)


class UIUpdaterImpl:
    """Implementation of UIUpdateCallback protocol."""

    def __init__(self, main_window: MainWindow):
        self.window = main_window

    def on_feed_loaded(self, path: str) -> None:
        self.window.on_feed_loaded(path)
