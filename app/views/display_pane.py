from __future__ import annotations

from typing import Any

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QLabel, QScrollArea, QVBoxLayout, QWidget
from loguru import logger

from app.views.constants import DISPLAY_MIN_HEIGHT
from app.views.image_tasks import DISPLAY_PREFIX, ImageTaskRunner
from infrastructure.media_locator import MediaLocator, is_video


class DisplayPane(QWidget):
    """Large display of the selected item, above the timeline."""

    def __init__(
        self,
        parent: QWidget | None,
        task_runner: ImageTaskRunner | None,
        locator: MediaLocator | None = None,
    ) -> None:
        super().__init__(parent)
        self._runner = task_runner
        self._locator = locator

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self.display_area = QScrollArea()
        self.display_area.setWidgetResizable(True)
        self.display_area.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.display_area.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.display_area.setAlignment(Qt.AlignCenter)

        self._label = QLabel("(no selection)")
        self._label.setAlignment(Qt.AlignCenter)
        self._label.setMinimumHeight(DISPLAY_MIN_HEIGHT)
        self.display_area.setWidget(self._label)
        root.addWidget(self.display_area)

        self._identity: str | None = None
        self._token: str | None = None
        self._pm: QPixmap | None = None

        self.display_area.viewport().installEventFilter(self)

    # Public API
    @property
    def identity(self) -> str | None:
        return self._identity

    def set_locator(self, locator: MediaLocator | None) -> None:
        self._locator = locator

    def show_item(self, identity: str | None) -> None:
        if identity == self._identity and self._pm is not None:
            return
        self.clear()
        self._identity = identity
        if identity is None:
            self._label.setText("(no selection)")
            return
        if is_video(identity):
            # Playback is out of scope; show the name only
            self._label.setText(f"▶ {identity}")
            return
        if self._runner is None or self._locator is None:
            self._label.setText(identity)
            return
        self._label.setText("Loading…")
        self._token = self._runner.request_preview(str(self._locator.full_path(identity)))

    def clear(self) -> None:
        self._identity = None
        self._token = None
        self._pm = None
        self._label.clear()

    def on_image_loaded(self, token: str, path: str, image: Any) -> None:
        if not token.startswith(DISPLAY_PREFIX) or token != self._token:
            return
        if image is None:
            logger.warning("Display image failed to load: {}", path)
            self._label.setText("(failed)")
            return
        pm = QPixmap.fromImage(image)
        if pm.isNull():
            self._label.setText("(failed)")
            return
        self._pm = pm
        self._apply_fit()

    def refit(self) -> None:
        """Re-apply the fit after the splitter moves."""
        self._apply_fit()

    # Qt events
    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # type: ignore[override]
        if event.type() == QEvent.Resize and obj is self.display_area.viewport():
            self._apply_fit()
        return super().eventFilter(obj, event)

    def _apply_fit(self) -> None:
        if self._pm is None or self._pm.isNull():
            return
        vp = self.display_area.viewport()
        max_w = max(1, vp.width() - 1)
        max_h = max(1, vp.height() - 1)
        pm = self._pm
        if pm.width() > max_w or pm.height() > max_h:
            pm = pm.scaled(max_w, max_h, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        self._label.setPixmap(pm)
