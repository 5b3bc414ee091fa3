"""Horizontally scrolling strip of time clusters.

Every expand/collapse goes through `_run_transition`: the compensator measures
the affected clusters, the new expand flags are pushed into the widgets and
the layout is activated synchronously, then the compensator measures again
and issues a single corrective scroll. Centering on the selected item runs
afterwards from the event loop and is dropped if a newer request arrives.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import (
    QEasingCurve,
    QPoint,
    QPropertyAnimation,
    QRect,
    QSize,
    Qt,
    QTimer,
    Signal,
)
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QLayout, QScrollArea, QWidget
from loguru import logger

from app.viewmodels.cluster_vm import ClusterVM
from app.viewmodels.timeline_vm import TimelineVM
from app.views.constants import (
    CENTER_ANIMATION_MS,
    CLUSTER_SPACING_PX,
    DEFAULT_COLLAPSED_MAX_PX,
    DEFAULT_COLLAPSED_SLICE_PX,
    DEFAULT_THUMB_HEIGHT,
    STRIP_MARGIN_PX,
    TILE_SPACING_PX,
    TIMELINE_STYLESHEET,
)
from app.views.image_tasks import ImageTaskRunner
from core.services.interfaces import IExtentMeasurer, IScrollPort
from core.services.navigator import WheelModifiers
from core.services.scroll_compensation import ScrollCompensator
from core.services.selection_state import Transition
from core.services.timeline_index import TimelineIndex
from infrastructure.media_locator import MediaLocator


class ItemTile(QLabel):
    """Focusable thumbnail of one item."""

    focused = Signal(str)
    clicked = Signal(str)

    def __init__(self, identity: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.identity = identity
        self._source: QPixmap | None = None
        self.setObjectName("ItemTile")
        self.setFocusPolicy(Qt.TabFocus)
        self.setAlignment(Qt.AlignCenter)
        self.setCursor(Qt.PointingHandCursor)
        self.setProperty("selected", False)

    def set_selected(self, selected: bool) -> None:
        if bool(self.property("selected")) == selected:
            return
        self.setProperty("selected", selected)
        self.style().unpolish(self)
        self.style().polish(self)

    def set_tile_size(self, width: int, height: int) -> None:
        if self.minimumSize() == self.maximumSize() == QSize(width, height):
            return
        self.setFixedSize(width, height)
        self._refresh_pixmap()

    def set_source_image(self, image: QImage | None) -> None:
        if image is None or image.isNull():
            self._source = None
            self.setText("?")
            return
        self._source = QPixmap.fromImage(image)
        self.setText("")
        self._refresh_pixmap()

    def _refresh_pixmap(self) -> None:
        if self._source is None or self._source.isNull():
            return
        w, h = max(1, self.width()), max(1, self.height())
        scaled = self._source.scaled(w, h, Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation)
        x = max(0, (scaled.width() - w) // 2)
        y = max(0, (scaled.height() - h) // 2)
        self.setPixmap(scaled.copy(QRect(x, y, w, h)))

    def focusInEvent(self, event) -> None:  # type: ignore[override]
        super().focusInEvent(event)
        self.focused.emit(self.identity)

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton and self.rect().contains(event.position().toPoint()):
            self.clicked.emit(self.identity)
            event.accept()
            return
        super().mouseReleaseEvent(event)


class ClusterWidget(QFrame):
    """Row of item tiles; sized from its tiles' fixed sizes."""

    def __init__(self, vm: ClusterVM, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.index = vm.index
        self.setObjectName("Cluster")
        self.setProperty("expanded", False)
        self.setToolTip(vm.label)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(TILE_SPACING_PX)
        layout.setSizeConstraint(QLayout.SetFixedSize)
        self.tiles: list[ItemTile] = []
        for item_vm in vm.items:
            tile = ItemTile(item_vm.identity, self)
            tile.setToolTip(item_vm.tooltip)
            if item_vm.is_video:
                tile.setProperty("video", True)
            layout.addWidget(tile)
            self.tiles.append(tile)

    def apply(self, vm: ClusterVM, widths: list[int], height: int) -> None:
        """Push expand state and tile geometry, then settle this row's layout."""
        if bool(self.property("expanded")) != vm.is_expanded:
            self.setProperty("expanded", vm.is_expanded)
            self.style().unpolish(self)
            self.style().polish(self)
        for tile, item_vm, width in zip(self.tiles, vm.items, widths):
            tile.set_tile_size(width, height)
            tile.set_selected(item_vm.is_selected)
        self.layout().activate()


class _ClusterMeasurer(IExtentMeasurer):
    def __init__(self, view: TimelineView) -> None:
        self._view = view

    def measure_cluster(self, cluster_index: int) -> float | None:
        widget = self._view.cluster_widget(cluster_index)
        if widget is None:
            return None
        return float(widget.geometry().width())


class _ScrollBarPort(IScrollPort):
    def __init__(self, view: TimelineView) -> None:
        self._view = view

    def scroll_by(self, delta: float) -> None:
        bar = self._view.horizontalScrollBar()
        before = bar.value()
        bar.setValue(before + round(delta))
        logger.debug("Compensating scroll {} -> {} (delta {})", before, bar.value(), delta)


class TimelineView(QScrollArea):
    """Timeline strip widget bound to a `TimelineVM`."""

    navigateRequested = Signal(str)

    def __init__(
        self,
        vm: TimelineVM,
        parent: QWidget | None = None,
        *,
        runner: ImageTaskRunner | None = None,
        locator: MediaLocator | None = None,
        thumb_height: int = DEFAULT_THUMB_HEIGHT,
        collapsed_slice: int = DEFAULT_COLLAPSED_SLICE_PX,
        collapsed_max: int = DEFAULT_COLLAPSED_MAX_PX,
        smooth_scroll: bool = True,
    ) -> None:
        super().__init__(parent)
        self._vm = vm
        self._runner = runner
        self._locator = locator
        self._thumb_height = int(thumb_height)
        self._collapsed_slice = int(collapsed_slice)
        self._collapsed_max = int(collapsed_max)
        self._smooth = smooth_scroll

        self.setWidgetResizable(False)
        self.setFrameShape(QFrame.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAsNeeded)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        bar_height = self.horizontalScrollBar().sizeHint().height()
        self.setMinimumHeight(self._thumb_height + 2 * STRIP_MARGIN_PX + bar_height)

        self._container = QWidget()
        self._container.setObjectName("Timeline")
        self._container.setStyleSheet(TIMELINE_STYLESHEET)
        self._strip = QHBoxLayout(self._container)
        self._strip.setContentsMargins(
            STRIP_MARGIN_PX, STRIP_MARGIN_PX, STRIP_MARGIN_PX, STRIP_MARGIN_PX
        )
        self._strip.setSpacing(CLUSTER_SPACING_PX)
        self._strip.setSizeConstraint(QLayout.SetFixedSize)
        self.setWidget(self._container)

        self._clusters: list[ClusterWidget] = []
        self._tiles: dict[str, ItemTile] = {}
        self._thumb_tokens: dict[str, str] = {}
        self._compensator = ScrollCompensator(_ClusterMeasurer(self), _ScrollBarPort(self))
        self._animation = QPropertyAnimation(self.horizontalScrollBar(), b"value", self)
        self._animation.setDuration(CENTER_ANIMATION_MS)
        self._animation.setEasingCurve(QEasingCurve.OutCubic)
        self._programmatic_focus = False
        self._jump_pending = True
        self._deferred_jump: str | None = None

    # Public API

    @property
    def vm(self) -> TimelineVM:
        return self._vm

    def cluster_widget(self, cluster_index: int) -> ClusterWidget | None:
        if 0 <= cluster_index < len(self._clusters):
            return self._clusters[cluster_index]
        return None

    def tile(self, identity: str) -> ItemTile | None:
        return self._tiles.get(identity)

    def set_locator(self, locator: MediaLocator | None) -> None:
        """Point thumbnails at a different media root; takes effect on the next rebuild."""
        self._locator = locator

    def set_index(self, index: TimelineIndex) -> None:
        """Replace the cluster set; the selected identity is kept."""
        self._stop_animation()
        self._compensator.abort()
        self._vm.reset(index)
        self._rebuild()
        self._apply_layout()
        self._jump_pending = True
        selected = self._vm.selected_identity
        if selected is not None and selected in index:
            self._schedule_center(selected)

    def select(self, identity: str | None) -> float:
        """Apply an external selection change. Returns the compensation delta."""
        transition = self._vm.select(identity)
        delta = self._run_transition(transition)
        if identity is None:
            return delta
        tile = self._tiles.get(identity)
        if tile is None:
            logger.debug("Selected item {} is not in the timeline", identity)
            return delta
        self._programmatic_focus = True
        try:
            tile.setFocus(Qt.OtherFocusReason)
        finally:
            self._programmatic_focus = False
        self._schedule_center(identity)
        return delta

    def step(self, delta: int) -> str | None:
        """Request navigation `delta` items away from the selection."""
        target = self._vm.step(delta)
        if target is not None:
            self.navigateRequested.emit(target)
        return target

    def handle_wheel(self, delta: float, modifiers: WheelModifiers) -> bool:
        """Navigate for a wheel delta; False when the event should scroll natively."""
        if modifiers.any:
            return False
        target = self._vm.wheel(delta, modifiers)
        if target is not None:
            self.navigateRequested.emit(target)
        return True

    def on_image_loaded(self, token: str, path: str, image: Any) -> None:
        identity = self._thumb_tokens.pop(token, None)
        if identity is None:
            return
        tile = self._tiles.get(identity)
        if tile is not None:
            tile.set_source_image(image)

    def center_on(self, identity: str, animate: bool = False) -> bool:
        tile = self._tiles.get(identity)
        if tile is None:
            return False
        self._center_on_tile(tile, animate)
        return True

    # Transitions

    def _run_transition(self, transition: Transition) -> float:
        """Measure, commit the layout, measure again and compensate."""
        if not transition.occurred:
            self._apply_layout()
            self._vm.settle()
            return 0.0

        self._stop_animation()
        pending = self._compensator.begin_transition(transition)
        try:
            self._apply_layout()
        except Exception:
            self._compensator.abort()
            raise
        delta = self._compensator.commit_transition(pending)
        self._vm.settle()
        return delta

    def _apply_layout(self) -> None:
        for widget, cluster_vm in zip(self._clusters, self._vm.cluster_vms()):
            widths = cluster_vm.tile_widths(
                self._thumb_height, self._collapsed_slice, self._collapsed_max
            )
            widget.apply(cluster_vm, widths, self._thumb_height)
        self._strip.activate()

    def _rebuild(self) -> None:
        for widget in self._clusters:
            for tile in widget.tiles:
                tile.blockSignals(True)
            self._strip.removeWidget(widget)
            widget.hide()
            widget.deleteLater()
        self._clusters = []
        self._tiles = {}
        self._thumb_tokens = {}

        for cluster_vm in self._vm.cluster_vms():
            widget = ClusterWidget(cluster_vm, self._container)
            for tile in widget.tiles:
                tile.focused.connect(self._on_tile_focused)
                tile.clicked.connect(self.navigateRequested)
                self._tiles[tile.identity] = tile
                self._request_thumbnail(tile.identity)
            self._strip.addWidget(widget)
            self._clusters.append(widget)
        logger.debug("Timeline rebuilt with {} clusters", len(self._clusters))

    def _request_thumbnail(self, identity: str) -> None:
        if self._runner is None or self._locator is None:
            return
        path = str(self._locator.thumbnail_path(identity))
        token = self._runner.request_thumbnail(path, self._thumb_height)
        self._thumb_tokens[token] = identity

    def _on_tile_focused(self, identity: str) -> None:
        if not self._programmatic_focus:
            # Scroll before measuring; the transition allows one corrective scroll only
            tile = self._tiles.get(identity)
            if tile is not None:
                self.ensureWidgetVisible(tile, 0, 0)
        transition = self._vm.focus_in(identity)
        self._run_transition(transition)

    # Centering

    def _schedule_center(self, identity: str) -> None:
        ticket = self._vm.request_center(identity)
        QTimer.singleShot(0, self, lambda: self._run_center(ticket))

    def _run_center(self, ticket: int) -> None:
        identity = self._vm.claim_center(ticket)
        if identity is None:
            return
        if not self.isVisible():
            self._deferred_jump = identity
            return
        animate = self._smooth and not self._jump_pending
        self._jump_pending = False
        self.center_on(identity, animate)

    def _center_on_tile(self, tile: ItemTile, animate: bool) -> None:
        bar = self.horizontalScrollBar()
        center_x = tile.mapTo(self._container, QPoint(tile.width() // 2, 0)).x()
        target = center_x - self.viewport().width() // 2
        target = max(bar.minimum(), min(bar.maximum(), target))
        self._stop_animation()
        if animate and target != bar.value():
            self._animation.setStartValue(bar.value())
            self._animation.setEndValue(target)
            self._animation.start()
        else:
            bar.setValue(target)

    def _stop_animation(self) -> None:
        if self._animation.state() == QPropertyAnimation.Running:
            self._animation.stop()

    # Qt events

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        if self._deferred_jump is not None:
            identity = self._deferred_jump
            self._deferred_jump = None
            self._jump_pending = False
            QTimer.singleShot(0, self, lambda: self.center_on(identity, False))

    def focusNextPrevChild(self, forward: bool) -> bool:  # type: ignore[override]
        # QScrollArea would scroll to the new focus widget after its focus-in transition ran
        return QWidget.focusNextPrevChild(self, forward)

    def wheelEvent(self, event) -> None:  # type: ignore[override]
        angle = event.angleDelta()
        raw = angle.y() or angle.x()
        mods = event.modifiers()
        modifiers = WheelModifiers(
            shift=bool(mods & Qt.ShiftModifier),
            ctrl=bool(mods & Qt.ControlModifier),
            alt=bool(mods & Qt.AltModifier),
            meta=bool(mods & Qt.MetaModifier),
        )
        # Wheel up (positive angle) goes back in time.
        if self.handle_wheel(-raw, modifiers):
            event.accept()
            return
        super().wheelEvent(event)

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.modifiers() == Qt.NoModifier:
            if event.key() == Qt.Key_Left:
                self.step(-1)
                event.accept()
                return
            if event.key() == Qt.Key_Right:
                self.step(1)
                event.accept()
                return
        super().keyPressEvent(event)
