"""DialogHandler: Coordinates dialog operations and user interactions."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QObject
from PySide6.QtWidgets import QDialog
from loguru import logger

from app.views.dialogs.filters_dialog import FiltersDialog


class DialogHandler:
    """Coordinates the tag filter dialog.

    The dialog result is handed to `filter_handler` as an encoded query; the
    caller decides how to navigate to it.
    """

    def __init__(
        self,
        parent_widget: QObject,
        vm: Any,
        filter_handler: Callable[[str], None],
    ) -> None:
        """Initialize with parent widget and data provider.

        Args:
            parent_widget: Parent widget for dialogs
            vm: ViewModel exposing `tag_filter` and `tag_counts()`
            filter_handler: Receives the encoded filter query on accept
        """
        self.parent = parent_widget
        self.vm = vm
        self.filter_handler = filter_handler

    def show_filter_dialog(self) -> None:
        """Show the tag filter dialog pre-populated with the active filter."""
        dlg = FiltersDialog(
            parent=self.parent, current=self.vm.tag_filter, tag_counts=self.vm.tag_counts()
        )
        if dlg.exec() != QDialog.Accepted:
            return
        query = dlg.query()
        logger.info("Filter dialog accepted: {!r}", query)
        self.filter_handler(query)
