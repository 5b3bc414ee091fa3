"""MenuController: Manages menu creation and action connections."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMainWindow, QMenuBar


class MenuController:
    """Manages main window menu creation and action connections.

    Menus:
    - File: open a metadata feed, exit
    - View: tag filter, clear filter, back/forward through the location history
    - Log: open the latest log or the log directory
    """

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to create menus for
        """
        self.window = main_window
        self.actions: dict[str, QAction] = {}

    def setup_menus(self) -> dict[str, QAction]:
        """Create all menus and return action references.

        Returns:
            Dictionary mapping action names to QAction instances
        """
        menubar = QMenuBar(self.window)

        # File Menu
        file_menu = menubar.addMenu("File")
        self.actions["open_feed"] = file_menu.addAction("Open Feed…")
        self.actions["open_feed"].setShortcut(QKeySequence.Open)
        file_menu.addSeparator()
        self.actions["exit"] = file_menu.addAction("Exit")

        # View Menu
        view_menu = menubar.addMenu("View")
        self.actions["filter"] = view_menu.addAction("Filter by Tags…")
        self.actions["filter"].setShortcut(QKeySequence("Ctrl+F"))
        self.actions["clear_filter"] = view_menu.addAction("Clear Filter")
        view_menu.addSeparator()
        self.actions["back"] = view_menu.addAction("Back")
        self.actions["back"].setShortcut(QKeySequence("Alt+Left"))
        self.actions["forward"] = view_menu.addAction("Forward")
        self.actions["forward"].setShortcut(QKeySequence("Alt+Right"))

        # Log Menu
        log_menu = menubar.addMenu("Log")
        self.actions["open_latest_log"] = log_menu.addAction("Open Latest Log")
        log_menu.addSeparator()
        self.actions["open_log_directory"] = log_menu.addAction("Open Log Directory")

        self.window.setMenuBar(menubar)
        return self.actions

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Connect menu actions to their handler methods.

        Args:
            handlers: Dictionary mapping action names to handler callables
        """
        for name, action in self.actions.items():
            handler = handlers.get(name)
            if handler is not None:
                action.triggered.connect(handler)
            elif name == "exit":
                action.triggered.connect(self.window.close)

    def get_action(self, name: str) -> QAction | None:
        return self.actions.get(name)

    def enable_action(self, name: str, enabled: bool = True) -> None:
        """Enable or disable a specific action.

        Args:
            name: Action name
            enabled: Whether to enable the action
        """
        action = self.actions.get(name)
        if action:
            action.setEnabled(enabled)
