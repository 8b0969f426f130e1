# widgets/GraphWidget.py

from PyQt5 import QtWidgets, QtCore
from typing import Any, Callable, Dict, Optional, Tuple
from PyQt5.QtWidgets import QToolBar, QAction, QMenu, QToolButton
from PyQt5.QtGui import QKeySequence


class GraphWidget(QtWidgets.QWidget):
    """
    Plot panel: a slim toolbar on top of `content_layout`.

    The panel is either a window of its own or embedded in a larger one.
    Window-level actions (maximize, close, stay on top, ...) always act on
    `host()`, the top-level window the panel currently lives in, so closing
    from an embedded panel closes the whole window and runs its closeEvent.
    Subclasses add menus through `extend_toolbar` / `add_menu`.
    """
    _name_counter = 1

    def __init__(self, name: Optional[str] = None, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)

        if name is None:
            name = f"Plot#{GraphWidget._name_counter}"
            GraphWidget._name_counter += 1
        self.graph_name = name
        self.setWindowTitle(self.graph_name)

        self.toolbar = QToolBar("Graph Toolbar", self)
        self.toolbar.setMovable(False)
        self.toolbar.setFloatable(False)
        self.toolbar.setFixedHeight(24)

        self.content_widget = QtWidgets.QWidget(self)
        self.content_layout = QtWidgets.QVBoxLayout(self.content_widget)
        self.content_layout.setContentsMargins(0, 0, 0, 0)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.toolbar)
        layout.addWidget(self.content_widget)

        self.window_actions: Dict[str, QAction] = {}
        self._build_window_menu()
        self.extend_toolbar(self.toolbar)

    def host(self) -> QtWidgets.QWidget:
        return self.window()

    def add_menu(self, title: str) -> QMenu:
        """Create a drop-down menu behind a toolbar button and return it."""
        menu = QMenu(title, self)
        button = QToolButton(self)
        button.setText(title)
        button.setMenu(menu)
        button.setPopupMode(QToolButton.InstantPopup)
        self.toolbar.addWidget(button)
        return menu

    def add_action(
        self,
        menu: QMenu,
        text: str,
        slot: Callable[..., Any],
        shortcut: Optional[str] = None,
        checkable: bool = False,
        checked: bool = False,
    ) -> QAction:
        # Registered on the panel as well, so the shortcut works while the menu is closed.
        action = QAction(text, self, checkable=checkable)
        if shortcut:
            action.setShortcut(QKeySequence(shortcut))
            action.setShortcutContext(QtCore.Qt.WindowShortcut)
        if checkable:
            action.setChecked(checked)
            action.toggled.connect(slot)
        else:
            action.triggered.connect(lambda: slot())
        menu.addAction(action)
        self.addAction(action)
        return action

    def _build_window_menu(self) -> None:
        entries: Tuple[Tuple[str, Optional[str], Callable[[], Any]], ...] = (
            ("Maximize", "Ctrl+Shift+M", lambda: self.host().showMaximized()),
            ("Minimize", "Ctrl+Shift+N", lambda: self.host().showMinimized()),
            ("Restore", "Ctrl+Shift+R", lambda: self.host().showNormal()),
            ("Screenshot", "Ctrl+Shift+S", lambda: self.take_screenshot()),
        )
        menu = self.add_menu("Window")
        for text, shortcut, slot in entries:
            self.window_actions[text] = self.add_action(menu, text, slot, shortcut)

        self.window_actions["Stay on top"] = self.add_action(
            menu, "Stay on top", self._set_stay_on_top, "Ctrl+T", checkable=True
        )
        self.window_actions["Close"] = self.add_action(menu, "Close", lambda: self.host().close(), "Ctrl+Q")

    def extend_toolbar(self, toolbar: QtWidgets.QToolBar) -> None:
        self._view_menu = self.add_menu("View")

        self._axis_labels_visible = True
        def on_toggle_axis_labels(checked):
            self._axis_labels_visible = checked
            self.update_axis_labels()

        self.add_action(self._view_menu, "Show Axis Labels", on_toggle_axis_labels, checkable=True, checked=True)

    def update_axis_labels(self) -> None:
        pass

    def take_screenshot(self, filename: Optional[str] = None) -> str:
        pixmap = self.grab(self.rect())
        if filename is None:
            filename = f"screenshot_{id(self)}.png"
        if not pixmap.save(filename):
            print(f"[GraphWidget] Failed to save screenshot: {filename}")
        return filename

    def set_graph_name(self, name: str) -> None:
        self.graph_name = name
        self.setWindowTitle(self.graph_name)

    def is_stay_on_top(self) -> bool:
        return bool(self.host().windowFlags() & QtCore.Qt.WindowStaysOnTopHint)

    def _set_stay_on_top(self, value: bool) -> None:
        host = self.host()
        if self.is_stay_on_top() == bool(value):
            return
        # Changing window flags hides the window; show it again if it was up.
        visible = host.isVisible()
        host.setWindowFlag(QtCore.Qt.WindowStaysOnTopHint, bool(value))
        if visible:
            host.show()
