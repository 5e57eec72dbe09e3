"""
Main window: terminal tabs, output panel and the sshdock commands.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt, QFileSystemWatcher
from PyQt6.QtGui import QAction, QKeySequence, QFont
from PyQt6.QtWidgets import (
    QMainWindow, QTabWidget, QPlainTextEdit, QDockWidget,
    QPushButton, QFileDialog, QLabel,
)

from ..app import SSHDock
from ..config import SettingsManager, get_settings_manager
from ..output import OutputLog
from ..session.local_terminal import LocalTerminal
from .shell import QtShell
from .terminal_tab import TerminalTab

logger = logging.getLogger(__name__)


class OutputPanel(QPlainTextEdit):
    """Read-only view of the output log."""

    def __init__(self, log: OutputLog, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setFont(QFont("monospace"))
        for line in log.lines:
            self.appendPlainText(line)
        log.add_listener(self.appendPlainText)


class MainWindow(QMainWindow):
    """
    sshdock main window.

    The window is the UI shell's host: it owns the terminal tabs and
    reports closed sessions and the "active file" back to the app.
    """

    def __init__(self, settings: SettingsManager = None):
        super().__init__()
        self.settings_manager = settings or get_settings_manager()
        self.log = OutputLog()

        self.setWindowTitle("sshdock")
        s = self.settings_manager.settings
        self.resize(s.window_width, s.window_height)

        self._tabs = QTabWidget()
        self._tabs.setTabsClosable(True)
        self._tabs.setDocumentMode(True)
        self._tabs.tabCloseRequested.connect(self._on_tab_close_requested)
        self.setCentralWidget(self._tabs)

        self._output_dock = QDockWidget("Output", self)
        self._output_dock.setObjectName("output")
        self._output_panel = OutputPanel(self.log)
        self._output_dock.setWidget(self._output_panel)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, self._output_dock)
        self.log.set_show_handler(self.show_output)

        self._fast_open_button = QPushButton()
        self._fast_open_button.setFlat(True)
        self._fast_open_button.hide()
        self.statusBar().addWidget(self._fast_open_button)
        self._active_file_label = QLabel()
        self.statusBar().addPermanentWidget(self._active_file_label)

        self.shell = QtShell(self)
        self.app = SSHDock(self.shell, self.settings_manager, self.log)
        self._fast_open_button.clicked.connect(self.app.fast_open_connection)

        self._setup_actions()

        self._watcher = QFileSystemWatcher(self)
        self._watcher.fileChanged.connect(self._on_hosts_file_changed)

        self.app.start()
        self._watch_hosts_files()
        self.settings_manager.add_listener(lambda _settings: self._watch_hosts_files())

    def _setup_actions(self) -> None:
        menu = self.menuBar().addMenu("&Connection")
        toolbar = self.addToolBar("Connection")
        toolbar.setObjectName("connection")

        open_action = QAction("Open Connection", self)
        open_action.setShortcut(QKeySequence("Ctrl+Shift+O"))
        open_action.triggered.connect(lambda: self.app.open_connection())

        forward_action = QAction("Port Forwarding", self)
        forward_action.setShortcut(QKeySequence("Ctrl+Shift+F"))
        forward_action.triggered.connect(lambda: self.app.port_forwarding())

        fast_action = QAction("Fast Open Connection", self)
        fast_action.setShortcut(QKeySequence("Ctrl+Shift+L"))
        fast_action.triggered.connect(lambda: self.app.fast_open_connection())

        active_file_action = QAction("Set Active File...", self)
        active_file_action.triggered.connect(self._choose_active_file)

        reload_action = QAction("Reload Servers", self)
        reload_action.triggered.connect(lambda: self.app.reload())

        for action in (open_action, forward_action, fast_action):
            menu.addAction(action)
            toolbar.addAction(action)
        menu.addSeparator()
        menu.addAction(active_file_action)
        menu.addAction(reload_action)

    # -------------------------------------------------------------------------
    # UI shell hooks
    # -------------------------------------------------------------------------

    def add_session_tab(self, session: LocalTerminal) -> TerminalTab:
        tab = TerminalTab(session)
        tab.closed.connect(self._on_session_ended)
        self._tabs.addTab(tab, session.title)
        session.set_show_handler(lambda: self._show_tab(tab))
        return tab

    def set_fast_open(self, label: Optional[str]) -> None:
        if label:
            self._fast_open_button.setText(label)
            self._fast_open_button.show()
        else:
            self._fast_open_button.hide()

    def show_output(self) -> None:
        self._output_dock.show()
        self._output_dock.raise_()

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _show_tab(self, tab: TerminalTab) -> None:
        index = self._tabs.indexOf(tab)
        if index >= 0:
            self._tabs.setCurrentIndex(index)
            tab.focus_input()
        self.raise_()

    def _on_tab_close_requested(self, index: int) -> None:
        tab = self._tabs.widget(index)
        self._tabs.removeTab(index)
        if isinstance(tab, TerminalTab):
            tab.session.close()
            self.app.session_closed(tab.session)
            tab.deleteLater()

    def _on_session_ended(self, session: LocalTerminal) -> None:
        # Tab stays open with the final output
        self.app.session_closed(session)

    def _choose_active_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Active file")
        if path:
            self._active_file_label.setText(Path(path).name)
            self.app.active_file_changed(path)

    def _watch_hosts_files(self) -> None:
        watched = self._watcher.files()
        if watched:
            self._watcher.removePaths(watched)
        paths = [str(Path(p).expanduser()) for p in self.settings_manager.settings.hosts_files]
        existing = [p for p in paths if Path(p).exists()]
        if existing:
            self._watcher.addPaths(existing)

    def _on_hosts_file_changed(self, path: str) -> None:
        logger.debug(f"Hosts file changed: {path}")
        self.app.reload()
        # Editors that replace the file drop it from the watcher
        if Path(path).exists() and path not in self._watcher.files():
            self._watcher.addPath(path)

    def closeEvent(self, event) -> None:
        s = self.settings_manager.settings
        s.window_width = self.width()
        s.window_height = self.height()
        for handle in self.app.connections():
            handle.session.close()
        self.settings_manager.save()
        super().closeEvent(event)
