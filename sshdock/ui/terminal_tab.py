"""
Terminal tab: a plain-text view over a LocalTerminal.
"""

from __future__ import annotations
import logging
import re

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QFont, QTextCursor
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QPlainTextEdit, QLineEdit

from ..session.base import SessionEvent, DataReceived, SessionClosed
from ..session.local_terminal import LocalTerminal

logger = logging.getLogger(__name__)

# ANSI escape sequences stripped before display
ANSI_ESCAPE = re.compile(rb'\x1b\[[0-9;?]*[a-zA-Z]|\x1b\].*?(?:\x07|\x1b\\)|\x1b[()][0-9A-Za-z]|\r')

MAX_BLOCKS = 10000


class TerminalTab(QWidget):
    """
    Shows a session's output and sends typed lines to it.

    Session events arrive on the PTY thread; they are re-emitted as Qt
    signals so widget updates happen on the UI thread.

    Signals:
        closed(session): the shell process is gone
    """

    data_received = pyqtSignal(bytes)
    session_ended = pyqtSignal(str)
    closed = pyqtSignal(object)  # LocalTerminal

    def __init__(self, session: LocalTerminal, parent=None):
        super().__init__(parent)
        self.session = session
        self._ended = False

        self._setup_ui()

        self.data_received.connect(self._append_output)
        self.session_ended.connect(self._on_session_ended)
        session.set_event_handler(self._on_session_event)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        font = QFont("monospace")
        font.setStyleHint(QFont.StyleHint.Monospace)

        self._view = QPlainTextEdit()
        self._view.setReadOnly(True)
        self._view.setMaximumBlockCount(MAX_BLOCKS)
        self._view.setFont(font)
        layout.addWidget(self._view, 1)

        self._input = QLineEdit()
        self._input.setFont(font)
        self._input.setPlaceholderText("Type a line and press Enter")
        self._input.returnPressed.connect(self._on_return)
        layout.addWidget(self._input)

    @property
    def output_text(self) -> str:
        return self._view.toPlainText()

    # Runs on the PTY thread
    def _on_session_event(self, event: SessionEvent) -> None:
        if isinstance(event, DataReceived):
            self.data_received.emit(event.data)
        elif isinstance(event, SessionClosed):
            self.session_ended.emit(event.message)

    def _append_output(self, data: bytes) -> None:
        text = ANSI_ESCAPE.sub(b'', data).decode('utf-8', errors='replace')
        cursor = self._view.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.End)
        cursor.insertText(text)
        self._view.setTextCursor(cursor)
        self._view.ensureCursorVisible()

    def _on_return(self) -> None:
        line = self._input.text()
        self._input.clear()
        self.session.send_text(line)

    def _on_session_ended(self, message: str) -> None:
        if self._ended:
            return
        self._ended = True
        self._input.setEnabled(False)
        self._append_output(f"\n[{message}]\n".encode())
        self.closed.emit(self.session)

    def focus_input(self) -> None:
        self._input.setFocus()
