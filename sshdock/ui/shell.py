"""
Qt implementation of the UI shell: modal pickers and prompts.
"""

from __future__ import annotations
from typing import Optional, Sequence, TYPE_CHECKING

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QLineEdit, QDialogButtonBox,
    QInputDialog, QMessageBox, QWidget,
)

from ..session.base import Session
from ..session.local_terminal import LocalTerminal
from ..shell import UIShell, Validator

if TYPE_CHECKING:
    from .main_window import MainWindow


class LineInputDialog(QDialog):
    """
    Single-line input with inline validation.

    The OK button stays disabled while the validator reports an error;
    the error text is shown under the field.
    """

    def __init__(self, prompt: str, validate: Optional[Validator] = None, parent: QWidget = None):
        super().__init__(parent)
        self._validate = validate

        self.setWindowTitle("sshdock")
        self.setMinimumWidth(420)
        self.setModal(True)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel(prompt))

        self._input = QLineEdit()
        self._input.textChanged.connect(self._on_text_changed)
        layout.addWidget(self._input)

        # Error label
        self._error_label = QLabel()
        self._error_label.setStyleSheet("color: #f38ba8;")
        self._error_label.setWordWrap(True)
        self._error_label.hide()
        layout.addWidget(self._error_label)

        self._buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        self._buttons.accepted.connect(self.accept)
        self._buttons.rejected.connect(self.reject)
        layout.addWidget(self._buttons)

        self._on_text_changed("")

    @property
    def text(self) -> str:
        return self._input.text()

    @property
    def error(self) -> Optional[str]:
        return self._error_label.text() if self._error_label.isVisibleTo(self) else None

    def set_text(self, text: str) -> None:
        self._input.setText(text)

    def _on_text_changed(self, text: str) -> None:
        error = self._validate(text) if (self._validate and text) else None
        ok_button = self._buttons.button(QDialogButtonBox.StandardButton.Ok)
        if error:
            self._error_label.setText(error)
            self._error_label.show()
        else:
            self._error_label.hide()
        ok_button.setEnabled(bool(text) and error is None)


class QtShell(UIShell):
    """UI shell backed by the main window."""

    def __init__(self, window: MainWindow):
        self.window = window

    def pick(self, items: Sequence[str], placeholder: str = "") -> Optional[str]:
        if not items:
            return None
        item, ok = QInputDialog.getItem(
            self.window, "sshdock", placeholder or "Select", list(items), 0, False
        )
        return item if ok else None

    def prompt(
        self,
        prompt: str,
        validate: Optional[Validator] = None,
        ignore_focus_out: bool = True,
    ) -> Optional[str]:
        # Dialogs are modal, so focus changes never dismiss them
        dialog = LineInputDialog(prompt, validate, self.window)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return None
        return dialog.text

    def show_info(self, message: str, *buttons: str) -> Optional[str]:
        return self._message(QMessageBox.Icon.Information, message, buttons)

    def show_error(self, message: str, *buttons: str) -> Optional[str]:
        return self._message(QMessageBox.Icon.Critical, message, buttons)

    def _message(self, icon: QMessageBox.Icon, message: str, buttons: Sequence[str]) -> Optional[str]:
        box = QMessageBox(icon, "sshdock", message, parent=self.window)
        added = [(box.addButton(label, QMessageBox.ButtonRole.AcceptRole), label) for label in buttons]
        box.addButton(QMessageBox.StandardButton.Close)
        box.exec()
        clicked = box.clickedButton()
        for button, label in added:
            if button is clicked:
                return label
        return None

    def create_session(self, title: str) -> Session:
        session = LocalTerminal(title)
        self.window.add_session_tab(session)
        session.connect()
        return session

    def set_fast_open(self, label: Optional[str]) -> None:
        self.window.set_fast_open(label)
