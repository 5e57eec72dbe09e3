"""Qt widget tests (pytest-qt). Skipped when PyQt6 is unavailable."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PyQt6.QtWidgets")
pytest.importorskip("pytestqt")

from PyQt6.QtWidgets import QDialogButtonBox

from sshdock.output import OutputLog
from sshdock.session.base import DataReceived, SessionClosed
from sshdock.session.local_terminal import LocalTerminal
from sshdock.ui.main_window import MainWindow, OutputPanel
from sshdock.ui.shell import LineInputDialog
from sshdock.ui.terminal_tab import TerminalTab

from conftest import FakeSession


def digits_only(text):
    return None if text.isdigit() else "digits only"


class TestLineInputDialog:

    def test_ok_disabled_while_invalid(self, qtbot):
        dialog = LineInputDialog("Port", digits_only)
        qtbot.addWidget(dialog)
        ok = dialog._buttons.button(QDialogButtonBox.StandardButton.Ok)

        assert not ok.isEnabled()
        dialog.set_text("abc")
        assert dialog.error == "digits only"
        assert not ok.isEnabled()

        dialog.set_text("9000")
        assert dialog.error is None
        assert ok.isEnabled()
        assert dialog.text == "9000"

    def test_without_validator(self, qtbot):
        dialog = LineInputDialog("Anything")
        qtbot.addWidget(dialog)
        dialog.set_text("x")
        assert dialog._buttons.button(QDialogButtonBox.StandardButton.Ok).isEnabled()


class TestTerminalTab:

    def test_output_is_stripped_of_escapes(self, qtbot):
        tab = TerminalTab(FakeSession("alpha"))
        qtbot.addWidget(tab)
        tab._on_session_event(DataReceived(b"\x1b[32mhello\x1b[0m\r\n"))
        assert "hello" in tab.output_text
        assert "\x1b" not in tab.output_text

    def test_return_sends_line(self, qtbot):
        session = FakeSession("alpha")
        tab = TerminalTab(session)
        qtbot.addWidget(tab)
        tab._input.setText("uptime")
        tab._on_return()
        assert session.lines == ["uptime"]
        assert tab._input.text() == ""

    def test_session_closed_signal(self, qtbot):
        session = FakeSession("alpha")
        tab = TerminalTab(session)
        qtbot.addWidget(tab)
        with qtbot.waitSignal(tab.closed, timeout=1000) as blocker:
            tab._on_session_event(SessionClosed("Process exited (code 0)"))
        assert blocker.args == [session]
        assert not tab._input.isEnabled()
        assert "Process exited (code 0)" in tab.output_text


def test_output_panel_follows_log(qtbot):
    log = OutputLog()
    log.append_line("before")
    panel = OutputPanel(log)
    qtbot.addWidget(panel)
    log.append_line("after")
    assert panel.toPlainText().splitlines() == ["before", "after"]


class TestMainWindow:

    @pytest.fixture
    def window(self, qtbot, settings_manager, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: "/usr/bin/ssh")
        window = MainWindow(settings_manager)
        qtbot.addWidget(window)
        return window

    def test_startup_logs_ssh_check(self, window):
        assert any("Find ssh on your system." in line for line in window.log.lines)

    def test_fast_open_button(self, window):
        window.set_fast_open("Open SSH on web")
        assert not window._fast_open_button.isHidden()
        assert window._fast_open_button.text() == "Open SSH on web"
        window.set_fast_open(None)
        assert window._fast_open_button.isHidden()

    def test_closing_tab_closes_session(self, window):
        session = LocalTerminal("alpha", command=["/bin/true"])
        window.add_session_tab(session)
        assert window._tabs.count() == 1

        window._on_tab_close_requested(0)
        assert window._tabs.count() == 0
        assert not session.is_active
