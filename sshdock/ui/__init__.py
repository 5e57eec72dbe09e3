"""
PyQt6 front end for sshdock.
"""

from .main_window import MainWindow, OutputPanel
from .shell import QtShell, LineInputDialog
from .terminal_tab import TerminalTab

__all__ = [
    "MainWindow",
    "OutputPanel",
    "QtShell",
    "LineInputDialog",
    "TerminalTab",
]
