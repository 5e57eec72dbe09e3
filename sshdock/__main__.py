"""
sshdock desktop entry point.

    python -m sshdock
"""

import sys
import logging

from PyQt6.QtWidgets import QApplication

from .config import get_settings_manager
from .ui.main_window import MainWindow


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("sshdock")
    app.setStyle("Fusion")

    window = MainWindow(get_settings_manager())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
