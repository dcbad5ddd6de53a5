import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QFont
from qt_material import apply_stylesheet

from core.config import load_settings
from ui import MainWindow


def main():
    app = QApplication(sys.argv)

    # Base font
    font = QFont("Segoe UI", 10)
    app.setFont(font)

    apply_stylesheet(app, theme="dark_lightgreen.xml")

    # "ffui <file>" is how the shell's "Open with" hands us a file
    source = Path(sys.argv[1]) if len(sys.argv) > 1 else None

    window = MainWindow(load_settings(), source)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
