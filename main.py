import sys

from PyQt5.QtWidgets import QApplication

from inkmark.config import load_settings
from inkmark.ui import MainWindow
from inkmark.utils import setup_logging


def main():
    """
    Run the annotation editor.
    An optional PDF path may be passed as the first command-line argument.
    """
    setup_logging()
    settings = load_settings()

    app = QApplication(sys.argv)

    file_path = None
    if len(sys.argv) > 1:
        file_path = sys.argv[1]

    window = MainWindow(file_path, settings)
    window.showMaximized()
    sys.exit(app.exec_())


if __name__ == '__main__':
    main()
