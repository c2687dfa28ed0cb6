"""
TextHighlighter demo.

Opens a window with annotated multi-line and single-line editors.
Run with: python -m texthighlighter.app
"""

import sys

from PySide6.QtWidgets import QApplication

from texthighlighter.services.config_service import ConfigService
from texthighlighter.services.logging_service import get_logger, setup_logging
from texthighlighter.ui.main_window import MainWindow


def main() -> int:
    """
    Show the demo window and run the Qt event loop.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    setup_logging()
    logger = get_logger(__name__)

    try:
        logger.info("Starting TextHighlighter demo...")

        app = QApplication.instance() or QApplication(sys.argv)
        app.setApplicationName("TextHighlighter")

        window = MainWindow(ConfigService())
        window.show()

        exit_code = app.exec()
        logger.info(f"TextHighlighter demo exiting with code {exit_code}")
        return exit_code

    except Exception as e:
        logger.critical(f"Fatal error during startup: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
