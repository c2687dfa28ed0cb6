"""
Demo window for TextHighlighter.

Shows a multi-line QTextEdit and a single-line QLineEdit, each with a few
highlight, underline and wavy-underline annotations, so the rendering can
be checked by eye while typing, resizing and scrolling.
"""

from typing import List, Optional

from PySide6.QtWidgets import (
    QLabel,
    QLineEdit,
    QMainWindow,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from texthighlighter.core.color import RGBA
from texthighlighter.editor.annotations import Style
from texthighlighter.services.config_service import ConfigService
from texthighlighter.services.logging_service import get_logger
from texthighlighter.ui.qt_hosts import HighlighterBinding, attach_highlighter

SAMPLE_TEXT = (
    "The quick brown fox jumps over the lazy dog.\n"
    "Teh spelling mistake is underlined, the word fox is highlighted,\n"
    "and every 'the' gets a straight underline.\n"
) * 8

HIGHLIGHT_COLOR = RGBA.from_rgb8(255, 220, 0, 0.6)
UNDERLINE_COLOR = RGBA.from_rgb8(40, 110, 230)
WAVY_COLOR = RGBA.from_rgb8(230, 30, 30)


class MainWindow(QMainWindow):
    """Main window hosting the two annotated editors."""

    def __init__(
        self,
        config_service: Optional[ConfigService] = None,
        parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self._logger = get_logger(__name__)
        self._config = config_service
        self._bindings: List[HighlighterBinding] = []

        self._setup_window()
        self._setup_central_widget()

        self._logger.info("MainWindow initialized")

    def _setup_window(self) -> None:
        self.setWindowTitle("TextHighlighter Demo")
        self.setMinimumSize(480, 320)
        self.resize(720, 480)

    def _setup_central_widget(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        self._text_edit = QTextEdit(central)
        self._text_edit.setPlainText(SAMPLE_TEXT)
        self._line_edit = QLineEdit(central)
        self._line_edit.setText("Teh fox in a single-line field")

        layout.addWidget(QLabel("Multi-line", central))
        layout.addWidget(self._text_edit)
        layout.addWidget(QLabel("Single-line", central))
        layout.addWidget(self._line_edit)
        self.setCentralWidget(central)

        for widget in (self._text_edit, self._line_edit):
            binding = attach_highlighter(widget, self._config)
            binding.engine.add_substring(Style.HIGHLIGHT, "fox", HIGHLIGHT_COLOR)
            binding.engine.add_substring(Style.UNDERLINE, "the", UNDERLINE_COLOR)
            binding.engine.add_substring(Style.WAVY_UNDERLINE, "Teh", WAVY_COLOR)
            self._bindings.append(binding)

    def closeEvent(self, event) -> None:
        for binding in self._bindings:
            binding.detach()
        super().closeEvent(event)
