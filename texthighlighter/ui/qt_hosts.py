"""
Qt integration for the highlight engine.

This module adapts real Qt text widgets to the engine's host interfaces
and wires the reactive refresh:

- TextEditGeometry: QTextEdit (multi-line, scrollable document)
- LineEditGeometry: QLineEdit (single-line field)
- PaletteSelectionColor: selection color via the palette Highlight role
- BackgroundPresenter: installs a rendered canvas as the widget background
- HighlighterBinding: owns engine + presenter and schedules refreshes

Typical use:

    binding = attach_highlighter(text_edit)
    binding.engine.add_substring(Style.WAVY_UNDERLINE, "teh", RGBA(1, 0, 0))
"""

from typing import Optional, Tuple, Union

from PySide6.QtCore import QEvent, QObject, QPointF, QTimer
from PySide6.QtGui import (
    QBrush,
    QColor,
    QFontMetricsF,
    QPainter,
    QPalette,
    QPixmap,
    QTextCursor,
)
from PySide6.QtWidgets import QLineEdit, QStyle, QTextEdit, QWidget

from texthighlighter.core.canvas import PixelCanvas
from texthighlighter.core.color import RGBA
from texthighlighter.core.errors import InvalidArgumentError
from texthighlighter.core.geometry import CharRect, HostKind, draw_offsets
from texthighlighter.editor.highlighter import HighlightEngine
from texthighlighter.services.config_service import ConfigService
from texthighlighter.services.logging_service import get_logger

# QLineEdit keeps this many pixels between the frame and the text
_LINE_EDIT_HORIZONTAL_MARGIN = 2
# QLineEdit.cursorRect starts this many pixels left of the caret
_LINE_EDIT_CARET_PAD = 5


# ─── Geometry Adapters ────────────────────────────────────────────────────────

class TextEditGeometry:
    """
    Geometry of a QTextEdit.

    The content area is the visible viewport, so a redraw allocates a canvas
    the size of what is on screen however long the document is. Character
    boxes come from cursorRect in viewport coordinates, which already apply
    the scroll position; the reported scroll offsets are therefore zero and
    the binding redraws whenever the scroll bars move.
    """

    def __init__(self, widget: QTextEdit) -> None:
        self._widget = widget

    def get_text(self) -> str:
        return self._widget.toPlainText()

    def get_content_size(self) -> Tuple[float, float]:
        viewport = self._widget.viewport()
        return (float(viewport.width()), float(viewport.height()))

    def get_character_bounds(self, index: int) -> CharRect:
        cursor = QTextCursor(self._widget.document())
        cursor.setPosition(index)
        rect = self._widget.cursorRect(cursor)

        width = None
        if index + 1 <= self._widget.document().characterCount() - 1:
            cursor.setPosition(index + 1)
            next_rect = self._widget.cursorRect(cursor)
            # same visual line: the caret advance is the glyph width
            if next_rect.top() == rect.top() and next_rect.left() > rect.left():
                width = float(next_rect.left() - rect.left())
        if width is None:
            text = self.get_text()
            char = text[index] if index < len(text) else " "
            width = QFontMetricsF(self._widget.font()).horizontalAdvance(char)

        return CharRect(float(rect.left()), float(rect.top()), width, float(rect.height()))

    def get_scroll_offsets(self) -> Tuple[float, float]:
        return (0.0, 0.0)

    def get_content_layout_position(self) -> Tuple[float, float]:
        position = self._widget.viewport().pos()
        return (float(position.x()), float(position.y()))


class LineEditGeometry:
    """
    Geometry of a QLineEdit.

    Character boxes are measured with the widget font and reported relative
    to the widget; the text starts at the content layout position. When the
    text is wider than the field, QLineEdit scrolls it to keep the caret in
    view, and that scroll is subtracted from every box.
    """

    def __init__(self, widget: QLineEdit) -> None:
        self._widget = widget

    def _metrics(self) -> QFontMetricsF:
        return QFontMetricsF(self._widget.font())

    def _frame_width(self) -> int:
        if not self._widget.hasFrame():
            return 0
        return self._widget.style().pixelMetric(
            QStyle.PixelMetric.PM_DefaultFrameWidth, None, self._widget
        )

    def _inner_rect(self) -> Tuple[float, float, float, float]:
        contents = self._widget.contentsRect()
        margins = self._widget.textMargins()
        frame = self._frame_width()
        x = contents.x() + margins.left() + frame + _LINE_EDIT_HORIZONTAL_MARGIN
        y = contents.y() + margins.top() + frame
        width = (
            contents.width() - margins.left() - margins.right()
            - 2 * frame - 2 * _LINE_EDIT_HORIZONTAL_MARGIN
        )
        height = contents.height() - margins.top() - margins.bottom() - 2 * frame
        return (float(x), float(y), float(max(0, width)), float(max(0, height)))

    def horizontal_scroll(self) -> float:
        """
        Pixels the field has scrolled its text to the left.

        QLineEdit keeps the scroll private; it is recovered from where the
        caret is drawn versus where the caret would be without scrolling.
        QLineEdit updates it while painting, so it is current after a paint.
        """
        caret_x = self._widget.cursorRect().left() + _LINE_EDIT_CARET_PAD
        prefix = self.get_text()[:self._widget.cursorPosition()]
        x, _ = self.get_content_layout_position()
        return x + self._metrics().horizontalAdvance(prefix) - caret_x

    def get_text(self) -> str:
        return self._widget.text()

    def get_content_size(self) -> Tuple[float, float]:
        _, _, width, height = self._inner_rect()
        return (width, height)

    def get_character_bounds(self, index: int) -> CharRect:
        text = self.get_text()
        metrics = self._metrics()
        x, y = self.get_content_layout_position()
        char = text[index] if index < len(text) else " "
        return CharRect(
            x + metrics.horizontalAdvance(text[:index]) - self.horizontal_scroll(),
            y,
            metrics.horizontalAdvance(char),
            metrics.height(),
        )

    def get_scroll_offsets(self) -> Tuple[float, float]:
        return (0.0, 0.0)

    def get_content_layout_position(self) -> Tuple[float, float]:
        x, y, _, height = self._inner_rect()
        # text is vertically centered in the field
        return (x, y + max(0.0, (height - self._metrics().height()) / 2))


class PaletteSelectionColor:
    """Selection color stored in the widget palette's Highlight role."""

    def __init__(self, widget: QWidget) -> None:
        self._widget = widget

    def get_selection_color(self) -> RGBA:
        return RGBA.from_qcolor(self._widget.palette().color(QPalette.ColorRole.Highlight))

    def set_selection_color(self, color: RGBA) -> None:
        palette = self._widget.palette()
        palette.setColor(QPalette.ColorRole.Highlight, color.to_qcolor())
        self._widget.setPalette(palette)


def host_for_widget(widget: QWidget) -> HostKind:
    """
    Wrap a text widget in the matching HostKind.

    Raises:
        InvalidArgumentError: widget is neither a QTextEdit nor a QLineEdit.
    """
    if isinstance(widget, QTextEdit):
        return HostKind.multi_line(TextEditGeometry(widget), PaletteSelectionColor(widget))
    if isinstance(widget, QLineEdit):
        return HostKind.single_line(LineEditGeometry(widget), PaletteSelectionColor(widget))
    raise InvalidArgumentError("No QTextEdit or QLineEdit widget.")


# ─── Presentation ─────────────────────────────────────────────────────────────

class BackgroundPresenter:
    """
    Installs rendered canvases as the background of a text widget.

    The canvas is composited over the widget's original base color into a
    pixmap exactly the size of the painted area, so the brush never tiles,
    and is placed so that the canvas origin lines up with the content origin.
    Only the part of the canvas that falls on the widget is converted.
    """

    def __init__(self, widget: Union[QTextEdit, QLineEdit], host: HostKind) -> None:
        self._target: QWidget = widget.viewport() if isinstance(widget, QTextEdit) else widget
        self._host = host
        self._original_base = QBrush(self._target.palette().brush(QPalette.ColorRole.Base))
        self._base_color = QColor(self._original_base.color())

    @property
    def target(self) -> QWidget:
        return self._target

    def present(self, canvas: PixelCanvas) -> None:
        size = self._target.size()
        if size.width() <= 0 or size.height() <= 0:
            return

        pixmap = QPixmap(size)
        pixmap.fill(self._base_color)

        offset_left, offset_top = draw_offsets(self._host)
        left = max(0, int(offset_left))
        top = max(0, int(offset_top))
        image = canvas.to_qimage(left, top, size.width(), size.height())
        if not image.isNull():
            painter = QPainter(pixmap)
            painter.drawImage(QPointF(left - offset_left, top - offset_top), image)
            painter.end()

        palette = self._target.palette()
        palette.setBrush(QPalette.ColorRole.Base, QBrush(pixmap))
        self._target.setPalette(palette)
        self._target.update()

    def clear(self) -> None:
        """Restore the background the widget had before presenting."""
        palette = self._target.palette()
        palette.setBrush(QPalette.ColorRole.Base, self._original_base)
        self._target.setPalette(palette)
        self._target.update()


# ─── Binding ──────────────────────────────────────────────────────────────────

class HighlighterBinding(QObject):
    """
    Connects a HighlightEngine to a live Qt text widget.

    Text, size and scroll changes request a refresh. Requests are deferred to
    the event loop through a zero-interval single-shot timer, so a burst of
    changes produces one redraw. Direct engine calls (add_index, refresh)
    still redraw synchronously.

    A QLineEdit has no scroll bars and settles its text scroll while
    painting, so after each paint the scroll is compared with the one of the
    last check and a change requests a refresh.
    """

    def __init__(
        self,
        widget: Union[QTextEdit, QLineEdit],
        config: Optional[ConfigService] = None,
    ) -> None:
        super().__init__(widget)
        self._logger = get_logger(__name__)
        self._widget = widget

        self._host = host_for_widget(widget)
        self._presenter = BackgroundPresenter(widget, self._host)
        self._engine = HighlightEngine(self._host, config, parent=self)
        self._engine.canvas_rendered.connect(self._presenter.present)

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setSingleShot(True)
        self._refresh_timer.setInterval(0)
        self._refresh_timer.timeout.connect(self._engine.refresh)

        self._line_scroll: Optional[float] = None
        self._scroll_check_timer = QTimer(self)
        self._scroll_check_timer.setSingleShot(True)
        self._scroll_check_timer.setInterval(0)
        self._scroll_check_timer.timeout.connect(self._check_line_scroll)

        self._connect_signals()
        self._attached = True
        self._logger.info(f"Highlighter attached to {type(widget).__name__}")

    @property
    def engine(self) -> HighlightEngine:
        return self._engine

    @property
    def presenter(self) -> BackgroundPresenter:
        return self._presenter

    @property
    def refresh_pending(self) -> bool:
        return self._refresh_timer.isActive()

    def _connect_signals(self) -> None:
        self._widget.textChanged.connect(self.request_refresh)
        self._widget.installEventFilter(self)
        if isinstance(self._widget, QTextEdit):
            for scroll_bar in (
                self._widget.horizontalScrollBar(),
                self._widget.verticalScrollBar(),
            ):
                scroll_bar.valueChanged.connect(self.request_refresh)
                scroll_bar.rangeChanged.connect(self.request_refresh)
        else:
            self._widget.cursorPositionChanged.connect(self.request_refresh)

    def _disconnect_signals(self) -> None:
        self._widget.textChanged.disconnect(self.request_refresh)
        self._widget.removeEventFilter(self)
        if isinstance(self._widget, QTextEdit):
            for scroll_bar in (
                self._widget.horizontalScrollBar(),
                self._widget.verticalScrollBar(),
            ):
                scroll_bar.valueChanged.disconnect(self.request_refresh)
                scroll_bar.rangeChanged.disconnect(self.request_refresh)
        else:
            self._widget.cursorPositionChanged.disconnect(self.request_refresh)

    def request_refresh(self, *args) -> None:
        """Schedule a refresh on the next event loop iteration."""
        if self._attached and not self._refresh_timer.isActive():
            self._refresh_timer.start()

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._widget:
            if event.type() == QEvent.Type.Resize:
                self.request_refresh()
            elif event.type() == QEvent.Type.Paint and isinstance(self._widget, QLineEdit):
                self._scroll_check_timer.start()
        return False

    def _check_line_scroll(self) -> None:
        if not self._attached:
            return
        scroll = self._host.geometry.horizontal_scroll()
        if scroll != self._line_scroll:
            self._line_scroll = scroll
            self.request_refresh()

    def detach(self) -> None:
        """Stop reacting to the widget, restore its background and close the engine."""
        if not self._attached:
            return
        self._attached = False
        self._refresh_timer.stop()
        self._scroll_check_timer.stop()
        self._disconnect_signals()
        self._engine.canvas_rendered.disconnect(self._presenter.present)
        self._presenter.clear()
        self._engine.close()
        self._logger.info(f"Highlighter detached from {type(self._widget).__name__}")


def attach_highlighter(
    widget: Union[QTextEdit, QLineEdit],
    config: Optional[ConfigService] = None,
) -> HighlighterBinding:
    """Create an engine for widget and keep it in sync with the widget."""
    return HighlighterBinding(widget, config)
