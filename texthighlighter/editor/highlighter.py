"""
Highlight engine.

The HighlightEngine owns the pending annotations of one text widget and
renders them into a fresh PixelCanvas whenever refresh() is called. The
finished canvas is emitted through ``canvas_rendered`` for the
presentation layer to install as the widget background.

A redraw pass:
1. Skips entirely when there is nothing to draw or the content area is empty
2. Allocates a transparent canvas the size of the content area plus a margin
3. Expands substring annotations against the current text
4. Draws each annotation at its character box, shifted by the host offsets
5. Emits the canvas

Redraw is synchronous and a pure function of the annotations and the
host's current geometry, so calling it repeatedly is safe and yields the
same pixels. Scheduling it (on text change, resize, scroll) is left to the
host integration in texthighlighter.ui.qt_hosts.
"""

import math
from typing import Callable, Dict, List, Optional

from PySide6.QtCore import QObject, Signal

from texthighlighter.core.canvas import PixelCanvas
from texthighlighter.core.color import RGBA
from texthighlighter.core.errors import InvalidArgumentError
from texthighlighter.core.geometry import CharRect, HostKind, draw_offsets
from texthighlighter.core.primitives import draw_hline, draw_wavy_hline, fill_rect
from texthighlighter.editor.annotations import (
    AnnotationStore,
    IndexAnnotation,
    Style,
    SubstringAnnotation,
)
from texthighlighter.editor.resolver import expand_annotations
from texthighlighter.services.config_service import ConfigService
from texthighlighter.services.logging_service import get_logger


def _round_px(value: float) -> int:
    """Round half up to the nearest pixel."""
    return int(math.floor(value + 0.5))


class HighlightEngine(QObject):
    """
    Highlights and underlines characters of a text widget.

    Signals:
        canvas_rendered: Emitted with the finished PixelCanvas after every
            redraw that was not skipped.
    """

    canvas_rendered = Signal(object)

    def __init__(
        self,
        host: HostKind,
        config: Optional[ConfigService] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """
        Initialize the engine for one host widget.

        Args:
            host: The multi-line or single-line host to draw for.
            config: Drawing constants; in-memory defaults when omitted.
            parent: Optional Qt parent.

        Raises:
            InvalidArgumentError: host is not a HostKind.
        """
        super().__init__(parent)
        self._logger = get_logger(__name__)

        if not isinstance(host, HostKind):
            raise InvalidArgumentError(
                f"Host must be a multi-line or single-line HostKind, got {type(host).__name__}"
            )

        self._host = host
        self._config = config or ConfigService.in_memory()
        self._store = AnnotationStore(on_change=self.refresh)
        self._last_canvas: Optional[PixelCanvas] = None
        self._closed = False

        self._painters: Dict[Style, Callable[[PixelCanvas, CharRect, RGBA, int], int]] = {
            Style.HIGHLIGHT: self._highlight_index,
            Style.UNDERLINE: self._underline_index,
            Style.WAVY_UNDERLINE: self._wavy_underline_index,
        }

        self.set_selection_opacity(self._config.selection_opacity)
        self._logger.info(
            f"HighlightEngine attached to {host.kind.name.lower().replace('_', '-')} host"
        )

    # ─── Annotations ──────────────────────────────────────────────────────

    def add_substring(self, style: Style, text: str, color: RGBA) -> SubstringAnnotation:
        """Highlight every occurrence of text (non-empty) and redraw."""
        return self._store.add_substring(style, text, color)

    def add_index(self, style: Style, index: int, color: RGBA) -> IndexAnnotation:
        """Highlight the character at index (>= 0) and redraw."""
        return self._store.add_index(style, index, color)

    def clear_substrings(self) -> None:
        """Drop all substring annotations. Call refresh() to update the display."""
        self._store.clear_substrings()

    def clear_indices(self) -> None:
        """Drop all index annotations. Call refresh() to update the display."""
        self._store.clear_indices()

    @property
    def substrings(self) -> List[SubstringAnnotation]:
        return self._store.substrings

    @property
    def indices(self) -> List[IndexAnnotation]:
        return self._store.indices

    @property
    def host(self) -> HostKind:
        return self._host

    @property
    def last_canvas(self) -> Optional[PixelCanvas]:
        """Canvas of the most recent completed redraw, if any."""
        return self._last_canvas

    # ─── Selection Color ──────────────────────────────────────────────────

    def set_selection_opacity(self, opacity: float) -> None:
        """Replace the alpha of the widget's selection color, keeping its RGB."""
        if (
            not isinstance(opacity, (int, float))
            or isinstance(opacity, bool)
            or not 0.0 <= opacity <= 1.0
        ):
            message = "Opacity value must be between 0.0 and 1.0"
            self._logger.warning(f"{message}, got {opacity!r}")
            raise InvalidArgumentError(message)

        selection = self._host.selection
        selection.set_selection_color(selection.get_selection_color().with_opacity(float(opacity)))

    def get_selection_opacity(self) -> float:
        return self._host.selection.get_selection_color().opacity

    @property
    def selection_color(self) -> RGBA:
        return self._host.selection.get_selection_color()

    @selection_color.setter
    def selection_color(self, color: RGBA) -> None:
        if not isinstance(color, RGBA):
            raise InvalidArgumentError("Color must not be None.")
        self._host.selection.set_selection_color(color)

    # ─── Rendering ────────────────────────────────────────────────────────

    def underline_offset(self) -> int:
        """
        Vertical shift of underlines relative to the bottom of the glyph box.

        Derived from the height of the first character as a stand-in for the
        line height; 0 when there is no text.
        """
        geometry = self._host.geometry
        if not geometry.get_text():
            return 0
        line_height = geometry.get_character_bounds(0).height
        return _round_px(-line_height / self._config.underline_divisor)

    def refresh(self) -> Optional[PixelCanvas]:
        """
        Redraw all annotations into a new canvas.

        Returns:
            The new canvas, or None when the pass was skipped. A skipped
            pass leaves last_canvas as it was.
        """
        if self._closed:
            return None
        if self._store.is_empty():
            self._logger.debug("Redraw skipped: no annotations")
            return None

        geometry = self._host.geometry
        width, height = geometry.get_content_size()
        if int(width) <= 0 or int(height) <= 0:
            self._logger.debug(f"Redraw skipped: empty content area {width}x{height}")
            return None

        margin = self._config.canvas_margin
        canvas = PixelCanvas(int(width) + margin, int(height) + margin)

        text = geometry.get_text()
        combined = expand_annotations(text, self._store.indices, self._store.substrings)
        offset_left, offset_top = draw_offsets(self._host)
        underline_offset = self.underline_offset()

        for annotation in combined:
            if annotation.index >= len(text):
                self._logger.debug(
                    f"Index {annotation.index} beyond text of length {len(text)}, skipped"
                )
                continue
            bounds = geometry.get_character_bounds(annotation.index)
            shifted = CharRect(
                bounds.min_x + offset_left,
                bounds.min_y + offset_top,
                bounds.width,
                bounds.height,
            )
            self._painters[annotation.style](canvas, shifted, annotation.color, underline_offset)

        self._logger.debug(
            f"Redrew {len(combined)} annotated characters on {canvas.width}x{canvas.height} canvas"
        )
        self._last_canvas = canvas
        self.canvas_rendered.emit(canvas)
        return canvas

    def close(self) -> None:
        """Drop all annotations and the last canvas; later refreshes are no-ops."""
        self._store.clear_substrings()
        self._store.clear_indices()
        self._last_canvas = None
        self._closed = True
        self._logger.info("HighlightEngine closed")

    # ─── Per-Character Drawing ────────────────────────────────────────────

    def _highlight_index(
        self, canvas: PixelCanvas, bounds: CharRect, color: RGBA, underline_offset: int
    ) -> int:
        return fill_rect(
            canvas,
            _round_px(bounds.min_x),
            _round_px(bounds.min_y + self._config.highlight_inset_top),
            int(bounds.width),
            int(bounds.height - self._config.highlight_height_reduction),
            color,
        )

    def _underline_index(
        self, canvas: PixelCanvas, bounds: CharRect, color: RGBA, underline_offset: int
    ) -> int:
        return draw_hline(
            canvas,
            _round_px(bounds.min_x),
            _round_px(bounds.max_y + underline_offset),
            int(bounds.width),
            color,
        )

    def _wavy_underline_index(
        self, canvas: PixelCanvas, bounds: CharRect, color: RGBA, underline_offset: int
    ) -> int:
        return draw_wavy_hline(
            canvas,
            _round_px(bounds.min_x),
            _round_px(bounds.max_y + underline_offset),
            int(bounds.width),
            color,
        )
