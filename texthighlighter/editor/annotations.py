"""
Annotation models for the highlight engine.

An annotation is a request to mark text with a style and a color. It is
given either by character index or by a substring that is looked up in
the live text on every redraw. Annotations are immutable; the store only
appends and clears.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional

from texthighlighter.core.color import RGBA
from texthighlighter.core.errors import InvalidArgumentError
from texthighlighter.services.logging_service import get_logger


class Style(Enum):
    """Visual treatment of an annotation."""
    HIGHLIGHT = auto()
    UNDERLINE = auto()
    WAVY_UNDERLINE = auto()


@dataclass(frozen=True)
class SubstringAnnotation:
    """Marks every occurrence of ``text``."""
    style: Style
    text: str
    color: RGBA


@dataclass(frozen=True)
class IndexAnnotation:
    """Marks the single character at ``index``."""
    style: Style
    index: int
    color: RGBA


class AnnotationStore:
    """
    Ordered, append-only lists of pending annotations.

    The substring list and the index list are independent: clearing one
    leaves the other alone. ``on_change`` is invoked after every successful
    add; clearing does not invoke it, the caller decides when to redraw.
    """

    def __init__(self, on_change: Optional[Callable[[], None]] = None) -> None:
        self._logger = get_logger(__name__)
        self._substrings: List[SubstringAnnotation] = []
        self._indices: List[IndexAnnotation] = []
        self._on_change = on_change

    def _reject(self, message: str) -> None:
        self._logger.warning(message)
        raise InvalidArgumentError(message)

    def _check_style_and_color(self, style: Style, color: RGBA) -> None:
        if style is None:
            self._reject("Style must not be None.")
        if not isinstance(style, Style):
            self._reject(f"Unknown style: {style!r}")
        if color is None:
            self._reject("Color must not be None.")
        if not isinstance(color, RGBA):
            self._reject(f"Color must be an RGBA value, got {type(color).__name__}")

    def add_substring(self, style: Style, text: str, color: RGBA) -> SubstringAnnotation:
        """Append a substring annotation and notify the owner."""
        self._check_style_and_color(style, color)
        if not isinstance(text, str) or text == "":
            self._reject("Substring value must not be an empty string.")

        annotation = SubstringAnnotation(style, text, color)
        self._substrings.append(annotation)
        self._notify()
        return annotation

    def add_index(self, style: Style, index: int, color: RGBA) -> IndexAnnotation:
        """Append an index annotation and notify the owner."""
        self._check_style_and_color(style, color)
        if not isinstance(index, int) or isinstance(index, bool):
            self._reject(f"Index must be an integer, got {index!r}")
        if index < 0:
            self._reject("Index must not be smaller than 0.")

        annotation = IndexAnnotation(style, index, color)
        self._indices.append(annotation)
        self._notify()
        return annotation

    def clear_substrings(self) -> None:
        self._substrings.clear()

    def clear_indices(self) -> None:
        self._indices.clear()

    @property
    def substrings(self) -> List[SubstringAnnotation]:
        return list(self._substrings)

    @property
    def indices(self) -> List[IndexAnnotation]:
        return list(self._indices)

    def is_empty(self) -> bool:
        return not self._substrings and not self._indices

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
