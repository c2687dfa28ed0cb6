"""
Geometry types and the interfaces a host widget must provide.

The engine never looks at a widget directly. A host adapter implements
GeometryProvider (text, content size, per-character boxes and offsets)
and SelectionColorProvider (the widget's selection highlight color), and
is wrapped in a HostKind that records whether the widget is multi-line
or single-line.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol, Tuple, runtime_checkable

from texthighlighter.core.color import RGBA
from texthighlighter.core.errors import InvalidArgumentError


@dataclass(frozen=True)
class CharRect:
    """Bounding box of one glyph, in content-area pixels."""
    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.min_x + self.width

    @property
    def max_y(self) -> float:
        return self.min_y + self.height


@runtime_checkable
class GeometryProvider(Protocol):
    """Read-only view of a text widget's content and layout."""

    def get_text(self) -> str:
        ...

    def get_content_size(self) -> Tuple[float, float]:
        """Visible content area as (width, height) in pixels."""
        ...

    def get_character_bounds(self, index: int) -> CharRect:
        """Box of the glyph at index. Only defined for 0 <= index < len(text)."""
        ...

    def get_scroll_offsets(self) -> Tuple[float, float]:
        """(left, top) scroll position. Used for multi-line hosts."""
        ...

    def get_content_layout_position(self) -> Tuple[float, float]:
        """(x, y) of the content area inside the widget. Used for single-line hosts."""
        ...


@runtime_checkable
class SelectionColorProvider(Protocol):
    """Access to the color the widget paints selected text with."""

    def get_selection_color(self) -> RGBA:
        ...

    def set_selection_color(self, color: RGBA) -> None:
        ...


class HostType(Enum):
    MULTI_LINE = auto()
    SINGLE_LINE = auto()


@dataclass(frozen=True)
class HostKind:
    """
    The widget the engine draws for, tagged with its kind.

    Build it with HostKind.multi_line() or HostKind.single_line(); the tag
    is fixed for the lifetime of the engine.
    """
    kind: HostType
    geometry: GeometryProvider
    selection: SelectionColorProvider

    def __post_init__(self) -> None:
        if not isinstance(self.kind, HostType):
            raise InvalidArgumentError(f"Unsupported host kind: {self.kind!r}")
        if self.geometry is None or self.selection is None:
            raise InvalidArgumentError("Host needs a geometry and a selection color provider.")

    @classmethod
    def multi_line(cls, geometry: GeometryProvider, selection: SelectionColorProvider) -> "HostKind":
        return cls(HostType.MULTI_LINE, geometry, selection)

    @classmethod
    def single_line(cls, geometry: GeometryProvider, selection: SelectionColorProvider) -> "HostKind":
        return cls(HostType.SINGLE_LINE, geometry, selection)

    @property
    def is_multi_line(self) -> bool:
        return self.kind is HostType.MULTI_LINE


def draw_offsets(host: HostKind) -> Tuple[float, float]:
    """
    Offset added to every character box before drawing.

    A multi-line widget scrolls its content, so the scroll position is added
    back. A single-line widget does not scroll independently; its content
    sits at a layout position inside the field, which is subtracted.
    """
    if host.kind is HostType.MULTI_LINE:
        return host.geometry.get_scroll_offsets()
    x, y = host.geometry.get_content_layout_position()
    return (-x, -y)
