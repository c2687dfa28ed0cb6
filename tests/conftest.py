"""Shared fixtures: an offscreen QApplication and an in-memory text host."""

import os
from typing import List, Tuple

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from texthighlighter.core.color import RGBA  # noqa: E402
from texthighlighter.core.geometry import CharRect, HostKind  # noqa: E402
from texthighlighter.services.config_service import ConfigService  # noqa: E402

CHAR_WIDTH = 8
LINE_HEIGHT = 18


class GridGeometry:
    """Monospace layout: every glyph is CHAR_WIDTH x LINE_HEIGHT, lines split on '\\n'."""

    def __init__(
        self,
        text: str = "",
        size: Tuple[float, float] = (200.0, 100.0),
        scroll: Tuple[float, float] = (0.0, 0.0),
        layout: Tuple[float, float] = (0.0, 0.0),
    ) -> None:
        self.text = text
        self.size = size
        self.scroll = scroll
        self.layout = layout
        self.bounds_requests: List[int] = []

    def get_text(self) -> str:
        return self.text

    def get_content_size(self) -> Tuple[float, float]:
        return self.size

    def get_character_bounds(self, index: int) -> CharRect:
        self.bounds_requests.append(index)
        line = self.text.count("\n", 0, index)
        column = index - (self.text.rfind("\n", 0, index) + 1)
        return CharRect(column * CHAR_WIDTH, line * LINE_HEIGHT, CHAR_WIDTH, LINE_HEIGHT)

    def get_scroll_offsets(self) -> Tuple[float, float]:
        return self.scroll

    def get_content_layout_position(self) -> Tuple[float, float]:
        return self.layout


class MemorySelection:
    def __init__(self, color: RGBA = RGBA(0.2, 0.4, 0.8, 1.0)) -> None:
        self.color = color

    def get_selection_color(self) -> RGBA:
        return self.color

    def set_selection_color(self, color: RGBA) -> None:
        self.color = color


@pytest.fixture(scope="session")
def qapp() -> QApplication:
    """One QApplication for the whole test session."""
    return QApplication.instance() or QApplication([])


@pytest.fixture
def geometry() -> GridGeometry:
    return GridGeometry(text="hello world")


@pytest.fixture
def selection() -> MemorySelection:
    return MemorySelection()


@pytest.fixture
def multi_line_host(geometry: GridGeometry, selection: MemorySelection) -> HostKind:
    return HostKind.multi_line(geometry, selection)


@pytest.fixture
def config() -> ConfigService:
    return ConfigService.in_memory()
