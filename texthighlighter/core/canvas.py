"""
Off-screen pixel buffer for one redraw pass.

PixelCanvas stores float RGBA pixels in a numpy array of shape
(height, width, 4). Writes outside the buffer are clipped silently: the
geometry reported by a widget during a resize can be briefly inconsistent,
and a half-drawn frame is corrected by the next redraw anyway.
"""

from typing import Optional, Tuple

import numpy as np
from PySide6.QtGui import QImage

from texthighlighter.core.color import RGBA
from texthighlighter.core.errors import InvalidArgumentError


class PixelCanvas:
    """
    A mutable 2D grid of RGBA pixels, fully transparent when created.

    Coordinates are integer pixels with the origin at the top-left corner.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise InvalidArgumentError(
                f"Canvas size must not be negative, got {width}x{height}"
            )
        self._width = int(width)
        self._height = int(height)
        self._pixels = np.zeros((self._height, self._width, 4), dtype=np.float64)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the underlying (height, width, 4) array."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def set_pixel(self, x: int, y: int, color: RGBA) -> bool:
        """
        Write one pixel, replacing whatever was there.

        Returns:
            True if the pixel was written, False if it was clipped.
        """
        if not self.contains(x, y):
            return False
        self._pixels[y, x] = color.as_tuple()
        return True

    def _clip(self, x: int, y: int, width: int, height: int) -> Tuple[int, int, int, int]:
        """Clip a rectangle to the canvas as (x0, y0, x1, y1), possibly empty."""
        x0 = min(max(x, 0), self._width)
        y0 = min(max(y, 0), self._height)
        x1 = max(x0, min(x + width, self._width))
        y1 = max(y0, min(y + height, self._height))
        return x0, y0, x1, y1

    def fill(self, x: int, y: int, width: int, height: int, color: RGBA) -> int:
        """
        Write color to every pixel of [x, x+width) x [y, y+height) on the canvas.

        Returns:
            Number of pixels written after clipping.
        """
        x0, y0, x1, y1 = self._clip(x, y, width, height)
        self._pixels[y0:y1, x0:x1] = color.as_tuple()
        return (x1 - x0) * (y1 - y0)

    def get_pixel(self, x: int, y: int) -> RGBA:
        if not self.contains(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self._width}x{self._height} canvas")
        red, green, blue, opacity = self._pixels[y, x]
        return RGBA(float(red), float(green), float(blue), float(opacity))

    def count_painted(self) -> int:
        """Number of pixels with non-zero opacity."""
        return int(np.count_nonzero(self._pixels[:, :, 3]))

    def to_rgba8(
        self,
        x: int = 0,
        y: int = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> np.ndarray:
        """
        Quantize to an 8-bit (height, width, 4) array, non-premultiplied.

        The optional rectangle limits the conversion to that region, clipped
        to the canvas. By default the whole canvas is converted.
        """
        if width is None:
            width = self._width - x
        if height is None:
            height = self._height - y
        x0, y0, x1, y1 = self._clip(x, y, width, height)
        return np.rint(self._pixels[y0:y1, x0:x1] * 255.0).astype(np.uint8)

    def to_qimage(
        self,
        x: int = 0,
        y: int = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> QImage:
        """Convert the canvas, or a region of it, to a QImage owning its data."""
        rgba = np.ascontiguousarray(self.to_rgba8(x, y, width, height))
        rows, columns = rgba.shape[:2]
        if rows == 0 or columns == 0:
            return QImage()

        return QImage(
            rgba.data, columns, rows, columns * 4,
            QImage.Format.Format_RGBA8888
        ).copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelCanvas):
            return NotImplemented
        return self.size == other.size and np.array_equal(self._pixels, other._pixels)

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelCanvas({self._width}x{self._height}, painted={self.count_painted()})"
