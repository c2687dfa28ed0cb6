"""
Drawing primitives over a PixelCanvas.

All primitives take integer pixel coordinates, clip silently at the canvas
edges and overwrite pixels (last write wins). Each returns the number of
pixels it actually wrote.
"""

from texthighlighter.core.canvas import PixelCanvas
from texthighlighter.core.color import RGBA

# Opacity multipliers for the three rows of a wavy underline. The column is
# picked by (x % 4), so the pattern repeats every 4 pixels and reads as a
# small sine wave once anti-aliased by the alpha steps.
WAVE_OPACITY_MATRIX = (
    (0.3, 1.0, 0.3, 0.0),
    (1.0, 0.3, 1.0, 0.3),
    (0.3, 0.0, 0.3, 1.0),
)
WAVE_PERIOD = 4
WAVE_HEIGHT = len(WAVE_OPACITY_MATRIX)


def fill_rect(canvas: PixelCanvas, x: int, y: int, width: int, height: int, color: RGBA) -> int:
    """Fill [x, x+width) x [y, y+height) with color."""
    return canvas.fill(x, y, width, height, color)


def draw_hline(canvas: PixelCanvas, x: int, y: int, length: int, color: RGBA) -> int:
    """Draw a one pixel tall line from x to x+length-1 on row y."""
    return fill_rect(canvas, x, y, length, 1, color)


def draw_wavy_hline(canvas: PixelCanvas, x: int, y: int, length: int, color: RGBA) -> int:
    """
    Draw a three pixel tall wavy line starting at (x, y).

    The wave is produced by alpha modulation only: every column writes rows
    y, y+1 and y+2 with the color's opacity scaled by WAVE_OPACITY_MATRIX.
    Cells whose scaled opacity is exactly 0 are left untouched.
    """
    written = 0
    for draw_x in range(x, x + length):
        phase = draw_x % WAVE_PERIOD
        for row, factors in enumerate(WAVE_OPACITY_MATRIX):
            opacity = color.opacity * factors[phase]
            if opacity == 0.0:
                continue
            if canvas.set_pixel(draw_x, y + row, color.with_opacity(opacity)):
                written += 1
    return written
