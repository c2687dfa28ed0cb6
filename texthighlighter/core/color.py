"""
Color model for the highlight engine.

Colors are kept as four floats in [0.0, 1.0] (red, green, blue, opacity)
so that opacity can be scaled without losing precision before the canvas
is quantized for display. Conversion to and from QColor is provided for
the Qt side.
"""

from dataclasses import dataclass

from PySide6.QtGui import QColor

from texthighlighter.core.errors import InvalidArgumentError


@dataclass(frozen=True)
class RGBA:
    """
    An immutable translucent color.

    Attributes:
        red, green, blue: Color channels in [0.0, 1.0].
        opacity: Alpha channel in [0.0, 1.0].
    """
    red: float
    green: float
    blue: float
    opacity: float = 1.0

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "opacity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidArgumentError(
                    f"Color channel '{name}' must be between 0.0 and 1.0, got {value}"
                )

    def with_opacity(self, opacity: float) -> "RGBA":
        """Return a copy with the alpha channel replaced, RGB untouched."""
        return RGBA(self.red, self.green, self.blue, opacity)

    def as_tuple(self) -> tuple:
        return (self.red, self.green, self.blue, self.opacity)

    def to_qcolor(self) -> QColor:
        return QColor.fromRgbF(self.red, self.green, self.blue, self.opacity)

    @classmethod
    def from_qcolor(cls, color: QColor) -> "RGBA":
        return cls(color.redF(), color.greenF(), color.blueF(), color.alphaF())

    @classmethod
    def from_rgb8(cls, red: int, green: int, blue: int, opacity: float = 1.0) -> "RGBA":
        """Build a color from 0-255 channels, e.g. ``RGBA.from_rgb8(255, 220, 0, 0.5)``."""
        return cls(red / 255.0, green / 255.0, blue / 255.0, opacity)


TRANSPARENT = RGBA(0.0, 0.0, 0.0, 0.0)


def _clamp(value: float) -> float:
    # weights can sum to 1 + epsilon
    return min(1.0, max(0.0, value))


def blend_colors(color1: RGBA, color2: RGBA) -> RGBA:
    """
    Combine two translucent colors.

    Each color contributes to the RGB channels in proportion to its share
    of the total opacity; the result takes the larger of the two opacities.

    Raises:
        ZeroDivisionError: Both colors are fully transparent, so the
            weighting is undefined. Callers skip blending in that case.
    """
    total = color1.opacity + color2.opacity
    if total == 0.0:
        raise ZeroDivisionError("Cannot blend two fully transparent colors")

    weight1 = color1.opacity / total
    weight2 = color2.opacity / total
    return RGBA(
        _clamp(weight1 * color1.red + weight2 * color2.red),
        _clamp(weight1 * color1.green + weight2 * color2.green),
        _clamp(weight1 * color1.blue + weight2 * color2.blue),
        max(color1.opacity, color2.opacity),
    )
