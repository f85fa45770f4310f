"""Text measurement used by the layout pass.

Hosts normally measure text against a live rendering surface. The engine only
depends on the `TextMetricsProvider` protocol; `HeuristicTextMetrics` is a
deterministic stand-in based on per-glyph width estimates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class TextMetricsError(RuntimeError):
    """Base class for text measurement failures."""


class MeasurementUnavailable(TextMetricsError):
    """Raised by a provider when text cannot be measured right now."""

    def __init__(self, *, text: str, reason: str) -> None:
        """Initialize the error.

        Args:
            text: Text that was being measured.
            reason: Provider-specific explanation.
        """

        super().__init__(f"Could not measure {text!r}: {reason}")
        self.text = text
        self.reason = reason


@dataclass(frozen=True, slots=True)
class TextProperties:
    """Text and font to measure.

    Args:
        text: The string to measure.
        font_family: CSS font family list.
        font_size: Font size in pixels.
    """

    text: str
    font_family: str
    font_size: float


@dataclass(frozen=True, slots=True)
class TextDimensions:
    """Rendered size of a piece of text, in layout units."""

    width: float = 0.0
    height: float = 0.0


class TextMetricsProvider(Protocol):
    """Measures rendered text. Implementations raise MeasurementUnavailable on failure."""

    def measure(self, properties: TextProperties) -> TextDimensions:
        """Return the rendered width and height of `properties.text`."""
        ...


def points_to_pixels(points: float) -> float:
    """Convert a font size in points to pixels (96 dpi)."""

    return points * 4.0 / 3.0


class HeuristicTextMetrics:
    """Estimate text size from glyph classes without a rendering surface."""

    line_height_ratio = 1.2

    def measure(self, properties: TextProperties) -> TextDimensions:
        """Estimate the rendered size of a single line of text."""

        font_size = properties.font_size
        width = 0.0
        for ch in properties.text:
            if ch.isspace():
                width += font_size * 0.33
            elif ch in "il.,:;|!'":
                width += font_size * 0.3
            elif ch in "mwMW@#%":
                width += font_size * 0.9
            else:
                width += font_size * 0.6
        return TextDimensions(width=width, height=font_size * self.line_height_ratio)
