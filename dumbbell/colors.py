"""Stable color assignment for series names."""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_PALETTE: tuple[str, ...] = (
    "#01B8AA",
    "#374649",
    "#FD625E",
    "#F2C80F",
    "#5F6B6D",
    "#8AD4EB",
    "#FE9666",
    "#A66999",
    "#3599B8",
    "#DFBFBF",
    "#3366CC",
    "#DC3912",
)


class ColorPalette:
    """Assign palette colors to names in first-request order.

    A name keeps its color for the lifetime of the palette, so the same series
    resolves to the same color in every category and across rebuilds. Once the
    palette is exhausted, colors repeat from the start.
    """

    def __init__(self, colors: Sequence[str] = DEFAULT_PALETTE) -> None:
        """Initialize the palette.

        Args:
            colors: Ordered color strings to hand out.

        Raises:
            ValueError: When `colors` is empty.
        """

        if not colors:
            raise ValueError("ColorPalette requires at least one color.")
        self._colors = tuple(colors)
        self._assigned: dict[str, str] = {}

    def get_color(self, name: str) -> str:
        """Return the color reserved for `name`, reserving the next one if new."""

        color = self._assigned.get(name)
        if color is None:
            color = self._colors[len(self._assigned) % len(self._colors)]
            self._assigned[name] = color
        return color

    def assigned(self) -> dict[str, str]:
        """Return a copy of the current name -> color assignments."""

        return dict(self._assigned)


def resolve_group_color(name: str, *, override: str | None, palette: ColorPalette) -> str:
    """Resolve the fill color for a series.

    Args:
        name: Series name used for palette lookup.
        override: Stored per-series color, when the user has set one.
        palette: Palette used when no override exists.

    Returns:
        The override when present, otherwise the palette color for `name`.
    """

    if override:
        return override
    return palette.get_color(name)
