"""Typed visual settings with the defaults the property pane starts from.

Settings are user-editable. The engine clamps them with
`clamp_visual_settings` before use; `visual.validator` reports the problems.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal

from .log import log_event

AxisOrientation = Literal["left", "bottom"]

DEFAULT_AXIS_COLOR = "#605E5C"
DEFAULT_FONT_FAMILY = '"Segoe UI", wf_segoe-ui_normal, helvetica, arial, sans-serif'


@dataclass(frozen=True, slots=True)
class CategoryAxisSettings:
    """Category axis appearance and placement.

    Args:
        orientation: `left` puts categories on a vertical axis; `bottom` on a horizontal one.
        inner_padding: Padding between category bands, in percent (0-50).
        color: Tick label color.
        font_size: Tick label font size, in points.
        font_family: Tick label font family.
    """

    orientation: AxisOrientation = "left"
    inner_padding: float = 20
    color: str = DEFAULT_AXIS_COLOR
    font_size: float = 9
    font_family: str = DEFAULT_FONT_FAMILY


@dataclass(frozen=True, slots=True)
class ValueAxisSettings:
    """Value axis appearance and number formatting.

    Args:
        color: Tick label color.
        font_size: Tick label font size, in points.
        font_family: Tick label font family.
        display_units: 0 for auto, 1 for none, or a thousands power.
        decimal_places: Fixed fraction digits (0-5), or None for auto.
    """

    color: str = DEFAULT_AXIS_COLOR
    font_size: float = 9
    font_family: str = DEFAULT_FONT_FAMILY
    display_units: float = 0
    decimal_places: int | None = None


@dataclass(frozen=True, slots=True)
class DataPointSettings:
    """Dumbbell end-point settings.

    Args:
        radius: Circle radius in pixels (2-10).
        format_string_missing: Number format used when a column carries none.
        fill_color: Fill used by the implicit group when there is no series.
    """

    radius: float = 5
    format_string_missing: str = "#,##0.00"
    fill_color: str = "#01B8AA"


@dataclass(frozen=True, slots=True)
class ConnectingLineSettings:
    """Line drawn between a category's extremes."""

    stroke_width: float = 2
    color: str = DEFAULT_AXIS_COLOR


@dataclass(frozen=True, slots=True)
class DataLabelSettings:
    """Series name labels drawn beside the first category."""

    show: bool = True


@dataclass(frozen=True, slots=True)
class VisualSettings:
    """All settings sections consumed by the engine."""

    category_axis: CategoryAxisSettings = field(default_factory=CategoryAxisSettings)
    value_axis: ValueAxisSettings = field(default_factory=ValueAxisSettings)
    data_points: DataPointSettings = field(default_factory=DataPointSettings)
    connecting_lines: ConnectingLineSettings = field(default_factory=ConnectingLineSettings)
    data_labels: DataLabelSettings = field(default_factory=DataLabelSettings)


INNER_PADDING_RANGE: tuple[float, float] = (0, 50)
RADIUS_RANGE: tuple[float, float] = (2, 10)
DECIMAL_PLACES_RANGE: tuple[int, int] = (0, 5)
MIN_FONT_SIZE: float = 1
ORIENTATIONS: tuple[AxisOrientation, ...] = ("left", "bottom")


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    """Return `value` limited to the inclusive `bounds`."""

    low, high = bounds
    return min(max(value, low), high)


def clamp_visual_settings(settings: VisualSettings) -> VisualSettings:
    """Return settings with every numeric option pulled into its allowed range.

    Args:
        settings: Settings as decoded from the host or a file.

    Returns:
        Settings safe for the engine: inner padding 0-50, radius 2-10, decimal
        places 0-5 (or None), font sizes >= 1, stroke width >= 0, and an
        unknown orientation replaced by `left`.
    """

    category_axis = settings.category_axis
    value_axis = settings.value_axis
    decimal_places = value_axis.decimal_places
    if decimal_places is not None:
        decimal_places = int(_clamp(decimal_places, DECIMAL_PLACES_RANGE))

    clamped = replace(
        settings,
        category_axis=replace(
            category_axis,
            orientation=category_axis.orientation if category_axis.orientation in ORIENTATIONS else "left",
            inner_padding=_clamp(category_axis.inner_padding, INNER_PADDING_RANGE),
            font_size=max(category_axis.font_size, MIN_FONT_SIZE),
        ),
        value_axis=replace(
            value_axis,
            font_size=max(value_axis.font_size, MIN_FONT_SIZE),
            decimal_places=decimal_places,
        ),
        data_points=replace(settings.data_points, radius=_clamp(settings.data_points.radius, RADIUS_RANGE)),
        connecting_lines=replace(
            settings.connecting_lines,
            stroke_width=max(settings.connecting_lines.stroke_width, 0),
        ),
    )
    if clamped != settings:
        log_event("settings_clamped", {"before": settings, "after": clamped}, level="info")
    return clamped
