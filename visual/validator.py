"""Validation for VisualSettings.

Settings come from the property pane or a settings file, so validation reports
every problem at once instead of failing on the first. Out-of-range numbers are
warnings because the engine clamps them; values it cannot interpret are errors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from dumbbell.formatting import AUTO_DISPLAY_UNITS, DISPLAY_UNIT_SUFFIXES, NO_DISPLAY_UNITS
from dumbbell.settings import (
    DECIMAL_PLACES_RANGE,
    INNER_PADDING_RANGE,
    MIN_FONT_SIZE,
    ORIENTATIONS,
    RADIUS_RANGE,
    VisualSettings,
)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of validating visual settings."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_visual_settings(settings: VisualSettings) -> ValidationResult:
    """Validate VisualSettings before they reach the engine.

    Args:
        settings: Decoded settings.

    Returns:
        ValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []

    category_axis = settings.category_axis
    value_axis = settings.value_axis

    if category_axis.orientation not in ORIENTATIONS:
        errors.append(f"categoryAxis.orientation is not a supported value: {category_axis.orientation!r}.")

    allowed_units = {AUTO_DISPLAY_UNITS, NO_DISPLAY_UNITS, *DISPLAY_UNIT_SUFFIXES}
    if value_axis.display_units not in allowed_units:
        errors.append(f"valueAxis.displayUnits is not a supported value: {value_axis.display_units!r}.")

    if not settings.data_points.format_string_missing.strip():
        errors.append("dataPoints.formatStringMissing must be a non-empty string.")

    _check_range(warnings, "categoryAxis.innerPadding", category_axis.inner_padding, INNER_PADDING_RANGE)
    _check_range(warnings, "dataPoints.radius", settings.data_points.radius, RADIUS_RANGE)
    if value_axis.decimal_places is not None:
        _check_range(warnings, "valueAxis.decimalPlaces", value_axis.decimal_places, DECIMAL_PLACES_RANGE)

    for name, size in (("categoryAxis.fontSize", category_axis.font_size), ("valueAxis.fontSize", value_axis.font_size)):
        if size < MIN_FONT_SIZE:
            warnings.append(f"{name} must be at least {MIN_FONT_SIZE}; got {size!r}.")

    if settings.connecting_lines.stroke_width < 0:
        warnings.append(f"connectingLines.strokeWidth must not be negative; got {settings.connecting_lines.stroke_width!r}.")

    for name, color in (
        ("categoryAxis.color", category_axis.color),
        ("valueAxis.color", value_axis.color),
        ("dataPoints.fillColor", settings.data_points.fill_color),
        ("connectingLines.color", settings.connecting_lines.color),
    ):
        if not _HEX_COLOR.match(color):
            warnings.append(f"{name} is not a hex color: {color!r}.")

    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def _check_range(warnings: list[str], name: str, value: float, bounds: tuple[float, float]) -> None:
    low, high = bounds
    if not low <= value <= high:
        warnings.append(f"{name} is outside {low}-{high} and will be clamped; got {value!r}.")
