"""Layout Engine: margins, ranges and scales for a ViewModel.

Layout runs in a fixed order:

1. Measurement: the largest category label and the larger of the formatted
   min/max value labels are measured with the configured fonts.
2. Margins: a base pad plus room for the measured labels, depending on the
   category axis orientation.
3. Axes: ranges are the viewport minus margins; the band and linear scales,
   translations and gridline lengths follow from the orientation.

Label sizes depend only on label content and font, never on the axis range, so
a single measurement pass is enough.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Final

from .dto import CategoryAxis, Coordinates, Margin, ValueAxis, ViewModel, ViewModelState, Viewport
from .formatting import ValueFormatter, create_value_formatter
from .log import log_event
from .scales import BandScale, LinearScale
from .settings import AxisOrientation
from .text_metrics import (
    MeasurementUnavailable,
    TextDimensions,
    TextMetricsProvider,
    TextProperties,
    points_to_pixels,
)

VALUE_AXIS_TICK_COUNT: Final[int] = 3
BASE_MARGIN: Final[Margin] = Margin(top=10, right=10, bottom=10, left=10)


@dataclass(frozen=True, slots=True)
class LabelMeasurements:
    """Largest label sizes found by the measurement pass."""

    category: TextDimensions = TextDimensions()
    value: TextDimensions = TextDimensions()


def value_axis_formatter(view_model: ViewModel) -> ValueFormatter:
    """Return the formatter used for value axis labels.

    Auto display units are resolved against the largest absolute extreme.
    """

    settings = view_model.settings.value_axis
    return create_value_formatter(
        view_model.primary_format_string,
        display_units=settings.display_units,
        decimal_places=settings.decimal_places,
        reference_value=max(abs(view_model.min_value), abs(view_model.max_value)),
    )


def measure_labels(view_model: ViewModel, *, text_metrics: TextMetricsProvider) -> LabelMeasurements:
    """Measure the largest category and value axis labels.

    Args:
        view_model: Valid model whose labels are measured.
        text_metrics: Provider used for every measurement.

    Returns:
        LabelMeasurements with the maximum width and height per axis.

    Raises:
        MeasurementUnavailable: Propagated from the provider.
    """

    category_settings = view_model.settings.category_axis
    value_settings = view_model.settings.value_axis

    category = _max_dimensions(
        text_metrics,
        (category.name for category in view_model.categories),
        font_family=category_settings.font_family,
        font_size=points_to_pixels(category_settings.font_size),
    )
    formatter = value_axis_formatter(view_model)
    value = _max_dimensions(
        text_metrics,
        (formatter.format(view_model.min_value), formatter.format(view_model.max_value)),
        font_family=value_settings.font_family,
        font_size=points_to_pixels(value_settings.font_size),
    )
    return LabelMeasurements(category=category, value=value)


def _max_dimensions(
    text_metrics: TextMetricsProvider,
    texts: Iterable[str],
    *,
    font_family: str,
    font_size: float,
) -> TextDimensions:
    """Return the largest width and height over `texts` (measured independently)."""

    width = 0.0
    height = 0.0
    for text in texts:
        dims = text_metrics.measure(TextProperties(text=text, font_family=font_family, font_size=font_size))
        width = max(width, dims.width)
        height = max(height, dims.height)
    return TextDimensions(width=width, height=height)


def derive_margin(measurements: LabelMeasurements, *, orientation: AxisOrientation) -> Margin:
    """Derive plot margins from measured label sizes.

    Args:
        measurements: Output of the measurement pass.
        orientation: Category axis orientation.

    Returns:
        Margin starting from the base pad. `left` reserves the value label
        height below, the category label width to the left, and half a value
        label to the right for a label overflowing the last tick. `bottom`
        reserves the category label height below and the value label width to
        the left.
    """

    if orientation == "left":
        return replace(
            BASE_MARGIN,
            bottom=BASE_MARGIN.bottom + measurements.value.height,
            left=BASE_MARGIN.left + measurements.category.width,
            right=BASE_MARGIN.right + measurements.value.width / 2,
        )
    return replace(
        BASE_MARGIN,
        bottom=BASE_MARGIN.bottom + measurements.category.height,
        left=BASE_MARGIN.left + measurements.value.width,
    )


def build_axes(
    view_model: ViewModel,
    viewport: Viewport,
    *,
    margin: Margin,
    measurements: LabelMeasurements,
) -> tuple[CategoryAxis, ValueAxis]:
    """Build both axes for a viewport and margin.

    Args:
        view_model: Valid model providing categories and extremes.
        viewport: Available size.
        margin: Margins from `derive_margin` (or a fallback).
        measurements: Label sizes recorded on the axes.

    Returns:
        (CategoryAxis, ValueAxis).
    """

    orientation = view_model.settings.category_axis.orientation
    plot_left = margin.left
    plot_right = max(margin.left, viewport.width - margin.right)
    plot_top = margin.top
    plot_bottom = max(margin.top, viewport.height - margin.bottom)

    if orientation == "left":
        category_range = (plot_top, plot_bottom)
        value_range = (plot_left, plot_right)
        padding = 0.0
        category_translate = Coordinates(x=margin.left, y=0)
        value_translate = Coordinates(x=0, y=viewport.height - margin.bottom)
        value_tick_size = -(plot_bottom - plot_top)
    else:
        category_range = (plot_left, plot_right)
        value_range = (plot_bottom, plot_top)
        padding = view_model.settings.category_axis.inner_padding / 100
        category_translate = Coordinates(x=0, y=viewport.height - margin.bottom)
        value_translate = Coordinates(x=margin.left, y=0)
        value_tick_size = -(plot_right - plot_left)

    domain = tuple(dict.fromkeys(category.name for category in view_model.categories))
    category_axis = CategoryAxis(
        domain=domain,
        range=category_range,
        scale=BandScale.create(domain, category_range, padding=padding),
        translate=category_translate,
        tick_size=0.0,
        tick_label_dimensions=measurements.category,
    )

    value_domain = (view_model.min_value, view_model.max_value)
    value_scale = LinearScale(domain=value_domain, range=value_range).nice(VALUE_AXIS_TICK_COUNT)
    tick_values = value_scale.ticks(VALUE_AXIS_TICK_COUNT)
    formatter = value_axis_formatter(view_model)
    value_axis = ValueAxis(
        domain=value_domain,
        range=value_range,
        scale=value_scale,
        translate=value_translate,
        tick_count=VALUE_AXIS_TICK_COUNT,
        tick_size=value_tick_size,
        ticks=tick_values,
        tick_labels=tuple(formatter.format(tick) for tick in tick_values),
        tick_label_dimensions=measurements.value,
    )
    return category_axis, value_axis


def layout(
    view_model: ViewModel,
    viewport: Viewport,
    *,
    text_metrics: TextMetricsProvider,
    previous: ViewModel | None = None,
) -> ViewModel:
    """Lay out a valid ViewModel for a viewport.

    Args:
        view_model: Model to lay out; invalid or empty models are returned as-is.
        viewport: Available size.
        text_metrics: Provider for the measurement pass.
        previous: Last laid-out model, whose margin is reused when measurement
            is unavailable.

    Returns:
        A Valid-Laidout copy of `view_model`.
    """

    if not view_model.is_valid:
        return view_model

    orientation = view_model.settings.category_axis.orientation
    try:
        measurements = measure_labels(view_model, text_metrics=text_metrics)
        margin = derive_margin(measurements, orientation=orientation)
    except MeasurementUnavailable as exc:
        margin, measurements = _fallback_layout(previous)
        log_event(
            "layout_measurement_unavailable",
            {"reason": str(exc), "margin": margin},
            level="warning",
        )

    category_axis, value_axis = build_axes(view_model, viewport, margin=margin, measurements=measurements)
    log_event(
        "layout_complete",
        {"orientation": orientation, "viewport": viewport, "margin": margin},
        level="debug",
    )
    return replace(
        view_model,
        state=ViewModelState.VALID_LAIDOUT,
        margin=margin,
        category_axis=category_axis,
        value_axis=value_axis,
    )


def _fallback_layout(previous: ViewModel | None) -> tuple[Margin, LabelMeasurements]:
    """Return the previous margin and label sizes, or the defaults."""

    if previous is None or previous.category_axis is None or previous.value_axis is None:
        return BASE_MARGIN, LabelMeasurements()
    return previous.margin, LabelMeasurements(
        category=previous.category_axis.tick_label_dimensions,
        value=previous.value_axis.tick_label_dimensions,
    )
