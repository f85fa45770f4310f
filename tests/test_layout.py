"""Tests for margins, axes and the measurement pass."""

from __future__ import annotations

import pytest

from dumbbell.colors import ColorPalette
from dumbbell.dataset import DataTable
from dumbbell.dto import Margin, ViewModelState, Viewport
from dumbbell.engine import build_view_model
from dumbbell.layout import BASE_MARGIN, LabelMeasurements, derive_margin, layout, measure_labels
from dumbbell.settings import CategoryAxisSettings, VisualSettings
from dumbbell.text_metrics import TextDimensions

pytestmark = pytest.mark.unit

VIEWPORT = Viewport(width=400, height=300)


@pytest.fixture
def unlaid(before_after_table, settings):
    return build_view_model(before_after_table, settings, palette=ColorPalette())


@pytest.fixture
def unlaid_bottom(before_after_table):
    settings = VisualSettings(category_axis=CategoryAxisSettings(orientation="bottom"))
    return build_view_model(before_after_table, settings, palette=ColorPalette())


def test_measure_labels_uses_largest_category_and_extreme_value(unlaid, text_metrics) -> None:
    """Category names and formatted extremes are measured with pixel font sizes."""

    measurements = measure_labels(unlaid, text_metrics=text_metrics)

    assert measurements.category == TextDimensions(width=10, height=10)
    assert measurements.value == TextDimensions(width=50, height=10)
    assert [call.text for call in text_metrics.calls] == ["A", "B", "6.00", "20.00"]
    assert text_metrics.calls[0].font_size == pytest.approx(12)


def test_derive_margin_depends_on_orientation() -> None:
    """Left reserves category width on the left; bottom reserves value width there."""

    measurements = LabelMeasurements(
        category=TextDimensions(width=30, height=12),
        value=TextDimensions(width=40, height=14),
    )

    assert derive_margin(measurements, orientation="left") == Margin(top=10, right=30, bottom=24, left=40)
    assert derive_margin(measurements, orientation="bottom") == Margin(top=10, right=10, bottom=22, left=50)


def test_layout_left_orientation_axes(unlaid, text_metrics) -> None:
    """Categories run down the vertical axis; values run across."""

    laid = layout(unlaid, VIEWPORT, text_metrics=text_metrics)
    category_axis = laid.category_axis
    value_axis = laid.value_axis

    assert laid.state is ViewModelState.VALID_LAIDOUT
    assert laid.margin == Margin(top=10, right=35, bottom=20, left=20)
    assert category_axis.range == (10, 280)
    assert category_axis.translate.x == 20
    assert category_axis.translate.y == 0
    assert category_axis.tick_size == 0
    assert category_axis.scale.bandwidth == 135
    assert category_axis.scale("B") == 145

    assert value_axis.domain == (6, 20)
    assert value_axis.range == (20, 365)
    assert value_axis.scale.domain == (5, 20)
    assert value_axis.translate.y == 280
    assert value_axis.tick_size == -270
    assert value_axis.tick_count == 3
    assert value_axis.ticks == (5, 10, 15, 20)
    assert value_axis.tick_labels == ("5.00", "10.00", "15.00", "20.00")


def test_layout_bottom_orientation_swaps_axes(unlaid_bottom, text_metrics) -> None:
    """Categories run along the bottom with padding; values run bottom to top."""

    laid = layout(unlaid_bottom, VIEWPORT, text_metrics=text_metrics)
    category_axis = laid.category_axis
    value_axis = laid.value_axis

    assert laid.margin == Margin(top=10, right=10, bottom=20, left=60)
    assert category_axis.range == (60, 390)
    assert category_axis.translate.y == 280
    assert category_axis.scale.padding_inner == pytest.approx(0.2)
    assert category_axis.scale.bandwidth == pytest.approx(120)
    assert category_axis.scale("A") == pytest.approx(90)

    assert value_axis.range == (280, 10)
    assert value_axis.translate.x == 60
    assert value_axis.tick_size == -330
    assert value_axis.scale(20) == 10


def test_layout_falls_back_to_base_margin_when_measurement_is_unavailable(unlaid, unavailable_metrics) -> None:
    """A detached measurement surface still yields a complete layout."""

    laid = layout(unlaid, VIEWPORT, text_metrics=unavailable_metrics)

    assert laid.state is ViewModelState.VALID_LAIDOUT
    assert laid.margin == BASE_MARGIN
    assert laid.value_axis.range == (10, 390)


def test_layout_reuses_previous_margin_when_measurement_is_unavailable(
    unlaid,
    text_metrics,
    unavailable_metrics,
) -> None:
    """The last measured margin is kept when a later measurement fails."""

    first = layout(unlaid, VIEWPORT, text_metrics=text_metrics)
    second = layout(unlaid, Viewport(width=500, height=300), text_metrics=unavailable_metrics, previous=first)

    assert second.margin == first.margin
    assert second.value_axis.tick_label_dimensions == first.value_axis.tick_label_dimensions
    assert second.value_axis.range == (20, 465)


def test_layout_on_resize_keeps_entities(unlaid, text_metrics) -> None:
    """Laying out again for a new viewport only changes the axes."""

    small = layout(unlaid, VIEWPORT, text_metrics=text_metrics)
    large = layout(small, Viewport(width=800, height=600), text_metrics=text_metrics)

    assert large.categories == small.categories
    assert large.margin == small.margin
    assert large.category_axis.range == (10, 580)
    assert large.value_axis.range == (20, 765)


def test_layout_clamps_tiny_viewports(unlaid, text_metrics) -> None:
    """A viewport smaller than the margins yields empty ranges, never inverted ones."""

    laid = layout(unlaid, Viewport(width=5, height=5), text_metrics=text_metrics)

    assert laid.category_axis.range == (10, 10)
    assert laid.value_axis.range == (20, 20)
    assert laid.category_axis.scale.bandwidth == 0


def test_layout_returns_invalid_models_unchanged(settings, text_metrics) -> None:
    """Invalid models are not laid out."""

    invalid = build_view_model(None, settings, palette=ColorPalette())

    assert layout(invalid, VIEWPORT, text_metrics=text_metrics) is invalid
    assert text_metrics.calls == []


def test_layout_single_value_dataset_has_one_tick(settings, text_metrics) -> None:
    """A zero-width value domain lays out with a single tick at the middle of the range."""

    table = DataTable.from_rows([{"region": "A", "sales": 7}], category="region", measure="sales")
    unlaid = build_view_model(table, settings, palette=ColorPalette())

    laid = layout(unlaid, VIEWPORT, text_metrics=text_metrics)
    value_axis = laid.value_axis

    assert laid.state is ViewModelState.VALID_LAIDOUT
    assert value_axis.domain == (7, 7)
    assert value_axis.ticks == (7,)
    assert value_axis.tick_labels == ("7.00",)
    assert value_axis.scale(7) == pytest.approx(sum(value_axis.range) / 2)
