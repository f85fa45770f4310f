"""Tests for the Data Aggregator."""

from __future__ import annotations

from dataclasses import replace

import pytest

from dumbbell.aggregations import aggregate, resolve_primary_format_string
from dumbbell.colors import DEFAULT_PALETTE, ColorPalette
from dumbbell.dataset import DataTable
from dumbbell.identity import category_identity, data_point_identity, series_identity
from dumbbell.settings import DataPointSettings, ValueAxisSettings, VisualSettings

pytestmark = pytest.mark.unit


def test_aggregate_computes_category_and_dataset_extremes(before_after_table, settings, palette) -> None:
    """Each category spans its own values; the dataset spans all of them."""

    result = aggregate(before_after_table, settings, palette=palette)

    assert result.is_valid is True
    assert [(c.name, c.min, c.max) for c in result.categories] == [("A", 6, 14), ("B", 12, 20)]
    assert result.min_value == 6
    assert result.max_value == 20
    assert all(c.min <= g.value <= c.max for c in result.categories for g in c.groups)


def test_aggregate_builds_distinct_groups_with_stable_colors(before_after_table, settings, palette) -> None:
    """Distinct groups appear once per series and share colors with their points."""

    result = aggregate(before_after_table, settings, palette=palette)

    assert [group.name for group in result.groups] == ["Start", "End"]
    assert [group.color for group in result.groups] == list(DEFAULT_PALETTE[:2])
    for category in result.categories:
        assert [group.color for group in category.groups] == list(DEFAULT_PALETTE[:2])
    assert result.groups[0].identity == series_identity("Start")


def test_aggregate_assigns_structural_identities(before_after_table, settings, palette) -> None:
    """Categories and points carry index-based identities."""

    result = aggregate(before_after_table, settings, palette=palette)
    second = result.categories[1]

    assert second.identity == category_identity(1)
    assert second.groups[1].identity == data_point_identity(1, "End", "sales")
    assert second.groups[1].series_identity == series_identity("End")


def test_aggregate_colors_survive_a_second_pass(before_after_table, settings) -> None:
    """The same palette keeps series colors across rebuilds."""

    palette = ColorPalette()
    palette.get_color("End")
    first = aggregate(before_after_table, settings, palette=palette)
    second = aggregate(before_after_table, settings, palette=palette)

    assert first.groups[1].color == DEFAULT_PALETTE[0]
    assert [g.color for g in first.groups] == [g.color for g in second.groups]


def test_aggregate_honors_series_color_overrides(before_after_rows, settings, palette) -> None:
    """A stored per-series color wins over the palette."""

    table = DataTable.from_rows(
        before_after_rows,
        category="region",
        measure="sales",
        series="period",
        fill_colors={"End": "#123456"},
    )
    result = aggregate(table, settings, palette=palette)

    assert [group.color for group in result.groups] == [DEFAULT_PALETTE[0], "#123456"]


def test_aggregate_without_series_uses_measure_name_and_fill_color(palette) -> None:
    """The implicit group is named after the measure and uses the data point fill."""

    settings = VisualSettings(data_points=DataPointSettings(fill_color="#ABCDEF"))
    table = DataTable.from_rows(
        [{"region": "A", "sales": 3}, {"region": "B", "sales": 5}],
        category="region",
        measure="sales",
    )
    result = aggregate(table, settings, palette=palette)

    assert [group.name for group in result.groups] == ["sales"]
    assert result.groups[0].color == "#ABCDEF"
    assert result.groups[0].identity == series_identity(None)
    assert palette.assigned() == {}


def test_aggregate_skips_null_values_and_empty_categories(settings, palette) -> None:
    """Null values produce no point; a category with no values is dropped."""

    table = DataTable.from_rows(
        [
            {"region": "A", "period": "Start", "sales": 6},
            {"region": "A", "period": "End", "sales": None},
            {"region": "B", "period": "Start", "sales": None},
            {"region": "C", "period": "End", "sales": 9},
        ],
        category="region",
        measure="sales",
        series="period",
    )
    result = aggregate(table, settings, palette=palette)

    assert [c.name for c in result.categories] == ["A", "C"]
    assert [(c.min, c.max) for c in result.categories] == [(6, 6), (9, 9)]
    assert [len(c.groups) for c in result.categories] == [1, 1]
    assert result.categories[1].identity == category_identity(2)


def test_aggregate_collects_distinct_groups_from_every_category(settings, palette) -> None:
    """A series missing from the first category still appears in the distinct list."""

    table = DataTable.from_rows(
        [
            {"region": "A", "period": "Start", "sales": 1},
            {"region": "B", "period": "Start", "sales": 2},
            {"region": "B", "period": "End", "sales": 3},
        ],
        category="region",
        measure="sales",
        series="period",
    )
    result = aggregate(table, settings, palette=palette)

    assert [group.name for group in result.groups] == ["Start", "End"]


def test_aggregate_category_highlight_requires_every_group(settings, palette) -> None:
    """A category is highlighted only when all of its points are."""

    table = DataTable.from_rows(
        [
            {"region": "A", "period": "Start", "sales": 6, "hl": 6},
            {"region": "A", "period": "End", "sales": 14},
            {"region": "B", "period": "Start", "sales": 20, "hl": 10},
            {"region": "B", "period": "End", "sales": 12, "hl": 12},
        ],
        category="region",
        measure="sales",
        series="period",
        highlight="hl",
    )
    result = aggregate(table, settings, palette=palette)
    first, second = result.categories

    assert result.has_highlights is True
    assert first.highlighted is False
    assert [g.highlighted for g in first.groups] == [True, False]
    assert second.highlighted is True
    assert second.groups[0].highlighted_value == 10


def test_aggregate_without_highlights_marks_nothing_highlighted(before_after_table, settings, palette) -> None:
    """Without highlight arrays nothing is highlighted."""

    result = aggregate(before_after_table, settings, palette=palette)

    assert result.has_highlights is False
    assert not any(c.highlighted for c in result.categories)


def test_aggregate_rejects_invalid_input(settings, palette) -> None:
    """Invalid input yields empty collections and the fallback format."""

    result = aggregate(DataTable(categories=(), groups=()), settings, palette=palette)

    assert result.is_valid is False
    assert result.categories == ()
    assert result.groups == ()
    assert result.primary_format_string == "#,##0.00"
    assert aggregate(None, settings, palette=palette).is_valid is False


def test_primary_format_string_prefers_unbound_measure_column(before_after_rows, settings) -> None:
    """The format of the measure column not bound to a series is used."""

    table = DataTable.from_rows(
        before_after_rows,
        category="region",
        measure="sales",
        series="period",
        format_strings={"sales": "$#,##0"},
    )
    assert resolve_primary_format_string(table, settings=settings) == "$#,##0"

    bound_only = replace(table, columns=())
    assert resolve_primary_format_string(bound_only, settings=settings) == "#,##0.00"


def test_aggregate_formats_values_and_tooltips(palette) -> None:
    """Points carry formatted values and tooltip lines in display order."""

    settings = VisualSettings(value_axis=ValueAxisSettings(display_units=1))
    table = DataTable.from_rows(
        [{"region": "A", "sales": 1234.5, "hl": 1000, "units": 7}],
        category="region",
        measure="sales",
        highlight="hl",
        tooltips=("units",),
        format_strings={"sales": "#,##0.0", "units": "0"},
    )
    result = aggregate(table, settings, palette=palette)
    point = result.categories[0].groups[0]

    assert point.formatted_value == "1,234.5"
    assert [(item.display_name, item.value) for item in point.tooltips] == [
        ("sales", "1,234.5"),
        ("sales (Highlighted)", "1,000.0"),
        ("units", "7"),
    ]
    assert all(item.color == point.color for item in point.tooltips)
