"""Data Aggregator: maps a DataTable into the Category/Group entity graph.

The walk is a single pass over categories (outer) and value groups (inner).
Per-category and dataset extremes are folded in as values are encountered, so
no second pass over groups is needed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from itertools import chain

from .colors import ColorPalette, resolve_group_color
from .dataset import MEASURE_ROLE, ColumnMetadata, DataTable, ValueColumn, ValueGroup, validate_data_table
from .dto import Category, Group, TooltipItem
from .formatting import BLANK_LABEL, NO_DISPLAY_UNITS, ValueFormatter, create_value_formatter
from .identity import category_identity, data_point_identity, series_identity
from .log import log_event
from .settings import VisualSettings


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Entities and dataset-level facts produced by `aggregate`.

    Attributes:
        is_valid: False when the input was rejected (collections are empty).
        categories: Category rows in first-seen order.
        groups: Distinct series in first-seen order.
        min_value: Smallest category minimum (0 when invalid).
        max_value: Largest category maximum (0 when invalid).
        has_highlights: Whether any measure column carries highlights.
        primary_format_string: Format used for value axis labels.
    """

    is_valid: bool
    categories: tuple[Category, ...] = ()
    groups: tuple[Group, ...] = ()
    min_value: float = 0.0
    max_value: float = 0.0
    has_highlights: bool = False
    primary_format_string: str = ""


def aggregate(
    table: DataTable | None,
    settings: VisualSettings,
    *,
    palette: ColorPalette,
) -> AggregationResult:
    """Build categories, distinct groups and extremes from a DataTable.

    Args:
        table: Input for this update, or None when the host sent no data.
        settings: Clamped visual settings.
        palette: Color provider; keeps series colors stable across calls.

    Returns:
        AggregationResult. Invalid input yields `is_valid=False` and empty
        collections instead of raising.
    """

    fallback_format = settings.data_points.format_string_missing
    reasons = validate_data_table(table)
    if reasons or table is None:
        log_event("view_model_invalid", {"reasons": list(reasons)}, level="warning")
        return AggregationResult(is_valid=False, primary_format_string=fallback_format)

    category_column = table.categories[0]
    has_highlights = any(_measure(group).highlights is not None for group in table.groups)

    colors: dict[str, str] = {}
    distinct: dict[str, Group] = {}
    categories: list[Category] = []
    dataset_min: float | None = None
    dataset_max: float | None = None

    for ci, raw_category in enumerate(category_column.values):
        category_name = BLANK_LABEL if raw_category is None else str(raw_category)
        category_min: float | None = None
        category_max: float | None = None
        groups: list[Group] = []

        for group in table.groups:
            measure = _measure(group)
            value = measure.values[ci]
            if value is None:
                continue

            name = group.name if group.name is not None else measure.source.display_name
            color = colors.get(name)
            if color is None:
                color = _resolve_color(group, name, settings=settings, palette=palette)
                colors[name] = color

            highlight = measure.highlights[ci] if measure.highlights is not None else None
            highlighted = has_highlights and highlight is not None
            formatter = _measure_formatter(measure.source, settings=settings, reference_value=value)
            formatted_value = formatter.format(value)
            point = Group(
                name=name,
                color=color,
                identity=data_point_identity(ci, group.series_key, measure.source.query_name),
                series_identity=series_identity(group.series_key),
                value=value,
                formatted_value=formatted_value,
                highlighted_value=highlight if highlighted else None,
                highlighted=highlighted,
                tooltips=_tooltip_items(
                    group,
                    measure,
                    ci,
                    formatted_value=formatted_value,
                    highlighted_value=formatter.format(highlight) if highlighted else None,
                    color=color,
                    fallback_format=fallback_format,
                ),
            )
            groups.append(point)

            if name not in distinct:
                distinct[name] = Group(
                    name=name,
                    color=color,
                    identity=point.series_identity,
                    series_identity=point.series_identity,
                    value=value,
                    formatted_value=formatted_value,
                    highlighted_value=point.highlighted_value,
                    highlighted=highlighted,
                )

            category_min = value if category_min is None else min(category_min, value)
            category_max = value if category_max is None else max(category_max, value)
            dataset_min = value if dataset_min is None else min(dataset_min, value)
            dataset_max = value if dataset_max is None else max(dataset_max, value)

        if category_min is None or category_max is None:
            continue
        categories.append(
            Category(
                name=category_name,
                identity=category_identity(ci),
                min=category_min,
                max=category_max,
                highlighted=has_highlights and all(point.highlighted for point in groups),
                groups=tuple(groups),
            )
        )

    return AggregationResult(
        is_valid=True,
        categories=tuple(categories),
        groups=tuple(distinct.values()),
        min_value=dataset_min if dataset_min is not None else 0.0,
        max_value=dataset_max if dataset_max is not None else 0.0,
        has_highlights=has_highlights,
        primary_format_string=resolve_primary_format_string(table, settings=settings),
    )


def resolve_primary_format_string(table: DataTable, *, settings: VisualSettings) -> str:
    """Return the format of the first measure column not bound to a series.

    Args:
        table: Validated input.
        settings: Settings providing the fallback format.

    Returns:
        The column's format string, or `data_points.format_string_missing`
        when there is no such column or it carries no format.
    """

    fallback = settings.data_points.format_string_missing
    for column in _measure_metadata(table):
        if column.has_role(MEASURE_ROLE) and not column.is_series_bound:
            return column.format_string or fallback
    return fallback


def _measure_metadata(table: DataTable) -> Iterator[ColumnMetadata]:
    """Yield declared column metadata, then each group's measure metadata."""

    group_columns = (_measure(group).source for group in table.groups)
    yield from chain(table.columns, group_columns)


def _measure(group: ValueGroup) -> ValueColumn:
    """Return the measure column of a validated group."""

    measure = group.measure_column()
    if measure is None:
        raise ValueError(f"Value group {group.name!r} has no measure column.")
    return measure


def _resolve_color(group: ValueGroup, name: str, *, settings: VisualSettings, palette: ColorPalette) -> str:
    """Resolve a group's color: override, then implicit-group fill, then palette."""

    if group.name is None:
        return group.fill_color or settings.data_points.fill_color
    return resolve_group_color(name, override=group.fill_color, palette=palette)


def _measure_formatter(
    source: ColumnMetadata,
    *,
    settings: VisualSettings,
    reference_value: float | None,
) -> ValueFormatter:
    """Return the formatter for measure values, honoring value axis units and precision."""

    return create_value_formatter(
        source.format_string or settings.data_points.format_string_missing,
        display_units=settings.value_axis.display_units,
        decimal_places=settings.value_axis.decimal_places,
        reference_value=reference_value,
    )


def _tooltip_items(
    group: ValueGroup,
    measure: ValueColumn,
    ci: int,
    *,
    formatted_value: str,
    highlighted_value: str | None,
    color: str,
    fallback_format: str,
) -> tuple[TooltipItem, ...]:
    """Assemble tooltip lines: primary metric, highlight, then tooltip columns."""

    items = [TooltipItem(display_name=measure.source.display_name, value=formatted_value, color=color)]
    if highlighted_value is not None:
        items.append(
            TooltipItem(
                display_name=f"{measure.source.display_name} (Highlighted)",
                value=highlighted_value,
                color=color,
            )
        )
    for column in group.tooltip_columns():
        formatter = ValueFormatter(
            format_string=column.source.format_string or fallback_format,
            display_units=NO_DISPLAY_UNITS,
        )
        items.append(
            TooltipItem(
                display_name=column.source.display_name,
                value=formatter.format(column.values[ci]),
                color=color,
            )
        )
    return tuple(items)
