"""Tabular input consumed by the Data Aggregator.

The input mirrors a host's categorical data mapping: one category column, and
one value group per series value, each group holding a measure column (with an
optional highlight array) plus zero or more tooltip columns. A table without a
series dimension has a single group whose `name` is None.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Final

CATEGORY_ROLE: Final[str] = "category"
MEASURE_ROLE: Final[str] = "measure"
TOOLTIPS_ROLE: Final[str] = "tooltips"

PrimitiveValue = str | int | float | bool | None


class InvalidDataTable(ValueError):
    """Raised by `require_valid_table` when the input cannot be charted."""

    def __init__(self, *, reasons: tuple[str, ...]) -> None:
        """Initialize the error.

        Args:
            reasons: Human-readable validation failures.
        """

        super().__init__("Invalid data table: " + "; ".join(reasons))
        self.reasons = reasons


@dataclass(frozen=True, slots=True)
class ColumnMetadata:
    """Describes a column bound to one or more data roles.

    Args:
        display_name: Name shown in tooltips and labels.
        query_name: Stable query name, used in data point identities.
        roles: Data roles the column is bound to.
        format_string: Number format attached to the column, if any.
        is_series_bound: True for per-series copies of a measure column.
    """

    display_name: str
    query_name: str
    roles: frozenset[str]
    format_string: str | None = None
    is_series_bound: bool = False

    def has_role(self, role: str) -> bool:
        """Return True when the column is bound to `role`."""

        return role in self.roles


@dataclass(frozen=True, slots=True)
class CategoryColumn:
    """The category column and its row values."""

    source: ColumnMetadata
    values: tuple[PrimitiveValue, ...]


@dataclass(frozen=True, slots=True)
class ValueColumn:
    """A measure or tooltip column within a value group.

    Args:
        source: Column metadata.
        values: Values aligned to category rows.
        highlights: Cross-filter highlight values aligned to rows, or None when
            the host sent no highlights for this column.
    """

    source: ColumnMetadata
    values: tuple[float | None, ...]
    highlights: tuple[float | None, ...] | None = None


@dataclass(frozen=True, slots=True)
class ValueGroup:
    """All value columns for one series value.

    Args:
        name: Series value, or None for the implicit group of a table with no series.
        key: Stable series key used for identity; defaults to `name`.
        columns: Measure and tooltip columns for the series.
        fill_color: Stored color override for the series, if any.
    """

    name: str | None
    columns: tuple[ValueColumn, ...]
    key: str | None = None
    fill_color: str | None = None

    @property
    def series_key(self) -> str | None:
        """Return `key` when set, otherwise `name`."""

        return self.key if self.key is not None else self.name

    def measure_column(self) -> ValueColumn | None:
        """Return the first column bound to the measure role."""

        for column in self.columns:
            if column.source.has_role(MEASURE_ROLE):
                return column
        return None

    def tooltip_columns(self) -> tuple[ValueColumn, ...]:
        """Return columns bound to the tooltips role (and not the measure role)."""

        return tuple(
            column
            for column in self.columns
            if column.source.has_role(TOOLTIPS_ROLE) and not column.source.has_role(MEASURE_ROLE)
        )


@dataclass(frozen=True, slots=True)
class DataTable:
    """Categorical input for a single update.

    Args:
        categories: Category columns (exactly one is valid).
        groups: Value groups, one per series value.
        columns: Column metadata as declared by the host, including the
            measure columns that are not bound to a series.
    """

    categories: tuple[CategoryColumn, ...]
    groups: tuple[ValueGroup, ...]
    columns: tuple[ColumnMetadata, ...] = ()

    @property
    def has_series(self) -> bool:
        """Return True when groups come from a series dimension."""

        return any(group.name is not None for group in self.groups)

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, PrimitiveValue]],
        *,
        category: str,
        measure: str,
        series: str | None = None,
        highlight: str | None = None,
        tooltips: Sequence[str] = (),
        format_strings: Mapping[str, str] | None = None,
        fill_colors: Mapping[str, str] | None = None,
    ) -> DataTable:
        """Pivot long-format rows into a DataTable.

        Args:
            rows: One mapping per category (and series) value.
            category: Field holding the category value.
            measure: Field holding the measure value.
            series: Optional field holding the series value.
            highlight: Optional field holding the highlighted measure value.
            tooltips: Extra numeric fields exposed as tooltip columns.
            format_strings: Optional field name -> format string mapping.
            fill_colors: Optional series name -> color override mapping.

        Returns:
            DataTable with categories and series in first-seen order. Cells
            missing from `rows` are None.
        """

        formats = dict(format_strings or {})
        overrides = dict(fill_colors or {})

        category_values: list[PrimitiveValue] = []
        category_index: dict[PrimitiveValue, int] = {}
        series_names: list[str | None] = []
        cells: dict[tuple[int, str | None], Mapping[str, PrimitiveValue]] = {}

        for row in rows:
            cv = row.get(category)
            if cv not in category_index:
                category_index[cv] = len(category_values)
                category_values.append(cv)
            name = None if series is None else _series_name(row.get(series))
            if name not in series_names:
                series_names.append(name)
            cells[(category_index[cv], name)] = row

        if not series_names:
            series_names.append(None)

        category_meta = ColumnMetadata(display_name=category, query_name=category, roles=frozenset({CATEGORY_ROLE}))
        measure_meta = ColumnMetadata(
            display_name=measure,
            query_name=measure,
            roles=frozenset({MEASURE_ROLE}),
            format_string=formats.get(measure),
        )
        tooltip_metas = tuple(
            ColumnMetadata(
                display_name=name,
                query_name=name,
                roles=frozenset({TOOLTIPS_ROLE}),
                format_string=formats.get(name),
            )
            for name in tooltips
        )

        row_count = len(category_values)
        groups: list[ValueGroup] = []
        bound = series is not None
        for name in series_names:
            columns = [
                ValueColumn(
                    source=replace(measure_meta, is_series_bound=bound),
                    values=_column_values(cells, row_count, name, measure),
                    highlights=(
                        _column_values(cells, row_count, name, highlight) if highlight is not None else None
                    ),
                )
            ]
            columns.extend(
                ValueColumn(
                    source=replace(meta, is_series_bound=bound),
                    values=_column_values(cells, row_count, name, meta.query_name),
                )
                for meta in tooltip_metas
            )
            groups.append(
                ValueGroup(
                    name=name,
                    columns=tuple(columns),
                    fill_color=overrides.get(name) if name is not None else None,
                )
            )

        return cls(
            categories=(CategoryColumn(source=category_meta, values=tuple(category_values)),),
            groups=tuple(groups),
            columns=(category_meta, measure_meta, *tooltip_metas),
        )


def _column_values(
    cells: Mapping[tuple[int, str | None], Mapping[str, PrimitiveValue]],
    row_count: int,
    series_name: str | None,
    field_name: str,
) -> tuple[float | None, ...]:
    """Collect one field for one series, aligned to category rows."""

    values: list[float | None] = []
    for ci in range(row_count):
        row = cells.get((ci, series_name))
        values.append(_as_number(row.get(field_name)) if row is not None else None)
    return tuple(values)


def _series_name(value: PrimitiveValue) -> str:
    """Return the display name for a series value."""

    return "(Blank)" if value is None else str(value)


def _as_number(value: PrimitiveValue) -> float | None:
    """Coerce a cell to float, keeping None (and bools) as missing."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value))
    except ValueError:
        return None


def validate_data_table(table: DataTable | None) -> tuple[str, ...]:
    """Return the reasons `table` cannot be charted (empty when it can).

    Args:
        table: Candidate input, or None when the host sent no data.

    Returns:
        Tuple of human-readable validation failures.
    """

    if table is None:
        return ("no data table was supplied",)

    reasons: list[str] = []
    if len(table.categories) != 1:
        reasons.append(f"expected exactly one category column, got {len(table.categories)}")
    if not table.groups:
        reasons.append("expected at least one value group")
    if reasons:
        return tuple(reasons)

    row_count = len(table.categories[0].values)
    for idx, group in enumerate(table.groups):
        measure = group.measure_column()
        if measure is None:
            reasons.append(f"group[{idx}] has no measure column")
            continue
        if len(measure.values) != row_count:
            reasons.append(f"group[{idx}] measure has {len(measure.values)} values for {row_count} categories")
        if measure.highlights is not None and len(measure.highlights) != row_count:
            reasons.append(f"group[{idx}] highlights have {len(measure.highlights)} values for {row_count} categories")
        for column in group.tooltip_columns():
            if len(column.values) != row_count:
                reasons.append(f"group[{idx}] tooltip {column.source.display_name!r} is misaligned")
    return tuple(reasons)


def is_data_table_valid(table: DataTable | None) -> bool:
    """Return True when `table` can be charted."""

    return not validate_data_table(table)


def require_valid_table(table: DataTable | None) -> DataTable:
    """Return `table` unchanged, raising InvalidDataTable when it cannot be charted."""

    reasons = validate_data_table(table)
    if reasons or table is None:
        raise InvalidDataTable(reasons=reasons)
    return table
