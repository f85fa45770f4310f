"""Plot geometry for a laid-out ViewModel.

Resolves every drawable element to layout coordinates so a renderer only has
to paint: one connecting line and one circle per group for each category, plus
series labels beside the first category row. In `left` orientation the value
dimension runs along x; in `bottom` orientation it runs along y.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .dto import Category, Group, ViewModel


@dataclass(frozen=True, slots=True)
class PointGeometry:
    """A dumbbell end point.

    Args:
        name: Series name.
        x: Circle center x.
        y: Circle center y.
        radius: Circle radius.
        color: Fill color.
        dimmed: Whether the point is drawn de-emphasized.
    """

    name: str
    x: float
    y: float
    radius: float
    color: str
    dimmed: bool


@dataclass(frozen=True, slots=True)
class LineGeometry:
    """The line joining a category's extremes."""

    x1: float
    y1: float
    x2: float
    y2: float
    stroke_width: float
    color: str
    dimmed: bool


@dataclass(frozen=True, slots=True)
class CategoryGeometry:
    """Band placement and drawables for one category.

    Args:
        category: Source category; names can repeat across rows.
        name: Category name.
        offset: Start of the category band along the category dimension.
        bandwidth: Width of the band.
        midpoint: Center of the band (absolute).
        line: Connecting line between `min` and `max`.
        points: One point per group.
        emphasized: Whether the category label is drawn emphasized.
    """

    category: Category
    name: str
    offset: float
    bandwidth: float
    midpoint: float
    line: LineGeometry
    points: tuple[PointGeometry, ...]
    emphasized: bool


@dataclass(frozen=True, slots=True)
class DataLabelGeometry:
    """A series name label."""

    text: str
    x: float
    y: float
    color: str
    visible: bool
    dimmed: bool


@dataclass(frozen=True, slots=True)
class PlotGeometry:
    """All drawables for a laid-out model."""

    categories: tuple[CategoryGeometry, ...]
    data_labels: tuple[DataLabelGeometry, ...]


def compute_plot_geometry(view_model: ViewModel) -> PlotGeometry | None:
    """Resolve drawables for a laid-out model.

    Args:
        view_model: Model in the Valid-Laidout state.

    Returns:
        PlotGeometry, or None when the model has not been laid out.
    """

    if not view_model.is_laid_out or view_model.category_axis is None or view_model.value_axis is None:
        return None

    settings = view_model.settings
    horizontal_values = settings.category_axis.orientation == "left"
    band_scale = view_model.category_axis.scale
    value_scale = view_model.value_axis.scale
    bandwidth = band_scale.bandwidth

    def place(value_position: float, category_position: float) -> tuple[float, float]:
        if horizontal_values:
            return value_position, category_position
        return category_position, value_position

    offsets = band_scale.offsets()
    categories: list[CategoryGeometry] = []
    for category in view_model.categories:
        offset = offsets.get(category.name)
        if offset is None:
            continue
        midpoint = offset + bandwidth / 2
        x1, y1 = place(value_scale(category.min), midpoint)
        x2, y2 = place(value_scale(category.max), midpoint)
        line = LineGeometry(
            x1=x1,
            y1=y1,
            x2=x2,
            y2=y2,
            stroke_width=settings.connecting_lines.stroke_width,
            color=settings.connecting_lines.color,
            dimmed=view_model.should_dim(category),
        )
        points = tuple(
            _point_geometry(view_model, group, place(value_scale(_plotted_value(group)), midpoint))
            for group in category.groups
        )
        categories.append(
            CategoryGeometry(
                category=category,
                name=category.name,
                offset=offset,
                bandwidth=bandwidth,
                midpoint=midpoint,
                line=line,
                points=points,
                emphasized=view_model.should_emphasize(category),
            )
        )

    return PlotGeometry(categories=tuple(categories), data_labels=_data_labels(view_model, categories, place))


def _plotted_value(group: Group) -> float:
    """Return the value a point is drawn at: the highlight when highlighted."""

    if group.highlighted and group.highlighted_value is not None:
        return group.highlighted_value
    return group.value


def _point_geometry(view_model: ViewModel, group: Group, center: tuple[float, float]) -> PointGeometry:
    return PointGeometry(
        name=group.name,
        x=center[0],
        y=center[1],
        radius=view_model.settings.data_points.radius,
        color=group.color,
        dimmed=view_model.should_dim(group),
    )


def _data_labels(
    view_model: ViewModel,
    categories: list[CategoryGeometry],
    place: Callable[[float, float], tuple[float, float]],
) -> tuple[DataLabelGeometry, ...]:
    """Place distinct series labels at the start of the first category band."""

    if not categories or view_model.value_axis is None:
        return ()
    first: Category = view_model.categories[0]
    anchor = categories[0].offset
    show = view_model.settings.data_labels.show
    labels: list[DataLabelGeometry] = []
    for group in view_model.groups:
        x, y = place(view_model.value_axis.scale(_first_value(first, group)), anchor)
        labels.append(
            DataLabelGeometry(
                text=group.name,
                x=x,
                y=y,
                color=group.color,
                visible=show,
                dimmed=view_model.should_dim(group),
            )
        )
    return tuple(labels)


def _first_value(first: Category, series: Group) -> float:
    """Return the series value in the first category, else its first-seen value."""

    for group in first.groups:
        if group.series_identity == series.series_identity:
            return group.value
    return series.value
