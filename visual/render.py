"""JSON payloads for a renderer built from a ViewModel and its plot geometry."""

from __future__ import annotations

from typing import TypedDict

from dumbbell.dto import Group, TooltipItem, ViewModel
from dumbbell.geometry import PlotGeometry, compute_plot_geometry

from .behavior import DEFAULT_OPACITY, DIMMED_OPACITY, entity_opacity


class TooltipPayload(TypedDict):
    """A tooltip line."""

    displayName: str
    value: str
    color: str


class PointPayload(TypedDict):
    """A dumbbell end point."""

    name: str
    x: float
    y: float
    radius: float
    color: str
    opacity: float
    value: str
    tooltips: list[TooltipPayload]


class LinePayload(TypedDict):
    """A connecting line."""

    x1: float
    y1: float
    x2: float
    y2: float
    strokeWidth: float
    color: str
    opacity: float


class CategoryPayload(TypedDict):
    """A category row."""

    name: str
    emphasized: bool
    line: LinePayload
    points: list[PointPayload]


class DataLabelPayload(TypedDict):
    """A series name label."""

    text: str
    x: float
    y: float
    color: str
    opacity: float


class AxisPayload(TypedDict, total=False):
    """An axis, with its translation and tick labels."""

    translateX: float
    translateY: float
    tickSize: float
    ticks: list[float]
    tickLabels: list[str]
    color: str
    fontSize: float
    fontFamily: str


class ChartPayload(TypedDict):
    """Full renderer payload for one update."""

    state: str
    margin: dict[str, float]
    categoryAxis: AxisPayload | None
    valueAxis: AxisPayload | None
    categories: list[CategoryPayload]
    dataLabels: list[DataLabelPayload]


def render_payload(view_model: ViewModel) -> ChartPayload:
    """Build the renderer payload for a model.

    Args:
        view_model: Current model in any state.

    Returns:
        ChartPayload. Only laid-out models produce axes and drawables.
    """

    margin = view_model.margin
    payload: ChartPayload = {
        "state": view_model.state.value,
        "margin": {"top": margin.top, "right": margin.right, "bottom": margin.bottom, "left": margin.left},
        "categoryAxis": None,
        "valueAxis": None,
        "categories": [],
        "dataLabels": [],
    }
    geometry = compute_plot_geometry(view_model)
    if geometry is None or view_model.category_axis is None or view_model.value_axis is None:
        return payload

    category_settings = view_model.settings.category_axis
    value_settings = view_model.settings.value_axis
    payload["categoryAxis"] = {
        "translateX": view_model.category_axis.translate.x,
        "translateY": view_model.category_axis.translate.y,
        "tickSize": view_model.category_axis.tick_size,
        "tickLabels": list(view_model.category_axis.domain),
        "color": category_settings.color,
        "fontSize": category_settings.font_size,
        "fontFamily": category_settings.font_family,
    }
    payload["valueAxis"] = {
        "translateX": view_model.value_axis.translate.x,
        "translateY": view_model.value_axis.translate.y,
        "tickSize": view_model.value_axis.tick_size,
        "ticks": list(view_model.value_axis.ticks),
        "tickLabels": list(view_model.value_axis.tick_labels),
        "color": value_settings.color,
        "fontSize": value_settings.font_size,
        "fontFamily": value_settings.font_family,
    }
    payload["categories"] = _categories(view_model, geometry)
    payload["dataLabels"] = [
        {
            "text": label.text,
            "x": label.x,
            "y": label.y,
            "color": label.color,
            "opacity": 0.0 if not label.visible else (DIMMED_OPACITY if label.dimmed else DEFAULT_OPACITY),
        }
        for label in geometry.data_labels
    ]
    return payload


def _categories(view_model: ViewModel, geometry: PlotGeometry) -> list[CategoryPayload]:
    rendered: list[CategoryPayload] = []
    for placed in geometry.categories:
        category = placed.category
        line = placed.line
        rendered.append(
            {
                "name": placed.name,
                "emphasized": placed.emphasized,
                "line": {
                    "x1": line.x1,
                    "y1": line.y1,
                    "x2": line.x2,
                    "y2": line.y2,
                    "strokeWidth": line.stroke_width,
                    "color": line.color,
                    "opacity": entity_opacity(view_model, category),
                },
                "points": [
                    _point(view_model, group, point.x, point.y, point.radius)
                    for group, point in zip(category.groups, placed.points)
                ],
            }
        )
    return rendered


def _point(view_model: ViewModel, group: Group, x: float, y: float, radius: float) -> PointPayload:
    return {
        "name": group.name,
        "x": x,
        "y": y,
        "radius": radius,
        "color": group.color,
        "opacity": entity_opacity(view_model, group),
        "value": group.formatted_value,
        "tooltips": [_tooltip(item) for item in group.tooltips],
    }


def _tooltip(item: TooltipItem) -> TooltipPayload:
    return {"displayName": item.display_name, "value": item.value, "color": item.color}
