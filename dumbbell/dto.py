"""DTO types produced by the view-model engine.

DTOs are immutable containers handed to a renderer. A new ViewModel is built on
every update; interaction feedback produces modified copies instead of
mutating a model in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .identity import EntityIdentity
from .scales import BandScale, LinearScale
from .settings import VisualSettings
from .text_metrics import TextDimensions


class ViewModelState(Enum):
    """Lifecycle state of a ViewModel."""

    EMPTY = "empty"
    INVALID = "invalid"
    VALID_UNLAIDOUT = "valid_unlaidout"
    VALID_LAIDOUT = "valid_laidout"


@dataclass(frozen=True, slots=True)
class Margin:
    """Space reserved around the plot area, in layout units."""

    top: float = 10
    right: float = 10
    bottom: float = 10
    left: float = 10


@dataclass(frozen=True, slots=True)
class Viewport:
    """Size of the area the visual renders into."""

    width: float
    height: float


@dataclass(frozen=True, slots=True)
class Coordinates:
    """An x/y pair, used for axis translation."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class TooltipItem:
    """A single tooltip line.

    Args:
        display_name: Column display name.
        value: Formatted value.
        color: Swatch color shown next to the line.
    """

    display_name: str
    value: str
    color: str


@dataclass(frozen=True, slots=True)
class Group:
    """A dumbbell end point (or, in the distinct list, a series).

    Args:
        name: Series name.
        color: Resolved fill color.
        identity: Data point identity (series identity for distinct groups).
        series_identity: Identity of the series the point belongs to.
        value: Measure value.
        formatted_value: Measure value rendered with the measure format.
        highlighted_value: Cross-filter highlight value, when highlighted.
        highlighted: True when the host sent a highlight for this point.
        selected: True when the entity is part of the current selection.
        tooltips: Tooltip lines for the point.
    """

    name: str
    color: str
    identity: EntityIdentity
    series_identity: EntityIdentity
    value: float
    formatted_value: str
    highlighted_value: float | None = None
    highlighted: bool = False
    selected: bool = False
    tooltips: tuple[TooltipItem, ...] = ()


@dataclass(frozen=True, slots=True)
class Category:
    """A category row with its end points and extremes.

    Args:
        name: Category display name.
        identity: Category identity.
        min: Smallest group value in the category.
        max: Largest group value in the category.
        selected: True when the category is selected.
        highlighted: True when every group in the category is highlighted.
        groups: End points, in series order.
    """

    name: str
    identity: EntityIdentity
    min: float
    max: float
    selected: bool = False
    highlighted: bool = False
    groups: tuple[Group, ...] = ()


SelectableEntity = Category | Group


@dataclass(frozen=True, slots=True)
class CategoryAxis:
    """Resolved category axis.

    Args:
        domain: Category names in first-seen order.
        range: Physical start and end of the axis.
        scale: Band scale over `domain`.
        translate: Offset of the axis group.
        tick_size: Gridline length (0: category axes draw no gridlines).
        tick_label_dimensions: Largest measured category label.
    """

    domain: tuple[str, ...]
    range: tuple[float, float]
    scale: BandScale
    translate: Coordinates
    tick_size: float = 0.0
    tick_label_dimensions: TextDimensions = TextDimensions()


@dataclass(frozen=True, slots=True)
class ValueAxis:
    """Resolved value axis.

    Args:
        domain: `(min_value, max_value)` of the dataset.
        range: Physical start and end of the axis.
        scale: Linear scale, niced to round tick boundaries.
        translate: Offset of the axis group.
        tick_count: Requested number of ticks.
        tick_size: Negative full-span gridline length.
        ticks: Tick values.
        tick_labels: Formatted tick values.
        tick_label_dimensions: Largest measured value label.
    """

    domain: tuple[float, float]
    range: tuple[float, float]
    scale: LinearScale
    translate: Coordinates
    tick_count: int
    tick_size: float
    ticks: tuple[float, ...] = ()
    tick_labels: tuple[str, ...] = ()
    tick_label_dimensions: TextDimensions = TextDimensions()


def should_dim(entity: SelectableEntity, *, has_selection: bool, has_highlights: bool) -> bool:
    """Return True when an entity is drawn de-emphasized.

    Args:
        entity: Category or Group.
        has_selection: Whether anything in the dataset is selected.
        has_highlights: Whether the host sent highlights.

    Returns:
        True when a selection exists that excludes the entity, or highlights
        exist that exclude it.
    """

    return (has_selection and not entity.selected) or (has_highlights and not entity.highlighted)


def should_emphasize(entity: SelectableEntity, *, has_selection: bool, has_highlights: bool) -> bool:
    """Return True when an entity is selected or highlighted while such state exists."""

    return (has_selection and entity.selected) or (has_highlights and entity.highlighted)


@dataclass(frozen=True, slots=True)
class ViewModel:
    """Renderer-ready model for one update.

    Args:
        state: Lifecycle state.
        primary_format_string: Format used for the value axis.
        margin: Margins around the plot.
        groups: Distinct series, for legends and data labels.
        categories: Category rows in first-seen order.
        min_value: Smallest category minimum.
        max_value: Largest category maximum.
        has_selection: Whether anything was selected when the model was built.
        has_highlights: Whether the host sent highlights.
        category_axis: Category axis, once laid out.
        value_axis: Value axis, once laid out.
        settings: Settings the model was built with.
    """

    state: ViewModelState = ViewModelState.EMPTY
    primary_format_string: str = ""
    margin: Margin = Margin()
    groups: tuple[Group, ...] = ()
    categories: tuple[Category, ...] = ()
    min_value: float = 0.0
    max_value: float = 0.0
    has_selection: bool = False
    has_highlights: bool = False
    category_axis: CategoryAxis | None = None
    value_axis: ValueAxis | None = None
    settings: VisualSettings = field(default_factory=VisualSettings)

    @classmethod
    def empty(cls, settings: VisualSettings | None = None) -> ViewModel:
        """Return an Empty-state model."""

        return cls(settings=settings or VisualSettings())

    @classmethod
    def invalid(cls, settings: VisualSettings | None = None) -> ViewModel:
        """Return an Invalid-state model with empty collections."""

        return cls(state=ViewModelState.INVALID, settings=settings or VisualSettings())

    @property
    def is_valid(self) -> bool:
        """Return True when the model holds chartable entities."""

        return self.state in (ViewModelState.VALID_UNLAIDOUT, ViewModelState.VALID_LAIDOUT)

    @property
    def is_laid_out(self) -> bool:
        """Return True when axes have been computed."""

        return self.state is ViewModelState.VALID_LAIDOUT

    def get_selectable_entities(self) -> tuple[SelectableEntity, ...]:
        """Return every entity that can carry selection state.

        Order: categories, then each category's groups, then distinct groups.
        """

        entities: list[SelectableEntity] = list(self.categories)
        for category in self.categories:
            entities.extend(category.groups)
        entities.extend(self.groups)
        return tuple(entities)

    def should_dim(self, entity: SelectableEntity) -> bool:
        """Return True when `entity` is drawn de-emphasized."""

        return should_dim(entity, has_selection=self.has_selection, has_highlights=self.has_highlights)

    def should_emphasize(self, entity: SelectableEntity) -> bool:
        """Return True when `entity` is drawn emphasized."""

        return should_emphasize(entity, has_selection=self.has_selection, has_highlights=self.has_highlights)
