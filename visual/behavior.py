"""Interaction behavior: opacity rules and click handling for rendered marks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from dumbbell.dto import SelectableEntity, ViewModel
from dumbbell.engine import ViewModelManager

DIMMED_OPACITY: Final[float] = 0.4
DEFAULT_OPACITY: Final[float] = 1.0


def get_fill_opacity(selected: bool, has_selection: bool, *, highlighted: bool = False, has_highlights: bool = False) -> float:
    """Return the fill opacity for a mark.

    Args:
        selected: Whether the mark is selected.
        has_selection: Whether anything is selected.
        highlighted: Whether the mark is highlighted by a cross-filter.
        has_highlights: Whether the host sent highlights.

    Returns:
        `DIMMED_OPACITY` when a selection or highlight exists that excludes
        the mark, otherwise `DEFAULT_OPACITY`.
    """

    if (has_selection and not selected) or (has_highlights and not highlighted):
        return DIMMED_OPACITY
    return DEFAULT_OPACITY


def entity_opacity(view_model: ViewModel, entity: SelectableEntity) -> float:
    """Return the fill opacity for a category or group of `view_model`."""

    return DIMMED_OPACITY if view_model.should_dim(entity) else DEFAULT_OPACITY


@dataclass(frozen=True, slots=True)
class ClickEvent:
    """A pointer click reported by the renderer.

    Args:
        entity: Entity under the pointer, or None for the background.
        ctrl_key: Whether the multi-select modifier was held.
    """

    entity: SelectableEntity | None
    ctrl_key: bool = False


def handle_click(manager: ViewModelManager, event: ClickEvent) -> ViewModel:
    """Apply a click to the manager's current model.

    A background click clears the selection; an entity click selects it,
    toggling within the current selection when `ctrl_key` is held.
    """

    if event.entity is None:
        return manager.clear_selection()
    return manager.select((event.entity.identity,), multi_select=event.ctrl_key)
