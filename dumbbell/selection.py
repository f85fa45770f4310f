"""Selection Reconciler: carries selection state across rebuilds.

Before a rebuild, the selected identities of the current model are captured in
a SelectionSnapshot. Freshly aggregated entities carry no selection state; the
snapshot is applied to them by identity equality. `has_selection` for the new
model comes from the snapshot, not from the rebuilt entities.

`apply_selection` and `clear_selection` implement the interaction back-channel:
they return a modified copy of a model for immediate visual feedback. The next
rebuild is still driven by whatever model is current at that point.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from .aggregations import AggregationResult
from .dto import Category, Group, ViewModel
from .identity import EntityIdentity


@dataclass(frozen=True, slots=True)
class SelectionSnapshot:
    """Identities that were selected when the snapshot was taken."""

    selected: frozenset[EntityIdentity] = frozenset()

    @classmethod
    def capture(cls, view_model: ViewModel | None) -> SelectionSnapshot:
        """Snapshot every selected entity of `view_model` (empty for None)."""

        if view_model is None:
            return cls()
        return cls(
            selected=frozenset(
                entity.identity for entity in view_model.get_selectable_entities() if entity.selected
            )
        )

    @property
    def has_selection(self) -> bool:
        """Return True when at least one entity was selected."""

        return bool(self.selected)

    def is_selected(self, identity: EntityIdentity) -> bool:
        """Return True when an identity-equal entity was selected."""

        return identity in self.selected


def reconcile(result: AggregationResult, snapshot: SelectionSnapshot) -> AggregationResult:
    """Apply a selection snapshot to freshly aggregated entities.

    Args:
        result: Output of `aggregate` (entities carry no selection yet).
        snapshot: Selection captured from the previous model.

    Returns:
        A copy of `result` whose entities are selected iff their identity was
        selected in the snapshot.
    """

    if not result.is_valid or not snapshot.has_selection:
        return result
    categories, groups = _map_entities(result.categories, result.groups, snapshot.is_selected)
    return replace(result, categories=categories, groups=groups)


def apply_selection(
    view_model: ViewModel,
    identities: Iterable[EntityIdentity],
    *,
    multi_select: bool = False,
) -> ViewModel:
    """Return a copy of `view_model` with a selection applied.

    Selecting a category or series also selects the data points it contains.

    Args:
        view_model: Current model.
        identities: Entities the user interacted with.
        multi_select: Toggle `identities` within the current selection instead
            of replacing it. Toggling off a data point inside a selected
            category or series deselects that container as well.

    Returns:
        Model copy with updated `selected` flags and `has_selection`.
    """

    requested = set(identities)
    entities = view_model.get_selectable_entities()
    current = {entity.identity for entity in entities if entity.selected}

    chosen: set[EntityIdentity]
    if multi_select:
        chosen = set(current)
        for identity in requested:
            if identity in chosen:
                # Dropping a covering category or series keeps its other points selected.
                chosen = {
                    other for other in chosen if not identity.includes(other) and not other.includes(identity)
                }
            else:
                chosen.add(identity)
    else:
        covered = {
            entity.identity
            for entity in entities
            if any(identity.includes(entity.identity) for identity in requested)
        }
        chosen = set() if covered and covered == current else requested

    def is_selected(identity: EntityIdentity) -> bool:
        return any(choice.includes(identity) for choice in chosen)

    categories, groups = _map_entities(view_model.categories, view_model.groups, is_selected)
    return replace(view_model, categories=categories, groups=groups, has_selection=bool(chosen))


def clear_selection(view_model: ViewModel) -> ViewModel:
    """Return a copy of `view_model` with nothing selected."""

    categories, groups = _map_entities(view_model.categories, view_model.groups, lambda _identity: False)
    return replace(view_model, categories=categories, groups=groups, has_selection=False)


def _map_entities(
    categories: tuple[Category, ...],
    groups: tuple[Group, ...],
    is_selected: Callable[[EntityIdentity], bool],
) -> tuple[tuple[Category, ...], tuple[Group, ...]]:
    """Rebuild categories, their groups and distinct groups with new selected flags."""

    mapped_categories = tuple(
        replace(
            category,
            selected=is_selected(category.identity),
            groups=tuple(replace(group, selected=is_selected(group.identity)) for group in category.groups),
        )
        for category in categories
    )
    mapped_groups = tuple(replace(group, selected=is_selected(group.identity)) for group in groups)
    return mapped_categories, mapped_groups
