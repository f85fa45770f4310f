"""Tests for selection reconciliation and interaction feedback."""

from __future__ import annotations

import pytest

from dumbbell.colors import ColorPalette
from dumbbell.engine import build_view_model
from dumbbell.identity import category_identity, data_point_identity, series_identity
from dumbbell.selection import SelectionSnapshot, apply_selection, clear_selection

pytestmark = pytest.mark.unit


@pytest.fixture
def view_model(before_after_table, settings):
    return build_view_model(before_after_table, settings, palette=ColorPalette())


def test_selecting_a_category_selects_its_points(view_model) -> None:
    """A category selection covers the category and its data points only."""

    selected = apply_selection(view_model, [category_identity(0)])
    first, second = selected.categories

    assert selected.has_selection is True
    assert first.selected is True
    assert all(group.selected for group in first.groups)
    assert second.selected is False
    assert not any(group.selected for group in second.groups)
    assert not any(group.selected for group in selected.groups)


def test_selecting_a_series_selects_its_points_across_categories(view_model) -> None:
    """A series selection covers the distinct group and every point of the series."""

    selected = apply_selection(view_model, [series_identity("End")])

    assert [group.selected for group in selected.groups] == [False, True]
    for category in selected.categories:
        assert category.selected is False
        assert [group.selected for group in category.groups] == [False, True]


def test_repeating_a_single_selection_clears_it(view_model) -> None:
    """Selecting the current selection again toggles it off."""

    once = apply_selection(view_model, [category_identity(0)])
    twice = apply_selection(once, [category_identity(0)])

    assert twice.has_selection is False
    assert not any(entity.selected for entity in twice.get_selectable_entities())


def test_multi_select_adds_and_toggles(view_model) -> None:
    """Multi-select adds new identities and removes already-selected ones."""

    both = apply_selection(view_model, [category_identity(0)])
    both = apply_selection(both, [category_identity(1)], multi_select=True)
    assert [c.selected for c in both.categories] == [True, True]

    only_second = apply_selection(both, [category_identity(0)], multi_select=True)
    assert [c.selected for c in only_second.categories] == [False, True]
    assert only_second.has_selection is True


def test_snapshot_round_trip_restores_selection(view_model, before_after_table, settings) -> None:
    """Selection survives a rebuild from the same data."""

    palette = ColorPalette()
    selected = apply_selection(view_model, [data_point_identity(1, "Start", "sales")])
    snapshot = SelectionSnapshot.capture(selected)

    rebuilt = build_view_model(before_after_table, settings, palette=palette, snapshot=snapshot)

    assert rebuilt.has_selection is True
    assert rebuilt.categories[1].groups[0].selected is True
    assert rebuilt.categories[1].selected is False
    assert sum(entity.selected for entity in rebuilt.get_selectable_entities()) == 1


def test_empty_snapshot_leaves_entities_unselected(view_model) -> None:
    """Capturing a model without selection yields an empty snapshot."""

    snapshot = SelectionSnapshot.capture(view_model)
    assert snapshot.has_selection is False
    assert SelectionSnapshot.capture(None).selected == frozenset()


def test_clear_selection_removes_dimming(view_model) -> None:
    """After clearing, nothing is dimmed when there are no highlights."""

    selected = apply_selection(view_model, [category_identity(0)])
    assert selected.should_dim(selected.categories[1]) is True

    cleared = clear_selection(selected)
    assert cleared.has_selection is False
    assert not any(cleared.should_dim(entity) for entity in cleared.get_selectable_entities())


def test_selected_entities_are_emphasized(view_model) -> None:
    """Selected entities are emphasized while a selection exists."""

    selected = apply_selection(view_model, [category_identity(1)])

    assert selected.should_emphasize(selected.categories[1]) is True
    assert selected.should_emphasize(selected.categories[0]) is False
    assert view_model.should_emphasize(view_model.categories[1]) is False


def test_multi_select_toggles_point_out_of_selected_category(view_model) -> None:
    """Ctrl-clicking a point of a selected category keeps only its siblings."""

    category = apply_selection(view_model, [category_identity(0)])
    toggled = apply_selection(category, [data_point_identity(0, "Start", "sales")], multi_select=True)
    first = toggled.categories[0]

    assert toggled.has_selection is True
    assert first.selected is False
    assert [group.selected for group in first.groups] == [False, True]
