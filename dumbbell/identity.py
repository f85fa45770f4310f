"""Structural identity keys for selectable chart entities.

Every rebuild allocates fresh Category and Group objects, so selection state is
carried across rebuilds by comparing identity keys rather than object
references. Keys are plain frozen dataclasses: hashable, comparable, and free of
any host service.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

EntityKind = Literal["category", "series", "data_point"]


@dataclass(frozen=True, slots=True)
class EntityIdentity:
    """Composite identity of a selectable entity.

    Args:
        kind: Which entity family the key belongs to.
        category_index: Row index of the category, when category-scoped.
        series_key: Stable series key, when series-scoped.
        measure_key: Query name of the measure column, for data points.
    """

    kind: EntityKind
    category_index: int | None = None
    series_key: str | None = None
    measure_key: str | None = None

    def includes(self, other: EntityIdentity) -> bool:
        """Return True when `other` is this entity or one of its data points."""

        if self == other:
            return True
        if other.kind != "data_point":
            return False
        if self.kind == "category":
            return other.category_index == self.category_index
        if self.kind == "series":
            return other.series_key == self.series_key
        return False


def category_identity(category_index: int) -> EntityIdentity:
    """Return the identity of a category row."""

    return EntityIdentity(kind="category", category_index=category_index)


def series_identity(series_key: str | None) -> EntityIdentity:
    """Return the identity of a series (distinct group)."""

    return EntityIdentity(kind="series", series_key=series_key)


def data_point_identity(
    category_index: int,
    series_key: str | None,
    measure_key: str,
) -> EntityIdentity:
    """Return the identity of the category x series x measure intersection."""

    return EntityIdentity(
        kind="data_point",
        category_index=category_index,
        series_key=series_key,
        measure_key=measure_key,
    )
