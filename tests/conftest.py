"""Pytest fixtures shared across the engine and visual tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from dumbbell.colors import ColorPalette
from dumbbell.dataset import DataTable
from dumbbell.engine import ViewModelManager
from dumbbell.settings import VisualSettings
from dumbbell.text_metrics import MeasurementUnavailable, TextDimensions, TextProperties


class FixedTextMetrics:
    """Measure every glyph as `char_width` wide and every line as `height` tall."""

    def __init__(self, *, char_width: float = 10, height: float = 10) -> None:
        self.char_width = char_width
        self.height = height
        self.calls: list[TextProperties] = []

    def measure(self, properties: TextProperties) -> TextDimensions:
        self.calls.append(properties)
        return TextDimensions(width=len(properties.text) * self.char_width, height=self.height)


class UnavailableTextMetrics:
    """A provider whose rendering surface is never ready."""

    def measure(self, properties: TextProperties) -> TextDimensions:
        raise MeasurementUnavailable(text=properties.text, reason="surface detached")


@pytest.fixture
def text_metrics() -> FixedTextMetrics:
    """Return a deterministic text metrics provider."""

    return FixedTextMetrics()


@pytest.fixture
def unavailable_metrics() -> UnavailableTextMetrics:
    """Return a provider that always raises MeasurementUnavailable."""

    return UnavailableTextMetrics()


@pytest.fixture
def palette() -> ColorPalette:
    """Return a fresh default palette."""

    return ColorPalette()


@pytest.fixture
def settings() -> VisualSettings:
    """Return default visual settings."""

    return VisualSettings()


@pytest.fixture
def before_after_rows() -> list[dict[str, object]]:
    """Two categories, each with a Start and End measurement."""

    return [
        {"region": "A", "period": "Start", "sales": 6},
        {"region": "A", "period": "End", "sales": 14},
        {"region": "B", "period": "Start", "sales": 20},
        {"region": "B", "period": "End", "sales": 12},
    ]


@pytest.fixture
def before_after_table(before_after_rows) -> DataTable:
    """Return the two-category, two-series sample table."""

    return DataTable.from_rows(before_after_rows, category="region", measure="sales", series="period")


@pytest.fixture
def manager(text_metrics) -> ViewModelManager:
    """Return a ViewModelManager using the fixed text metrics."""

    return ViewModelManager(text_metrics=text_metrics)


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no filesystem access.
    - `integration`: tests touching files or running full update cycles.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
