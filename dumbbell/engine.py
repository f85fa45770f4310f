"""View-model engine entrypoints.

`build_view_model` is the pure aggregate -> reconcile step. `ViewModelManager`
owns the single current ViewModel for a visual instance and runs one complete
pass per host update; each pass replaces the model wholesale.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .aggregations import aggregate
from .colors import ColorPalette
from .dataset import DataTable
from .dto import ViewModel, ViewModelState, Viewport
from .identity import EntityIdentity
from .layout import layout
from .log import log_event
from .selection import SelectionSnapshot, apply_selection, clear_selection, reconcile
from .settings import VisualSettings, clamp_visual_settings
from .text_metrics import HeuristicTextMetrics, TextMetricsProvider


def build_view_model(
    table: DataTable | None,
    settings: VisualSettings,
    *,
    palette: ColorPalette,
    snapshot: SelectionSnapshot | None = None,
) -> ViewModel:
    """Aggregate a DataTable and carry a prior selection onto the result.

    Args:
        table: Input for this update.
        settings: Clamped visual settings.
        palette: Color provider shared across updates.
        snapshot: Selection captured from the previous model, if any.

    Returns:
        ViewModel in the Invalid or Valid-Unlaidout state.
    """

    snapshot = snapshot or SelectionSnapshot()
    result = aggregate(table, settings, palette=palette)
    if not result.is_valid:
        return replace(ViewModel.invalid(settings), primary_format_string=result.primary_format_string)

    result = reconcile(result, snapshot)
    log_event(
        "view_model_built",
        {
            "categories": len(result.categories),
            "groups": len(result.groups),
            "has_highlights": result.has_highlights,
            "has_selection": snapshot.has_selection,
        },
        level="debug",
    )
    return ViewModel(
        state=ViewModelState.VALID_UNLAIDOUT,
        primary_format_string=result.primary_format_string,
        groups=result.groups,
        categories=result.categories,
        min_value=result.min_value,
        max_value=result.max_value,
        has_selection=snapshot.has_selection,
        has_highlights=result.has_highlights,
        settings=settings,
    )


class ViewModelManager:
    """Maintain the current ViewModel for one visual instance.

    The manager is the only owner of the current model. Renderers read it and
    report interactions back through `select` / `clear_selection`; the next
    `map_data_table` reconciles from whatever model is current at that time.
    """

    def __init__(
        self,
        *,
        text_metrics: TextMetricsProvider | None = None,
        palette: ColorPalette | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            text_metrics: Provider for the layout measurement pass.
            palette: Color provider; a fresh default palette when omitted.
        """

        self._text_metrics: TextMetricsProvider = text_metrics or HeuristicTextMetrics()
        self._palette = palette or ColorPalette()
        self._view_model = ViewModel.empty()
        self._last_layout: ViewModel | None = None

    @property
    def view_model(self) -> ViewModel:
        """The current ViewModel."""

        return self._view_model

    def map_data_table(self, table: DataTable | None, settings: VisualSettings) -> ViewModel:
        """Rebuild entities for new data, preserving the current selection.

        Args:
            table: Input for this update.
            settings: Visual settings; out-of-range values are clamped.

        Returns:
            The new current model (Invalid or Valid-Unlaidout).
        """

        settings = clamp_visual_settings(settings)
        snapshot = SelectionSnapshot.capture(self._view_model)
        self._view_model = build_view_model(table, settings, palette=self._palette, snapshot=snapshot)
        return self._view_model

    def update_axes(self, viewport: Viewport) -> ViewModel:
        """Lay out the current model for a viewport.

        Runs on resize without new data as well. Invalid or empty models are
        left unchanged.
        """

        if not self._view_model.is_valid:
            return self._view_model
        self._view_model = layout(
            self._view_model,
            viewport,
            text_metrics=self._text_metrics,
            previous=self._last_layout,
        )
        self._last_layout = self._view_model
        return self._view_model

    def update(self, table: DataTable | None, settings: VisualSettings, viewport: Viewport) -> ViewModel:
        """Run a full aggregate -> reconcile -> layout pass."""

        self.map_data_table(table, settings)
        return self.update_axes(viewport)

    def select(self, identities: Iterable[EntityIdentity], *, multi_select: bool = False) -> ViewModel:
        """Apply a user selection to the current model."""

        self._view_model = apply_selection(self._view_model, identities, multi_select=multi_select)
        return self._view_model

    def clear_selection(self) -> ViewModel:
        """Clear every selection on the current model."""

        self._view_model = clear_selection(self._view_model)
        return self._view_model
