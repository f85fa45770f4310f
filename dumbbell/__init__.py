"""Dumbbell chart view-model engine.

This package turns categorical input, visual settings and a viewport into an
immutable, renderer-ready ViewModel. It is pure: no host imports, no I/O, and
every collaborator (text metrics, colors) is passed in.
"""

from .dataset import DataTable
from .dto import ViewModel, ViewModelState, Viewport
from .engine import ViewModelManager, build_view_model
from .geometry import compute_plot_geometry
from .settings import VisualSettings

__all__ = [
    "DataTable",
    "ViewModel",
    "ViewModelManager",
    "ViewModelState",
    "Viewport",
    "VisualSettings",
    "build_view_model",
    "compute_plot_geometry",
]
