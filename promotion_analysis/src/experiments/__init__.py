"""Step entrypoints for the analysis.

Each module contains a CLI-friendly ``main`` function. This package re-exports
those entrypoints so they can be called programmatically, e.g. from
``promotion_analysis/run_analysis.py``.
"""

from __future__ import annotations

from .run_descriptives import main as run_descriptives
from .run_inference import main as run_inference
from .run_plots import main as run_plots

__all__ = [
    "run_descriptives",
    "run_inference",
    "run_plots",
]

