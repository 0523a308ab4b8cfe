"""Figures and console rendering for the promotion analysis.

Design goals
------------
- Matplotlib-only (no hard seaborn dependency).
- Every plot returns its figure and optionally saves it.
- Text rendering is separate from computation: tables and test results are
  computed in :mod:`..analysis` and only formatted here.
"""

from __future__ import annotations

from .plots_promotion import (
    DEFAULT_COLORS,
    plot_correlation_heatmap,
    plot_promotion_rate_by_department,
    plot_promotions_by_department,
    plot_rating_distribution,
    plot_training_score_by_promotion,
)
from .text_report import render_cross_tabulation, render_table, render_test_result

__all__ = [
    # figures
    "DEFAULT_COLORS",
    "plot_promotions_by_department",
    "plot_promotion_rate_by_department",
    "plot_training_score_by_promotion",
    "plot_rating_distribution",
    "plot_correlation_heatmap",
    # text
    "render_table",
    "render_cross_tabulation",
    "render_test_result",
]
