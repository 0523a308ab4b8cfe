"""Promotion-focused figures for the exploratory report.

The plots answer the questions asked in the analysis session:
- Which departments promote the most employees (absolute and relative)?
- Do promoted employees score higher in training?
- How is the previous-year rating distributed?

All functions use matplotlib only, return the :class:`~matplotlib.figure.Figure`
and save it when ``save_path`` is given. Callers close figures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from ..analysis.tables import cross_tabulation, grouped_summary, SummaryMetric
from ..data.schema import EmployeeField, FieldLike, require_columns, resolve_field
from ..exceptions import InsufficientDataError

# Not Promoted / Promoted
DEFAULT_COLORS: Sequence[str] = ("#8B4513", "#4682B4")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _maybe_save(fig: plt.Figure, save_path: str | Path | None) -> None:
    if save_path is None:
        return
    path = Path(save_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches="tight", dpi=200)


def _label_bars(ax: plt.Axes, bars, fmt: str = "{:.0f}", fontsize: int = 8) -> None:
    for b in bars:
        height = b.get_height()
        if not np.isfinite(height):
            continue
        ax.text(
            b.get_x() + b.get_width() / 2,
            float(height),
            fmt.format(height),
            ha="center",
            va="bottom",
            fontsize=fontsize,
        )


# ---------------------------------------------------------------------------
# Department plots
# ---------------------------------------------------------------------------


def plot_promotions_by_department(
    df: pd.DataFrame,
    *,
    department: FieldLike = EmployeeField.DEPARTMENT,
    status: FieldLike = EmployeeField.IS_PROMOTED_LABEL,
    colors: Sequence[str] = DEFAULT_COLORS,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """Dodged bars of employee counts per department and promotion status.

    Departments are ordered by their total head count, largest first.
    """
    xtab = cross_tabulation(df, department, status, include_missing=False)
    counts = xtab.counts
    if counts.to_numpy().sum() == 0:
        raise InsufficientDataError("No rows with both department and promotion status.")
    counts = counts.loc[counts.sum(axis=1).sort_values(ascending=False).index]

    x = np.arange(len(counts.index))
    n_status = max(1, len(counts.columns))
    width = 0.8 / n_status

    fig, ax = plt.subplots(figsize=(9, 5))
    for i, level in enumerate(counts.columns):
        ax.bar(
            x + (i - (n_status - 1) / 2) * width,
            counts[level].to_numpy(),
            width=width,
            label=str(level),
            color=colors[i % len(colors)],
        )

    ax.set_xticks(x)
    ax.set_xticklabels([str(i) for i in counts.index], rotation=45, ha="right")
    ax.set_title("Promotion Status by Department")
    ax.set_xlabel("Department")
    ax.set_ylabel("Number of employees")
    ax.legend(title="Promotion status", fontsize=9)
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


def plot_promotion_rate_by_department(
    df: pd.DataFrame,
    *,
    department: FieldLike = EmployeeField.DEPARTMENT,
    outcome: FieldLike = EmployeeField.IS_PROMOTED,
    annotate: bool = True,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """Horizontal bars of the promotion rate (%) per department, highest on top."""
    dept = resolve_field(department)
    metric = SummaryMetric("pct_promoted", resolve_field(outcome), "pct_true")
    summary = grouped_summary(df, dept, [metric]).dropna(subset=["pct_promoted"])
    if summary.empty:
        raise InsufficientDataError("No departments with a known promotion outcome.")
    summary = summary.sort_values("pct_promoted", ascending=True)

    fig, ax = plt.subplots(figsize=(7, 0.45 * len(summary) + 1.5))
    bars = ax.barh([str(d) for d in summary[dept]], summary["pct_promoted"].to_numpy(), color=DEFAULT_COLORS[1])

    ax.set_title("Promotion rate by department")
    ax.set_xlabel("Promoted (%)")
    ax.set_ylabel("Department")

    if annotate:
        for b, v in zip(bars, summary["pct_promoted"].to_numpy()):
            ax.text(float(v), b.get_y() + b.get_height() / 2, f" {float(v):.1f}%", va="center", fontsize=8)

    fig.tight_layout()
    _maybe_save(fig, save_path)
    return fig


# ---------------------------------------------------------------------------
# Distribution plots
# ---------------------------------------------------------------------------


def plot_training_score_by_promotion(
    df: pd.DataFrame,
    *,
    value: FieldLike = EmployeeField.AVG_TRAINING_SCORE,
    status: FieldLike = EmployeeField.IS_PROMOTED_LABEL,
    colors: Sequence[str] = DEFAULT_COLORS,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """Box plot of training score for each promotion status."""
    v = resolve_field(value)
    s = resolve_field(status)
    require_columns(df, [v, s])

    sub = pd.DataFrame({"value": pd.to_numeric(df[v], errors="coerce"), "status": df[s]}).dropna()
    if isinstance(df[s].dtype, pd.CategoricalDtype):
        levels = [c for c in df[s].cat.categories if (sub["status"] == c).any()]
    else:
        levels = sorted(sub["status"].unique())
    if not levels:
        raise InsufficientDataError(f"No rows with both '{v}' and '{s}'.")

    data = [sub.loc[sub["status"] == lvl, "value"].astype(float).to_numpy() for lvl in levels]

    fig, ax = plt.subplots(figsize=(6, 4))
    box = ax.boxplot(data, patch_artist=True)
    for patch, color in zip(box["boxes"], colors):
        patch.set_facecolor(color)
        patch.set_alpha(0.7)

    ax.set_xticks(np.arange(1, len(levels) + 1))
    ax.set_xticklabels([str(lvl) for lvl in levels])
    ax.set_title("Training Score by Promotion Status")
    ax.set_xlabel("Promotion status")
    ax.set_ylabel("Average training score")
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


def plot_rating_distribution(
    df: pd.DataFrame,
    *,
    rating: FieldLike = EmployeeField.PREVIOUS_YEAR_RATING,
    include_missing: bool = False,
    annotate: bool = True,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """Bar chart of previous-year ratings with a count label on each bar."""
    col = resolve_field(rating)
    require_columns(df, [col])

    values = pd.to_numeric(df[col], errors="coerce")
    counts = values.dropna().astype(int).value_counts().sort_index()
    labels = [str(i) for i in counts.index]
    heights = counts.to_numpy()
    if include_missing and values.isna().any():
        labels.append("NA")
        heights = np.append(heights, int(values.isna().sum()))

    fig, ax = plt.subplots(figsize=(6, 4))
    bars = ax.bar(labels, heights, color=DEFAULT_COLORS[1])
    if annotate:
        _label_bars(ax, bars)

    ax.set_title("Distribution of Previous Year Ratings")
    ax.set_xlabel("Previous year rating")
    ax.set_ylabel("Count")
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


def plot_correlation_heatmap(
    corr: pd.DataFrame,
    title: str = "Correlation matrix",
    *,
    annotate: bool = True,
    save_path: Optional[str | Path] = None,
) -> plt.Figure:
    """Heatmap of a correlation matrix from :func:`correlation_matrix`."""
    fig, ax = plt.subplots(figsize=(0.8 * len(corr.columns) + 3, 0.8 * len(corr.index) + 2))
    im = ax.imshow(corr.to_numpy(dtype=float), vmin=-1.0, vmax=1.0, cmap="RdBu_r")

    ax.set_xticks(np.arange(len(corr.columns)))
    ax.set_xticklabels([str(c) for c in corr.columns], rotation=45, ha="right")
    ax.set_yticks(np.arange(len(corr.index)))
    ax.set_yticklabels([str(i) for i in corr.index])

    if annotate:
        for i in range(corr.shape[0]):
            for j in range(corr.shape[1]):
                val = corr.iat[i, j]
                if np.isfinite(val):
                    ax.text(j, i, f"{val:.2f}", ha="center", va="center", fontsize=8)

    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    ax.set_title(title)
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


__all__ = [
    "DEFAULT_COLORS",
    "plot_promotions_by_department",
    "plot_promotion_rate_by_department",
    "plot_training_score_by_promotion",
    "plot_rating_distribution",
    "plot_correlation_heatmap",
]
