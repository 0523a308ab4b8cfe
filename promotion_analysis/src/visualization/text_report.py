"""Plain-text rendering of summary tables and test results for the console."""

from __future__ import annotations

import math
from typing import Optional

import pandas as pd

from ..analysis.inference import (
    AnovaResult,
    ChiSquareResult,
    HypothesisTestResult,
    LogisticRegressionResult,
    TTestResult,
)
from ..analysis.tables import CrossTabulation, format_percent_columns


def _fmt(value: float, digits: int = 3) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "NA"
    return f"{float(value):.{digits}f}"


def _fmt_p(p: float) -> str:
    if p is None or math.isnan(p):
        return "NA"
    if p < 2.2e-16:
        return "< 2.2e-16"
    return f"{p:.4g}"


def _heading(title: str) -> str:
    return f"{title}\n{'=' * len(title)}"


def render_table(
    table: pd.DataFrame,
    title: Optional[str] = None,
    *,
    percent_digits: Optional[int] = None,
    index: bool = False,
) -> str:
    """Render a summary table; percentage columns get a ``%`` suffix when
    ``percent_digits`` is set."""
    shown = table if percent_digits is None else format_percent_columns(table, digits=percent_digits)
    body = shown.to_string(index=index, na_rep="NA") if not shown.empty else "(empty table)"
    return f"{_heading(title)}\n{body}" if title else body


def render_cross_tabulation(xtab: CrossTabulation, *, digits: int = 1, title: Optional[str] = None) -> str:
    title = title or f"{xtab.row} x {xtab.col} (row %)"
    table = xtab.formatted(digits)
    table["Total"] = xtab.row_totals.astype(int).to_numpy()
    return f"{_heading(title)}\n{table.to_string()}"


def render_test_result(result: HypothesisTestResult, *, alpha: float = 0.05) -> str:
    """Summarize a test result in a few lines, including type-specific detail."""
    lines = [_heading(result.method)]

    if isinstance(result, LogisticRegressionResult):
        lines.append(f"outcome: {result.outcome}   n = {result.n_obs} (dropped {result.n_dropped})")
        lines.append(result.coefficients.to_string(float_format=lambda v: f"{v:.4f}", na_rep="NA"))
        lines.append(
            f"LR chi-squared = {_fmt(result.statistic)}, df = {_fmt(result.dof, 0)}, "
            f"p-value = {_fmt_p(result.p_value)}"
        )
        lines.append(f"AIC = {_fmt(result.aic, 2)}   pseudo R^2 = {_fmt(result.pseudo_r2)}")
        if not result.converged:
            lines.append(f"WARNING: model not converged ({result.message})")
        return "\n".join(lines)

    if isinstance(result, ChiSquareResult):
        lines.append(result.observed.to_string())
        stat = f"X-squared = {_fmt(result.statistic, 4)}, df = {_fmt(result.dof, 0)}"
    elif isinstance(result, TTestResult):
        (a, b), (ma, mb) = result.group_labels, result.group_means
        stat = f"t = {_fmt(result.statistic, 4)}, df = {_fmt(result.dof, 2)}"
        lines.append(f"mean in group {a} = {_fmt(ma, 3)}   mean in group {b} = {_fmt(mb, 3)}")
        lines.append(f"95 percent confidence interval: {_fmt(result.ci_low)} {_fmt(result.ci_high)}")
    elif isinstance(result, AnovaResult):
        lines.append(result.table.to_string(float_format=lambda v: f"{v:.4g}", na_rep=""))
        df1, df2 = result.dof
        stat = f"F = {_fmt(result.statistic, 3)}, df = ({df1:.0f}, {df2:.0f})"
    else:
        stat = f"statistic = {_fmt(result.statistic, 4)}"

    verdict = "significant" if result.is_significant(alpha) else "not significant"
    lines.append(f"{stat}, p-value = {_fmt_p(result.p_value)} ({verdict} at alpha = {alpha})")

    if isinstance(result, AnovaResult) and result.posthoc is not None:
        lines.append("Tukey HSD pairwise comparisons:")
        lines.append(result.posthoc.to_string(index=False))
    return "\n".join(lines)


__all__ = ["render_table", "render_cross_tabulation", "render_test_result"]
