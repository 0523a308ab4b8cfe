"""Frequency tables, cross-tabulations and grouped summaries.

All functions take a prepared dataset and return a fresh DataFrame (a
"summary table"); nothing is cached. Grouping keys are resolved through
:class:`~promotion_analysis.src.data.schema.EmployeeField`.

Missing values
--------------
- Grouping keys: ``include_missing=False`` drops rows whose key is missing;
  ``include_missing=True`` reports them as their own ``"(Missing)"`` group,
  always listed last.
- Numeric aggregates skip missing values (mean / SD over the observed values;
  missing is never treated as zero).

Percentages are stored as numbers on a 0-100 scale. Use ``digits`` to round
them or :func:`format_percent_columns` to turn them into display strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..data.schema import (
    NUMERIC_FIELDS,
    EmployeeField,
    FieldLike,
    require_columns,
    resolve_field,
    resolve_fields,
)

MISSING_LABEL = "(Missing)"
TOTAL_LABEL = "Total"

SummaryStat = Literal["mean", "std", "median", "sum", "pct_true"]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _as_group_key(series: pd.Series, include_missing: bool) -> pd.Series:
    """Return ``series`` as a categorical with a stable level order.

    Existing categoricals keep their categories (so unobserved levels show up
    with zero counts); other dtypes get their sorted observed values.
    """
    if isinstance(series.dtype, pd.CategoricalDtype):
        key = series.copy()
    else:
        levels = sorted(series.dropna().unique())
        key = pd.Series(
            pd.Categorical(series.astype(object), categories=levels),
            index=series.index,
            name=series.name,
        )

    if include_missing and key.isna().any():
        if MISSING_LABEL not in key.cat.categories:
            key = key.cat.add_categories([MISSING_LABEL])
        key = key.fillna(MISSING_LABEL)
    return key


def _numeric(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series, errors="coerce").astype(float)


def _pct(numerator: np.ndarray, denominator: float) -> np.ndarray:
    if denominator <= 0:
        return np.full(len(numerator), np.nan)
    return 100.0 * np.asarray(numerator, dtype=float) / float(denominator)


def format_percent(value: float, digits: int = 1) -> str:
    """Format a 0-100 percentage, e.g. ``12.345 -> '12.3%'`` (``'NA'`` for NaN)."""
    if value is None or pd.isna(value):
        return "NA"
    return f"{float(value):.{int(digits)}f}%"


def format_percent_columns(
    table: pd.DataFrame,
    columns: Optional[Sequence[str]] = None,
    digits: int = 1,
) -> pd.DataFrame:
    """Return a copy of ``table`` with percentage columns rendered as strings.

    When ``columns`` is omitted, every column whose name contains ``percent``
    or starts with ``pct_`` / ``%`` is formatted.
    """
    out = table.copy()
    if columns is None:
        columns = [
            c
            for c in out.columns
            if "percent" in str(c) or str(c).startswith(("pct_", "%"))
        ]
    for col in columns:
        out[col] = out[col].map(lambda v: format_percent(v, digits))
    return out


# -----------------------------------------------------------------------------
# One-way frequency tables
# -----------------------------------------------------------------------------


def frequency_table(
    df: pd.DataFrame,
    field: FieldLike,
    *,
    include_missing: bool = True,
    totals: bool = False,
    digits: Optional[int] = None,
) -> pd.DataFrame:
    """Counts and percentages per level of ``field``.

    Columns
    -------
    ``<field>``, ``n``, ``percent`` (share of all counted rows) and
    ``valid_percent`` (share of non-missing rows; NaN on the missing row).
    Over the non-missing levels ``valid_percent`` sums to 100.
    """
    col = resolve_field(field)
    require_columns(df, [col])

    key = _as_group_key(df[col], include_missing)
    levels = list(key.cat.categories)
    counts = key.value_counts(sort=False).reindex(levels, fill_value=0)
    n = counts.to_numpy(dtype=int)

    is_missing = np.array([lvl == MISSING_LABEL for lvl in levels], dtype=bool)
    table = pd.DataFrame(
        {
            col: levels,
            "n": n,
            "percent": _pct(n, n.sum()),
            "valid_percent": np.where(is_missing, np.nan, _pct(n, n[~is_missing].sum())),
        }
    )

    if totals:
        total_row = {
            col: TOTAL_LABEL,
            "n": int(n.sum()),
            "percent": float(np.nansum(table["percent"])) if len(table) else np.nan,
            "valid_percent": float(np.nansum(table["valid_percent"])) if len(table) else np.nan,
        }
        table = pd.concat([table, pd.DataFrame([total_row])], ignore_index=True)

    if digits is not None:
        table[["percent", "valid_percent"]] = table[["percent", "valid_percent"]].round(digits)
    return table


# -----------------------------------------------------------------------------
# Two-way cross-tabulations
# -----------------------------------------------------------------------------


@dataclass
class CrossTabulation:
    """Counts and row percentages for two categorical fields."""

    row: str
    col: str
    counts: pd.DataFrame
    percentages: pd.DataFrame

    @property
    def row_totals(self) -> pd.Series:
        return self.counts.sum(axis=1)

    def formatted(self, digits: int = 1) -> pd.DataFrame:
        """Cells rendered as ``"12.3% (45)"``."""
        out = pd.DataFrame(index=self.counts.index, columns=self.counts.columns, dtype=object)
        for c in self.counts.columns:
            out[c] = [
                f"{format_percent(p, digits)} ({int(n)})"
                for p, n in zip(self.percentages[c], self.counts[c])
            ]
        return out

    def to_long(self) -> pd.DataFrame:
        """Tidy form: one row per (row level, column level)."""
        def _melt(table: pd.DataFrame, value_name: str) -> pd.DataFrame:
            wide = table.rename_axis(index=self.row, columns=None).reset_index()
            return wide.melt(id_vars=self.row, var_name=self.col, value_name=value_name)

        long = _melt(self.counts, "n")
        long["row_percent"] = _melt(self.percentages, "row_percent")["row_percent"].to_numpy()
        return long


def cross_tabulation(
    df: pd.DataFrame,
    row: FieldLike,
    col: FieldLike,
    *,
    include_missing: bool = False,
    digits: Optional[int] = None,
) -> CrossTabulation:
    """Two-way table of counts with row-normalized percentages.

    Rows with no observations get NaN percentages instead of a division error.
    """
    r = resolve_field(row)
    c = resolve_field(col)
    require_columns(df, [r, c])

    rkey = _as_group_key(df[r], include_missing)
    ckey = _as_group_key(df[c], include_missing)
    row_levels = list(rkey.cat.categories)
    col_levels = list(ckey.cat.categories)

    pairs = pd.DataFrame({"r": rkey, "c": ckey}).dropna()
    if pairs.empty:
        counts = pd.DataFrame(0, index=row_levels, columns=col_levels, dtype=int)
    else:
        observed = pairs.groupby(["r", "c"], observed=True).size().unstack(fill_value=0)
        counts = observed.reindex(index=row_levels, columns=col_levels, fill_value=0).astype(int)
        counts.index = pd.Index(row_levels)
        counts.columns = pd.Index(col_levels)
    counts.index.name = r
    counts.columns.name = c

    totals = counts.sum(axis=1).astype(float).replace(0.0, np.nan)
    percentages = counts.astype(float).div(totals, axis=0) * 100.0
    if digits is not None:
        percentages = percentages.round(digits)

    return CrossTabulation(row=r, col=c, counts=counts, percentages=percentages)


# -----------------------------------------------------------------------------
# Grouped numeric summaries
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class SummaryMetric:
    """One output column of :func:`grouped_summary`.

    ``pct_true`` is the mean of a 0/1 field on a 0-100 scale.
    """

    name: str
    field: str
    stat: SummaryStat = "mean"
    digits: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "field", resolve_field(self.field))
        if self.stat not in ("mean", "std", "median", "sum", "pct_true"):
            raise ValueError(f"Unknown summary statistic: {self.stat}")


DEFAULT_GROUP_METRICS: List[SummaryMetric] = [
    SummaryMetric("avg_training_score", EmployeeField.AVG_TRAINING_SCORE.value, "mean", 1),
    SummaryMetric("avg_rating", EmployeeField.PREVIOUS_YEAR_RATING.value, "mean", 2),
    SummaryMetric("pct_promoted", EmployeeField.IS_PROMOTED.value, "pct_true", 1),
]

DESCRIPTIVE_METRICS: List[SummaryMetric] = [
    SummaryMetric("Avg Training Score", EmployeeField.AVG_TRAINING_SCORE.value, "mean", 1),
    SummaryMetric("SD Training Score", EmployeeField.AVG_TRAINING_SCORE.value, "std", 1),
    SummaryMetric("Avg Years of Service", EmployeeField.LENGTH_OF_SERVICE.value, "mean", 1),
    SummaryMetric("% Promoted", EmployeeField.IS_PROMOTED.value, "pct_true", 1),
    SummaryMetric("% Award Won", EmployeeField.AWARDS_WON.value, "pct_true", 1),
]


def _aggregate(grouped, stat: SummaryStat) -> pd.Series:
    if stat == "mean":
        return grouped.mean()
    if stat == "std":
        return grouped.std(ddof=1)
    if stat == "median":
        return grouped.median()
    if stat == "sum":
        return grouped.sum(min_count=1)
    return grouped.mean() * 100.0


def grouped_summary(
    df: pd.DataFrame,
    by: Union[FieldLike, Sequence[FieldLike]],
    metrics: Optional[Sequence[SummaryMetric]] = None,
    *,
    include_missing: bool = False,
    count_name: str = "n",
    digits: Optional[int] = None,
) -> pd.DataFrame:
    """Group-wise row count plus the requested metrics.

    ``digits`` rounds every metric that does not set its own precision. An
    empty dataset yields an empty table with the same columns.
    """
    keys = resolve_fields(by)
    metrics = list(DEFAULT_GROUP_METRICS if metrics is None else metrics)
    require_columns(df, keys + [m.field for m in metrics])

    columns = keys + [count_name] + [m.name for m in metrics]
    if df.empty:
        return pd.DataFrame(columns=columns)

    group_keys = [_as_group_key(df[k], include_missing) for k in keys]
    frame = pd.DataFrame({k: g for k, g in zip(keys, group_keys)}, index=df.index)

    sizes = frame.groupby(keys, observed=True, sort=True).size()
    out = sizes.rename(count_name).to_frame()

    for metric in metrics:
        values = _numeric(df[metric.field])
        grouped = values.groupby([frame[k] for k in keys], observed=True, sort=True)
        result = _aggregate(grouped, metric.stat)
        precision = metric.digits if metric.digits is not None else digits
        if precision is not None:
            result = result.round(precision)
        out[metric.name] = result

    out = out.reset_index()
    for k in keys:
        out[k] = out[k].astype(object)
    return out[columns]


def descriptive_table(
    df: pd.DataFrame,
    by: Union[FieldLike, Sequence[FieldLike]] = EmployeeField.DEPARTMENT,
    *,
    include_missing: bool = False,
) -> pd.DataFrame:
    """Report-style table: N, training score mean/SD, service, % promoted, % awards."""
    return grouped_summary(
        df,
        by,
        DESCRIPTIVE_METRICS,
        include_missing=include_missing,
        count_name="N",
    )


# -----------------------------------------------------------------------------
# Whole-dataset numeric summaries
# -----------------------------------------------------------------------------


DEFAULT_CORRELATION_FIELDS: List[str] = [
    EmployeeField.NO_OF_TRAININGS.value,
    EmployeeField.AGE.value,
    EmployeeField.PREVIOUS_YEAR_RATING.value,
    EmployeeField.LENGTH_OF_SERVICE.value,
    EmployeeField.AVG_TRAINING_SCORE.value,
    EmployeeField.IS_PROMOTED.value,
]


def correlation_matrix(
    df: pd.DataFrame,
    fields: Optional[Sequence[FieldLike]] = None,
    *,
    digits: Optional[int] = 2,
) -> pd.DataFrame:
    """Pearson correlations over complete cases of ``fields``."""
    cols = resolve_fields(DEFAULT_CORRELATION_FIELDS if fields is None else fields)
    require_columns(df, cols)
    complete = df[cols].apply(_numeric).dropna()
    corr = complete.corr(method="pearson")
    return corr.round(digits) if digits is not None else corr


def numeric_summary(
    df: pd.DataFrame,
    fields: Optional[Sequence[FieldLike]] = None,
    *,
    digits: Optional[int] = 2,
) -> pd.DataFrame:
    """Min / quartiles / mean / max and missing count per numeric field."""
    if fields is None:
        cols = [c for c in NUMERIC_FIELDS if c in df.columns]
    else:
        cols = resolve_fields(fields)
        require_columns(df, cols)

    rows: Dict[str, Dict[str, float]] = {}
    for col in cols:
        s = _numeric(df[col])
        valid = s.dropna()
        rows[col] = {
            "min": valid.min() if len(valid) else np.nan,
            "q1": valid.quantile(0.25) if len(valid) else np.nan,
            "median": valid.median() if len(valid) else np.nan,
            "mean": valid.mean() if len(valid) else np.nan,
            "q3": valid.quantile(0.75) if len(valid) else np.nan,
            "max": valid.max() if len(valid) else np.nan,
            "n_missing": float(s.isna().sum()),
        }
    out = pd.DataFrame.from_dict(
        rows, orient="index", columns=["min", "q1", "median", "mean", "q3", "max", "n_missing"]
    )
    out["n_missing"] = out["n_missing"].astype(int)
    return out.round(digits) if digits is not None else out


__all__ = [
    "MISSING_LABEL",
    "TOTAL_LABEL",
    "CrossTabulation",
    "SummaryMetric",
    "DEFAULT_GROUP_METRICS",
    "DESCRIPTIVE_METRICS",
    "DEFAULT_CORRELATION_FIELDS",
    "format_percent",
    "format_percent_columns",
    "frequency_table",
    "cross_tabulation",
    "grouped_summary",
    "descriptive_table",
    "correlation_matrix",
    "numeric_summary",
]
