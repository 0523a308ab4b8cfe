"""Deterministic cleaning of the raw employee table.

:func:`clean_data` is the only transformation applied between loading and
recoding. It never drops rows and never imputes; it only

1) normalizes column names (lowercase, underscore separated, no special
   characters);
2) turns empty / whitespace-only strings in *text* columns into missing values;
3) coerces the known numeric fields to numbers (integer fields become pandas'
   nullable ``Int64`` so missing ratings stay missing).

The function is idempotent: cleaning an already-cleaned frame returns an equal
frame.

What counts as "missing"
------------------------
Numeric fields: NA only. Text fields: NA or a blank string. Blank-string
checks are never applied to numeric columns, where comparing against ``""``
would be meaningless.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..exceptions import SchemaError
from .schema import FLOAT_FIELDS, INTEGER_FIELDS

logger = logging.getLogger(__name__)

_SPECIAL_TOKENS = {"%": "_percent_", "#": "_number_", "&": "_and_"}


def clean_column_name(name: object) -> str:
    """Normalize one column name.

    Examples
    --------
    >>> clean_column_name("KPIs_met >80%")
    'kp_is_met_80_percent'
    >>> clean_column_name("awards_won?")
    'awards_won'
    >>> clean_column_name("avgTrainingScore")
    'avg_training_score'
    """
    text = str(name).strip()
    for token, replacement in _SPECIAL_TOKENS.items():
        text = text.replace(token, replacement)
    # split camelCase / acronyms
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", text)
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", text)
    text = text.lower()
    text = re.sub(r"[^a-z0-9]+", "_", text)
    text = text.strip("_")
    return text or "x"


def clean_names(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``df`` with normalized, de-duplicated column names."""
    out = df.copy()
    # Suffix counters per base name; every emitted name stays reserved.
    seen: Dict[str, int] = {}
    names: List[str] = []
    for col in out.columns:
        base = clean_column_name(col)
        name = base
        if name in seen:
            counter = max(seen[base], 1)
            while name in seen:
                counter += 1
                name = f"{base}_{counter}"
            seen[base] = counter
        seen.setdefault(name, 1)
        names.append(name)
    out.columns = names
    return out


def _text_columns(df: pd.DataFrame) -> List[str]:
    return [
        c
        for c in df.columns
        if pd.api.types.is_object_dtype(df[c]) or pd.api.types.is_string_dtype(df[c])
    ]


def blank_to_missing(df: pd.DataFrame, columns: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Replace empty / whitespace-only strings with NA in text columns."""
    out = df.copy()
    cols = list(columns) if columns is not None else _text_columns(out)
    for col in cols:
        if col not in out.columns or isinstance(out[col].dtype, pd.CategoricalDtype):
            continue
        s = out[col]
        is_blank = s.map(lambda v: isinstance(v, str) and not v.strip())
        if is_blank.any():
            out[col] = s.mask(is_blank.astype(bool), np.nan)
    return out


def _coerce_numeric(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for col in INTEGER_FIELDS + FLOAT_FIELDS:
        if col not in out.columns:
            continue
        s = out[col]
        if pd.api.types.is_bool_dtype(s):
            s = s.astype("Int64")
        numeric = pd.to_numeric(s, errors="coerce")
        bad = numeric.isna() & s.notna()
        if bad.any():
            examples = s[bad].astype(str).unique()[:3].tolist()
            raise SchemaError(f"Column '{col}' holds non-numeric values, e.g. {examples}")

        as_float = numeric.astype(float)
        if col in INTEGER_FIELDS:
            non_integral = as_float.notna() & (as_float != np.floor(as_float))
            if non_integral.any():
                # keep fractional values rather than silently truncating them
                out[col] = as_float
            else:
                out[col] = as_float.astype("Int64")
        else:
            out[col] = as_float
    return out


def clean_data(df: pd.DataFrame, *, coerce_types: bool = True) -> pd.DataFrame:
    """Apply the deterministic cleaning steps and return a new frame.

    Steps
    -----
    1) Normalize column names.
    2) Convert blank strings in text columns to NA.
    3) Coerce known numeric fields (raises :class:`SchemaError` on text).
    """
    out = clean_names(df)
    out = blank_to_missing(out)
    if coerce_types:
        out = _coerce_numeric(out)
    return out


def missing_value_report(df: pd.DataFrame, *, log: bool = True) -> pd.DataFrame:
    """Per-column counts of missing values and blank strings.

    Diagnostic only: returns a table indexed by column with ``n_missing``,
    ``n_blank`` (text columns only) and ``pct_missing``. Never raises.
    """
    n_rows = len(df)
    text_cols = set(_text_columns(df))
    rows = []
    for col in df.columns:
        s = df[col]
        n_blank = 0
        if col in text_cols:
            n_blank = int(s.map(lambda v: isinstance(v, str) and not v.strip()).sum())
        n_missing = int(s.isna().sum())
        rows.append(
            {
                "column": col,
                "n_missing": n_missing,
                "n_blank": n_blank,
                "pct_missing": (100.0 * (n_missing + n_blank) / n_rows) if n_rows else 0.0,
            }
        )
    report = pd.DataFrame(rows, columns=["column", "n_missing", "n_blank", "pct_missing"])
    report = report.set_index("column")

    if log:
        flagged = report[(report["n_missing"] > 0) | (report["n_blank"] > 0)]
        if flagged.empty:
            logger.info("No missing values or blank strings in %d columns.", len(report))
        for col, row in flagged.iterrows():
            logger.info(
                "Column %s: %d missing, %d blank (%.1f%%)",
                col,
                row["n_missing"],
                row["n_blank"],
                row["pct_missing"],
            )
    return report


def dataset_overview(df: pd.DataFrame) -> pd.DataFrame:
    """Column-level overview: dtype, non-missing count and first value."""
    return pd.DataFrame(
        {
            "dtype": [str(t) for t in df.dtypes],
            "non_missing": [int(df[c].notna().sum()) for c in df.columns],
            "first_value": [df[c].iloc[0] if len(df) else None for c in df.columns],
        },
        index=pd.Index(df.columns, name="column"),
    )


__all__ = [
    "clean_column_name",
    "clean_names",
    "blank_to_missing",
    "clean_data",
    "missing_value_report",
    "dataset_overview",
]
