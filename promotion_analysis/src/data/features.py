"""Derived labels (recoding) for the employee dataset.

Every label here is a pure function of one source field:

* ``is_promoted_label``  : 0 -> "Not Promoted", 1 -> "Promoted"
* ``awards_won_label``   : 0 -> "No Award", 1 -> "Award Won"
* ``performance_cat``    : rating <= 2 -> "Low", == 3 -> "Average", >= 4 -> "High"
* ``age_group``          : "Under 30", "30-39", "40-49", "50+"

Unmapped or missing inputs produce a missing label; nothing here raises on
values. The scalar helpers (:func:`performance_category`, :func:`age_group`)
and the column-wise helpers implement the same rules, so a label recomputed
from a single record always matches the frame-level result.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .schema import EmployeeField, require_columns


PROMOTION_LABELS: Dict[int, str] = {0: "Not Promoted", 1: "Promoted"}
AWARD_LABELS: Dict[int, str] = {0: "No Award", 1: "Award Won"}

PERFORMANCE_LEVELS: List[str] = ["Low", "Average", "High"]
AGE_GROUP_LEVELS: List[str] = ["Under 30", "30-39", "40-49", "50+"]


def _missing(value: Any) -> bool:
    if value is None or value is pd.NA:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True


# -----------------------------------------------------------------------------
# Scalar rules
# -----------------------------------------------------------------------------


def performance_category(rating: Any) -> Optional[str]:
    """Map a previous-year rating to Low / Average / High (``None`` if missing)."""
    if _missing(rating):
        return None
    r = float(rating)
    if r <= 2:
        return "Low"
    if r == 3:
        return "Average"
    if r >= 4:
        return "High"
    return None


def age_group(age: Any) -> Optional[str]:
    """Bucket an age into the four reporting bands."""
    if _missing(age):
        return None
    a = float(age)
    if a < 30:
        return "Under 30"
    if a < 40:
        return "30-39"
    if a < 50:
        return "40-49"
    return "50+"


def binary_label(value: Any, labels: Mapping[int, str]) -> Optional[str]:
    if _missing(value):
        return None
    v = float(value)
    if not v.is_integer():
        return None
    return labels.get(int(v))


# -----------------------------------------------------------------------------
# Column-wise recoding
# -----------------------------------------------------------------------------


def _as_float(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series, errors="coerce").astype(float)


def recode_binary(series: pd.Series, labels: Mapping[int, str]) -> pd.Series:
    """Map a 0/1 series to an (unordered) categorical of ``labels``."""
    mapped = _as_float(series).map(dict(labels))
    ordered_levels = [labels[k] for k in sorted(labels)]
    return pd.Series(pd.Categorical(mapped, categories=ordered_levels), index=series.index)


def performance_categories(ratings: pd.Series) -> pd.Series:
    """Vectorized :func:`performance_category` returning an ordered categorical."""
    r = _as_float(ratings)
    labels = np.select(
        [r <= 2, r == 3, r >= 4],
        PERFORMANCE_LEVELS,
        default=None,
    )
    return pd.Series(
        pd.Categorical(labels, categories=PERFORMANCE_LEVELS, ordered=True),
        index=ratings.index,
    )


def age_groups(ages: pd.Series) -> pd.Series:
    """Vectorized :func:`age_group` returning an ordered categorical."""
    a = _as_float(ages)
    labels = np.select(
        [a < 30, a < 40, a < 50, a >= 50],
        AGE_GROUP_LEVELS,
        default=None,
    )
    return pd.Series(
        pd.Categorical(labels, categories=AGE_GROUP_LEVELS, ordered=True),
        index=ages.index,
    )


def add_promotion_label(
    df: pd.DataFrame,
    source_col: str = EmployeeField.IS_PROMOTED.value,
    label_col: str = EmployeeField.IS_PROMOTED_LABEL.value,
) -> pd.DataFrame:
    require_columns(df, [source_col])
    out = df.copy()
    out[label_col] = recode_binary(out[source_col], PROMOTION_LABELS)
    return out


def add_award_label(
    df: pd.DataFrame,
    source_col: str = EmployeeField.AWARDS_WON.value,
    label_col: str = EmployeeField.AWARDS_WON_LABEL.value,
) -> pd.DataFrame:
    require_columns(df, [source_col])
    out = df.copy()
    out[label_col] = recode_binary(out[source_col], AWARD_LABELS)
    return out


def add_performance_category(
    df: pd.DataFrame,
    source_col: str = EmployeeField.PREVIOUS_YEAR_RATING.value,
    label_col: str = EmployeeField.PERFORMANCE_CAT.value,
) -> pd.DataFrame:
    require_columns(df, [source_col])
    out = df.copy()
    out[label_col] = performance_categories(out[source_col])
    return out


def add_age_group(
    df: pd.DataFrame,
    source_col: str = EmployeeField.AGE.value,
    label_col: str = EmployeeField.AGE_GROUP.value,
) -> pd.DataFrame:
    require_columns(df, [source_col])
    out = df.copy()
    out[label_col] = age_groups(out[source_col])
    return out


def add_derived_labels(df: pd.DataFrame, *, include_age_group: bool = True) -> pd.DataFrame:
    """Attach every derived label to a cleaned dataset (returns a new frame)."""
    out = add_promotion_label(df)
    out = add_award_label(out)
    out = add_performance_category(out)
    if include_age_group:
        out = add_age_group(out)
    return out


def recoding_preview(df: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """Source fields next to their labels, for eyeballing the recode."""
    cols: Sequence[str] = [
        EmployeeField.IS_PROMOTED.value,
        EmployeeField.IS_PROMOTED_LABEL.value,
        EmployeeField.PREVIOUS_YEAR_RATING.value,
        EmployeeField.PERFORMANCE_CAT.value,
    ]
    require_columns(df, cols)
    return df.loc[:, list(cols)].head(n)


__all__ = [
    "PROMOTION_LABELS",
    "AWARD_LABELS",
    "PERFORMANCE_LEVELS",
    "AGE_GROUP_LEVELS",
    "performance_category",
    "age_group",
    "binary_label",
    "recode_binary",
    "performance_categories",
    "age_groups",
    "add_promotion_label",
    "add_award_label",
    "add_performance_category",
    "add_age_group",
    "add_derived_labels",
    "recoding_preview",
]
