"""Load -> clean -> recode, threaded as plain values.

Each stage returns a new DataFrame; nothing keeps a reference to an earlier
stage's output, so callers can hold on to the raw frame and the prepared one
side by side.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from .features import add_derived_labels
from .load import load_employee_data
from .preprocess import clean_data, missing_value_report

logger = logging.getLogger(__name__)


def prepare_frame(raw: pd.DataFrame, *, report_missing: bool = True) -> pd.DataFrame:
    """Clean and recode an already-loaded frame."""
    cleaned = clean_data(raw)
    if report_missing:
        missing_value_report(cleaned)
    return add_derived_labels(cleaned)


def prepare_dataset(path: Union[str, Path], *, report_missing: bool = True) -> pd.DataFrame:
    """Read ``path`` and return the cleaned dataset with derived labels."""
    raw = load_employee_data(path)
    prepared = prepare_frame(raw, report_missing=report_missing)
    logger.info("Prepared dataset: %d rows, %d columns", prepared.shape[0], prepared.shape[1])
    return prepared


__all__ = ["prepare_frame", "prepare_dataset"]
