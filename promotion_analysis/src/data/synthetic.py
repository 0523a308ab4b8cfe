"""Reproducible synthetic employee data.

The real dataset is not redistributed with this repository. This module
writes a CSV with the same header (including its quirks, ``KPIs_met >80%``
and ``awards_won?``), a share of blank education strings and missing ratings,
so every pipeline step can be exercised end to end.

Promotion is drawn from a logistic model in training score, rating, awards
and KPI attainment, so the inferential tests have real effects to find.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from ..utils.seed_utils import reproducible_numpy_rng

logger = logging.getLogger(__name__)

DEPARTMENTS = {
    "Sales & Marketing": 0.31,
    "Operations": 0.21,
    "Procurement": 0.13,
    "Technology": 0.13,
    "Analytics": 0.10,
    "Finance": 0.05,
    "HR": 0.04,
    "Legal": 0.02,
    "R&D": 0.01,
}
EDUCATION = {"Bachelor's": 0.67, "Master's & above": 0.27, "Below Secondary": 0.02, "": 0.04}
RECRUITMENT_CHANNELS = {"other": 0.56, "sourcing": 0.42, "referred": 0.02}
DEPARTMENT_SCORE_SHIFT = {
    "Analytics": 20.0,
    "R&D": 22.0,
    "Technology": 18.0,
    "Operations": 1.0,
    "Finance": 1.0,
    "Procurement": 9.0,
    "Legal": 0.0,
    "HR": -10.0,
    "Sales & Marketing": -10.0,
}

RAW_COLUMNS = [
    "employee_id",
    "department",
    "region",
    "education",
    "gender",
    "recruitment_channel",
    "no_of_trainings",
    "age",
    "previous_year_rating",
    "length_of_service",
    "KPIs_met >80%",
    "awards_won?",
    "avg_training_score",
    "is_promoted",
]


def _choice(rng: np.random.Generator, weights: dict, size: int) -> np.ndarray:
    keys = list(weights)
    p = np.asarray(list(weights.values()), dtype=float)
    return rng.choice(keys, size=size, p=p / p.sum())


def generate_employee_data(
    n_rows: int = 2000,
    seed: Optional[int] = 42,
    *,
    missing_rating_rate: float = 0.075,
) -> pd.DataFrame:
    """Generate a raw (uncleaned) employee table."""
    if n_rows < 0:
        raise ValueError("n_rows must be non-negative.")
    rng = reproducible_numpy_rng(seed)

    department = _choice(rng, DEPARTMENTS, n_rows)
    education = _choice(rng, EDUCATION, n_rows)
    gender = rng.choice(["m", "f"], size=n_rows, p=[0.70, 0.30])
    channel = _choice(rng, RECRUITMENT_CHANNELS, n_rows)
    region = np.array([f"region_{k}" for k in rng.integers(1, 35, size=n_rows)])

    age = np.clip(np.round(rng.normal(35, 7.6, size=n_rows)), 20, 60).astype(int)
    service = np.clip(rng.poisson(5.5, size=n_rows), 1, age - 19).astype(int)
    trainings = np.clip(rng.poisson(0.25, size=n_rows) + 1, 1, 10)
    rating = rng.choice([1, 2, 3, 4, 5], size=n_rows, p=[0.12, 0.08, 0.36, 0.19, 0.25]).astype(float)
    kpis = (rng.random(n_rows) < 0.20 + 0.08 * (rating - 3)).astype(int)
    awards = (rng.random(n_rows) < 0.023).astype(int)

    shift = np.array([DEPARTMENT_SCORE_SHIFT[d] for d in department])
    score = np.clip(np.round(rng.normal(62, 9, size=n_rows) + shift * 0.6 + 2 * kpis), 39, 99)

    logit = (
        -4.2
        + 0.045 * (score - 63)
        + 0.35 * (rating - 3)
        + 1.6 * kpis
        + 1.9 * awards
        - 0.08 * (trainings - 1)
    )
    promoted = (rng.random(n_rows) < 1.0 / (1.0 + np.exp(-logit))).astype(int)

    # first-year employees have no previous rating
    rating[service == 1] = np.nan
    first_year_share = float(np.mean(service == 1)) if n_rows else 0.0
    extra_missing = rng.random(n_rows) < max(0.0, missing_rating_rate - first_year_share)
    rating[extra_missing] = np.nan

    df = pd.DataFrame(
        {
            "employee_id": rng.permutation(np.arange(1, n_rows + 1) + 10_000),
            "department": department,
            "region": region,
            "education": education,
            "gender": gender,
            "recruitment_channel": channel,
            "no_of_trainings": trainings,
            "age": age,
            "previous_year_rating": rating,
            "length_of_service": service,
            "KPIs_met >80%": kpis,
            "awards_won?": awards,
            "avg_training_score": score,
            "is_promoted": promoted,
        },
        columns=RAW_COLUMNS,
    )
    return df


def write_synthetic_csv(
    path: Union[str, Path],
    n_rows: int = 2000,
    seed: Optional[int] = 42,
) -> Path:
    """Generate a dataset and write it as CSV (blank education stays blank)."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df = generate_employee_data(n_rows=n_rows, seed=seed)
    df.to_csv(out_path, index=False)
    logger.info("Wrote %d synthetic employee rows to %s", len(df), out_path)
    return out_path


__all__ = ["RAW_COLUMNS", "generate_employee_data", "write_synthetic_csv"]
