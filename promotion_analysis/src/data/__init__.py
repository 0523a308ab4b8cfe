"""Data loading, deterministic cleaning, and derived labels.

The data workflow is a straight line of pure stages:

1) **Load** (:func:`load_employee_data`)
   - reads the CSV, checks required columns and numeric types
2) **Clean** (:func:`clean_data`)
   - normalizes column names, blank strings -> NA, numeric coercion
   - idempotent, never drops rows
3) **Recode** (:func:`add_derived_labels`)
   - promotion / award labels, performance category, age group

:func:`prepare_dataset` runs all three.
"""

from __future__ import annotations

from .features import (
    AGE_GROUP_LEVELS,
    AWARD_LABELS,
    PERFORMANCE_LEVELS,
    PROMOTION_LABELS,
    add_age_group,
    add_award_label,
    add_derived_labels,
    add_performance_category,
    add_promotion_label,
    age_group,
    performance_category,
    recoding_preview,
)
from .load import load_employee_data
from .prepare import prepare_dataset, prepare_frame
from .preprocess import (
    clean_column_name,
    clean_data,
    clean_names,
    dataset_overview,
    missing_value_report,
)
from .schema import (
    BINARY_FIELDS,
    CATEGORICAL_FIELDS,
    NUMERIC_FIELDS,
    REQUIRED_COLUMNS,
    EmployeeField,
    EmployeeRecord,
    records_from_frame,
    records_to_frame,
    resolve_field,
)
from .synthetic import generate_employee_data, write_synthetic_csv

__all__ = [
    # loading
    "load_employee_data",
    # cleaning
    "clean_column_name",
    "clean_names",
    "clean_data",
    "missing_value_report",
    "dataset_overview",
    # recoding
    "PROMOTION_LABELS",
    "AWARD_LABELS",
    "PERFORMANCE_LEVELS",
    "AGE_GROUP_LEVELS",
    "performance_category",
    "age_group",
    "add_promotion_label",
    "add_award_label",
    "add_performance_category",
    "add_age_group",
    "add_derived_labels",
    "recoding_preview",
    # pipeline
    "prepare_frame",
    "prepare_dataset",
    # schema
    "EmployeeField",
    "EmployeeRecord",
    "REQUIRED_COLUMNS",
    "CATEGORICAL_FIELDS",
    "NUMERIC_FIELDS",
    "BINARY_FIELDS",
    "resolve_field",
    "records_from_frame",
    "records_to_frame",
    # demo data
    "generate_employee_data",
    "write_synthetic_csv",
]
