"""Summary tables and hypothesis tests over the prepared dataset."""

from __future__ import annotations

from .inference import (
    DEFAULT_ALPHA,
    DEFAULT_LOGIT_PREDICTORS,
    AnovaResult,
    ChiSquareResult,
    HypothesisTestResult,
    LogisticRegressionResult,
    TTestResult,
    chi_square_from_table,
    chi_square_test,
    logistic_regression,
    one_way_anova,
    t_test,
    tukey_hsd,
    two_sample_t_test,
)
from .tables import (
    DEFAULT_CORRELATION_FIELDS,
    DEFAULT_GROUP_METRICS,
    DESCRIPTIVE_METRICS,
    MISSING_LABEL,
    CrossTabulation,
    SummaryMetric,
    correlation_matrix,
    cross_tabulation,
    descriptive_table,
    format_percent,
    format_percent_columns,
    frequency_table,
    grouped_summary,
    numeric_summary,
)

__all__ = [
    # tables
    "MISSING_LABEL",
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
    # inference
    "DEFAULT_ALPHA",
    "DEFAULT_LOGIT_PREDICTORS",
    "HypothesisTestResult",
    "ChiSquareResult",
    "TTestResult",
    "AnovaResult",
    "LogisticRegressionResult",
    "chi_square_from_table",
    "chi_square_test",
    "two_sample_t_test",
    "t_test",
    "tukey_hsd",
    "one_way_anova",
    "logistic_regression",
]
