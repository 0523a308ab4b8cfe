"""Hypothesis tests used in the promotion analysis.

Four independent procedures, each returning a result dataclass with a test
statistic, degrees of freedom (where defined) and a p-value:

- :func:`chi_square_test` / :func:`chi_square_from_table` - independence of two
  categorical fields (Yates continuity correction on 2x2 tables);
- :func:`t_test` / :func:`two_sample_t_test` - Welch two-sample t-test by default;
- :func:`one_way_anova` - one-way ANOVA, followed by Tukey HSD pairwise
  comparisons only when the ANOVA is significant;
- :func:`logistic_regression` - binomial GLM with logit link and listwise
  deletion of incomplete rows.

Conventions
-----------
- Fewer than two valid observations in a required group raises
  :class:`~promotion_analysis.src.exceptions.InsufficientDataError`.
- Degenerate but valid input (zero variance, a single outcome level, perfect
  separation) never raises: undefined statistics are reported as NaN and the
  logistic model is flagged ``converged=False``.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf
from scipy import stats
from statsmodels.stats.multicomp import pairwise_tukeyhsd
from statsmodels.tools.sm_exceptions import PerfectSeparationError, PerfectSeparationWarning

from ..data.schema import EmployeeField, FieldLike, require_columns, resolve_field, resolve_fields
from ..exceptions import InsufficientDataError, SchemaError
from .tables import cross_tabulation

logger = logging.getLogger(__name__)

ArrayLike = Union[pd.Series, Sequence[float], np.ndarray]

DEFAULT_ALPHA = 0.05

DEFAULT_LOGIT_PREDICTORS: List[str] = [
    EmployeeField.AVG_TRAINING_SCORE.value,
    EmployeeField.PREVIOUS_YEAR_RATING.value,
    EmployeeField.AWARDS_WON.value,
    EmployeeField.NO_OF_TRAININGS.value,
    EmployeeField.LENGTH_OF_SERVICE.value,
]

INTERCEPT_NAME = "(Intercept)"

# Fitted probabilities this close to the observed 0/1 outcome mean the classes
# are separated and the estimates are not identified.
SEPARATION_TOL = 1e-6


def _finite_or_nan(value: Any) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return float("nan")
    return v if math.isfinite(v) else float("nan")


def _jsonable(value: Any) -> Any:
    if isinstance(value, pd.DataFrame):
        records = value.reset_index().rename(columns=str).to_dict(orient="records")
        return [{k: _jsonable(v) for k, v in row.items()} for row in records]
    if isinstance(value, pd.Series):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (tuple, list)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (np.integer,)):
        return int(value)
    if isinstance(value, (np.floating, float)):
        return float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    return value


# -----------------------------------------------------------------------------
# Result containers
# -----------------------------------------------------------------------------


@dataclass
class HypothesisTestResult:
    """Common fields shared by every procedure."""

    method: str
    statistic: float
    p_value: float
    dof: Optional[Union[float, Tuple[float, float]]]
    n_obs: int

    def is_significant(self, alpha: float = DEFAULT_ALPHA) -> bool:
        return not math.isnan(self.p_value) and self.p_value < alpha

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _jsonable(getattr(self, f.name)) for f in fields(self)}


@dataclass
class ChiSquareResult(HypothesisTestResult):
    observed: pd.DataFrame
    expected: pd.DataFrame
    correction: bool = True


@dataclass
class TTestResult(HypothesisTestResult):
    group_labels: Tuple[str, str]
    group_means: Tuple[float, float]
    group_sizes: Tuple[int, int]
    ci_low: float = float("nan")
    ci_high: float = float("nan")
    equal_var: bool = False


@dataclass
class AnovaResult(HypothesisTestResult):
    table: pd.DataFrame
    group_means: pd.Series
    alpha: float = DEFAULT_ALPHA
    posthoc: Optional[pd.DataFrame] = None


@dataclass
class LogisticRegressionResult(HypothesisTestResult):
    outcome: str
    coefficients: pd.DataFrame
    converged: bool
    n_dropped: int = 0
    pseudo_r2: float = float("nan")
    aic: float = float("nan")
    message: str = ""


# -----------------------------------------------------------------------------
# Chi-square test of independence
# -----------------------------------------------------------------------------


def chi_square_from_table(
    table: Union[pd.DataFrame, np.ndarray, Sequence[Sequence[float]]],
    *,
    correction: bool = True,
) -> ChiSquareResult:
    """Chi-square test on a contingency table of counts.

    All-zero rows and columns are dropped first (unobserved levels carry no
    information). With fewer than two non-empty rows or columns the statistic
    is undefined and reported as NaN.
    """
    observed = pd.DataFrame(table).astype(float)
    observed = observed.loc[observed.sum(axis=1) > 0, observed.sum(axis=0) > 0]
    n_obs = int(observed.to_numpy().sum())
    if n_obs < 2:
        raise InsufficientDataError(
            f"Chi-square test needs at least 2 observations; got {n_obs}."
        )

    if observed.shape[0] < 2 or observed.shape[1] < 2:
        logger.warning(
            "Contingency table has shape %s after dropping empty rows/columns; "
            "chi-square statistic is undefined.",
            observed.shape,
        )
        return ChiSquareResult(
            method="Pearson's chi-squared test",
            statistic=float("nan"),
            p_value=float("nan"),
            dof=0.0,
            n_obs=n_obs,
            observed=observed,
            expected=observed * np.nan,
            correction=correction,
        )

    res = stats.chi2_contingency(observed.to_numpy(), correction=correction)
    expected = pd.DataFrame(res.expected_freq, index=observed.index, columns=observed.columns)
    if (expected < 5).to_numpy().any():
        logger.warning("Chi-squared approximation may be incorrect (expected counts < 5).")

    corrected = correction and observed.shape == (2, 2)
    method = "Pearson's chi-squared test"
    if corrected:
        method += " with Yates' continuity correction"

    return ChiSquareResult(
        method=method,
        statistic=_finite_or_nan(res.statistic),
        p_value=_finite_or_nan(res.pvalue),
        dof=float(res.dof),
        n_obs=n_obs,
        observed=observed,
        expected=expected,
        correction=corrected,
    )


def chi_square_test(
    df: pd.DataFrame,
    row: FieldLike = EmployeeField.GENDER,
    col: FieldLike = EmployeeField.IS_PROMOTED,
    *,
    correction: bool = True,
) -> ChiSquareResult:
    """Test independence of two categorical fields (missing keys excluded)."""
    xtab = cross_tabulation(df, row, col, include_missing=False)
    return chi_square_from_table(xtab.counts, correction=correction)


# -----------------------------------------------------------------------------
# Two-sample t-test
# -----------------------------------------------------------------------------


def _valid_values(values: ArrayLike) -> np.ndarray:
    arr = pd.to_numeric(pd.Series(values), errors="coerce").astype(float).to_numpy()
    return arr[~np.isnan(arr)]


def _observed_levels(series: pd.Series) -> List[Any]:
    present = series.dropna()
    if isinstance(series.dtype, pd.CategoricalDtype):
        seen = set(present.unique())
        return [c for c in series.cat.categories if c in seen]
    return sorted(present.unique())


def two_sample_t_test(
    a: ArrayLike,
    b: ArrayLike,
    *,
    equal_var: bool = False,
    labels: Tuple[str, str] = ("a", "b"),
    confidence_level: float = 0.95,
) -> TTestResult:
    """Independent two-sample t-test of ``mean(a) - mean(b)``.

    Welch's unequal-variance test unless ``equal_var=True``. Missing values
    are dropped; each sample needs at least two values.
    """
    x = _valid_values(a)
    y = _valid_values(b)
    if len(x) < 2 or len(y) < 2:
        raise InsufficientDataError(
            f"t-test needs at least 2 valid values per group; got {len(x)} and {len(y)}."
        )

    with warnings.catch_warnings(), np.errstate(all="ignore"):
        warnings.simplefilter("ignore", RuntimeWarning)
        res = stats.ttest_ind(x, y, equal_var=equal_var)
        statistic = _finite_or_nan(res.statistic)
        ci_low = ci_high = float("nan")
        if not math.isnan(statistic):
            ci = res.confidence_interval(confidence_level=confidence_level)
            ci_low, ci_high = _finite_or_nan(ci.low), _finite_or_nan(ci.high)

    return TTestResult(
        method="Two Sample t-test" if equal_var else "Welch Two Sample t-test",
        statistic=statistic,
        p_value=_finite_or_nan(res.pvalue) if not math.isnan(statistic) else float("nan"),
        dof=_finite_or_nan(res.df),
        n_obs=int(len(x) + len(y)),
        group_labels=(str(labels[0]), str(labels[1])),
        group_means=(float(np.mean(x)), float(np.mean(y))),
        group_sizes=(int(len(x)), int(len(y))),
        ci_low=ci_low,
        ci_high=ci_high,
        equal_var=equal_var,
    )


def t_test(
    df: pd.DataFrame,
    value: FieldLike = EmployeeField.AVG_TRAINING_SCORE,
    group: FieldLike = EmployeeField.IS_PROMOTED,
    *,
    equal_var: bool = False,
) -> TTestResult:
    """Compare ``value`` between the two levels of a binary ``group`` field."""
    v = resolve_field(value)
    g = resolve_field(group)
    require_columns(df, [v, g])

    sub = pd.DataFrame(
        {"value": pd.to_numeric(df[v], errors="coerce").astype(float), "group": df[g]}
    ).dropna()
    levels = _observed_levels(sub["group"])
    if len(levels) > 2:
        raise SchemaError(f"Field '{g}' has {len(levels)} levels; a t-test needs exactly two.")
    if len(levels) < 2:
        raise InsufficientDataError(f"Field '{g}' has fewer than two observed levels.")

    first = sub.loc[sub["group"] == levels[0], "value"]
    second = sub.loc[sub["group"] == levels[1], "value"]
    return two_sample_t_test(first, second, equal_var=equal_var, labels=(levels[0], levels[1]))


# -----------------------------------------------------------------------------
# One-way ANOVA + Tukey HSD
# -----------------------------------------------------------------------------


def tukey_hsd(values: ArrayLike, groups: ArrayLike, *, alpha: float = DEFAULT_ALPHA) -> pd.DataFrame:
    """Tukey honest-significant-difference pairwise comparisons."""
    with warnings.catch_warnings(), np.errstate(all="ignore"):
        warnings.simplefilter("ignore", RuntimeWarning)
        tukey = pairwise_tukeyhsd(
            endog=np.asarray(values, dtype=float),
            groups=np.asarray(groups).astype(str),
            alpha=alpha,
        )
    summary = tukey.summary().data
    out = pd.DataFrame(data=summary[1:], columns=summary[0])
    return out.rename(columns={"p-adj": "p_adj"})


def one_way_anova(
    df: pd.DataFrame,
    value: FieldLike = EmployeeField.AVG_TRAINING_SCORE,
    group: FieldLike = EmployeeField.DEPARTMENT,
    *,
    alpha: float = DEFAULT_ALPHA,
    posthoc: bool = True,
) -> AnovaResult:
    """One-way ANOVA of ``value`` across the levels of ``group``.

    Every observed level needs at least two valid values. When the overall
    p-value is below ``alpha`` (and ``posthoc`` is set) Tukey HSD comparisons
    are attached as :attr:`AnovaResult.posthoc`.
    """
    v = resolve_field(value)
    g = resolve_field(group)
    require_columns(df, [v, g])

    sub = pd.DataFrame(
        {"value": pd.to_numeric(df[v], errors="coerce").astype(float), "group": df[g]}
    ).dropna()
    levels = _observed_levels(sub["group"])
    if len(levels) < 2:
        raise InsufficientDataError(f"ANOVA needs at least two observed levels of '{g}'.")

    sub["group"] = sub["group"].astype(str)
    sizes = sub.groupby("group").size()
    small = sizes[sizes < 2]
    if not small.empty:
        raise InsufficientDataError(
            f"ANOVA needs at least 2 valid values per level; too few for {small.index.tolist()}."
        )

    with warnings.catch_warnings(), np.errstate(all="ignore"):
        warnings.simplefilter("ignore", RuntimeWarning)
        model = smf.ols("value ~ C(group)", data=sub).fit()
        anova_table = sm.stats.anova_lm(model, typ=1)

    table = anova_table.rename(
        index={"C(group)": g, "Residual": "Residuals"},
        columns={"sum_sq": "sum_sq", "mean_sq": "mean_sq", "F": "f_value", "PR(>F)": "p_value"},
    )
    f_value = _finite_or_nan(table.loc[g, "f_value"])
    p_value = _finite_or_nan(table.loc[g, "p_value"]) if not math.isnan(f_value) else float("nan")
    dof = (float(table.loc[g, "df"]), float(table.loc["Residuals", "df"]))

    order = [str(lvl) for lvl in levels]
    group_means = sub.groupby("group")["value"].mean().reindex(order)

    result = AnovaResult(
        method="One-way ANOVA",
        statistic=f_value,
        p_value=p_value,
        dof=dof,
        n_obs=int(len(sub)),
        table=table,
        group_means=group_means,
        alpha=alpha,
    )

    if posthoc and result.is_significant(alpha):
        logger.info("ANOVA significant (p=%.3g < %.3g); running Tukey HSD.", p_value, alpha)
        result.posthoc = tukey_hsd(sub["value"], sub["group"], alpha=alpha)
    return result


# -----------------------------------------------------------------------------
# Logistic regression
# -----------------------------------------------------------------------------


def _degenerate_logit(
    outcome: str,
    terms: Sequence[str],
    n_obs: int,
    n_dropped: int,
    message: str,
) -> LogisticRegressionResult:
    logger.warning("Logistic regression on '%s' is degenerate: %s", outcome, message)
    coefficients = pd.DataFrame(
        np.nan,
        index=pd.Index(list(terms), name="term"),
        columns=["estimate", "std_error", "z_value", "p_value", "odds_ratio"],
    )
    return LogisticRegressionResult(
        method="Logistic regression (binomial GLM, logit link)",
        statistic=float("nan"),
        p_value=float("nan"),
        dof=float(len(terms) - 1),
        n_obs=n_obs,
        outcome=outcome,
        coefficients=coefficients,
        converged=False,
        n_dropped=n_dropped,
        message=message,
    )


def logistic_regression(
    df: pd.DataFrame,
    outcome: FieldLike = EmployeeField.IS_PROMOTED,
    predictors: Optional[Sequence[FieldLike]] = None,
    *,
    max_iter: int = 100,
) -> LogisticRegressionResult:
    """Regress a 0/1 ``outcome`` on numeric / 0-1 ``predictors``.

    Rows with a missing value in the outcome or any predictor are dropped
    (listwise deletion). The returned statistic is the likelihood-ratio
    chi-square of the model against the intercept-only model.
    """
    y_col = resolve_field(outcome)
    x_cols = resolve_fields(DEFAULT_LOGIT_PREDICTORS if predictors is None else predictors)
    require_columns(df, [y_col] + x_cols)

    data = df[[y_col] + x_cols].apply(lambda s: pd.to_numeric(s, errors="coerce")).astype(float)
    complete = data.dropna()
    n_obs = int(len(complete))
    n_dropped = int(len(data) - n_obs)
    if n_obs < 2:
        raise InsufficientDataError(
            f"Logistic regression needs at least 2 complete rows; got {n_obs}."
        )

    y = complete[y_col]
    if not y.isin([0.0, 1.0]).all():
        raise SchemaError(f"Outcome '{y_col}' must be coded 0/1.")

    X = sm.add_constant(complete[x_cols], has_constant="add").rename(columns={"const": INTERCEPT_NAME})
    terms = list(X.columns)
    if y.nunique() < 2:
        return _degenerate_logit(y_col, terms, n_obs, n_dropped, "outcome has a single level")

    # GLM falls back to a pseudo-inverse, so rank deficiency has to be caught here.
    if np.linalg.matrix_rank(X.to_numpy()) < X.shape[1]:
        return _degenerate_logit(y_col, terms, n_obs, n_dropped, "singular design matrix")

    with warnings.catch_warnings(record=True) as caught, np.errstate(all="ignore"):
        warnings.simplefilter("always")
        try:
            fit = sm.GLM(y, X, family=sm.families.Binomial()).fit(maxiter=max_iter)
        except (PerfectSeparationError, np.linalg.LinAlgError) as exc:
            return _degenerate_logit(y_col, terms, n_obs, n_dropped, str(exc))

        separated = any(issubclass(w.category, PerfectSeparationWarning) for w in caught)
        if separated or np.max(np.abs(np.asarray(fit.mu) - y.to_numpy())) < SEPARATION_TOL:
            return _degenerate_logit(y_col, terms, n_obs, n_dropped, "perfect separation of the outcome")

        params = fit.params
        bse = fit.bse
        coefficients = pd.DataFrame(
            {
                "estimate": params,
                "std_error": bse,
                "z_value": fit.tvalues,
                "p_value": fit.pvalues,
                "odds_ratio": np.exp(params),
            }
        )
        lr_stat = float(fit.null_deviance - fit.deviance)
        df_model = float(fit.df_model)
        lr_p = float(stats.chi2.sf(lr_stat, df_model)) if df_model > 0 else float("nan")
        pseudo_r2 = 1.0 - fit.deviance / fit.null_deviance if fit.null_deviance > 0 else float("nan")

    coefficients.index.name = "term"
    converged = bool(getattr(fit, "converged", True))
    message = "" if converged else f"did not converge within {max_iter} iterations"
    if not converged:
        logger.warning("Logistic regression on '%s' %s.", y_col, message)

    return LogisticRegressionResult(
        method="Logistic regression (binomial GLM, logit link)",
        statistic=_finite_or_nan(lr_stat),
        p_value=_finite_or_nan(lr_p),
        dof=df_model,
        n_obs=n_obs,
        outcome=y_col,
        coefficients=coefficients,
        converged=converged,
        n_dropped=n_dropped,
        pseudo_r2=_finite_or_nan(pseudo_r2),
        aic=_finite_or_nan(fit.aic),
        message=message,
    )


__all__ = [
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
