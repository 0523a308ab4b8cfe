"""Hypothesis tests on the promotion dataset.

1) Chi-square: gender x promotion (and department x promotion)
2) Welch t-test: training score, promoted vs not promoted
3) One-way ANOVA: training score across departments (+ Tukey HSD)
4) Logistic regression: promotion on score, rating, awards, trainings, service

A test whose data are insufficient is logged and skipped; the other tests
still run. Outputs under ``<output_dir>/tables``: ``inference_results.json``,
``anova_table.csv``, ``tukey_hsd.csv`` (when run) and
``logistic_coefficients.csv``.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence

from ..analysis.inference import (
    AnovaResult,
    HypothesisTestResult,
    LogisticRegressionResult,
    chi_square_test,
    logistic_regression,
    one_way_anova,
    t_test,
)
from ..data.schema import EmployeeField
from ..exceptions import InsufficientDataError
from ..utils.logging_utils import configure_logging
from ..visualization.text_report import render_test_result
from .common import build_parser, load_prepared_or_exit, parse_args, resolve_config, save_json, save_table

F = EmployeeField


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger = configure_logging(force=False)
    args = parse_args(build_parser("Inferential tests for the promotion dataset."), argv)
    cfg = resolve_config(args, logger)
    df = load_prepared_or_exit(cfg, logger)

    tests: Dict[str, Callable[[], HypothesisTestResult]] = {
        "chi_square_gender_promotion": lambda: chi_square_test(
            df, F.GENDER, F.IS_PROMOTED, correction=cfg.chi_square_correction
        ),
        "chi_square_department_promotion": lambda: chi_square_test(
            df, F.DEPARTMENT, F.IS_PROMOTED, correction=cfg.chi_square_correction
        ),
        "t_test_training_score_by_promotion": lambda: t_test(
            df, F.AVG_TRAINING_SCORE, F.IS_PROMOTED, equal_var=cfg.t_test_equal_var
        ),
        "anova_training_score_by_department": lambda: one_way_anova(
            df, F.AVG_TRAINING_SCORE, F.DEPARTMENT, alpha=cfg.alpha
        ),
        "logistic_regression_promotion": lambda: logistic_regression(
            df, cfg.logit_outcome, cfg.logit_predictors, max_iter=cfg.logit_max_iter
        ),
    }

    results: Dict[str, Any] = {}
    for name, run in tests.items():
        logger.info("Running %s", name)
        try:
            result = run()
        except InsufficientDataError as exc:
            logger.warning("Skipping %s: %s", name, exc)
            results[name] = {"skipped": str(exc)}
            continue

        print(render_test_result(result, alpha=cfg.alpha))
        print()
        payload = result.to_dict()
        payload["significant"] = result.is_significant(cfg.alpha)
        results[name] = payload

        if isinstance(result, AnovaResult):
            save_table(result.table, cfg.table_dir / "anova_table.csv", logger, index=True)
            if result.posthoc is not None:
                save_table(result.posthoc, cfg.table_dir / "tukey_hsd.csv", logger)
        elif isinstance(result, LogisticRegressionResult):
            save_table(result.coefficients, cfg.table_dir / "logistic_coefficients.csv", logger, index=True)

    save_json(results, cfg.table_dir / "inference_results.json", logger)


if __name__ == "__main__":
    main()
