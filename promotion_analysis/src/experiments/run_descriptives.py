"""Frequency tables, cross-tabulations and grouped summaries.

Prints report-style tables to stdout and writes them as CSV under
``<output_dir>/tables``:

- ``freq_<field>.csv``            one-way frequencies (with a Total row)
- ``xtab_<field>_by_promotion.csv`` row-percentage cross-tabulations
- ``summary_by_<keys>.csv``       counts, mean training score, mean rating, % promoted
- ``descriptive_by_department.csv``
- ``correlation_matrix.csv``, ``numeric_summary.csv``, ``missing_values.csv``
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..analysis.tables import (
    correlation_matrix,
    cross_tabulation,
    descriptive_table,
    frequency_table,
    grouped_summary,
    numeric_summary,
)
from ..data.features import recoding_preview
from ..data.preprocess import missing_value_report
from ..data.schema import EmployeeField
from ..utils.logging_utils import configure_logging
from ..visualization.text_report import render_cross_tabulation, render_table
from .common import build_parser, load_prepared_or_exit, parse_args, resolve_config, save_table

F = EmployeeField

FREQUENCY_FIELDS = [F.DEPARTMENT, F.EDUCATION, F.GENDER, F.IS_PROMOTED_LABEL, F.PERFORMANCE_CAT, F.AGE_GROUP]
CROSSTAB_ROWS = [F.DEPARTMENT, F.GENDER, F.EDUCATION, F.PERFORMANCE_CAT, F.AWARDS_WON_LABEL]
SUMMARY_KEYS = [[F.DEPARTMENT], [F.DEPARTMENT, F.GENDER], [F.PERFORMANCE_CAT], [F.AGE_GROUP]]


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger = configure_logging(force=False)
    args = parse_args(build_parser("Descriptive tables for the promotion dataset."), argv)
    cfg = resolve_config(args, logger)
    df = load_prepared_or_exit(cfg, logger)

    out = cfg.table_dir
    pct = cfg.percent_digits

    print(render_table(recoding_preview(df), "Recoding check"))
    save_table(missing_value_report(df, log=False), out / "missing_values.csv", logger, index=True)

    for field in FREQUENCY_FIELDS:
        table = frequency_table(df, field, include_missing=True, totals=True, digits=pct)
        print(render_table(table, f"Frequency: {field}", percent_digits=pct))
        save_table(table, out / f"freq_{field}.csv", logger)

    for field in CROSSTAB_ROWS:
        xtab = cross_tabulation(
            df,
            field,
            F.IS_PROMOTED_LABEL,
            include_missing=cfg.include_missing_groups,
            digits=pct,
        )
        print(render_cross_tabulation(xtab, digits=pct))
        save_table(xtab.to_long(), out / f"xtab_{field}_by_promotion.csv", logger)

    for keys in SUMMARY_KEYS:
        summary = grouped_summary(df, keys, include_missing=cfg.include_missing_groups)
        name = "_".join(str(k) for k in keys)
        print(render_table(summary, f"Summary by {name.replace('_', ' ')}"))
        save_table(summary, out / f"summary_by_{name}.csv", logger)

    descriptive = descriptive_table(df, F.DEPARTMENT, include_missing=cfg.include_missing_groups)
    print(render_table(descriptive, "Descriptive statistics by department"))
    save_table(descriptive, out / "descriptive_by_department.csv", logger)

    corr = correlation_matrix(df)
    print(render_table(corr, "Correlation matrix (complete cases)", index=True))
    save_table(corr, out / "correlation_matrix.csv", logger, index=True)

    summary = numeric_summary(df, digits=cfg.mean_digits)
    print(render_table(summary, "Numeric summary", index=True))
    save_table(summary, out / "numeric_summary.csv", logger, index=True)

    logger.info("Descriptive tables written under %s", out)


if __name__ == "__main__":
    main()
