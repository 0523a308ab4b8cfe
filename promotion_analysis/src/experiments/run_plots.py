"""Report figures for the promotion dataset, saved as PNG under ``<output_dir>/figures``."""

from __future__ import annotations

from typing import Optional, Sequence

import matplotlib.pyplot as plt

from ..analysis.tables import correlation_matrix
from ..exceptions import InsufficientDataError
from ..utils.logging_utils import configure_logging
from ..visualization.plots_promotion import (
    plot_correlation_heatmap,
    plot_promotion_rate_by_department,
    plot_promotions_by_department,
    plot_rating_distribution,
    plot_training_score_by_promotion,
)
from .common import build_parser, load_prepared_or_exit, parse_args, resolve_config


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger = configure_logging(force=False)
    args = parse_args(build_parser("Figures for the promotion dataset."), argv)
    cfg = resolve_config(args, logger)
    df = load_prepared_or_exit(cfg, logger)

    fig_dir = cfg.figure_dir
    figures = {
        "promotions_by_department.png": lambda p: plot_promotions_by_department(df, save_path=p),
        "promotion_rate_by_department.png": lambda p: plot_promotion_rate_by_department(df, save_path=p),
        "training_score_by_promotion.png": lambda p: plot_training_score_by_promotion(df, save_path=p),
        "rating_distribution.png": lambda p: plot_rating_distribution(df, save_path=p),
        "correlation_matrix.png": lambda p: plot_correlation_heatmap(correlation_matrix(df), save_path=p),
    }

    for filename, draw in figures.items():
        path = fig_dir / filename
        try:
            fig = draw(path)
        except InsufficientDataError as exc:
            logger.warning("Skipping %s: %s", filename, exc)
            continue
        plt.close(fig)
        logger.info("Saved %s", path)

    plt.close("all")


if __name__ == "__main__":
    main()
