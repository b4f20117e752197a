"""Command line entry point: run hierarchical backward elimination on a wine-quality file.

Usage::

    wine-select path/to/winequality-red.csv --alpha 0.05

Prints the comparison trace, the final model, its standardized coefficients,
and residual diagnostics (multicollinearity and autocorrelation included).
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable

import pandas as pd

from wine_tlbx.analysis.model_selection import SelectionConfig, SelectionResult, compare_models
from wine_tlbx.analysis.ols_helper import diagnose, fit_standardized_model, standardized_coefficients
from wine_tlbx.data import WineQualityDataset, WQCol
from wine_tlbx.errors import WineToolboxError


logger = logging.getLogger(__name__)


def _alpha(value: str) -> float:
    alpha = float(value)
    if not 0.0 < alpha < 1.0:
        raise argparse.ArgumentTypeError(f"alpha must be in (0, 1), got {value}")
    return alpha


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wine-select",
        description="Backward elimination of interaction terms for wine quality OLS models",
    )
    p.add_argument("csv_path", help="Delimited dataset file (delimiter is detected automatically)")
    p.add_argument("--alpha", type=_alpha, default=0.05, help="Significance level of the nested F-tests")
    return p


def format_report(dataset: WineQualityDataset, selection: SelectionResult) -> str:
    """Render the selection trace, final model, standardized coefficients, and diagnostics as text."""
    predictors = dataset.default_predictors()
    standardized = fit_standardized_model(dataset.df, outcome=WQCol.TARGET, predictors=predictors)
    diagnostics = diagnose(selection.final)

    with pd.option_context("display.width", 160, "display.max_columns", 20):
        sections = [
            "== Data ==",
            dataset.describe_columns().loc[[WQCol.TARGET, *predictors]].to_string(),
            "",
            "== Elimination trace ==",
            selection.summary_table().drop(columns=["reduced_rhs", "baseline_rhs"]).to_string(),
            "",
            f"== Final model: {selection.final.spec} ==",
            selection.final.coefficient_table().to_string(),
            f"R^2={selection.final.rsquared:.4f}  adj R^2={selection.final.rsquared_adj:.4f}  n={selection.final.nobs}",
            "",
            "== Full vs final ==",
            compare_models({"full": selection.full, "final": selection.final}).to_string(),
            "",
            "== Standardized coefficients ==",
            standardized_coefficients(standardized).to_string(),
            "",
            "== Diagnostics ==",
            repr(diagnostics.metrics),
            repr(diagnostics.assumptions),
            "VIF:",
            diagnostics.vif.to_string(index=False),
        ]
    return "\n".join(sections)


def main(argv: Iterable[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        dataset = WineQualityDataset.from_csv(csv_path=args.csv_path)
        selector = dataset.make_backward_elimination_selector(config=SelectionConfig(alpha=args.alpha))
        selection = selector.fit().result()
        report = format_report(dataset, selection)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 2
    except WineToolboxError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    print(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
