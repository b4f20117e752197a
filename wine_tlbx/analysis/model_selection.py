"""Hierarchical backward elimination for OLS models guided by nested F-tests.

Starting from the maximal model (all predictors plus every interaction up to a
given order), terms are removed one interaction order at a time, highest order
first. Within an order every candidate removal is tested against the *same*
baseline, and all non-significant terms of that order are dropped together in
a single refit. With correlated predictors a greedy one-at-a-time search can
keep a different set of terms than this batch rule.

Main effects are tested and logged but never removed unless the ``"drop"``
policy is configured.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal, Self

import numpy as np
import pandas as pd

from wine_tlbx.data.utils import complete_cases
from wine_tlbx.data.views import DatasetView
from wine_tlbx.errors import InvalidInput, NotNested

from .base_analyser import BaseAnalyser
from .ols_helper import FittedModel, fit_ols_terms
from .terms import ModelSpec, Term, unique_terms


logger = logging.getLogger(__name__)

MainEffectPolicy = Literal["keep", "drop"]


@dataclass(frozen=True)
class SelectionConfig:
    """Settings of the backward elimination procedure.

    Attributes:
        alpha: Significance level; a removal is accepted when the F-test p-value is ``>= alpha``.
        max_order: Highest interaction order in the full model (``None`` = number of predictors).
        main_effect_policy: ``"keep"`` only logs the main-effect tests, ``"drop"`` removes
            non-significant main effects like any other level.
    """

    alpha: float = 0.05
    max_order: int | None = None
    main_effect_policy: MainEffectPolicy = "keep"

    def __post_init__(self) -> None:
        if not 0.0 < self.alpha < 1.0:
            raise InvalidInput(f"alpha must be in (0, 1), got {self.alpha}.")
        if self.max_order is not None and self.max_order < 1:
            raise InvalidInput(f"max_order must be >= 1, got {self.max_order}.")
        if self.main_effect_policy not in {"keep", "drop"}:
            raise InvalidInput(f"main_effect_policy must be 'keep' or 'drop', got {self.main_effect_policy!r}.")


@dataclass(frozen=True)
class ComparisonResult:
    r"""Nested-model F-test of a reduced model against a fuller one.

    :math:`F = \frac{(RSS_r - RSS_f) / (df_r - df_f)}{RSS_f / df_f}`, where
    :math:`df` are residual degrees of freedom. A significant result means the
    extra terms of the full model improve the fit beyond chance.
    """

    reduced: ModelSpec
    full: ModelSpec
    f_statistic: float
    p_value: float
    df_diff: int
    alpha: float

    @property
    def significant(self) -> bool:
        """True when the dropped terms significantly improve the fit (``p < alpha``)."""
        return self.p_value < self.alpha

    @property
    def dropped_terms(self) -> list[Term]:
        reduced = self.reduced.term_set
        return [term for term in self.full.terms if term not in reduced]


@dataclass(frozen=True)
class EliminationStep:
    """One candidate removal tested during elimination."""

    order: int
    """Interaction order of the level being processed (1 = main effects)."""
    term: Term
    comparison: ComparisonResult
    accepted: bool
    """Whether the removal was carried into the next current-best model."""


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of hierarchical backward elimination.

    Attributes:
        full: Fit of the maximal model the procedure started from.
        final: Fit of the minimal adequate model.
        steps: Every comparison made, in the order it was made.
        config: Settings used for the run.
    """

    full: FittedModel
    final: FittedModel
    steps: tuple[EliminationStep, ...]
    config: SelectionConfig = field(default_factory=SelectionConfig)

    @property
    def removed_terms(self) -> list[Term]:
        final_terms = self.final.spec.term_set
        return [term for term in self.full.spec.terms if term not in final_terms]

    @property
    def retained_terms(self) -> list[Term]:
        return list(self.final.spec.terms)

    def steps_at_order(self, order: int) -> list[EliminationStep]:
        return [step for step in self.steps if step.order == order]

    def summary_table(self) -> pd.DataFrame:
        """Return a tidy trace of the comparisons for reporting and plotting."""
        rows = [
            {
                "step": idx,
                "order": step.order,
                "term": step.term.label,
                "f_statistic": step.comparison.f_statistic,
                "p_value": step.comparison.p_value,
                "df_diff": step.comparison.df_diff,
                "significant": step.comparison.significant,
                "accepted": step.accepted,
                "reduced_rhs": step.comparison.reduced.rhs,
                "baseline_rhs": step.comparison.full.rhs,
            }
            for idx, step in enumerate(self.steps)
        ]
        columns = [
            "step",
            "order",
            "term",
            "f_statistic",
            "p_value",
            "df_diff",
            "significant",
            "accepted",
            "reduced_rhs",
            "baseline_rhs",
        ]
        return pd.DataFrame(rows, columns=columns).set_index("step")

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_pvalues(self, **kwargs: object):
        """Plot the p-value of every tested removal against the significance level."""
        from wine_tlbx.plotting.selection_plots import plot_elimination_pvalues  # noqa: PLC0415

        return plot_elimination_pvalues(self, **kwargs)


def _row_labels(fitted: FittedModel) -> pd.Index:
    return pd.Index(fitted.results.model.data.row_labels)


def compare_nested(reduced: FittedModel, full: FittedModel, *, alpha: float = 0.05) -> ComparisonResult:
    """Nested F-test of ``reduced`` against ``full``.

    The reduced term set must be a *strict* subset of the full one, so
    comparing a model with itself is rejected.

    Raises:
        NotNested: If the term sets are not strictly nested, the outcomes differ,
            or the two fits were not made on the same rows.
    """
    if not reduced.spec.is_nested_in(full.spec, strict=True):
        raise NotNested(f"'{reduced.spec}' is not strictly nested in '{full.spec}'.")
    if reduced.nobs != full.nobs:
        raise NotNested(f"Models were fit on different rows ({reduced.nobs} vs {full.nobs} observations).")
    if not _row_labels(reduced).equals(_row_labels(full)):
        raise NotNested("Models were fit on different rows (same count, different row labels).")

    f_value, p_value, df_diff = full.results.compare_f_test(reduced.results)
    f_value = float(f_value)
    p_value = float(p_value)
    if not np.isfinite(p_value):
        # Identical residual sums of squares can yield nan; no improvement at all.
        f_value, p_value = 0.0, 1.0
    return ComparisonResult(
        reduced=reduced.spec,
        full=full.spec,
        f_statistic=max(f_value, 0.0),
        p_value=min(p_value, 1.0),
        df_diff=int(round(df_diff)),
        alpha=alpha,
    )


def _test_level(
    data: pd.DataFrame,
    baseline: FittedModel,
    order: int,
    alpha: float,
    *,
    removable: bool,
) -> tuple[list[EliminationStep], list[Term]]:
    """Test each term of ``order`` against the same ``baseline``; return steps and non-significant terms."""
    steps: list[EliminationStep] = []
    flagged: list[Term] = []
    for term in unique_terms(baseline.spec.terms_of_order(order)):
        reduced = fit_ols_terms(data, baseline.spec.without(term))
        comparison = compare_nested(reduced, baseline, alpha=alpha)
        accepted = removable and not comparison.significant
        logger.debug(
            "order=%d drop %s: F=%.4g p=%.4g -> %s",
            order,
            term.label,
            comparison.f_statistic,
            comparison.p_value,
            "remove" if accepted else "keep",
        )
        steps.append(EliminationStep(order=order, term=term, comparison=comparison, accepted=accepted))
        if not comparison.significant:
            flagged.append(term)
    return steps, flagged


def backward_elimination(
    data: pd.DataFrame,
    *,
    outcome: str,
    predictors: Sequence[str],
    config: SelectionConfig | None = None,
) -> SelectionResult:
    """Run hierarchical backward elimination and return the final model with its trace.

    Args:
        data: DataFrame with the outcome and predictor columns (other columns are ignored).
        outcome: Name of the numeric outcome column.
        predictors: Base predictor names (at least one, column names used verbatim).
        config: Significance level, interaction order limit, and main-effect policy.

    Returns:
        SelectionResult with the full fit, the final fit, and every comparison in order.

    Raises:
        InvalidInput: For missing/non-numeric columns, empty or duplicate predictors,
            an empty dataset, or an invalid order limit.
        Unidentifiable: If the full model has more parameters than complete observations;
            raised before any comparison is made.
    """
    config = config or SelectionConfig()
    predictors = list(predictors)
    full_spec = ModelSpec.full(outcome, predictors, max_order=config.max_order)
    # Complete cases over every relevant column, so all candidate fits share the same rows.
    frame = complete_cases(data, [outcome, *predictors])

    full = fit_ols_terms(frame, full_spec)
    current = full
    steps: list[EliminationStep] = []
    logger.info("Full model %s (%d terms, n=%d)", full_spec, len(full_spec.terms), full.nobs)

    for order in range(full_spec.max_order, 1, -1):
        baseline = current
        level_steps, flagged = _test_level(frame, baseline, order, config.alpha, removable=True)
        steps.extend(level_steps)
        if flagged:
            current = fit_ols_terms(frame, baseline.spec.without(*flagged))
            logger.info("Order %d: removed %s", order, ", ".join(t.label for t in flagged))

    removable = config.main_effect_policy == "drop"
    baseline = current
    level_steps, flagged = _test_level(frame, baseline, 1, config.alpha, removable=removable)
    steps.extend(level_steps)
    if flagged and removable:
        current = fit_ols_terms(frame, baseline.spec.without(*flagged))
        logger.info("Main effects: removed %s", ", ".join(t.label for t in flagged))
    elif flagged:
        logger.info("Main effects not significant but kept: %s", ", ".join(t.label for t in flagged))

    logger.info("Final model %s", current.spec)
    return SelectionResult(full=full, final=current, steps=tuple(steps), config=config)


def compare_models(models: dict[str, FittedModel]) -> pd.DataFrame:
    """Tabulate AIC/BIC, adj R², and RMSE for multiple fitted models.

    Information criteria are most meaningful for comparing models fit to the
    same response on the same data; lower values indicate a better trade-off of
    fit and complexity.
    """
    rows = [
        {
            "model": name,
            "rhs": fitted.spec.rhs,
            "n_terms": len(fitted.spec.terms),
            "aic": fitted.aic,
            "bic": fitted.bic,
            "adj_r2": fitted.rsquared_adj,
            "rmse": float(np.sqrt(fitted.results.mse_resid)),
        }
        for name, fitted in models.items()
    ]
    return pd.DataFrame(rows).sort_values("aic").reset_index(drop=True)


class BackwardEliminationSelector(BaseAnalyser):
    """Analyzer wrapper around :func:`backward_elimination` for a dataset view.

    The view's target column is the outcome; its remaining numeric columns are
    the base predictors, in view order.

    Example:
        >>> from wine_tlbx.data import WineQualityDataset
        >>> from wine_tlbx.analysis import SelectionConfig
        >>> ds = WineQualityDataset.from_csv()
        >>> selector = ds.make_backward_elimination_selector(config=SelectionConfig(alpha=0.05))
        >>> result = selector.fit().result()
        >>> result.summary_table()[["term", "p_value", "accepted"]]
    """

    def __init__(self, view: DatasetView, config: SelectionConfig | None = None) -> None:
        if not view.target_col:
            raise InvalidInput("Dataset view has no target column configured.")
        self._view = view
        self.config = config or SelectionConfig()
        self._result: SelectionResult | None = None

    @property
    def predictors(self) -> list[str]:
        return self._view.feature_names

    def fit(self) -> Self:
        """Run the elimination on the view's data."""
        self._result = backward_elimination(
            self._view.df,
            outcome=self._view.target_col,
            predictors=self.predictors,
            config=self.config,
        )
        return self

    def result(self) -> SelectionResult:
        if self._result is None:
            raise ValueError("Must call fit() before result()")
        return self._result


__all__ = [
    "BackwardEliminationSelector",
    "ComparisonResult",
    "EliminationStep",
    "MainEffectPolicy",
    "SelectionConfig",
    "SelectionResult",
    "backward_elimination",
    "compare_models",
    "compare_nested",
]
