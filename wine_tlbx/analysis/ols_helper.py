"""OLS fitting on term specifications, diagnostics, and standardized coefficients.

The helpers in this module fit classical linear regressions with ordinary least
squares (OLS) through the statsmodels formula API. :func:`fit_ols_terms` is the
fitting primitive used by model selection; :func:`diagnose` packages standard
fit metrics (e.g., :math:`R^2`, RMSE, AIC/BIC) and assumption checks for
independence (autocorrelation), homoscedasticity, normality, and collinearity.
Tests are *diagnostic* rather than definitive: small p-values indicate evidence
against the null, but results are sensitive to sample size and should be read
alongside residual plots.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
import statsmodels.api as sm
import statsmodels.formula.api as smf
from scipy import stats
from sklearn.linear_model import LinearRegression
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from sklearn.model_selection import KFold, cross_val_score
from statsmodels.graphics.regressionplots import influence_plot
from statsmodels.stats import diagnostic as sm_diagnostic
from statsmodels.stats.outliers_influence import variance_inflation_factor
from statsmodels.stats.stattools import durbin_watson, jarque_bera

from wine_tlbx.data.utils import complete_cases, standardize_frame
from wine_tlbx.errors import Unidentifiable

from .terms import ModelSpec


if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure


logger = logging.getLogger(__name__)

INTERCEPT = "Intercept"
_SHAPIRO_MAX_N = 5000


@dataclass(frozen=True)
class FittedModel:
    """Immutable OLS fit of a :class:`~wine_tlbx.analysis.terms.ModelSpec`.

    Coefficients are keyed by readable term labels (``pH:alcohol``) rather than
    Patsy's quoted names. A new instance is created for every spec that is fit;
    nothing here is mutated after construction.
    """

    spec: ModelSpec
    results: sm.regression.linear_model.RegressionResultsWrapper

    @property
    def params(self) -> pd.Series:
        """Coefficient estimates indexed by ``Intercept`` and term labels."""
        return self.results.params.rename(index=self._label_by_exog_name())

    @property
    def pvalues(self) -> pd.Series:
        return self.results.pvalues.rename(index=self._label_by_exog_name())

    @property
    def bse(self) -> pd.Series:
        return self.results.bse.rename(index=self._label_by_exog_name())

    @property
    def nobs(self) -> int:
        return int(self.results.nobs)

    @property
    def df_resid(self) -> float:
        """Residual degrees of freedom :math:`n - p`."""
        return float(self.results.df_resid)

    @property
    def ssr(self) -> float:
        """Residual sum of squares."""
        return float(self.results.ssr)

    @property
    def centered_tss(self) -> float:
        """Total sum of squares around the mean of the outcome."""
        return float(self.results.centered_tss)

    @property
    def rsquared(self) -> float:
        return float(self.results.rsquared)

    @property
    def rsquared_adj(self) -> float:
        return float(self.results.rsquared_adj)

    @property
    def aic(self) -> float:
        return float(self.results.aic)

    @property
    def bic(self) -> float:
        return float(self.results.bic)

    def coefficient_table(self) -> pd.DataFrame:
        """Coefficient, standard error, t-statistic, and p-value per term."""
        labels = self._label_by_exog_name()
        return pd.DataFrame(
            {
                "coef": self.results.params,
                "std_err": self.results.bse,
                "t": self.results.tvalues,
                "p_value": self.results.pvalues,
            },
        ).rename(index=labels).rename_axis("term")

    def summary(self) -> str:
        """statsmodels text summary of the fit."""
        return str(self.results.summary())

    def _label_by_exog_name(self) -> dict[str, str]:
        return {term.formula: term.label for term in self.spec.terms}

    def __repr__(self) -> str:
        return f"FittedModel({self.spec}, n={self.nobs}, r2={self.rsquared:.3f}, ssr={self.ssr:.4g})"


def fit_ols_terms(data: pd.DataFrame, spec: ModelSpec) -> FittedModel:
    """Fit ``spec`` by OLS on the complete cases of the columns it uses.

    The design matrix is built by Patsy (through ``statsmodels.formula.api.ols``)
    with quoted column names, so predictors containing spaces stay atomic.

    Raises:
        InvalidInput: If the outcome or a predictor is missing or non-numeric.
        Unidentifiable: If the design matrix is rank-deficient or leaves no
            residual degrees of freedom (fewer observations than parameters).
    """
    frame = complete_cases(data, [spec.outcome, *spec.variables])
    model = smf.ols(spec.formula, data=frame)
    n_obs, n_params = model.exog.shape
    rank = int(np.linalg.matrix_rank(model.exog))
    if rank < n_params or n_obs <= n_params:
        raise Unidentifiable(
            f"Cannot estimate {n_params} parameters (rank {rank}) from {n_obs} observations for '{spec}'.",
        )
    results = model.fit()
    logger.debug("Fitted %s: n=%d ssr=%.6g r2=%.4f", spec, n_obs, results.ssr, results.rsquared)
    return FittedModel(spec=spec, results=results)


def fit_standardized_model(
    data: pd.DataFrame,
    *,
    outcome: str,
    predictors: Sequence[str],
) -> FittedModel:
    """Fit the main-effects model on z-scored outcome and predictors.

    The resulting slopes are standardized (beta) coefficients: the change in
    outcome standard deviations per standard deviation of each predictor, which
    makes effect magnitudes comparable across predictors with different units.
    This model is independent of backward elimination.

    Raises:
        InvalidInput: If a column is missing or non-numeric.
        DegenerateColumn: If a column has zero variance.
    """
    spec = ModelSpec.main_effects(outcome, predictors)
    frame = standardize_frame(complete_cases(data, [outcome, *spec.variables]))
    return fit_ols_terms(frame, spec)


def standardized_coefficients(fitted: FittedModel) -> pd.Series:
    """Slopes of a model fitted on standardized data, sorted by absolute size."""
    params = fitted.params.drop(INTERCEPT, errors="ignore")
    return params.reindex(params.abs().sort_values(ascending=False).index).rename("beta")


@dataclass(frozen=True)
class MetricsResult:
    r"""Fit and generalization metrics for OLS models.

    Key equations (with :math:`n` observations and :math:`p` predictors):

    - :math:`R^2 = 1 - \frac{SS_{res}}{SS_{tot}}`
    - :math:`\bar{R}^2 = 1 - (1 - R^2)\frac{n-1}{n-p-1}`
    - :math:`\text{RMSE} = \sqrt{\frac{1}{n}\sum_i (y_i - \hat{y}_i)^2}`
    - :math:`\text{AIC} = 2k - 2\log L`, :math:`\text{BIC} = k\log n - 2\log L`

    Information criteria are most meaningful for *relative* comparisons across
    models fit on the same response and dataset (lower is better).
    """

    r2: float
    adj_r2: float
    rmse: float
    """Root mean squared error (in outcome units)."""
    mae: float
    aic: float
    bic: float
    loglik: float
    n_obs: int
    cv_scores: list[float] | None = None
    """Raw cross-validation RMSE scores (if enabled)."""
    cv_rmse: float | None = None

    def __repr__(self) -> str:
        cv_block = ""
        if self.cv_rmse is not None and self.cv_scores is not None:
            cv_block = f" CV[rmse={self.cv_rmse:.3f}, folds={len(self.cv_scores)}]"
        return (
            f"MetricsResult(Fit[r2={self.r2:.3f}, adj_r2={self.adj_r2:.3f}, rmse={self.rmse:.3f}, "
            f"mae={self.mae:.3f}, aic={self.aic:.3f}, bic={self.bic:.3f}]{cv_block} n={self.n_obs})"
        )


@dataclass(frozen=True)
class AssumptionCheckResult:
    """Regression assumption diagnostics.

    - Independence (autocorrelation): Durbin-Watson.
    - Normality of residuals: Jarque-Bera, Shapiro-Wilk (or Anderson-Darling).
    - Homoscedasticity: Breusch-Pagan.
    - Collinearity: condition number and variance inflation factors (VIF).
    - Influence: leverage and Cook's distance.
    """

    durbin_watson: float
    r"""Durbin-Watson statistic :math:`\sum_t (e_t - e_{t-1})^2 / \sum_t e_t^2` in :math:`[0, 4]`.

    Values near 2 indicate no first-order autocorrelation of residuals in row order.
    """
    jarque_bera_statistic: float
    jarque_bera_pvalue: float
    shapiro_statistic: float
    """Shapiro-Wilk W (Anderson-Darling statistic above 5000 observations)."""
    shapiro_pvalue: float
    breusch_pagan_statistic: float
    breusch_pagan_pvalue: float
    condition_number: float
    vif: pd.Series
    r"""Variance Inflation Factor per term (intercept excluded), :math:`1 / (1 - R_j^2)`."""
    leverage: np.ndarray
    cooks_distance: np.ndarray

    def __repr__(self) -> str:
        alpha = 0.05

        def decision(p_value: float) -> str:
            return "FAIL" if p_value < alpha else "OK"

        dw_status = "OK" if 1.5 <= self.durbin_watson <= 2.5 else "WARN"
        max_vif = float(self.vif.max()) if not self.vif.empty else float("nan")
        n_obs = len(self.cooks_distance)
        cooks_exceed = int(np.sum(self.cooks_distance > 4 / n_obs)) if n_obs else 0
        return (
            "AssumptionCheckResult(\n"
            f"  Normality: JB(p={self.jarque_bera_pvalue:.3f}, {decision(self.jarque_bera_pvalue)}); "
            f"Shapiro/AD(p={self.shapiro_pvalue:.3f}, {decision(self.shapiro_pvalue)})\n"
            f"  Homoscedasticity: BP(p={self.breusch_pagan_pvalue:.3f}, {decision(self.breusch_pagan_pvalue)})\n"
            f"  Autocorrelation: Durbin-Watson={self.durbin_watson:.2f} ({dw_status})\n"
            f"  Collinearity: cond#={self.condition_number:.2f}, max_vif={max_vif:.2f}\n"
            f"  Influence: max_cook={float(np.max(self.cooks_distance)):.3f}, cooks>4/n={cooks_exceed}\n"
            ")"
        )


@dataclass(frozen=True)
class RegressionResult:
    """Packaged OLS fit, metrics, and diagnostics for reporting."""

    fitted: FittedModel
    design_matrix: pd.DataFrame
    y: pd.Series
    metrics: MetricsResult
    assumptions: AssumptionCheckResult
    residuals: pd.Series
    predictions: pd.Series

    @property
    def model(self) -> sm.regression.linear_model.RegressionResultsWrapper:
        """The underlying statsmodels results object."""
        return self.fitted.results

    @property
    def fitted_values(self) -> pd.Series:
        """Alias for predictions aligned with ``residuals``."""
        return self.predictions

    @property
    def vif(self) -> pd.DataFrame:
        """Variance-inflation factors as a tidy DataFrame."""
        return self.assumptions.vif.rename_axis("term").reset_index(name="vif")

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_residuals_vs_fitted(self, **kwargs: object) -> Axes:
        """Residuals vs fitted values; a curved smooth hints at missing terms, a funnel at heteroscedasticity."""
        from wine_tlbx.plotting.regression_plots import plot_residuals_vs_fitted  # noqa: PLC0415

        return plot_residuals_vs_fitted(self, **kwargs)

    def plot_scale_location(self, **kwargs: object) -> Axes:
        from wine_tlbx.plotting.regression_plots import plot_scale_location  # noqa: PLC0415

        return plot_scale_location(self, **kwargs)

    def plot_qq(self, **kwargs: object) -> Axes:
        from wine_tlbx.plotting.regression_plots import plot_qq  # noqa: PLC0415

        return plot_qq(self, **kwargs)

    def plot_residual_order(self, **kwargs: object) -> Axes:
        """Residuals in row order; runs or waves indicate autocorrelation (compare Durbin-Watson)."""
        from wine_tlbx.plotting.regression_plots import plot_residual_order  # noqa: PLC0415

        return plot_residual_order(self, **kwargs)

    def plot_residual_diags(
        self,
        predictors: list[str] | None = None,
        *,
        max_cols: int = 3,
        figsize: tuple[int, int] = (12, 10),
    ) -> tuple[Figure, Figure | None, Figure]:
        """Plot the standard residual diagnostics suite.

        Returns the 2x2 grid (residuals vs fitted, scale-location, QQ, residuals
        in row order), an optional residuals-vs-predictor grid, and the
        statsmodels influence plot.
        """
        from wine_tlbx.plotting.regression_plots import (  # noqa: PLC0415
            plot_qq,
            plot_residual_order,
            plot_residuals_vs_fitted,
            plot_scale_location,
        )

        fig_main, axes = plt.subplots(2, 2, figsize=figsize)
        plot_residuals_vs_fitted(self, ax=axes[0, 0])
        plot_scale_location(self, ax=axes[0, 1])
        plot_qq(self, ax=axes[1, 0])
        plot_residual_order(self, ax=axes[1, 1])
        fig_main.tight_layout()

        all_preds = [c for c in self.design_matrix.columns if c != INTERCEPT]
        preds_to_plot = all_preds if predictors is None else [p for p in predictors if p in all_preds]
        fig_pred: Figure | None = None
        if preds_to_plot:
            n_cols = max(1, max_cols)
            n_rows = int(np.ceil(len(preds_to_plot) / n_cols))
            fig_pred, pred_axes = plt.subplots(n_rows, n_cols, figsize=(4 * n_cols, 3 * n_rows))
            axes_list = np.atleast_1d(pred_axes).ravel()
            for ax, pred in zip(axes_list, preds_to_plot, strict=False):
                sns.scatterplot(x=self.design_matrix[pred], y=self.residuals, ax=ax, alpha=0.45)
                ax.axhline(0, color="grey", linewidth=1)
                ax.set_title(f"Residuals vs {pred}")
            for ax in axes_list[len(preds_to_plot) :]:
                ax.set_visible(False)
            fig_pred.tight_layout()

        fig_influence = influence_plot(self.model, criterion="cooks")
        return fig_main, fig_pred, fig_influence


def design_matrix_from_model(fitted: FittedModel) -> pd.DataFrame:
    """Return the design matrix of a fit with readable term labels as columns."""
    model = fitted.results.model
    row_labels = getattr(getattr(model, "data", None), "row_labels", None)
    labels = fitted._label_by_exog_name()  # noqa: SLF001
    columns = [labels.get(name, name) for name in model.exog_names]
    return pd.DataFrame(model.exog, columns=columns, index=row_labels)


def compute_vif(design_matrix: pd.DataFrame) -> pd.Series:
    r"""Compute VIF per regressor (intercept excluded).

    :math:`VIF_j = \frac{1}{1 - R_j^2}`, where :math:`R_j^2` comes from regressing
    column :math:`j` on all other columns. A single regressor has VIF 1.0.
    Interaction columns are usually strongly collinear with their main effects.
    """
    x = design_matrix.drop(columns=[INTERCEPT], errors="ignore")
    if x.shape[1] == 0:
        return pd.Series(dtype=float)
    if x.shape[1] == 1:
        return pd.Series({x.columns[0]: 1.0})
    exog = sm.add_constant(x.to_numpy(), has_constant="add")
    return pd.Series(
        {col: float(variance_inflation_factor(exog, idx + 1)) for idx, col in enumerate(x.columns)},
    )


def compute_cv_scores(
    design_matrix: pd.DataFrame,
    y: pd.Series,
    *,
    cv_folds: int,
    shuffle: bool = False,
    random_state: int | None = None,
) -> list[float]:
    """Cross-validated RMSE scores of the same design refit with scikit-learn."""
    has_intercept = INTERCEPT in design_matrix.columns
    lr = LinearRegression(fit_intercept=not has_intercept)
    splitter = KFold(n_splits=cv_folds, shuffle=shuffle, random_state=(random_state if shuffle else None))
    scores = cross_val_score(
        lr,
        design_matrix,
        y,
        cv=splitter,
        scoring="neg_root_mean_squared_error",
        error_score="raise",
    )
    return [float(s) for s in -np.asarray(scores)]


def compute_metrics(
    fitted: FittedModel,
    y_true: pd.Series,
    y_pred: pd.Series,
    design_matrix: pd.DataFrame,
    *,
    cv_folds: int | None = None,
    shuffle_cv: bool = False,
    random_state: int | None = None,
) -> MetricsResult:
    """Compute in-sample fit, information criteria, and optional K-fold CV RMSE."""
    cv_scores: list[float] | None = None
    cv_rmse: float | None = None
    if cv_folds and cv_folds > 1:
        cv_scores = compute_cv_scores(
            design_matrix,
            y_true,
            cv_folds=cv_folds,
            shuffle=shuffle_cv,
            random_state=random_state,
        )
        cv_rmse = float(np.mean(cv_scores))

    return MetricsResult(
        r2=float(r2_score(y_true, y_pred)),
        adj_r2=fitted.rsquared_adj,
        rmse=float(np.sqrt(mean_squared_error(y_true, y_pred))),
        mae=float(mean_absolute_error(y_true, y_pred)),
        aic=fitted.aic,
        bic=fitted.bic,
        loglik=float(fitted.results.llf),
        n_obs=fitted.nobs,
        cv_scores=cv_scores,
        cv_rmse=cv_rmse,
    )


def compute_assumptions(fitted: FittedModel, design_matrix: pd.DataFrame) -> AssumptionCheckResult:
    """Run autocorrelation, normality, heteroscedasticity, collinearity, and influence checks."""
    resid = pd.Series(fitted.results.resid, index=design_matrix.index)

    jb_stat, jb_pvalue, _, _ = jarque_bera(resid)

    if resid.shape[0] > _SHAPIRO_MAX_N:
        # Shapiro-Wilk warns above 5k; fall back to Anderson-Darling.
        shapiro_stat, shapiro_pvalue = sm_diagnostic.normal_ad(resid)
    else:
        shapiro_stat, shapiro_pvalue = stats.shapiro(resid)

    if design_matrix.shape[1] > 1:
        bp_stat, bp_pvalue, _, _ = sm_diagnostic.het_breuschpagan(resid, design_matrix.to_numpy())
    else:
        bp_stat, bp_pvalue = float("nan"), float("nan")

    influence = fitted.results.get_influence()

    return AssumptionCheckResult(
        durbin_watson=float(durbin_watson(resid)),
        jarque_bera_statistic=float(jb_stat),
        jarque_bera_pvalue=float(jb_pvalue),
        shapiro_statistic=float(shapiro_stat),
        shapiro_pvalue=float(shapiro_pvalue),
        breusch_pagan_statistic=float(bp_stat),
        breusch_pagan_pvalue=float(bp_pvalue),
        condition_number=float(np.linalg.cond(design_matrix.to_numpy())),
        vif=compute_vif(design_matrix),
        leverage=np.asarray(influence.hat_matrix_diag),
        cooks_distance=np.asarray(influence.cooks_distance[0]),
    )


def diagnose(
    fitted: FittedModel,
    *,
    cv_folds: int | None = None,
    shuffle_cv: bool = False,
    random_state: int | None = None,
) -> RegressionResult:
    """Compute the full diagnostics bundle for an already-fitted model."""
    design_matrix = design_matrix_from_model(fitted)
    predictions = pd.Series(np.asarray(fitted.results.fittedvalues), index=design_matrix.index)
    residuals = pd.Series(np.asarray(fitted.results.resid), index=design_matrix.index)
    y = pd.Series(fitted.results.model.endog, index=design_matrix.index, name=fitted.spec.outcome)

    metrics = compute_metrics(
        fitted,
        y,
        predictions,
        design_matrix,
        cv_folds=cv_folds,
        shuffle_cv=shuffle_cv,
        random_state=random_state,
    )
    return RegressionResult(
        fitted=fitted,
        design_matrix=design_matrix,
        y=y,
        metrics=metrics,
        assumptions=compute_assumptions(fitted, design_matrix),
        residuals=residuals,
        predictions=predictions,
    )


__all__ = [
    "INTERCEPT",
    "AssumptionCheckResult",
    "FittedModel",
    "MetricsResult",
    "RegressionResult",
    "compute_assumptions",
    "compute_metrics",
    "compute_vif",
    "design_matrix_from_model",
    "diagnose",
    "fit_ols_terms",
    "fit_standardized_model",
    "standardized_coefficients",
]
