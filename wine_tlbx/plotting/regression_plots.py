"""Residual, influence, and coefficient plots for fitted wine-quality models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from statsmodels.graphics.gofplots import qqplot
from statsmodels.graphics.regressionplots import influence_plot


if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from wine_tlbx.analysis.ols_helper import RegressionResult


def _studentized_residuals(result: RegressionResult) -> np.ndarray:
    return np.asarray(result.model.get_influence().resid_studentized_internal)


def plot_residuals_vs_fitted(
    result: RegressionResult,
    *,
    ax: plt.Axes | None = None,
) -> plt.Axes:
    """Residuals against fitted quality scores, with a LOWESS trend line.

    Drawn with :func:`seaborn.residplot`
    on the OLS residuals contained in ``RegressionResult``. The discrete quality
    score shows up as parallel diagonal bands.
    """
    ax = ax or plt.gca()
    sns.residplot(x=result.fitted_values, y=result.residuals, lowess=True, ax=ax, scatter_kws={"alpha": 0.45})
    ax.set_xlabel("Fitted values")
    ax.set_ylabel("Residuals")
    ax.set_title("Residuals vs Fitted")
    return ax


def plot_scale_location(
    result: RegressionResult,
    *,
    ax: plt.Axes | None = None,
) -> plt.Axes:
    """Spread of the residuals across the fitted range; an upward trend suggests heteroscedasticity."""
    ax = ax or plt.gca()
    stud_resid = _studentized_residuals(result)
    sns.scatterplot(x=result.fitted_values, y=np.sqrt(np.abs(stud_resid)), ax=ax, alpha=0.45, color="tab:orange")
    ax.set_xlabel("Fitted values")
    ax.set_ylabel("sqrt(|studentized residuals|)")
    ax.set_title("Scale-Location")
    return ax


def plot_qq(
    result: RegressionResult,
    *,
    ax: plt.Axes | None = None,
) -> plt.Axes:
    """Normal QQ plot of the internally studentized residuals."""
    ax = ax or plt.gca()
    stud_resid = _studentized_residuals(result)
    qqplot(stud_resid, line="45", fit=True, ax=ax)
    ax.set_title("QQ plot (studentized residuals)")
    return ax


def plot_residual_order(
    result: RegressionResult,
    *,
    ax: plt.Axes | None = None,
) -> plt.Axes:
    """Residuals against row order, annotated with the Durbin-Watson statistic.

    Long runs above or below zero indicate positive autocorrelation; rapid
    alternation indicates negative autocorrelation.
    """
    ax = ax or plt.gca()
    order = np.arange(len(result.residuals))
    ax.plot(order, result.residuals.to_numpy(), marker=".", linestyle="-", linewidth=0.5, alpha=0.6)
    ax.axhline(0, color="tab:red", linewidth=1)
    ax.set_xlabel("Observation order")
    ax.set_ylabel("Residuals")
    ax.set_title(f"Residuals in order (DW={result.assumptions.durbin_watson:.2f})")
    return ax


def plot_influence(
    result: RegressionResult,
    *,
    ax: plt.Axes | None = None,
) -> Figure:
    """Leverage against studentized residuals, bubble size by Cook's distance."""
    fig = influence_plot(result.model, criterion="cooks", ax=ax)
    fig.set_figwidth(8)
    fig.set_figheight(6)
    return fig


def plot_standardized_coefficients(
    betas,
    *,
    ax: plt.Axes | None = None,
    pretty_by_col: dict[str, str] | None = None,
) -> plt.Axes:
    """Horizontal bar chart of standardized (beta) coefficients.

    Args:
        betas: Series indexed by term label, e.g. from
            :func:`~wine_tlbx.analysis.ols_helper.standardized_coefficients`.
        ax: Axes to draw on (defaults to the current axes).
        pretty_by_col: Optional mapping from term labels to display names.
    """
    ax = ax or plt.gca()
    labels = [(pretty_by_col or {}).get(name, name) for name in betas.index]
    colors = ["tab:blue" if value >= 0 else "tab:red" for value in betas.to_numpy()]
    ax.barh(labels, betas.to_numpy(), color=colors)
    ax.axvline(0, color="grey", linewidth=1)
    ax.invert_yaxis()
    ax.set_xlabel("Standardized coefficient (SD of outcome per SD of predictor)")
    ax.set_title("Standardized coefficients")
    return ax
