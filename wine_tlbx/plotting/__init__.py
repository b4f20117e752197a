"""Plotting utilities for data visualization."""

from .correlation_plots import plot_correlation_heatmap, plot_target_correlations
from .regression_plots import (
    plot_influence,
    plot_qq,
    plot_residual_order,
    plot_residuals_vs_fitted,
    plot_scale_location,
    plot_standardized_coefficients,
)
from .selection_plots import plot_elimination_pvalues


__all__ = [
    "plot_correlation_heatmap",
    "plot_elimination_pvalues",
    "plot_influence",
    "plot_qq",
    "plot_residual_order",
    "plot_residuals_vs_fitted",
    "plot_scale_location",
    "plot_standardized_coefficients",
    "plot_target_correlations",
]
