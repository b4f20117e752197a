"""Exploratory correlation and multicollinearity checks for predictors."""

from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd
import statsmodels.api as sm

from wine_tlbx.data.views import DatasetView

from .base_analyser import BaseAnalyser
from .ols_helper import compute_vif


@dataclass(frozen=True)
class CollinearityResult:
    """Correlation and VIF outputs grouped for plotting and reporting.

    Attributes:
        matrix: Pearson correlation matrix of all columns in the view (target included).
        pretty_by_col: Mapping from raw column names to presentation labels.
        feature_pairs: Predictor pairs with columns `feature_a`, `feature_b`, `correlation`,
            `abs_correlation`, `pair`; sorted by strongest absolute correlation.
        target_correlations: Optional DataFrame with columns `feature`, `correlation`
            for predictor-vs-target correlations (sorted descending).
        vif: Variance inflation factor of each predictor in the additive model.
    """

    matrix: pd.DataFrame
    pretty_by_col: dict[str, str]
    feature_pairs: pd.DataFrame
    vif: pd.Series
    target_correlations: pd.DataFrame | None = None

    @property
    def max_vif(self) -> float:
        return float(self.vif.max()) if not self.vif.empty else float("nan")

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_heatmap(self, **kwargs: object):
        """Plot correlation heatmap using the plotting helper."""
        from wine_tlbx.plotting.correlation_plots import plot_correlation_heatmap  # noqa: PLC0415

        return plot_correlation_heatmap(self, **kwargs)

    def plot_target_correlations(self, **kwargs: object):
        """Plot correlations with the target variable."""
        from wine_tlbx.plotting.correlation_plots import plot_target_correlations  # noqa: PLC0415

        return plot_target_correlations(self, **kwargs)


class CollinearityAnalyzer(BaseAnalyser):
    """Analyzer for pairwise correlations and VIF among predictors.

    Strongly correlated predictors inflate coefficient variances and can make
    individually non-significant terms appear in a jointly significant model
    (suppressor effects), which is worth knowing before reading elimination
    F-tests.

    Example:
        >>> from wine_tlbx.data import WineQualityDataset
        >>> ds = WineQualityDataset.from_csv()
        >>> res = ds.make_collinearity_analyzer(predictors=ds.default_predictors()).fit().result()
        >>> res.vif
        >>> _ = res.plot_heatmap()
    """

    def __init__(self, view: DatasetView):
        """Initialize the analyzer with a dataset view."""
        self._view = view
        self._corr_mat: pd.DataFrame | None = None
        self._vif: pd.Series | None = None

    def get_correlation_matrix(self) -> pd.DataFrame:
        """Compute the Pearson correlation matrix via :meth:`pandas.DataFrame.corr`."""
        if self._corr_mat is None:
            self._corr_mat = self._view.df.corr(numeric_only=True)
        return self._corr_mat

    def get_top_correlated_pairs(self, n: int = 10) -> pd.DataFrame:
        """Return the strongest absolute correlations between predictor pairs (target excluded)."""
        features = self._view.feature_names
        corr_matrix = self.get_correlation_matrix().loc[features, features]
        mask = np.triu(np.ones(corr_matrix.shape, dtype=bool), k=1)

        return (
            corr_matrix.where(mask)
            .melt(ignore_index=False, var_name="feature_b", value_name="correlation")
            .dropna()
            .reset_index()
            .rename(columns={"index": "feature_a"})
            .assign(
                abs_correlation=lambda d: d.correlation.abs(),
                pair=lambda d: d.feature_a + " vs " + d.feature_b,
            )
            .sort_values("abs_correlation", ascending=False)
            .head(n)
            .reset_index(drop=True)
        )

    def get_target_correlations(self) -> pd.DataFrame:
        """Return Pearson correlations between each predictor and the target.

        Raises:
            ValueError: If the view has no target column or it is absent from the data.
        """
        if not self._view.target_col:
            raise ValueError("Dataset view has no target column configured.")

        corr_matrix = self.get_correlation_matrix()
        if self._view.target_col not in corr_matrix.index:
            raise ValueError(f"Target column '{self._view.target_col}' not found in data")

        return (
            corr_matrix.loc[self._view.target_col]
            .drop(self._view.target_col)
            .sort_values(ascending=False)
            .to_frame(name="correlation")
            .assign(feature=lambda d: d.index)
            .reset_index(drop=True)
        )

    def get_vif(self) -> pd.Series:
        """VIF of each predictor in the additive (main effects) design."""
        if self._vif is None:
            design = sm.add_constant(self._view.features.astype(float), has_constant="add")
            self._vif = compute_vif(design.rename(columns={"const": "Intercept"}))
        return self._vif

    def fit(self) -> Self:
        """Compute correlation matrix and VIFs."""
        self.get_correlation_matrix()
        self.get_vif()
        return self

    def result(self, *, top_n_pairs: int = 10) -> CollinearityResult:
        matrix = self.get_correlation_matrix()
        target_corr = (
            self.get_target_correlations() if self._view.target_col and self._view.target_col in matrix.index else None
        )
        return CollinearityResult(
            matrix=matrix,
            pretty_by_col=dict(self._view.pretty_by_col),
            feature_pairs=self.get_top_correlated_pairs(n=top_n_pairs),
            vif=self.get_vif(),
            target_correlations=target_corr,
        )
