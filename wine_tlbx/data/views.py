"""Task-specific views over dataset content."""

from collections.abc import Mapping
from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class DatasetView:
    """Immutable snapshot of dataset data and related metadata.

    Attributes:
        df: Complete-case dataframe slice with the selected columns.
        pretty_by_col: Mapping from column names to display-friendly labels.
        numeric_cols: Ordered list of numeric column names present in ``df``.
        target_col: Optional name of the outcome variable used for analysis.
        is_standardized: Indicates if numeric columns have been z-scored.
    """

    df: pd.DataFrame
    """Dataframe slice containing the relevant columns."""
    pretty_by_col: Mapping[str, str]
    """Mapping from column names to display-friendly labels."""
    numeric_cols: list[str]
    target_col: str | None = None
    is_standardized: bool | None = None
    """Indicates if numeric columns have been standardized (zero mean, unit sample variance)."""

    @property
    def features(self) -> pd.DataFrame:
        """Return view over numeric columns other than the target."""
        cols = [c for c in (self.numeric_cols or self.df.columns.tolist()) if c != self.target_col]
        return self.df.loc[:, cols]

    @property
    def feature_names(self) -> list[str]:
        """Names of the numeric non-target columns, in view order."""
        return self.features.columns.tolist()
