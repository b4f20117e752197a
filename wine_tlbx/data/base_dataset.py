"""Base dataset class for all dataset implementations."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd


if TYPE_CHECKING:
    from wine_tlbx.analysis.collinearity_analyzer import CollinearityAnalyzer
    from wine_tlbx.analysis.model_selection import BackwardEliminationSelector, SelectionConfig

from .base_columns import BaseColumn
from .utils import complete_cases, describe_columns, standardize_frame
from .views import DatasetView


class BaseDataset(ABC):
    """Abstract base class for dataset handlers used throughout the toolbox.

    A dataset is read once and treated as immutable: views and standardized
    frames are derived copies.
    """

    Col: type[BaseColumn]

    def __init__(self, df: pd.DataFrame | None = None) -> None:
        """Initialize the base dataset.

        Args:
            df: Pre-loaded and cleaned DataFrame (optional)
        """
        self._df: pd.DataFrame | None = df
        self._df_standardized: pd.DataFrame | None = None

    @classmethod
    @abstractmethod
    def from_csv(cls, *, csv_path: str | Path | None = None, **kwargs: object) -> "BaseDataset":
        """Load the dataset from a delimited file (``None`` resolves the default file in the data directory)."""
        ...

    @property
    def df(self) -> pd.DataFrame:
        """Get the raw DataFrame.

        Raises:
            ValueError: If dataset not loaded
        """
        if self._df is None:
            raise ValueError("Dataset not loaded. Use from_csv() to load data.")
        return self._df

    @property
    def df_pretty(self) -> pd.DataFrame:
        """Get the DataFrame with pretty column names."""
        return self.df.rename(columns={col: self.get_pretty_name(col) for col in self.df.columns})

    @property
    def numeric_cols(self) -> pd.Index:
        """Get numeric column names."""
        return self.df.select_dtypes(include=["number"]).columns

    @property
    def df_standardized(self) -> pd.DataFrame:
        """Get the standardized DataFrame (numeric columns, complete cases).

        X <- (X - mean(X)) / sd(X)
        """
        if self._df_standardized is None:
            self._df_standardized = self.standardize()
        return self._df_standardized

    def standardize(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """Z-score every numeric column with :func:`~wine_tlbx.data.utils.standardize_frame`.

        Rows with missing values are dropped first so all columns are scaled on
        the same observations.

        Raises:
            DegenerateColumn: If a numeric column has zero variance.
        """
        if df is None:
            df = self.df
        numeric = df.select_dtypes(include=["number"]).columns
        return standardize_frame(df.loc[:, numeric].dropna(axis=0, how="any").astype(float))

    def describe_columns(self) -> pd.DataFrame:
        """Return count, missing, mean, std, min, and max for each numeric column."""
        return describe_columns(self.df)

    def get_pretty_names(self, column_names: list[str] | None = None) -> list[str]:
        """Convert multiple column names to pretty names."""
        return [self.get_pretty_name(name) for name in column_names or self.df.columns.to_list()]

    def get_pretty_name(self, column_name: str) -> str:
        """Convert column name to pretty name for visualization."""
        try:
            col_enum = self.Col(column_name)
        except ValueError:
            return column_name.replace("_", " ").title()
        else:
            return str(col_enum.pretty_name)

    def view(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = False,
        target_col: str | None = None,
    ) -> DatasetView:
        """Build an immutable complete-case view for analyzers and plotting layers.

        Args:
            columns: Columns to include in the view (defaults to all numeric columns)
            standardized: Z-score the selected columns after dropping incomplete rows
            target_col: Outcome column reference (defaults to ``Col.TARGET``)

        Raises:
            InvalidInput: If a column is missing or non-numeric.
            DegenerateColumn: If ``standardized`` and a column has zero variance.
        """
        selected_cols = [str(col) for col in columns] if columns is not None else self.numeric_cols.to_list()
        frame = complete_cases(self.df, selected_cols)
        if standardized:
            frame = standardize_frame(frame)

        return DatasetView(
            df=frame,
            pretty_by_col={col: self.get_pretty_name(col) for col in selected_cols},
            numeric_cols=selected_cols,
            target_col=str(target_col or self.Col.TARGET),
            is_standardized=standardized,
        )

    def analyzer_view(
        self,
        predictors: Iterable[str] | None = None,
        standardized: bool = False,
        include_target: bool = True,
    ) -> DatasetView:
        """Build a view with the outcome followed by ``predictors`` (default: all features)."""
        predictors = list(predictors) if predictors is not None else self.Col.feature_columns(exclude_target=True)
        columns = [self.Col.TARGET, *predictors] if include_target else predictors
        return self.view(columns=columns, standardized=standardized, target_col=self.Col.TARGET)

    def make_collinearity_analyzer(
        self,
        predictors: Iterable[str] | None = None,
        include_target: bool = True,
    ) -> "CollinearityAnalyzer":
        """Instantiate a correlation/VIF analyzer configured for this dataset."""
        from wine_tlbx.analysis.collinearity_analyzer import CollinearityAnalyzer

        return CollinearityAnalyzer(self.analyzer_view(predictors=predictors, include_target=include_target))

    def make_backward_elimination_selector(
        self,
        predictors: Iterable[str] | None = None,
        config: "SelectionConfig | None" = None,
    ) -> "BackwardEliminationSelector":
        """Instantiate a hierarchical backward elimination selector for this dataset.

        Example:
            >>> from wine_tlbx.data import WineQualityDataset
            >>> ds = WineQualityDataset.from_csv()
            >>> selection = ds.make_backward_elimination_selector().fit().result()
            >>> selection.summary_table()
            >>> selection.final.spec.rhs

        Args:
            predictors: Base predictors (defaults to ``Col.default_predictors()`` when defined)
            config: Significance level, interaction order limit, and main-effect policy
        """
        from wine_tlbx.analysis.model_selection import BackwardEliminationSelector

        if predictors is None:
            predictors = self.default_predictors()
        return BackwardEliminationSelector(self.analyzer_view(predictors=predictors), config=config)

    def default_predictors(self) -> list[str]:
        """Predictors used when none are given; all features unless the column enum narrows them."""
        return self.Col.feature_columns(exclude_target=True)
