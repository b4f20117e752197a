"""Column validation and standardization helpers shared by datasets and analyzers."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from wine_tlbx.errors import DegenerateColumn, InvalidInput


def require_numeric_columns(df: pd.DataFrame, columns: Iterable[str]) -> list[str]:
    """Check that every requested column exists and is numeric.

    Column names are matched verbatim (case and whitespace sensitive).

    Returns:
        The requested columns as a list, in the given order.

    Raises:
        InvalidInput: If a column is missing or has a non-numeric dtype.
    """
    columns = list(columns)
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise InvalidInput(f"Columns not found in dataset: {missing}. Available: {df.columns.tolist()}")
    non_numeric = [
        col for col in columns if not pd.api.types.is_numeric_dtype(df[col]) or pd.api.types.is_bool_dtype(df[col])
    ]
    if non_numeric:
        raise InvalidInput(f"Columns must be numeric: {non_numeric}")
    return columns


def complete_cases(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Select ``columns`` and drop rows with a missing value in any of them.

    Raises:
        InvalidInput: If a column is missing or non-numeric, or no complete row remains.
    """
    columns = list(dict.fromkeys(require_numeric_columns(df, columns)))
    frame = df.loc[:, columns].dropna(axis=0, how="any").astype(float)
    if frame.empty:
        raise InvalidInput(f"No complete cases left for columns {columns}.")
    return frame


def standardize_frame(df: pd.DataFrame) -> pd.DataFrame:
    r"""Replace every column by its z-score.

    :math:`z = (x - \bar{x}) / s` where :math:`s` is the *sample* standard
    deviation (``ddof=1``), so coefficients of a model fitted on the result are
    directly comparable across predictors.

    Raises:
        InvalidInput: If a column is non-numeric.
        DegenerateColumn: If a column has zero or undefined standard deviation.
    """
    require_numeric_columns(df, df.columns)
    std = df.std(ddof=1)
    degenerate = std.index[~(std > 0)].tolist()
    if degenerate:
        raise DegenerateColumn(f"Cannot standardize zero-variance columns: {degenerate}")
    return df.sub(df.mean()).div(std)


def describe_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Per-column summary used for exploratory checks.

    Returns:
        DataFrame indexed by column with ``count``, ``missing``, ``mean``,
        ``std``, ``min``, and ``max``.
    """
    numeric = df.select_dtypes(include=["number"])
    return pd.DataFrame(
        {
            "count": numeric.count(),
            "missing": numeric.isna().sum(),
            "mean": numeric.mean(),
            "std": numeric.std(ddof=1),
            "min": numeric.min(),
            "max": numeric.max(),
        },
    ).rename_axis("column")
