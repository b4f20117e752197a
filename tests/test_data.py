"""Tests for column definitions, loading, views, and standardization."""

import inspect

import numpy as np
import pandas as pd
import pytest

from wine_tlbx.data import WineQualityDataset, WQCol
from wine_tlbx.data.base_dataset import BaseDataset
from wine_tlbx.data.utils import complete_cases, describe_columns, require_numeric_columns, standardize_frame
from wine_tlbx.errors import DegenerateColumn, InvalidInput


def test_column_enum_uses_verbatim_names() -> None:
    """Enum values are the header names of the UCI files, spaces included."""
    assert WQCol.VOLATILE_ACIDITY == "volatile acidity"
    assert WQCol.TARGET == WQCol.QUALITY == "quality"
    assert len(WQCol.numeric_columns()) == 12
    assert WQCol.TARGET not in WQCol.feature_columns(exclude_target=True)
    assert WQCol.default_predictors() == ["pH", "volatile acidity", "alcohol"]
    assert WQCol.VOLATILE_ACIDITY.pretty_name
    assert WQCol.ALCOHOL.unit


# ------------------------------------------------------------------ standardization
def test_standardize_frame_uses_sample_standard_deviation() -> None:
    df = pd.DataFrame({"a": [1.0, 2.0, 3.0, 4.0], "b": [10.0, 0.0, 5.0, 5.0]})
    z = standardize_frame(df)

    assert np.allclose(z.mean(), 0.0)
    assert np.allclose(z.std(ddof=1), 1.0)
    assert z.loc[0, "a"] == pytest.approx((1.0 - 2.5) / np.std([1, 2, 3, 4], ddof=1))
    assert df.loc[0, "a"] == 1.0


def test_standardize_frame_rejects_constant_column() -> None:
    df = pd.DataFrame({"a": [1.0, 2.0, 3.0], "residual sugar": [2.0, 2.0, 2.0]})
    with pytest.raises(DegenerateColumn, match="residual sugar"):
        standardize_frame(df)


def test_standardize_frame_rejects_single_row_and_text() -> None:
    with pytest.raises(DegenerateColumn):
        standardize_frame(pd.DataFrame({"a": [1.0]}))
    with pytest.raises(InvalidInput):
        standardize_frame(pd.DataFrame({"a": [1.0, 2.0], "colour": ["red", "white"]}))


# ------------------------------------------------------------------ validation helpers
def test_require_numeric_columns_rejects_booleans_and_missing() -> None:
    df = pd.DataFrame({"a": [1.0, 2.0], "flag": [True, False]})

    assert require_numeric_columns(df, ["a"]) == ["a"]
    with pytest.raises(InvalidInput):
        require_numeric_columns(df, ["flag"])
    with pytest.raises(InvalidInput, match="not found"):
        require_numeric_columns(df, ["A"])


def test_complete_cases_selects_and_drops_rows() -> None:
    df = pd.DataFrame({"a": [1, 2, np.nan], "b": [1.0, np.nan, 3.0], "c": [np.nan] * 3})

    frame = complete_cases(df, ["a"])
    assert frame.columns.tolist() == ["a"]
    assert len(frame) == 2
    assert frame["a"].dtype == float

    with pytest.raises(InvalidInput, match="No complete cases"):
        complete_cases(df, ["a", "c"])


def test_describe_columns_counts_missing_values() -> None:
    df = pd.DataFrame({"a": [1.0, np.nan, 3.0], "name": ["x", "y", "z"]})
    summary = describe_columns(df)

    assert summary.index.tolist() == ["a"]
    assert summary.loc["a", "count"] == 2
    assert summary.loc["a", "missing"] == 1
    assert summary.loc["a", "mean"] == pytest.approx(2.0)


# ------------------------------------------------------------------ loading
def test_from_csv_detects_semicolon_delimiter(wine_csv) -> None:
    ds = WineQualityDataset.from_csv(csv_path=wine_csv)

    assert ds.df.columns.tolist() == ["fixed acidity", "volatile acidity", "pH", "alcohol", "quality"]
    assert ds.df["volatile acidity"].dtype == float
    assert ds.df["pH"].isna().sum() == 1


def test_from_csv_reads_comma_files(tmp_path, main_effects_df) -> None:
    path = tmp_path / "wine.csv"
    main_effects_df.to_csv(path, index=False)

    ds = WineQualityDataset.from_csv(csv_path=path)

    assert len(ds.df) == len(main_effects_df)
    assert set(ds.df.columns) == set(main_effects_df.columns)


def test_from_csv_requires_outcome_column(tmp_path) -> None:
    path = tmp_path / "no_quality.csv"
    pd.DataFrame({"pH": [3.1, 3.2], "alcohol": [9.5, 10.1]}).to_csv(path, sep=";", index=False)

    with pytest.raises(InvalidInput, match="quality"):
        WineQualityDataset.from_csv(csv_path=path)


def test_from_csv_coerces_unparsable_entries_and_drops_missing_target(tmp_path) -> None:
    path = tmp_path / "messy.csv"
    path.write_text("pH;alcohol;quality\n3.1;9.5;5\n3.2;n/a;6\n3.3;10.0;\n")

    ds = WineQualityDataset.from_csv(csv_path=path, sep=";")

    assert len(ds.df) == 2
    assert ds.df["alcohol"].isna().sum() == 1
    assert ds.df.index.tolist() == [0, 1]


# ------------------------------------------------------------------ views
def test_analyzer_view_puts_target_first_and_drops_incomplete_rows(wine_csv) -> None:
    ds = WineQualityDataset.from_csv(csv_path=wine_csv)
    view = ds.analyzer_view(predictors=ds.default_predictors())

    assert view.numeric_cols == ["quality", "pH", "volatile acidity", "alcohol"]
    assert view.target_col == "quality"
    assert view.feature_names == ["pH", "volatile acidity", "alcohol"]
    assert len(view.df) == len(ds.df) - 1
    assert view.pretty_by_col["volatile acidity"] == WQCol.VOLATILE_ACIDITY.pretty_name


def test_standardized_view_and_dataset(main_effects_df) -> None:
    ds = WineQualityDataset(df=main_effects_df)

    view = ds.analyzer_view(predictors=["alcohol"], standardized=True)
    assert view.is_standardized
    assert np.allclose(view.df.std(ddof=1), 1.0)

    assert np.allclose(ds.df_standardized.mean(), 0.0)
    assert ds.df["alcohol"].mean() > 5


def test_view_rejects_unknown_columns(main_effects_df) -> None:
    ds = WineQualityDataset(df=main_effects_df)
    with pytest.raises(InvalidInput):
        ds.view(columns=["quality", "sulphates"])


def test_dataset_requires_loaded_frame() -> None:
    with pytest.raises(ValueError, match="not loaded"):
        _ = WineQualityDataset().df


def test_pretty_frame_and_metadata(main_effects_df) -> None:
    ds = WineQualityDataset(df=main_effects_df)

    assert "Volatile Acidity" in ds.df_pretty.columns
    assert ds.get_pretty_names(["alcohol", "mystery_col"]) == ["Alcohol", "Mystery Col"]
    assert WQCol.QUALITY.dtype_name == "int64"


def test_views_store_plain_column_names(main_effects_df) -> None:
    """Enum members passed in by the dataset API come out as plain strings."""
    ds = WineQualityDataset(df=main_effects_df)
    view = ds.analyzer_view(predictors=[WQCol.PH, WQCol.ALCOHOL])

    assert type(view.target_col) is str
    assert all(type(col) is str for col in view.numeric_cols)
    assert view.feature_names == ["pH", "alcohol"]


def test_from_csv_is_keyword_only_on_every_dataset() -> None:
    base_params = inspect.signature(BaseDataset.from_csv).parameters
    concrete_params = inspect.signature(WineQualityDataset.from_csv).parameters

    assert base_params["csv_path"].kind is inspect.Parameter.KEYWORD_ONLY
    assert concrete_params["csv_path"].kind is inspect.Parameter.KEYWORD_ONLY
    assert base_params["csv_path"].default is None
