"""Loading and light preprocessing for the Wine Quality dataset."""

import logging
from pathlib import Path

import pandas as pd

from wine_tlbx.errors import InvalidInput
from wine_tlbx.utils.paths import get_dataset_path

from .base_dataset import BaseDataset
from .wine_quality_columns import WineQualityColumn as Col


logger = logging.getLogger(__name__)


class WineQualityDataset(BaseDataset):
    """Loading and validation for the [Wine Quality dataset](https://archive.ics.uci.edu/dataset/186/wine+quality).

    Column names are used verbatim, so ``"volatile acidity"`` stays a single
    identifier with a space in it.

    **Example workflow**:
    >>> from wine_tlbx.data import WineQualityDataset, WQCol
    >>> ds = WineQualityDataset.from_csv()
    >>> ds.describe_columns()
    >>> collinearity = ds.make_collinearity_analyzer(predictors=ds.default_predictors()).fit().result()
    >>> selection = ds.make_backward_elimination_selector().fit().result()
    >>> selection.final.params
    """

    Col = Col

    @classmethod
    def from_csv(
        cls,
        *,
        csv_path: str | Path | None = None,
        sep: str | None = None,
        drop_missing_target: bool = True,
    ) -> "WineQualityDataset":
        """Load the dataset from a delimited file.

        Args:
            csv_path: Path to the file (defaults to ``winequality-red.csv`` in the data directory)
            sep: Field delimiter. ``None`` sniffs it (the UCI files use ``;``).
            drop_missing_target: If True, drop rows with a missing quality score

        Raises:
            InvalidInput: If the outcome column is absent.
        """
        csv_path = get_dataset_path("wine_quality") if csv_path is None else Path(csv_path)

        if sep is None:
            wq_df = pd.read_csv(csv_path, sep=None, engine="python")
        else:
            wq_df = pd.read_csv(csv_path, sep=sep)
        wq_df = wq_df.pipe(cls._coerce_numeric)

        if Col.TARGET not in wq_df.columns:
            raise InvalidInput(f"Outcome column '{Col.TARGET}' not found in {csv_path}: {wq_df.columns.tolist()}")

        if drop_missing_target:
            wq_df = wq_df.dropna(subset=[Col.TARGET])

        logger.info("Loaded %d rows x %d columns from %s", wq_df.shape[0], wq_df.shape[1], csv_path)
        return cls(df=wq_df.reset_index(drop=True))

    @staticmethod
    def _coerce_numeric(df: pd.DataFrame) -> pd.DataFrame:
        """Convert known wine columns to numbers; unparsable entries become NaN.

        Unknown columns are left untouched so non-numeric extras remain detectable.
        """
        known = [col for col in df.columns if col in Col.numeric_columns()]
        return df.assign(**{col: pd.to_numeric(df[col], errors="coerce") for col in known})

    def default_predictors(self) -> list[str]:
        return Col.default_predictors()
