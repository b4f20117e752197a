"""Column enum base class and per-column metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class ColumnMetadata:
    """Static description of one dataset column.

    ``name`` is the header exactly as it appears in the file; formulas and
    DataFrame lookups use it verbatim, spaces included.
    """

    name: str
    dtype: str
    pretty_name: str
    unit: str = ""


class BaseColumn(StrEnum):
    """Enum of the columns of one dataset; member values are the raw header names.

    Concrete enums set ``TARGET`` to the outcome column and provide
    :meth:`metadata` and :meth:`numeric_columns`.
    """

    TARGET: str

    def metadata(self) -> ColumnMetadata:
        raise NotImplementedError(f"{type(self).__name__} does not define column metadata")

    @classmethod
    def numeric_columns(cls) -> list[str]:
        raise NotImplementedError(f"{cls.__name__} does not list its numeric columns")

    @classmethod
    def feature_columns(cls, *, exclude_target: bool = False) -> list[str]:
        """Numeric columns usable as predictors, optionally without the outcome."""
        return [col for col in cls.numeric_columns() if not (exclude_target and col == cls.TARGET)]

    @property
    def pretty_name(self) -> str:
        return self.metadata().pretty_name

    @property
    def dtype_name(self) -> str:
        return self.metadata().dtype

    @property
    def unit(self) -> str:
        """Measurement unit, empty for dimensionless columns such as ``pH``."""
        return self.metadata().unit
