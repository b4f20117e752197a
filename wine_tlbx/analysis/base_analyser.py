"""Common interface of the toolbox analyzers."""

from abc import ABC, abstractmethod
from typing import Any, Self


class BaseAnalyser(ABC):
    """Analyzer contract used by the dataset factories.

    An analyzer is built from a :class:`~wine_tlbx.data.views.DatasetView`,
    does its computation in :meth:`fit`, and hands out an immutable result
    object from :meth:`result`. Result objects carry the plotting shortcuts;
    the figures themselves are drawn by :mod:`wine_tlbx.plotting`.
    """

    @abstractmethod
    def fit(self) -> Self:
        """Run the computation on the view and return ``self``."""

    @abstractmethod
    def result(self) -> Any:
        """Frozen dataclass with the outputs of :meth:`fit`.

        Raises:
            ValueError: If called before :meth:`fit` where the analyzer needs it.
        """
