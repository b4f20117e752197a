"""Wine quality toolbox: OLS model selection by hierarchical backward elimination."""

from .errors import DegenerateColumn, InvalidInput, NotNested, Unidentifiable, WineToolboxError


__version__ = "0.1.0"

__all__ = [
    "DegenerateColumn",
    "InvalidInput",
    "NotNested",
    "Unidentifiable",
    "WineToolboxError",
    "__version__",
]
