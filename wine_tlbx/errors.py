"""Error taxonomy for model construction, fitting, and comparison."""


class WineToolboxError(Exception):
    """Base class for all errors raised by the toolbox."""


class InvalidInput(WineToolboxError, ValueError):  # noqa: N818
    """Missing or malformed columns, predictors, or settings."""


class Unidentifiable(WineToolboxError):  # noqa: N818
    """Design matrix is rank-deficient or has no residual degrees of freedom."""


class NotNested(WineToolboxError):  # noqa: N818
    """Comparison requested between models whose term sets are not strictly nested."""


class DegenerateColumn(WineToolboxError):  # noqa: N818
    """Column with zero (or undefined) standard deviation cannot be standardized."""


__all__ = [
    "DegenerateColumn",
    "InvalidInput",
    "NotNested",
    "Unidentifiable",
    "WineToolboxError",
]
