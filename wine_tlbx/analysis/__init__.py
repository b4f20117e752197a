"""Analysis modules: OLS fitting, nested-model selection, and exploratory checks."""

from .collinearity_analyzer import CollinearityAnalyzer, CollinearityResult
from .model_selection import (
    BackwardEliminationSelector,
    ComparisonResult,
    EliminationStep,
    SelectionConfig,
    SelectionResult,
    backward_elimination,
    compare_models,
    compare_nested,
)
from .ols_helper import (
    FittedModel,
    RegressionResult,
    diagnose,
    fit_ols_terms,
    fit_standardized_model,
    standardized_coefficients,
)
from .terms import ModelSpec, Term


__all__ = [
    "BackwardEliminationSelector",
    "CollinearityAnalyzer",
    "CollinearityResult",
    "ComparisonResult",
    "EliminationStep",
    "FittedModel",
    "ModelSpec",
    "RegressionResult",
    "SelectionConfig",
    "SelectionResult",
    "Term",
    "backward_elimination",
    "compare_models",
    "compare_nested",
    "diagnose",
    "fit_ols_terms",
    "fit_standardized_model",
    "standardized_coefficients",
]
