"""Model terms and model specifications for formula-based OLS.

A :class:`Term` is a main effect (one variable) or an interaction (several
variables). A :class:`ModelSpec` is an outcome plus an ordered set of terms;
specs are compared by term-set inclusion, which is what "nested" means for the
F-tests in :mod:`wine_tlbx.analysis.model_selection`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import combinations

from wine_tlbx.errors import InvalidInput


def quote_name(name: str) -> str:
    """Quote a column name for Patsy so spaces and symbols are kept atomic (``Q('volatile acidity')``)."""
    return f"Q({str(name)!r})"


@dataclass(frozen=True, eq=False)
class Term:
    """Main effect or interaction over one or more base variables.

    Two terms are equal when they involve the same set of variables, whatever
    the order in which the names were given.
    """

    variables: tuple[str, ...]

    def __post_init__(self) -> None:
        # Column enum members are stored by value.
        object.__setattr__(self, "variables", tuple(str(v) for v in self.variables))
        if not self.variables:
            raise InvalidInput("A term needs at least one variable.")
        if len(set(self.variables)) != len(self.variables):
            raise InvalidInput(f"Repeated variable in term {self.variables}.")

    @classmethod
    def of(cls, *variables: str) -> Term:
        return cls(tuple(variables))

    @property
    def order(self) -> int:
        """Number of variables in the term (1 for a main effect)."""
        return len(self.variables)

    @property
    def is_main_effect(self) -> bool:
        return self.order == 1

    @property
    def label(self) -> str:
        """Readable name, e.g. ``pH:volatile acidity``."""
        return ":".join(self.variables)

    @property
    def formula(self) -> str:
        """Patsy representation, e.g. ``Q('pH'):Q('volatile acidity')``."""
        return ":".join(quote_name(v) for v in self.variables)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        return frozenset(self.variables) == frozenset(other.variables)

    def __hash__(self) -> int:
        return hash(frozenset(self.variables))

    def __repr__(self) -> str:
        return f"Term({self.label!r})"


@dataclass(frozen=True)
class ModelSpec:
    """Outcome variable plus an ordered, duplicate-free tuple of terms."""

    outcome: str
    terms: tuple[Term, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "outcome", str(self.outcome))
        deduped = tuple(dict.fromkeys(self.terms))
        if len(deduped) != len(self.terms):
            object.__setattr__(self, "terms", deduped)
        if any(self.outcome in term.variables for term in self.terms):
            raise InvalidInput(f"Outcome '{self.outcome}' cannot also be a predictor.")

    @classmethod
    def full(cls, outcome: str, predictors: Sequence[str], max_order: int | None = None) -> ModelSpec:
        """Build the maximal model: all predictors and every interaction up to ``max_order``.

        With ``n`` predictors and ``max_order=n`` this yields :math:`2^n - 1` terms,
        ordered by interaction order and then by predictor position.

        Raises:
            InvalidInput: If no predictors are given, a predictor is repeated, or
                ``max_order`` is outside ``[1, n]``.
        """
        predictors = list(predictors)
        if not predictors:
            raise InvalidInput("At least one predictor is required.")
        if len(set(predictors)) != len(predictors):
            raise InvalidInput(f"Duplicate predictors: {predictors}")
        max_order = len(predictors) if max_order is None else max_order
        if not 1 <= max_order <= len(predictors):
            raise InvalidInput(f"max_order must be between 1 and {len(predictors)}, got {max_order}.")
        terms = [Term(combo) for k in range(1, max_order + 1) for combo in combinations(predictors, k)]
        return cls(outcome=outcome, terms=tuple(terms))

    @classmethod
    def main_effects(cls, outcome: str, predictors: Sequence[str]) -> ModelSpec:
        """Additive model with one main effect per predictor."""
        return cls.full(outcome, predictors, max_order=1)

    @property
    def term_set(self) -> frozenset[Term]:
        return frozenset(self.terms)

    @property
    def variables(self) -> list[str]:
        """Base variables used by any term, in order of first appearance."""
        return list(dict.fromkeys(v for term in self.terms for v in term.variables))

    @property
    def max_order(self) -> int:
        """Highest interaction order present (0 for the intercept-only model)."""
        return max((term.order for term in self.terms), default=0)

    @property
    def n_params(self) -> int:
        """Number of estimated coefficients, intercept included (numeric predictors only)."""
        return len(self.terms) + 1

    def terms_of_order(self, order: int) -> list[Term]:
        return [term for term in self.terms if term.order == order]

    def without(self, *terms: Term) -> ModelSpec:
        """Return a new spec with ``terms`` removed (terms not present are ignored)."""
        drop = set(terms)
        return ModelSpec(outcome=self.outcome, terms=tuple(t for t in self.terms if t not in drop))

    def is_nested_in(self, other: ModelSpec, *, strict: bool = True) -> bool:
        """Whether this spec's terms are a (strict) subset of ``other``'s, for the same outcome."""
        if self.outcome != other.outcome:
            return False
        if strict:
            return self.term_set < other.term_set
        return self.term_set <= other.term_set

    @property
    def rhs(self) -> str:
        """Readable right-hand side, e.g. ``pH + alcohol + pH:alcohol``."""
        return " + ".join(term.label for term in self.terms) if self.terms else "1"

    @property
    def formula(self) -> str:
        """Patsy formula with quoted names."""
        rhs = " + ".join(term.formula for term in self.terms) if self.terms else "1"
        return f"{quote_name(self.outcome)} ~ {rhs}"

    def __str__(self) -> str:
        return f"{self.outcome} ~ {self.rhs}"


def unique_terms(terms: Iterable[Term]) -> list[Term]:
    """Drop repeated terms (same variable set) while keeping first-seen order."""
    return list(dict.fromkeys(terms))


__all__ = ["ModelSpec", "Term", "quote_name", "unique_terms"]
