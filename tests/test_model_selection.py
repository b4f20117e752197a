"""Tests for nested F-tests and hierarchical backward elimination."""

import pandas as pd
import pytest
from scipy import stats

from wine_tlbx.analysis import model_selection
from wine_tlbx.analysis.model_selection import (
    BackwardEliminationSelector,
    SelectionConfig,
    backward_elimination,
    compare_models,
    compare_nested,
)
from wine_tlbx.analysis.ols_helper import fit_ols_terms
from wine_tlbx.analysis.terms import ModelSpec, Term
from wine_tlbx.data import WineQualityDataset
from wine_tlbx.errors import InvalidInput, NotNested, Unidentifiable


PREDICTORS = ["pH", "volatile acidity", "alcohol"]
MAIN_EFFECTS = {Term.of(p) for p in PREDICTORS}


# ------------------------------------------------------------------ compare_nested
def test_compare_matches_textbook_f_statistic(noisy_df) -> None:
    """F = ((RSS_r - RSS_f) / df_diff) / (RSS_f / df_f) and p is its upper tail."""
    full = fit_ols_terms(noisy_df, ModelSpec.full("quality", PREDICTORS, max_order=2))
    reduced = fit_ols_terms(noisy_df, ModelSpec.main_effects("quality", PREDICTORS))

    comparison = compare_nested(reduced, full, alpha=0.05)

    df_diff = full.spec.n_params - reduced.spec.n_params
    f_expected = ((reduced.ssr - full.ssr) / df_diff) / (full.ssr / full.df_resid)
    assert comparison.df_diff == df_diff == 3
    assert comparison.f_statistic == pytest.approx(f_expected, rel=1e-8)
    assert comparison.p_value == pytest.approx(stats.f.sf(f_expected, df_diff, full.df_resid), rel=1e-6)
    assert comparison.significant == (comparison.p_value < 0.05)
    assert set(comparison.dropped_terms) == set(full.spec.terms_of_order(2))


def test_compare_model_with_itself_is_not_nested(noisy_df) -> None:
    fitted = fit_ols_terms(noisy_df, ModelSpec.main_effects("quality", PREDICTORS))
    with pytest.raises(NotNested):
        compare_nested(fitted, fitted)


def test_compare_in_wrong_direction_is_not_nested(noisy_df) -> None:
    small = fit_ols_terms(noisy_df, ModelSpec.main_effects("quality", ["alcohol"]))
    big = fit_ols_terms(noisy_df, ModelSpec.main_effects("quality", PREDICTORS))

    compare_nested(small, big)
    with pytest.raises(NotNested):
        compare_nested(big, small)


def test_compare_non_subset_terms_is_not_nested(noisy_df) -> None:
    a = fit_ols_terms(noisy_df, ModelSpec.main_effects("quality", ["pH", "alcohol"]))
    b = fit_ols_terms(noisy_df, ModelSpec.main_effects("quality", ["volatile acidity", "alcohol"]))
    with pytest.raises(NotNested):
        compare_nested(a, b)


def test_compare_on_different_rows_is_not_nested(noisy_df) -> None:
    full = fit_ols_terms(noisy_df, ModelSpec.main_effects("quality", PREDICTORS))
    reduced = fit_ols_terms(noisy_df.iloc[10:], ModelSpec.main_effects("quality", ["alcohol"]))
    with pytest.raises(NotNested, match="different rows"):
        compare_nested(reduced, full)


def test_compare_on_shifted_rows_of_equal_count_is_not_nested(noisy_df) -> None:
    """Equal observation counts are not enough; the fits must share their rows."""
    full = fit_ols_terms(noisy_df.iloc[:100], ModelSpec.main_effects("quality", PREDICTORS))
    reduced = fit_ols_terms(noisy_df.iloc[20:120], ModelSpec.main_effects("quality", ["alcohol"]))

    assert reduced.nobs == full.nobs
    with pytest.raises(NotNested, match="different rows"):
        compare_nested(reduced, full)


def test_identical_fit_gives_p_value_one(main_effects_df) -> None:
    """Dropping a term the outcome does not depend on leaves RSS unchanged."""
    full = fit_ols_terms(main_effects_df, ModelSpec.full("quality", PREDICTORS))
    reduced = fit_ols_terms(main_effects_df, full.spec.without(Term.of(*PREDICTORS)))

    comparison = compare_nested(reduced, full)

    assert comparison.f_statistic >= 0.0
    assert comparison.p_value == pytest.approx(1.0, abs=1e-6)
    assert not comparison.significant


# ------------------------------------------------------------------ backward_elimination
def test_only_main_effects_survive(main_effects_df) -> None:
    """Three-way term removed first, then all two-way terms in one batch; main effects kept."""
    result = backward_elimination(main_effects_df, outcome="quality", predictors=PREDICTORS)

    assert len(result.full.spec.terms) == 7
    assert result.final.spec.term_set == MAIN_EFFECTS

    order3 = result.steps_at_order(3)
    assert [step.term for step in order3] == [Term.of(*PREDICTORS)]
    assert order3[0].accepted

    order2 = result.steps_at_order(2)
    assert len(order2) == 3
    assert all(step.accepted for step in order2)

    order1 = result.steps_at_order(1)
    assert len(order1) == 3
    assert all(step.comparison.significant for step in order1)
    assert not any(step.accepted for step in order1)

    assert [step.order for step in result.steps] == [3, 2, 2, 2, 1, 1, 1]
    assert set(result.removed_terms) == set(result.full.spec.terms) - MAIN_EFFECTS
    assert set(result.retained_terms) == MAIN_EFFECTS


def test_level_candidates_share_one_baseline(main_effects_df) -> None:
    """Every candidate at an order is tested against the same model, then removed together."""
    result = backward_elimination(main_effects_df, outcome="quality", predictors=PREDICTORS)

    baselines = {step.comparison.full for step in result.steps_at_order(2)}
    assert len(baselines) == 1
    (baseline,) = baselines
    assert baseline == result.full.spec.without(Term.of(*PREDICTORS))
    for step in result.steps_at_order(2):
        assert step.comparison.reduced == baseline.without(step.term)

    main_baselines = {step.comparison.full for step in result.steps_at_order(1)}
    assert main_baselines == {result.final.spec}


def test_significant_interaction_is_retained(interaction_df) -> None:
    result = backward_elimination(interaction_df, outcome="quality", predictors=PREDICTORS)

    assert result.final.spec.term_set == MAIN_EFFECTS | {Term.of("pH", "alcohol")}
    decisions = {step.term: step.accepted for step in result.steps_at_order(2)}
    assert decisions == {
        Term.of("pH", "volatile acidity"): True,
        Term.of("pH", "alcohol"): False,
        Term.of("volatile acidity", "alcohol"): True,
    }


def test_rerunning_gives_the_same_result(interaction_df) -> None:
    first = backward_elimination(interaction_df, outcome="quality", predictors=PREDICTORS)
    second = backward_elimination(interaction_df, outcome="quality", predictors=PREDICTORS)

    assert first.final.spec == second.final.spec
    pd.testing.assert_frame_equal(first.summary_table(), second.summary_table())


def test_single_predictor_has_only_the_main_effect_level(main_effects_df) -> None:
    result = backward_elimination(main_effects_df, outcome="quality", predictors=["alcohol"])

    assert len(result.steps) == 1
    assert result.steps[0].order == 1
    assert result.final.spec == ModelSpec.main_effects("quality", ["alcohol"])
    assert result.removed_terms == []


def test_unidentifiable_before_any_comparison(main_effects_df, monkeypatch) -> None:
    calls: list[object] = []

    def counting_compare(*args, **kwargs):
        calls.append(args)
        return compare_nested(*args, **kwargs)

    monkeypatch.setattr(model_selection, "compare_nested", counting_compare)
    with pytest.raises(Unidentifiable):
        backward_elimination(main_effects_df.head(6), outcome="quality", predictors=PREDICTORS)
    assert calls == []


def test_drop_policy_removes_irrelevant_main_effect(wine_frame_factory) -> None:
    df = wine_frame_factory(coefs={"pH": 0.0, "volatile acidity": -1.2, "alcohol": 0.35})

    kept = backward_elimination(df, outcome="quality", predictors=PREDICTORS)
    dropped = backward_elimination(
        df,
        outcome="quality",
        predictors=PREDICTORS,
        config=SelectionConfig(main_effect_policy="drop"),
    )

    assert kept.final.spec.term_set == MAIN_EFFECTS
    assert dropped.final.spec.term_set == {Term.of("volatile acidity"), Term.of("alcohol")}
    assert [step.accepted for step in dropped.steps_at_order(1)] == [True, False, False]


def test_max_order_limits_the_full_model(main_effects_df) -> None:
    result = backward_elimination(
        main_effects_df,
        outcome="quality",
        predictors=PREDICTORS,
        config=SelectionConfig(max_order=2),
    )

    assert result.full.spec.max_order == 2
    assert result.steps_at_order(3) == []
    assert result.final.spec.term_set == MAIN_EFFECTS


def test_incomplete_rows_are_dropped_once_for_all_fits(main_effects_df) -> None:
    df = main_effects_df.copy()
    df.loc[[1, 2, 3], "alcohol"] = float("nan")

    result = backward_elimination(df, outcome="quality", predictors=PREDICTORS)

    assert result.full.nobs == result.final.nobs == len(df) - 3


def test_invalid_inputs_raise(main_effects_df) -> None:
    with pytest.raises(InvalidInput):
        backward_elimination(main_effects_df, outcome="quality", predictors=[])
    with pytest.raises(InvalidInput):
        backward_elimination(main_effects_df, outcome="quality", predictors=["pH", "pH"])
    with pytest.raises(InvalidInput):
        backward_elimination(main_effects_df, outcome="quality", predictors=["sulphates"])
    with pytest.raises(InvalidInput):
        backward_elimination(main_effects_df.iloc[0:0], outcome="quality", predictors=PREDICTORS)


@pytest.mark.parametrize(
    "kwargs",
    [{"alpha": 0.0}, {"alpha": 1.0}, {"max_order": 0}, {"main_effect_policy": "sometimes"}],
)
def test_selection_config_validation(kwargs: dict[str, object]) -> None:
    with pytest.raises(InvalidInput):
        SelectionConfig(**kwargs)


def test_summary_table_lists_every_comparison(main_effects_df) -> None:
    result = backward_elimination(main_effects_df, outcome="quality", predictors=PREDICTORS)
    table = result.summary_table()

    assert table.columns.tolist() == [
        "order",
        "term",
        "f_statistic",
        "p_value",
        "df_diff",
        "significant",
        "accepted",
        "reduced_rhs",
        "baseline_rhs",
    ]
    assert len(table) == len(result.steps)
    assert table.loc[0, "term"] == "pH:volatile acidity:alcohol"
    assert (table["df_diff"] == 1).all()
    assert table["p_value"].between(0.0, 1.0).all()


def test_compare_models_orders_by_aic(main_effects_df) -> None:
    result = backward_elimination(main_effects_df, outcome="quality", predictors=PREDICTORS)
    table = compare_models({"full": result.full, "final": result.final})

    assert table["model"].tolist() == ["final", "full"]
    assert table["aic"].is_monotonic_increasing
    assert table.loc[table["model"] == "final", "n_terms"].item() == 3


# ------------------------------------------------------------------ selector
def test_selector_requires_fit_before_result(main_effects_df) -> None:
    ds = WineQualityDataset(df=main_effects_df)
    selector = ds.make_backward_elimination_selector()

    assert selector.predictors == ["pH", "volatile acidity", "alcohol"]
    with pytest.raises(ValueError, match="fit"):
        selector.result()


def test_selector_runs_on_dataset_view(interaction_df) -> None:
    ds = WineQualityDataset(df=interaction_df)
    selector = ds.make_backward_elimination_selector(config=SelectionConfig(alpha=0.01))

    result = selector.fit().result()

    assert isinstance(selector, BackwardEliminationSelector)
    assert result.config.alpha == 0.01
    assert Term.of("pH", "alcohol") in result.final.spec.term_set
