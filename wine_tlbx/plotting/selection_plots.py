"""Visualization of the backward elimination trace."""

from __future__ import annotations

from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns


if TYPE_CHECKING:
    from wine_tlbx.analysis.model_selection import SelectionResult


def plot_elimination_pvalues(
    result: SelectionResult,
    *,
    ax: plt.Axes | None = None,
    log_scale: bool = True,
) -> plt.Axes:
    """Plot the F-test p-value of each tested removal, grouped by interaction order.

    Points below the dashed ``alpha`` line were significant (term kept); the
    marker style shows whether the removal was carried into the next model.
    """
    ax = ax or plt.gca()
    table = result.summary_table().reset_index()
    floor = np.finfo(float).tiny
    table = table.assign(
        p_plot=lambda d: d["p_value"].clip(lower=floor),
        removed=lambda d: d["accepted"].map({True: "removed", False: "kept"}),
        level=lambda d: d["order"].map(lambda o: "main effect" if o == 1 else f"{o}-way"),
    )
    sns.scatterplot(
        data=table,
        x="term",
        y="p_plot",
        hue="level",
        style="removed",
        s=80,
        ax=ax,
    )
    ax.axhline(result.config.alpha, color="tab:red", linestyle="--", linewidth=1, label=f"alpha={result.config.alpha}")
    if log_scale:
        ax.set_yscale("log")
    ax.set_xlabel("Tested term")
    ax.set_ylabel("p-value")
    ax.set_title("Backward elimination: nested F-tests")
    ax.tick_params(axis="x", rotation=45)
    ax.legend(loc="best", fontsize="small")
    return ax
