"""Correlation analysis visualization functions."""

import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.figure import Figure

from wine_tlbx.analysis.collinearity_analyzer import CollinearityResult


def plot_correlation_heatmap(
    result: CollinearityResult,
    figsize: tuple[int, int] = (8, 7),
    **kwargs: object,
) -> Figure:
    """Plot the annotated correlation heatmap of outcome and predictors."""
    fig, ax = plt.subplots(figsize=figsize)

    label_map = {col: result.pretty_by_col.get(col, col) for col in result.matrix.columns}

    sns.heatmap(
        result.matrix.rename(index=label_map, columns=label_map),
        annot=True,
        fmt=".2f",
        cmap="coolwarm",
        vmin=-1,
        vmax=1,
        ax=ax,
        square=True,
        cbar_kws={"shrink": 0.8},
        **kwargs,  # type: ignore[arg-type]
    )
    ax.set_xticklabels(ax.get_xticklabels(), rotation=45, ha="right", rotation_mode="anchor")
    ax.tick_params(axis="y", rotation=0)
    ax.set_title("Correlation Heatmap")
    fig.tight_layout()

    return fig


def plot_target_correlations(
    result: CollinearityResult,
    *,
    ax: plt.Axes | None = None,
) -> plt.Axes:
    """Bar chart of each predictor's correlation with the outcome.

    Raises:
        ValueError: If the result carries no target correlations.
    """
    if result.target_correlations is None:
        raise ValueError("No target correlations available; build the view with a target column.")

    ax = ax or plt.gca()
    data = result.target_correlations.assign(
        label=lambda d: d["feature"].map(lambda f: result.pretty_by_col.get(f, f)),
    )
    sns.barplot(data=data, x="correlation", y="label", hue="label", palette="coolwarm", legend=False, ax=ax)
    ax.axvline(0, color="grey", linewidth=1)
    ax.set_xlim(-1, 1)
    ax.set_xlabel("Pearson correlation with target")
    ax.set_ylabel("")
    ax.set_title("Correlation with target")
    return ax
