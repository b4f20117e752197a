"""Test configuration for the wine toolbox."""

from itertools import combinations

import matplotlib
import numpy as np
import pandas as pd
import pytest


matplotlib.use("Agg")

PREDICTORS = ["pH", "volatile acidity", "alcohol"]
OUTCOME = "quality"


def _full_design(df: pd.DataFrame) -> np.ndarray:
    """Intercept, main effects, and every interaction of ``PREDICTORS``."""
    cols = [np.ones(len(df))]
    for k in range(1, len(PREDICTORS) + 1):
        for combo in combinations(PREDICTORS, k):
            cols.append(np.prod(df[list(combo)].to_numpy(), axis=1))
    return np.column_stack(cols)


def _orthogonal_noise(design: np.ndarray, rng: np.random.Generator, scale: float) -> np.ndarray:
    """Noise with exactly zero projection on the columns of ``design``.

    Every model that contains the true signal then has the same residual sum of
    squares, so dropping a term outside the signal gives F = 0 and p = 1.
    """
    noise = rng.normal(0.0, scale, size=design.shape[0])
    coef, *_ = np.linalg.lstsq(design, noise, rcond=None)
    return noise - design @ coef


def make_wine_frame(
    n: int = 300,
    *,
    seed: int = 0,
    coefs: dict[str, float] | None = None,
    interaction: float = 0.0,
    noise: float = 0.5,
) -> pd.DataFrame:
    """Synthetic wine-like data whose outcome depends on main effects (and optionally pH x alcohol)."""
    rng = np.random.default_rng(seed)
    df = pd.DataFrame(
        {
            "pH": rng.normal(3.3, 0.15, n),
            "volatile acidity": rng.normal(0.53, 0.18, n),
            "alcohol": rng.normal(10.4, 1.0, n),
        },
    )
    coefs = coefs if coefs is not None else {"pH": -1.5, "volatile acidity": -1.2, "alcohol": 0.35}
    signal = 5.0 + sum(coef * df[name] for name, coef in coefs.items())
    signal = signal + interaction * (df["pH"] - 3.3) * (df["alcohol"] - 10.4)
    df[OUTCOME] = signal + _orthogonal_noise(_full_design(df), rng, noise)
    return df


@pytest.fixture(scope="session")
def main_effects_df() -> pd.DataFrame:
    """Only the three main effects matter."""
    return make_wine_frame()


@pytest.fixture(scope="session")
def interaction_df() -> pd.DataFrame:
    """Main effects plus a strong pH x alcohol interaction."""
    return make_wine_frame(interaction=2.5)


@pytest.fixture(scope="session")
def noisy_df() -> pd.DataFrame:
    """Plain Gaussian noise (not orthogonalized) for property checks."""
    rng = np.random.default_rng(7)
    n = 120
    df = pd.DataFrame(
        {
            "pH": rng.normal(3.3, 0.15, n),
            "volatile acidity": rng.normal(0.53, 0.18, n),
            "alcohol": rng.normal(10.4, 1.0, n),
        },
    )
    df[OUTCOME] = 5.0 + 0.3 * df["alcohol"] - 1.0 * df["volatile acidity"] + rng.normal(0.0, 0.6, n)
    return df


@pytest.fixture
def wine_csv(tmp_path, main_effects_df):
    """Semicolon-delimited file laid out like the UCI download (extra column, one incomplete row)."""
    df = main_effects_df.assign(**{"fixed acidity": 7.4}).round(6)
    df = df[["fixed acidity", "volatile acidity", "pH", "alcohol", OUTCOME]].copy()
    df.loc[0, "pH"] = np.nan
    path = tmp_path / "winequality-red.csv"
    df.to_csv(path, sep=";", index=False)
    return path


@pytest.fixture
def wine_frame_factory():
    """Build synthetic frames with custom effect sizes."""
    return make_wine_frame
