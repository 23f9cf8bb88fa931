"""Shared fixtures: synthetic beverage measurement tables."""

import numpy as np
import pandas as pd
import pytest


def make_observations(n_samples: int = 60, seed: int = 42) -> pd.DataFrame:
    """Observation table with the required columns plus a text column."""
    rng = np.random.default_rng(seed)
    df = pd.DataFrame({
        'Brand Code': rng.choice(['A', 'B', 'C', 'D'], size=n_samples),
        'Carb Volume': rng.uniform(5.0, 5.8, n_samples),
        'Carb Pressure': rng.uniform(60, 80, n_samples),
        'Balling': rng.uniform(1.0, 4.0, n_samples),
        'Density': rng.uniform(0.8, 1.3, n_samples),
        'Oxygen Filler': rng.uniform(0.01, 0.06, n_samples),
        'Temperature': rng.uniform(63, 70, n_samples),
        'Hyd Pressure1': rng.uniform(0, 30, n_samples),
    })
    df['PH'] = (
        7.0
        + 0.2 * df['Carb Volume']
        - 0.1 * df['Balling']
        + 2.0 * df['Oxygen Filler']
        + rng.normal(0, 0.05, n_samples)
    )
    return df


@pytest.fixture
def observations():
    """Clean synthetic observation table."""
    return make_observations()


@pytest.fixture
def dirty_observations():
    """Synthetic table with zeros and missing values sprinkled in."""
    df = make_observations()
    df.loc[[0, 5], 'Carb Volume'] = 0.0
    df.loc[[3, 7], 'Balling'] = np.nan
    df.loc[10, 'PH'] = np.nan
    df.loc[12, 'Brand Code'] = None
    return df
