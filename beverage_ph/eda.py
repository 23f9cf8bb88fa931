"""
Exploratory Data Analysis (EDA) Module
=======================================

Describes the distribution of the pH target.

Functions:
    - target_skewness: Third standardized moment of the target
    - summarize_target: Descriptive statistics of the target
    - plot_target_distribution: Histogram with KDE
    - generate_eda_report: Full EDA report for the cleaned table
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional

import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
from scipy import stats

from .exceptions import DataError
from .schema import PH

logger = logging.getLogger(__name__)


def _present_values(series: pd.Series) -> np.ndarray:
    values = pd.to_numeric(series, errors='coerce').dropna().to_numpy(dtype=float)
    if len(values) < 2:
        raise DataError(
            f"Column '{series.name}' needs at least 2 values, found {len(values)}"
        )
    return values


def target_skewness(series: pd.Series) -> float:
    """
    Compute the skewness (third standardized moment) of a column.

    Args:
        series: Target values

    Returns:
        Population skewness; 0.0 for a constant column

    Raises:
        DataError: If fewer than 2 values are present
    """
    values = _present_values(series)
    if np.allclose(values, values[0]):
        return 0.0
    return float(stats.skew(values, bias=True))


def summarize_target(series: pd.Series) -> Dict[str, float]:
    """
    Descriptive statistics for the target column.

    Args:
        series: Target values

    Returns:
        Dictionary of count, mean, std, quartiles, skew and kurtosis
    """
    values = pd.Series(_present_values(series))
    return {
        "count": int(values.count()),
        "mean": float(values.mean()),
        "std": float(values.std()),
        "min": float(values.min()),
        "25%": float(values.quantile(0.25)),
        "50%": float(values.quantile(0.50)),
        "75%": float(values.quantile(0.75)),
        "max": float(values.max()),
        "skew": target_skewness(series),
        "kurtosis": float(stats.kurtosis(values, bias=True)) if values.nunique() > 1 else 0.0,
    }


def plot_target_distribution(
    series: pd.Series,
    figsize: tuple = (8, 5),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Histogram with KDE of the target, annotated with mean and median.

    Args:
        series: Target values
        figsize: Figure size
        save_path: Path to save the figure (optional)

    Returns:
        Matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)

    sns.histplot(series.dropna(), kde=True, ax=ax, bins=40, alpha=0.7)

    mean_val = series.mean()
    median_val = series.median()
    ax.axvline(mean_val, color='red', linestyle='--', label=f'Mean: {mean_val:.3f}')
    ax.axvline(median_val, color='green', linestyle='--', label=f'Median: {median_val:.3f}')

    ax.set_title(f'{series.name} Distribution (skew={target_skewness(series):.3f})',
                 fontsize=12, fontweight='bold')
    ax.legend(fontsize=8)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Distribution plot saved to {save_path}")

    return fig


def generate_eda_report(
    df: pd.DataFrame,
    target_column: str = PH,
    output_dir: str = "reports/figures/",
    save_figures: bool = False
) -> Dict[str, Any]:
    """
    Generate the EDA report for the target column.

    Args:
        df: Cleaned observation table
        target_column: Column to analyze
        output_dir: Directory to save figures
        save_figures: Whether to render and save the distribution plot

    Returns:
        Dictionary containing skewness, statistics and figure file names
    """
    logger.info("=" * 60)
    logger.info("STARTING EXPLORATORY DATA ANALYSIS")
    logger.info("=" * 60)

    series = df[target_column]
    report = {
        "target": target_column,
        "skewness": target_skewness(series),
        "statistics": summarize_target(series),
        "figures": []
    }

    if save_figures:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{target_column.lower()}_distribution.png"
        plot_target_distribution(series, save_path=str(output_dir / filename))
        report["figures"].append(filename)
        plt.close('all')

    logger.info(f"Skewness of {target_column}: {report['skewness']:.4f}")
    logger.info("=" * 60)

    return report


def print_eda_summary(report: Dict[str, Any]) -> None:
    """
    Print the target statistics to console.

    Args:
        report: Dictionary from generate_eda_report
    """
    print("\n" + "=" * 50)
    print(f"TARGET DISTRIBUTION: {report['target']}")
    print("=" * 50)
    for name, value in report['statistics'].items():
        print(f"  {name:<10} {value:>12.4f}")

    skew = report['skewness']
    if abs(skew) < 0.5:
        shape = "approximately symmetric"
    elif skew < 0:
        shape = "left-skewed"
    else:
        shape = "right-skewed"
    print(f"\nSkewness {skew:.4f}: {shape}")
    print("=" * 50 + "\n")
