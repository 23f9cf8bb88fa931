"""
Model Evaluation Module
=======================

RMSE of each model against the observed pH, and the comparison table.

No model is selected here; both numbers are reported side by side.
"""

import logging
import json
from pathlib import Path
from typing import Dict, Any, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import mean_squared_error

from .exceptions import DataError

logger = logging.getLogger(__name__)


def rmse(observed, predicted) -> float:
    """
    Root-mean-squared error between observations and predictions.

    Args:
        observed: Observed target values
        predicted: Predicted values, same length

    Returns:
        sqrt(mean((observed - predicted)^2))

    Raises:
        DataError: If the inputs are empty or differ in length
    """
    y_true = np.asarray(observed, dtype=float)
    y_pred = np.asarray(predicted, dtype=float)

    if y_true.size == 0:
        raise DataError("Cannot compute RMSE of an empty set of observations")
    if y_true.shape != y_pred.shape:
        raise DataError(
            f"Observed and predicted lengths differ: {y_true.shape} vs {y_pred.shape}"
        )

    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def compare_models(observed, predictions: Dict[str, Any]) -> pd.DataFrame:
    """
    Tabulate the RMSE of each model against the same observations.

    Args:
        observed: Observed target values
        predictions: Mapping from model name to predicted values

    Returns:
        DataFrame with columns 'Model' and 'RMSE', in the order given
    """
    rows = [
        {'Model': name, 'RMSE': rmse(observed, predicted)}
        for name, predicted in predictions.items()
    ]
    return pd.DataFrame(rows, columns=['Model', 'RMSE'])


def evaluate_models(
    observed,
    predictions: Dict[str, Any],
    metrics_path: Optional[str] = None
) -> Dict[str, Any]:
    """
    Run the evaluation and optionally save the comparison to JSON.

    Args:
        observed: Observed target values
        predictions: Mapping from model name to predicted values
        metrics_path: Path of the JSON metrics file (optional)

    Returns:
        Dictionary containing the comparison table and per-model RMSE
    """
    logger.info("=" * 60)
    logger.info("STARTING MODEL EVALUATION")
    logger.info("=" * 60)

    comparison = compare_models(observed, predictions)
    metrics = {
        'rmse': dict(zip(comparison['Model'], comparison['RMSE'].astype(float))),
        'n_samples': int(len(np.asarray(observed))),
    }

    if metrics_path:
        metrics_path = Path(metrics_path)
        metrics_path.parent.mkdir(parents=True, exist_ok=True)
        with open(metrics_path, 'w') as f:
            json.dump(metrics, f, indent=2)
        logger.info(f"Metrics saved to {metrics_path}")

    for name, value in metrics['rmse'].items():
        logger.info(f"  {name} RMSE: {value:.6f}")
    logger.info("=" * 60)

    return {
        'comparison': comparison,
        'metrics': metrics,
        'metrics_file': str(metrics_path) if metrics_path else None,
    }


def print_evaluation_report(comparison: pd.DataFrame) -> None:
    """
    Print the comparison table to console.

    Args:
        comparison: DataFrame from compare_models
    """
    print("\n" + "=" * 50)
    print("MODEL COMPARISON")
    print("=" * 50)
    print(f"{'Model':<20} {'RMSE':<12}")
    print("-" * 50)

    for _, row in comparison.iterrows():
        print(f"{row['Model']:<20} {row['RMSE']:<12.6f}")

    print("=" * 50 + "\n")
