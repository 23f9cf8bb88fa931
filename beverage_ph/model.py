"""
Linear Model Module
===================

Ordinary least-squares baseline for pH using scikit-learn LinearRegression.

Features:
    - In-sample fit on the full cleaned table
    - Rank check of the design matrix before fitting
    - Model persistence (save/load)
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional, Sequence
from datetime import datetime

import numpy as np
import pandas as pd
import joblib
from sklearn.linear_model import LinearRegression

from .exceptions import NumericError
from .schema import OBSERVATION_SCHEMA, PH, LM_PH

logger = logging.getLogger(__name__)


class LinearPHModel:
    """
    PH ≈ b0 + b1*(Carb Volume) + b2*Balling + b3*(Oxygen Filler).

    Fits on every row given and is evaluated on the same rows.
    """

    def __init__(
        self,
        features: Optional[Sequence[str]] = None,
        target_column: str = PH
    ):
        """
        Initialize the model.

        Args:
            features: Predictor columns (default: the schema's linear features)
            target_column: Column to predict
        """
        self.features = list(features or OBSERVATION_SCHEMA.linear_features)
        self.target_column = target_column

        self.model: Optional[LinearRegression] = None
        self.training_info: Dict[str, Any] = {}
        self._is_fitted = False

    def _design_matrix(self, df: pd.DataFrame) -> np.ndarray:
        return df[self.features].to_numpy(dtype=float)

    @staticmethod
    def check_rank(X: np.ndarray) -> int:
        """
        Verify that [1 | X] has full column rank.

        Args:
            X: Predictor array of shape (n_samples, n_features)

        Returns:
            Rank of the design matrix including the intercept column

        Raises:
            NumericError: If the design matrix is rank-deficient
        """
        design = np.column_stack([np.ones(len(X)), X])
        rank = int(np.linalg.matrix_rank(design))
        if rank < design.shape[1]:
            raise NumericError(
                f"Design matrix is rank-deficient (rank {rank} < {design.shape[1]} columns); "
                f"predictors are collinear or there are too few rows ({len(X)})"
            )
        return rank

    def fit(self, df: pd.DataFrame) -> 'LinearPHModel':
        """
        Fit ordinary least squares on the table.

        Args:
            df: Cleaned observation table containing features and target

        Returns:
            Self for method chaining

        Raises:
            NumericError: If the predictors are perfectly collinear
        """
        X = self._design_matrix(df)
        y = df[self.target_column].to_numpy(dtype=float)

        logger.info(f"Fitting OLS on {X.shape[0]} rows with features {self.features}")
        self.check_rank(X)

        self.model = LinearRegression()
        self.model.fit(X, y)

        self.training_info = {
            'n_samples': X.shape[0],
            'n_features': X.shape[1],
            'r2': float(self.model.score(X, y)),
            'trained_at': datetime.now().isoformat(),
        }
        self._is_fitted = True

        logger.info(f"OLS coefficients: {self.coefficients()}")
        return self

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        """
        Predict pH for every row.

        Args:
            df: Table containing the feature columns

        Returns:
            Predictions array of shape (n_samples,)
        """
        if not self._is_fitted:
            raise ValueError("Model must be trained before prediction. Call fit() first.")

        return self.model.predict(self._design_matrix(df))

    def predict_series(self, df: pd.DataFrame) -> pd.Series:
        """Predictions as a Series aligned with df, named LM_PH."""
        return pd.Series(self.predict(df), index=df.index, name=LM_PH)

    def coefficients(self) -> Dict[str, float]:
        """Intercept and slopes keyed by feature name."""
        if not self._is_fitted:
            raise ValueError("Model must be trained first.")

        coefs = {'intercept': float(self.model.intercept_)}
        coefs.update({
            name: float(value)
            for name, value in zip(self.features, self.model.coef_)
        })
        return coefs

    def save(self, filepath: str) -> None:
        """
        Save the fitted model to disk.

        Args:
            filepath: Path to save the model
        """
        if not self._is_fitted:
            raise ValueError("Cannot save untrained model.")

        state = {
            'model': self.model,
            'features': self.features,
            'target_column': self.target_column,
            'training_info': self.training_info,
        }

        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(state, filepath)
        logger.info(f"Model saved to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> 'LinearPHModel':
        """
        Load a fitted model from disk.

        Args:
            filepath: Path to the saved model

        Returns:
            Loaded LinearPHModel instance
        """
        state = joblib.load(filepath)

        model = cls(features=state['features'], target_column=state['target_column'])
        model.model = state['model']
        model.training_info = state['training_info']
        model._is_fitted = True

        logger.info(f"Model loaded from {filepath}")
        return model


def train_linear_model(
    df: pd.DataFrame,
    config: Dict[str, Any],
    save_path: Optional[str] = None
) -> LinearPHModel:
    """
    Fit the linear baseline using configuration parameters.

    Args:
        df: Cleaned observation table
        config: Configuration dictionary
        save_path: Path to save the fitted model (optional)

    Returns:
        Fitted LinearPHModel
    """
    model_config = config.get('model', {})

    model = LinearPHModel(
        features=model_config.get('features'),
        target_column=model_config.get('target', PH)
    )
    model.fit(df)

    if save_path:
        model.save(save_path)

    return model


def print_model_summary(model: LinearPHModel) -> None:
    """
    Print the fitted coefficients.

    Args:
        model: Fitted model instance
    """
    print("\n" + "=" * 50)
    print("LINEAR MODEL SUMMARY")
    print("=" * 50)
    print("Model Type: LinearRegression (ordinary least squares)")
    print(f"Target: {model.target_column}")
    print("\nCoefficients:")
    for name, value in model.coefficients().items():
        print(f"  - {name}: {value:.6f}")

    if model.training_info:
        print(f"\nSamples: {model.training_info.get('n_samples', 'N/A')}")
        print(f"In-sample R²: {model.training_info.get('r2', float('nan')):.4f}")

    print("=" * 50 + "\n")
