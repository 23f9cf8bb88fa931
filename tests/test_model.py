"""
Test Suite for Linear Model
============================

Tests for LinearPHModel and train_linear_model.
"""

import pytest
import numpy as np
import pandas as pd

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from beverage_ph.model import LinearPHModel, train_linear_model
from beverage_ph.exceptions import NumericError


class TestLinearPHModel:
    """Tests for LinearPHModel class."""

    @pytest.fixture
    def exact_data(self):
        """Target is an exact linear function of the three features."""
        rng = np.random.default_rng(0)
        n = 50
        df = pd.DataFrame({
            'Carb Volume': rng.uniform(5.0, 5.8, n),
            'Balling': rng.uniform(1.0, 4.0, n),
            'Oxygen Filler': rng.uniform(0.01, 0.06, n),
        })
        df['PH'] = 1.0 + 2.0 * df['Carb Volume'] - 0.5 * df['Balling'] + 3.0 * df['Oxygen Filler']
        return df

    def test_init(self):
        """Test default features and target."""
        model = LinearPHModel()

        assert model.features == ['Carb Volume', 'Balling', 'Oxygen Filler']
        assert model.target_column == 'PH'
        assert model._is_fitted == False

    def test_recovers_coefficients(self, exact_data):
        """Test OLS recovers the generating coefficients."""
        coefs = LinearPHModel().fit(exact_data).coefficients()

        assert coefs['intercept'] == pytest.approx(1.0, abs=1e-8)
        assert coefs['Carb Volume'] == pytest.approx(2.0, abs=1e-8)
        assert coefs['Balling'] == pytest.approx(-0.5, abs=1e-8)
        assert coefs['Oxygen Filler'] == pytest.approx(3.0, abs=1e-8)

    def test_predict(self, exact_data):
        """Test in-sample predictions reproduce an exact target."""
        model = LinearPHModel().fit(exact_data)
        predictions = model.predict(exact_data)

        assert predictions.shape == (len(exact_data),)
        np.testing.assert_allclose(predictions, exact_data['PH'].to_numpy(), atol=1e-8)

    def test_predict_before_fit(self, exact_data):
        """Test that predict raises error before fit."""
        with pytest.raises(ValueError, match="must be trained"):
            LinearPHModel().predict(exact_data)

    def test_predict_series(self, exact_data):
        """Test the Series output is named LM_PH."""
        series = LinearPHModel().fit(exact_data).predict_series(exact_data)
        assert series.name == 'LM_PH'

    def test_collinear_features(self, exact_data):
        """Test perfectly collinear predictors are rejected."""
        exact_data['Balling'] = 2.0 * exact_data['Carb Volume']

        with pytest.raises(NumericError, match="rank-deficient"):
            LinearPHModel().fit(exact_data)

    def test_constant_feature(self, exact_data):
        """Test a constant predictor is collinear with the intercept."""
        exact_data['Oxygen Filler'] = 0.02

        with pytest.raises(NumericError):
            LinearPHModel().fit(exact_data)

    def test_too_few_rows(self, exact_data):
        """Test fewer rows than parameters is rank-deficient."""
        with pytest.raises(NumericError):
            LinearPHModel().fit(exact_data.head(3))

    def test_check_rank(self):
        """Test the rank includes the intercept column."""
        X = np.array([[1.0, 2.0], [2.0, 1.0], [3.0, 5.0], [4.0, 3.0]])
        assert LinearPHModel.check_rank(X) == 3

    def test_save_load(self, exact_data, tmp_path):
        """Test saving and loading the fitted model."""
        model = LinearPHModel().fit(exact_data)
        path = tmp_path / "models" / "linear_ph.joblib"

        model.save(str(path))
        loaded = LinearPHModel.load(str(path))

        assert loaded.features == model.features
        assert loaded._is_fitted == True
        np.testing.assert_allclose(loaded.predict(exact_data), model.predict(exact_data))

    def test_save_untrained(self, tmp_path):
        """Test an untrained model cannot be saved."""
        with pytest.raises(ValueError, match="untrained"):
            LinearPHModel().save(str(tmp_path / "model.joblib"))


class TestTrainLinearModel:
    """Tests for the train_linear_model function."""

    def test_uses_config(self, observations):
        """Test features and target are read from the config."""
        config = {'model': {'features': ['Carb Volume', 'Balling'], 'target': 'PH'}}
        model = train_linear_model(observations, config)

        assert model.features == ['Carb Volume', 'Balling']
        assert set(model.coefficients()) == {'intercept', 'Carb Volume', 'Balling'}

    def test_defaults(self, observations, tmp_path):
        """Test empty config falls back to defaults and saves when asked."""
        path = tmp_path / "linear_ph.joblib"
        model = train_linear_model(observations, {}, save_path=str(path))

        assert model.features == ['Carb Volume', 'Balling', 'Oxygen Filler']
        assert path.exists()
        assert model.training_info['n_samples'] == len(observations)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
