"""
Test Suite for Rule Model
==========================

Tests for predict_row and RulePHModel.
"""

import pytest
import numpy as np
import pandas as pd

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from beverage_ph.rules import RULES, DEFAULT_PH, RulePHModel, predict_row


def make_row(**overrides):
    """Row that matches none of the rules unless overridden."""
    row = {
        'Carb Volume': 5.0,
        'Carb Pressure': 60.0,
        'Balling': 5.0,
        'Density': 1.2,
        'Oxygen Filler': 0.01,
        'Temperature': 60.0,
    }
    row.update({key.replace('_', ' '): value for key, value in overrides.items()})
    return row


class TestPredictRow:
    """Tests for single-row prediction."""

    def test_rule_1(self):
        """Test high carb volume and pressure gives 7.2."""
        row = {
            'Carb Volume': 6.0, 'Carb Pressure': 75, 'Balling': 5,
            'Density': 1.2, 'Oxygen Filler': 0.01, 'Temperature': 60,
        }
        assert predict_row(row) == 7.2

    def test_rule_2(self):
        """Test low balling and density gives 8.5 when rule 1 does not fire."""
        row = {
            'Carb Volume': 4.0, 'Balling': 2, 'Density': 0.8,
            'Oxygen Filler': 0.01, 'Temperature': 60,
        }
        # Carb Pressure is absent: rule 1 stops at its first clause
        assert predict_row(row) == 8.5

    def test_rule_3(self):
        """Test high oxygen filler gives 7.9."""
        assert predict_row(make_row(Oxygen_Filler=0.05)) == 7.9

    def test_rule_4(self):
        """Test warm temperature with carb volume above 5.4 gives 7.5."""
        assert predict_row(make_row(Temperature=67, Carb_Volume=5.45)) == 7.5

    def test_default(self):
        """Test a row matching no rule gets the default."""
        assert predict_row(make_row()) == DEFAULT_PH == 8.2

    def test_first_match_wins(self):
        """Test a row satisfying rules 1 and 2 gets the rule 1 value."""
        row = make_row(Carb_Volume=6.0, Carb_Pressure=75, Balling=2, Density=0.8)

        assert RULES[0].matches(row)
        assert RULES[1].matches(row)
        assert predict_row(row) == 7.2

    def test_thresholds_are_strict(self):
        """Test values equal to a threshold do not satisfy it."""
        assert predict_row(make_row(Carb_Volume=5.5, Carb_Pressure=75)) == DEFAULT_PH
        assert predict_row(make_row(Oxygen_Filler=0.03)) == DEFAULT_PH
        assert predict_row(make_row(Temperature=66, Carb_Volume=5.45)) == DEFAULT_PH

    def test_pure(self):
        """Test repeated calls give the same answer."""
        row = make_row(Oxygen_Filler=0.05, Temperature=70)
        assert [predict_row(row) for _ in range(5)] == [7.9] * 5

    def test_accepts_series(self):
        """Test a pandas Series works as the row."""
        row = pd.Series(make_row(Balling=2.5, Density=0.95))
        assert predict_row(row) == 8.5


class TestRulePHModel:
    """Tests for table-wide prediction."""

    @pytest.fixture
    def random_rows(self):
        """Rows spread around every threshold."""
        rng = np.random.default_rng(7)
        n = 500
        return pd.DataFrame({
            'Carb Volume': rng.uniform(5.0, 6.0, n),
            'Carb Pressure': rng.uniform(60, 80, n),
            'Balling': rng.uniform(1.0, 5.0, n),
            'Density': rng.uniform(0.7, 1.3, n),
            'Oxygen Filler': rng.uniform(0.0, 0.06, n),
            'Temperature': rng.uniform(62, 70, n),
        })

    def test_matches_row_wise(self, random_rows):
        """Test vectorised predictions equal predict_row on every row."""
        expected = random_rows.apply(predict_row, axis=1).to_numpy()
        predicted = RulePHModel().predict(random_rows)

        np.testing.assert_array_equal(predicted, expected)

    def test_scenarios(self):
        """Test the documented scenarios through the table interface."""
        df = pd.DataFrame([
            make_row(Carb_Volume=6.0, Carb_Pressure=75),
            make_row(Carb_Volume=4.0, Balling=2, Density=0.8),
            make_row(Carb_Volume=6.0, Carb_Pressure=75, Balling=2, Density=0.8),
            make_row(),
        ])
        assert RulePHModel().predict(df).tolist() == [7.2, 8.5, 7.2, 8.2]

    def test_empty_table(self):
        """Test an empty table gives an empty prediction array."""
        df = pd.DataFrame(columns=list(make_row()))
        assert RulePHModel().predict(df).shape == (0,)

    def test_predict_series(self, random_rows):
        """Test the Series output is named and aligned."""
        series = RulePHModel().predict_series(random_rows)

        assert series.name == 'Rule_PH'
        assert series.index.equals(random_rows.index)

    def test_rule_hits(self, random_rows):
        """Test each row is counted for exactly one rule."""
        model = RulePHModel()
        hits = model.rule_hits(random_rows)
        predicted = model.predict(random_rows)

        assert sum(hits.values()) == len(random_rows)
        assert hits['default'] == int((predicted == DEFAULT_PH).sum())
        assert hits['high carbonation'] == int((predicted == 7.2).sum())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
