"""
Schema Module
=============

Column names and the expected layout of the beverage measurements sheet.

All other modules refer to columns through the constants defined here
instead of repeating string literals.
"""

from dataclasses import dataclass, field
from typing import List


# =============================================================================
# Column Names
# =============================================================================

CARB_VOLUME = "Carb Volume"
CARB_PRESSURE = "Carb Pressure"
BALLING = "Balling"
DENSITY = "Density"
OXYGEN_FILLER = "Oxygen Filler"
TEMPERATURE = "Temperature"
PH = "PH"

# Prediction columns
RULE_PH = "Rule_PH"
LM_PH = "LM_PH"


# =============================================================================
# Observation Table Schema
# =============================================================================

@dataclass(frozen=True)
class ObservationSchema:
    """
    Schema definition for the observation table.

    Only the columns used by the models are required; the sheet may carry
    any number of additional operational columns.
    """
    # Target variable
    target_column: str = PH

    # Inputs of the rule model
    rule_features: List[str] = field(default_factory=lambda: [
        CARB_VOLUME,
        CARB_PRESSURE,
        BALLING,
        DENSITY,
        OXYGEN_FILLER,
        TEMPERATURE,
    ])

    # Inputs of the linear baseline
    linear_features: List[str] = field(default_factory=lambda: [
        CARB_VOLUME,
        BALLING,
        OXYGEN_FILLER,
    ])

    @property
    def required_columns(self) -> List[str]:
        """Columns that must be present and numeric, target last."""
        columns = list(self.rule_features)
        for col in self.linear_features:
            if col not in columns:
                columns.append(col)
        return columns + [self.target_column]


# Output layout of the prediction export
PREDICTION_COLUMNS = [PH, RULE_PH, LM_PH]

# Default instance
OBSERVATION_SCHEMA = ObservationSchema()
