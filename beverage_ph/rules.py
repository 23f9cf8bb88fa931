"""
Rule Model Module
=================

Threshold-based lookup model for pH.

The rules are evaluated in order and the first one whose clauses all hold
decides the prediction. Rows matching no rule get DEFAULT_PH.
"""

import logging
import operator
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

import numpy as np
import pandas as pd

from .schema import (
    CARB_VOLUME,
    CARB_PRESSURE,
    BALLING,
    DENSITY,
    OXYGEN_FILLER,
    TEMPERATURE,
    RULE_PH,
)

logger = logging.getLogger(__name__)

DEFAULT_PH = 8.2

OPERATORS = {
    '>': operator.gt,
    '<': operator.lt,
}


@dataclass(frozen=True)
class Clause:
    """Single threshold comparison on one column."""
    column: str
    op: str
    threshold: float

    def holds(self, row: Mapping) -> bool:
        return bool(OPERATORS[self.op](row[self.column], self.threshold))

    def mask(self, df: pd.DataFrame) -> np.ndarray:
        return OPERATORS[self.op](df[self.column], self.threshold).to_numpy(dtype=bool)

    def __str__(self) -> str:
        return f"{self.column} {self.op} {self.threshold}"


@dataclass(frozen=True)
class Rule:
    """Conjunction of clauses and the pH it predicts."""
    name: str
    clauses: Tuple[Clause, ...]
    value: float

    def matches(self, row: Mapping) -> bool:
        return all(clause.holds(row) for clause in self.clauses)

    def mask(self, df: pd.DataFrame) -> np.ndarray:
        return np.logical_and.reduce([clause.mask(df) for clause in self.clauses])

    def __str__(self) -> str:
        return " AND ".join(str(c) for c in self.clauses) + f" -> {self.value}"


RULES: Tuple[Rule, ...] = (
    Rule("high carbonation",
         (Clause(CARB_VOLUME, '>', 5.5), Clause(CARB_PRESSURE, '>', 70)), 7.2),
    Rule("low balling and density",
         (Clause(BALLING, '<', 3), Clause(DENSITY, '<', 1)), 8.5),
    Rule("high oxygen filler",
         (Clause(OXYGEN_FILLER, '>', 0.03),), 7.9),
    Rule("warm and carbonated",
         (Clause(TEMPERATURE, '>', 66), Clause(CARB_VOLUME, '>', 5.4)), 7.5),
)


def predict_row(row: Mapping, rules: Tuple[Rule, ...] = RULES, default: float = DEFAULT_PH) -> float:
    """
    Predict pH for a single row.

    Args:
        row: Mapping from column name to value (dict or pandas Series)
        rules: Ordered rules to evaluate
        default: Value when no rule matches

    Returns:
        Value of the first matching rule, or the default
    """
    for rule in rules:
        if rule.matches(row):
            return rule.value
    return default


class RulePHModel:
    """
    Table-wide form of predict_row.

    There is nothing to fit; the class gives both models the same
    predict(df) interface.
    """

    def __init__(self, rules: Tuple[Rule, ...] = RULES, default: float = DEFAULT_PH):
        self.rules = rules
        self.default = default

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        """
        Predict pH for every row of the table.

        Args:
            df: Cleaned observation table

        Returns:
            Array of predictions, one per row
        """
        if df.empty:
            return np.array([], dtype=float)

        conditions = [rule.mask(df) for rule in self.rules]
        choices = [rule.value for rule in self.rules]
        # np.select picks the first true condition, same as predict_row
        return np.select(conditions, choices, default=self.default).astype(float)

    def predict_series(self, df: pd.DataFrame) -> pd.Series:
        """Predictions as a Series aligned with df, named Rule_PH."""
        return pd.Series(self.predict(df), index=df.index, name=RULE_PH)

    def rule_hits(self, df: pd.DataFrame) -> Dict[str, int]:
        """
        Count how many rows each rule decided.

        Args:
            df: Cleaned observation table

        Returns:
            Dictionary mapping rule name (and 'default') to row count
        """
        hits = {}
        decided = np.zeros(len(df), dtype=bool)
        for rule in self.rules:
            matched = rule.mask(df)
            hits[rule.name] = int((matched & ~decided).sum())
            decided |= matched
        hits['default'] = int((~decided).sum())

        logger.info(f"Rule hits: {hits}")
        return hits


def print_rules(rules: Tuple[Rule, ...] = RULES, default: float = DEFAULT_PH) -> None:
    """Print the rule table in evaluation order."""
    print("\nRule Model (first match wins):")
    for i, rule in enumerate(rules, start=1):
        print(f"  {i}. {rule}")
    print(f"  else -> {default}")
