"""
Export Module
=============

Writes tables to comma-separated text files.

Output is UTF-8 with a header row, no index column and '\\n' line endings,
so identical input produces byte-identical files. Existing files are
overwritten.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from .schema import PH, RULE_PH, LM_PH, PREDICTION_COLUMNS

logger = logging.getLogger(__name__)


def export_table(
    df: pd.DataFrame,
    output_path: Union[str, Path],
    columns: Optional[List[str]] = None
) -> str:
    """
    Export a table to CSV.

    Args:
        df: Table to write
        output_path: Destination file
        columns: Subset and order of columns to write (default: all)

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df.to_csv(
        output_path,
        columns=columns,
        index=False,
        encoding='utf-8',
        lineterminator='\n'
    )

    logger.info(f"Exported {len(df)} rows to {output_path}")
    return str(output_path)


def read_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a table written by export_table."""
    return pd.read_csv(path, encoding='utf-8')


def build_prediction_table(observed, rule_predictions, lm_predictions) -> pd.DataFrame:
    """
    Combine observed pH and both models' predictions.

    Args:
        observed: Observed PH values
        rule_predictions: Rule model output
        lm_predictions: Linear model output

    Returns:
        DataFrame with columns PH, Rule_PH, LM_PH
    """
    table = pd.DataFrame({
        PH: pd.Series(observed).to_numpy(dtype=float),
        RULE_PH: pd.Series(rule_predictions).to_numpy(dtype=float),
        LM_PH: pd.Series(lm_predictions).to_numpy(dtype=float),
    })
    return table[PREDICTION_COLUMNS]
