"""
Data Cleaning Module
====================

Handles missing and zero-valued measurements before modelling.

Zero is treated as a "not recorded" sentinel in any numeric column that
shows missing or zero entries. Those zeros become missing, missing
predictor values are filled with the column median, and rows that are
still incomplete are dropped.

Functions:
    - profile_missing: Missing/zero counts per numeric column
    - clean_data: Run the full cleaning step and report on it
"""

import logging
from typing import Dict, Any, Iterable, List, Optional

import pandas as pd
import numpy as np

from .exceptions import DataError
from .schema import PH

logger = logging.getLogger(__name__)


def profile_missing(df: pd.DataFrame) -> pd.DataFrame:
    """
    Count missing and zero entries in every numeric column.

    Args:
        df: Observation table

    Returns:
        DataFrame indexed by column with 'missing', 'zeros' and 'flagged'
    """
    numeric = df.select_dtypes(include=[np.number])
    profile = pd.DataFrame({
        'missing': numeric.isnull().sum(),
        'zeros': (numeric == 0).sum(),
    })
    profile['flagged'] = (profile['missing'] > 0) | (profile['zeros'] > 0)
    return profile


class DataCleaner:
    """
    Zero-as-missing replacement and median imputation.

    The cleaner learns which columns are flagged and the median of each
    numeric predictor column in `fit`, then applies them in `transform`.
    """

    def __init__(
        self,
        target_column: str = PH,
        zero_exempt_columns: Optional[Iterable[str]] = None
    ):
        """
        Initialize the cleaner.

        Args:
            target_column: Column that is never imputed; rows missing it are dropped
            zero_exempt_columns: Columns where zero is a valid measurement
        """
        self.target_column = target_column
        self.zero_exempt_columns = list(zero_exempt_columns or [])

        self.numeric_columns: Optional[List[str]] = None
        self.flagged_columns: Optional[List[str]] = None
        self.medians: Dict[str, float] = {}
        self.profile_: Optional[pd.DataFrame] = None
        self._is_fitted = False

    def _replace_zeros(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.copy()
        for col in self.flagged_columns:
            if col in self.zero_exempt_columns:
                continue
            df[col] = df[col].mask(df[col] == 0)
        return df

    def fit(self, df: pd.DataFrame) -> 'DataCleaner':
        """
        Learn flagged columns and imputation medians.

        Args:
            df: Raw observation table

        Returns:
            Self for method chaining

        Raises:
            DataError: If a numeric column, the target included, has no value left
        """
        self.profile_ = profile_missing(df)
        self.numeric_columns = self.profile_.index.tolist()
        self.flagged_columns = self.profile_.index[self.profile_['flagged']].tolist()

        logger.info(
            f"Flagged {len(self.flagged_columns)} of {len(self.numeric_columns)} "
            f"numeric columns: {self.flagged_columns}"
        )

        # Medians are taken after the zero replacement
        replaced = self._replace_zeros(df)

        self.medians = {}
        for col in self.numeric_columns:
            present = replaced[col].dropna()
            if present.empty:
                raise DataError(f"Column '{col}' has no values; median is undefined")
            if col == self.target_column:
                continue
            self.medians[col] = float(present.median())

        self._is_fitted = True
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Apply zero replacement, median imputation and the incomplete-row drop.

        Args:
            df: Observation table with the same columns seen in fit

        Returns:
            Cleaned DataFrame with a fresh RangeIndex
        """
        if not self._is_fitted:
            raise ValueError("Cleaner must be fitted before transform. Call fit() first.")

        cleaned = self._replace_zeros(df)
        cleaned = cleaned.fillna(value=self.medians)
        cleaned = cleaned.dropna(how='any').reset_index(drop=True)

        logger.info(f"Dropped {len(df) - len(cleaned)} incomplete rows")
        return cleaned

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Fit and transform in one step."""
        self.fit(df)
        return self.transform(df)


def clean_data(
    df: pd.DataFrame,
    target_column: str = PH,
    zero_exempt_columns: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """
    Complete cleaning step for the observation table.

    Args:
        df: Raw DataFrame
        target_column: Column predicted by the models
        zero_exempt_columns: Columns where zero is kept as a valid value

    Returns:
        Dictionary containing:
            - data: Cleaned DataFrame
            - cleaner: Fitted DataCleaner
            - profile: Missing/zero counts of the raw table
            - rows_in, rows_out: Row counts before and after
    """
    logger.info("=" * 60)
    logger.info("STARTING DATA CLEANING")
    logger.info("=" * 60)

    cleaner = DataCleaner(
        target_column=target_column,
        zero_exempt_columns=zero_exempt_columns
    )
    cleaned = cleaner.fit_transform(df)

    result = {
        'data': cleaned,
        'cleaner': cleaner,
        'profile': cleaner.profile_,
        'rows_in': len(df),
        'rows_out': len(cleaned),
    }

    logger.info("=" * 60)
    logger.info("CLEANING COMPLETE")
    logger.info(f"  Rows: {len(df)} -> {len(cleaned)}")
    logger.info(f"  Imputed columns: {len(cleaner.medians)}")
    logger.info("=" * 60)

    return result


def print_cleaning_summary(result: Dict[str, Any]) -> None:
    """
    Print a summary of the cleaning results.

    Args:
        result: Dictionary from clean_data
    """
    profile = result['profile']
    flagged = profile[profile['flagged']]

    print("\n" + "=" * 50)
    print("CLEANING SUMMARY")
    print("=" * 50)
    print(f"Rows before: {result['rows_in']}")
    print(f"Rows after: {result['rows_out']}")
    print(f"\nFlagged columns ({len(flagged)}):")
    print(f"{'Column':<20} {'Missing':<10} {'Zeros':<10}")
    print("-" * 40)
    for col, row in flagged.iterrows():
        print(f"{col:<20} {int(row['missing']):<10} {int(row['zeros']):<10}")
    print("=" * 50 + "\n")
