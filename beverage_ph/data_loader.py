"""
Data Loader Module
==================

Handles spreadsheet ingestion, schema validation, and basic data quality output.

Functions:
    - load_config: Load YAML configuration file
    - load_data: Load the measurements sheet with numeric type detection
    - validate_schema: Check the required columns once at load time
    - get_data_summary: Generate basic statistics
"""

import logging
import zipfile
from pathlib import Path
from typing import Dict, Any, Optional, Union

import pandas as pd
import numpy as np
import yaml

from .exceptions import DataFileError, FormatError
from .schema import ObservationSchema, OBSERVATION_SCHEMA

logger = logging.getLogger(__name__)

# Formats read by openpyxl; legacy .xls would need xlrd
EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv"}


def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Dictionary containing configuration parameters

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    logger.info(f"Loaded configuration from {config_path}")
    return config


def coerce_numeric_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Convert text columns whose present values all parse as numbers.

    Columns with at least one non-numeric value stay as text.
    """
    df = df.copy()
    for col in df.select_dtypes(exclude=[np.number]).columns:
        converted = pd.to_numeric(df[col], errors='coerce')
        if converted.notna().sum() == df[col].notna().sum():
            df[col] = converted
    return df


def load_data(
    file_path: Union[str, Path],
    sheet_name: Union[str, int] = 0,
    schema: Optional[ObservationSchema] = None
) -> pd.DataFrame:
    """
    Load the measurements table and validate it against the schema.

    Args:
        file_path: Path to the spreadsheet (.xlsx/.xlsm) or CSV file
        sheet_name: Sheet to read for spreadsheet input
        schema: Expected schema (default: OBSERVATION_SCHEMA)

    Returns:
        DataFrame containing the loaded data

    Raises:
        DataFileError: If the file doesn't exist or cannot be read
        FormatError: If the sheet or required columns are absent
    """
    file_path = Path(file_path)
    schema = schema or OBSERVATION_SCHEMA

    if not file_path.is_file():
        raise DataFileError(f"Data file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in EXCEL_SUFFIXES | CSV_SUFFIXES:
        raise FormatError(
            f"Unsupported file type '{suffix}'. "
            f"Expected one of: {sorted(EXCEL_SUFFIXES | CSV_SUFFIXES)}"
        )

    try:
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(file_path, sheet_name=sheet_name)
        else:
            df = pd.read_csv(file_path)
    except (OSError, zipfile.BadZipFile) as e:
        raise DataFileError(f"Could not read {file_path}: {e}") from e
    except (ValueError, KeyError) as e:
        # pandas raises these for a missing worksheet or an unparseable workbook
        raise FormatError(f"Could not parse {file_path}: {e}") from e

    logger.info(f"Loaded data from {file_path}: {df.shape[0]} rows × {df.shape[1]} columns")

    df = coerce_numeric_columns(df)
    validate_schema(df, schema)

    return df


def validate_schema(df: pd.DataFrame, schema: Optional[ObservationSchema] = None) -> None:
    """
    Check that every required column exists and is numeric.

    Args:
        df: DataFrame to validate
        schema: Expected schema (default: OBSERVATION_SCHEMA)

    Raises:
        FormatError: On the first mismatch found
    """
    schema = schema or OBSERVATION_SCHEMA

    missing = [col for col in schema.required_columns if col not in df.columns]
    if missing:
        raise FormatError(
            f"Missing required columns: {missing}. "
            f"Columns: {list(df.columns)}"
        )

    non_numeric = [
        col for col in schema.required_columns
        if not pd.api.types.is_numeric_dtype(df[col])
    ]
    if non_numeric:
        raise FormatError(f"Required columns are not numeric: {non_numeric}")

    logger.info(f"Schema validated: {len(schema.required_columns)} required columns present")


def get_data_summary(df: pd.DataFrame) -> Dict[str, Any]:
    """
    Generate summary statistics for the dataset.

    Args:
        df: DataFrame to summarize

    Returns:
        Dictionary containing summary statistics
    """
    summary = {
        "shape": df.shape,
        "columns": list(df.columns),
        "dtypes": df.dtypes.astype(str).to_dict(),
        "missing": df.isnull().sum().to_dict(),
        "statistics": {}
    }

    # Per-column statistics
    for col in df.select_dtypes(include=[np.number]).columns:
        summary["statistics"][col] = {
            "count": int(df[col].count()),
            "mean": float(df[col].mean()),
            "std": float(df[col].std()),
            "min": float(df[col].min()),
            "50%": float(df[col].quantile(0.50)),
            "max": float(df[col].max()),
        }

    return summary


def print_data_summary(df: pd.DataFrame) -> None:
    """
    Print a formatted summary of the dataset to console.

    Args:
        df: DataFrame to summarize
    """
    summary = get_data_summary(df)
    n_rows, n_cols = summary["shape"]

    print("\n" + "=" * 60)
    print("DATASET SUMMARY")
    print("=" * 60)
    print(f"Shape: {n_rows} rows × {n_cols} columns")
    print("\nColumn Information:")
    print("-" * 40)

    for col in summary["columns"]:
        missing = summary["missing"][col]
        null_pct = missing / n_rows * 100 if n_rows else 0.0
        print(f"  {col}: {summary['dtypes'][col]} | {n_rows - missing} non-null "
              f"({null_pct:.1f}% missing)")

    print("\nBasic Statistics:")
    print("-" * 40)
    print(df.describe().round(4).to_string())
    print("=" * 60 + "\n")
