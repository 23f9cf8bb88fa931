"""
Beverage pH Analysis
====================

A one-shot analysis pipeline for beverage manufacturing measurements.

Modules:
    - data_loader: Spreadsheet ingestion and schema validation
    - cleaning: Zero/missing detection and median imputation
    - eda: Distribution summary of the pH target
    - rules: Threshold-based rule model
    - model: Ordinary least-squares baseline
    - evaluation: RMSE comparison of both models
    - export: Delimited text export of tables
    - pipeline: Ordered stages tying everything together
"""

__version__ = "1.0.0"
__author__ = "Predictive Analytics Team"
