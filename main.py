#!/usr/bin/env python3
"""
Beverage pH Analysis - Main Pipeline
====================================

Runs the complete analysis of the beverage manufacturing measurements.

Stages:
    1. Load - Read the measurements spreadsheet
    2. Clean - Zero/missing handling and median imputation
    3. Explore - Skewness of the pH target
    4. Rule Model - Threshold-based pH lookup
    5. Linear Model - OLS baseline
    6. Evaluation - RMSE comparison
    7. Export - Cleaned data and predictions as CSV

Usage:
    # Run with the defaults in config/config.yaml
    python main.py

    # Run on another file
    python main.py --data data/raw/StudentData.xlsx

    # Run with custom config
    python main.py --config config/custom.yaml
"""

import argparse
import logging
import sys
from pathlib import Path
from datetime import datetime

from beverage_ph.data_loader import load_config
from beverage_ph.exceptions import PipelineError
from beverage_ph.pipeline import run_pipeline


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the pipeline."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(f'pipeline_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log')
        ]
    )


def main(argv=None) -> int:
    """Main entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        description="pH analysis of beverage manufacturing measurements",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --data data/raw/StudentData.xlsx
  python main.py --config config/custom.yaml
        """
    )

    parser.add_argument(
        '--data', '-d',
        type=str,
        default=None,
        help='Path to the input spreadsheet (default: data.path from config)'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default='config/config.yaml',
        help='Path to configuration file (default: config/config.yaml)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    # Check if config exists
    if not Path(args.config).exists():
        print(f"Error: Config file not found: {args.config}")
        return 1

    config = load_config(args.config)
    level = 'DEBUG' if args.verbose else config.get('logging', {}).get('level', 'INFO')
    setup_logging(level)

    data_path = args.data or config.get('data', {}).get('path', 'data/raw/StudentData.xlsx')

    try:
        run_pipeline(data_path, config)
        return 0

    except PipelineError as e:
        # Outputs written before the failure are not valid
        logging.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\n❌ Pipeline failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
