"""
Pipeline Module
===============

Orchestrates the analysis as an ordered list of stages.

Stages:
    1. load - Read and validate the measurements sheet
    2. clean - Zero/missing replacement and median imputation
    3. export_clean - Write the cleaned table
    4. explore - Skewness and distribution of pH
    5. rule_model - Threshold rule predictions
    6. linear_model - OLS baseline predictions
    7. evaluate - RMSE comparison
    8. export_predictions - Write observed and predicted pH

Each stage declares the context keys it reads and writes, so a stage can be
run on its own against a hand-built context.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .data_loader import load_data, print_data_summary
from .cleaning import clean_data, print_cleaning_summary
from .eda import generate_eda_report, print_eda_summary
from .rules import RulePHModel, print_rules
from .model import train_linear_model, print_model_summary
from .evaluation import evaluate_models, print_evaluation_report
from .export import export_table, build_prediction_table
from .schema import PH

logger = logging.getLogger(__name__)

Context = Dict[str, Any]

RULE_MODEL_NAME = "Rule Model"
LINEAR_MODEL_NAME = "Linear Model"


@dataclass(frozen=True)
class Stage:
    """One step of the pipeline and the context keys it uses."""
    name: str
    run: Callable[[Context, Dict[str, Any]], Context]
    requires: Tuple[str, ...] = ()
    produces: Tuple[str, ...] = ()


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


def _target(config: Dict[str, Any]) -> str:
    return config.get('model', {}).get('target', PH)


def run_load(context: Context, config: Dict[str, Any]) -> Context:
    """Read the measurements sheet named by context['data_path']."""
    _banner("STAGE 1: LOAD DATA")
    data_config = config.get('data', {})
    raw = load_data(context['data_path'], sheet_name=data_config.get('sheet_name', 0))
    print_data_summary(raw)
    return {'raw': raw}


def run_clean(context: Context, config: Dict[str, Any]) -> Context:
    """Replace zeros, impute medians and drop incomplete rows."""
    _banner("STAGE 2: CLEAN DATA")
    cleaning_config = config.get('cleaning', {})
    result = clean_data(
        context['raw'],
        target_column=_target(config),
        zero_exempt_columns=cleaning_config.get('zero_exempt_columns')
    )
    print_cleaning_summary(result)
    return {'cleaned': result['data'], 'cleaning': result}


def run_export_clean(context: Context, config: Dict[str, Any]) -> Context:
    """Write the numeric columns of the cleaned table."""
    path = config.get('output', {}).get('cleaned_path', 'data/processed/cleaned.csv')
    cleaned = context['cleaned']
    numeric_columns = cleaned.select_dtypes(include=[np.number]).columns.tolist()
    cleaned_path = export_table(cleaned, path, columns=numeric_columns)
    print(f"✓ Cleaned data written to {cleaned_path}")
    return {'cleaned_path': cleaned_path}


def run_explore(context: Context, config: Dict[str, Any]) -> Context:
    """Summarize the distribution of the target."""
    _banner("STAGE 3: EXPLORE TARGET")
    output_config = config.get('output', {})
    report = generate_eda_report(
        context['cleaned'],
        target_column=_target(config),
        output_dir=output_config.get('figures_path', 'reports/figures/'),
        save_figures=output_config.get('save_figures', False)
    )
    print_eda_summary(report)
    return {'eda': report}


def run_rule_model(context: Context, config: Dict[str, Any]) -> Context:
    """Apply the threshold rules to every row."""
    _banner("STAGE 4: RULE MODEL")
    model = RulePHModel()
    print_rules(model.rules, model.default)
    hits = model.rule_hits(context['cleaned'])
    for name, count in hits.items():
        print(f"  • {name}: {count} rows")
    return {'rule_predictions': model.predict(context['cleaned']), 'rule_hits': hits}


def run_linear_model(context: Context, config: Dict[str, Any]) -> Context:
    """Fit and apply the OLS baseline."""
    _banner("STAGE 5: LINEAR MODEL")
    model = train_linear_model(
        context['cleaned'],
        config,
        save_path=config.get('output', {}).get('model_path')
    )
    print_model_summary(model)
    return {'linear_model': model, 'lm_predictions': model.predict(context['cleaned'])}


def run_evaluate(context: Context, config: Dict[str, Any]) -> Context:
    """Compare both models by RMSE."""
    _banner("STAGE 6: EVALUATION")
    result = evaluate_models(
        context['cleaned'][_target(config)],
        {
            RULE_MODEL_NAME: context['rule_predictions'],
            LINEAR_MODEL_NAME: context['lm_predictions'],
        },
        metrics_path=config.get('output', {}).get('metrics_path')
    )
    print_evaluation_report(result['comparison'])
    return {'evaluation': result}


def run_export_predictions(context: Context, config: Dict[str, Any]) -> Context:
    """Write observed and predicted pH."""
    table = build_prediction_table(
        context['cleaned'][_target(config)],
        context['rule_predictions'],
        context['lm_predictions']
    )
    path = config.get('output', {}).get('predictions_path', 'data/predictions/predictions.csv')
    predictions_path = export_table(table, path)
    print(f"✓ Predictions written to {predictions_path}")
    return {'predictions': table, 'predictions_path': predictions_path}


PIPELINE: List[Stage] = [
    Stage('load', run_load, ('data_path',), ('raw',)),
    Stage('clean', run_clean, ('raw',), ('cleaned', 'cleaning')),
    Stage('export_clean', run_export_clean, ('cleaned',), ('cleaned_path',)),
    Stage('explore', run_explore, ('cleaned',), ('eda',)),
    Stage('rule_model', run_rule_model, ('cleaned',), ('rule_predictions', 'rule_hits')),
    Stage('linear_model', run_linear_model, ('cleaned',), ('linear_model', 'lm_predictions')),
    Stage('evaluate', run_evaluate,
          ('cleaned', 'rule_predictions', 'lm_predictions'), ('evaluation',)),
    Stage('export_predictions', run_export_predictions,
          ('cleaned', 'rule_predictions', 'lm_predictions'), ('predictions', 'predictions_path')),
]


def run_stage(stage: Stage, context: Context, config: Dict[str, Any]) -> Context:
    """
    Run one stage and merge its outputs into the context.

    Args:
        stage: Stage to run
        context: Values produced so far
        config: Configuration dictionary

    Returns:
        The updated context

    Raises:
        KeyError: If a required context key is missing
    """
    missing = [key for key in stage.requires if key not in context]
    if missing:
        raise KeyError(f"Stage '{stage.name}' requires missing inputs: {missing}")

    logger.info(f"Running stage '{stage.name}'")
    outputs = stage.run(context, config)

    unexpected = set(outputs) - set(stage.produces)
    if unexpected:
        raise KeyError(f"Stage '{stage.name}' produced undeclared outputs: {sorted(unexpected)}")

    context.update(outputs)
    return context


def run_pipeline(
    data_path: str,
    config: Optional[Dict[str, Any]] = None,
    stages: Optional[List[Stage]] = None
) -> Context:
    """
    Execute every stage in order; the first error aborts the run.

    Args:
        data_path: Path to the measurements spreadsheet
        config: Configuration dictionary
        stages: Stages to run (default: PIPELINE)

    Returns:
        Context dictionary holding every stage output
    """
    config = config or {}
    stages = PIPELINE if stages is None else stages

    _banner("BEVERAGE PH ANALYSIS")
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    # No stage is stochastic; the seed is carried for the record
    context: Context = {'data_path': data_path, 'seed': config.get('seed', 42)}
    logger.info(f"Seed: {context['seed']}")

    for stage in stages:
        run_stage(stage, context, config)

    _banner("PIPELINE COMPLETE")
    if 'cleaned' in context:
        print(f"  • Rows analysed: {len(context['cleaned'])}")
    if 'evaluation' in context:
        for name, value in context['evaluation']['metrics']['rmse'].items():
            print(f"  • {name} RMSE: {value:.4f}")
    if 'predictions_path' in context:
        print(f"  • Output: {context['predictions_path']}")
    print(f"Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 70 + "\n")

    return context
