"""End-to-end runs: importance and forecast, overfitting check, Granger causality.

Each run takes the raw (text) observation frame and a configuration
dictionary as produced by ``load_pipeline_config`` and returns a result
object; ``format_*`` turns results into the printed report.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

import pandas as pd

from lagforecast.data.cleaners import NumericCleaner
from lagforecast.data.dates import index_by_calendar
from lagforecast.data.loaders import DataLoader, resolve_column
from lagforecast.data.structs import LaggedDataset
from lagforecast.evaluation.causality import GrangerCausalityAnalyzer, GrangerResult
from lagforecast.evaluation.walk_forward import EvaluationReport, WalkForwardEvaluator
from lagforecast.features.engineering import LagFeatureBuilder, LagFeatureSpec
from lagforecast.models.forecasting import PointForecast, forecast
from lagforecast.models.random_forest import RandomForestModel
from lagforecast.utils.config_manager import ConfigManager
from lagforecast.utils.error_handling import InsufficientData

logger = logging.getLogger(__name__)

_settings = ConfigManager()


@dataclass
class ImportanceRunResult:
    """Outputs of the full-sample importance and forecast run."""
    dataset: LaggedDataset
    model: RandomForestModel
    importances: Dict[str, float]
    last_actual: float
    last_predicted: float
    forecast: PointForecast
    observations: pd.DataFrame = field(repr=False, default=None)

    @property
    def last_error(self) -> float:
        return abs(self.last_predicted - self.last_actual)


def load_observations(config: Dict[str, Any], path: Optional[Union[str, Path]] = None) -> pd.DataFrame:
    """Load the raw observation file named in the config (or ``path``)."""
    data_cfg = config["data"]
    path = path or data_cfg.get("path")
    if not path:
        raise ValueError("No data path configured")
    return DataLoader().load_csv(
        path, required_columns=[data_cfg["month_column"], data_cfg["year_column"]]
    )


def build_feature_spec(config: Dict[str, Any]) -> LagFeatureSpec:
    feat = config["features"]
    return LagFeatureSpec.from_templates(
        target=feat["target"],
        predictors=feat["predictors"],
        lag_horizon=feat["lag_horizon"],
        target_alias=feat.get("target_alias"),
    )


def build_model(config: Dict[str, Any]) -> RandomForestModel:
    params = {
        k: v for k, v in _settings.get_value(config, "model", {}).items()
        if k in ("n_estimators", "random_state", "max_features", "min_samples_leaf")
    }
    return RandomForestModel(hyperparameters=params)


def prepare_observations(
    raw: pd.DataFrame,
    config: Dict[str, Any],
    columns,
    policy: str,
) -> pd.DataFrame:
    """Clean the named columns under ``policy`` and sort by calendar month."""
    data_cfg = config["data"]
    cleaned = NumericCleaner(policy).clean_columns(raw, columns)
    return index_by_calendar(
        cleaned,
        month_col=data_cfg["month_column"],
        year_col=data_cfg["year_column"],
        on_unrecognized=data_cfg.get("on_unrecognized_month", "drop"),
    )


def build_dataset(raw: pd.DataFrame, config: Dict[str, Any]):
    """
    Clean, sort, and lag the modelling columns.

    Returns:
        Tuple of (sorted observations, feature spec, lagged dataset)

    Raises:
        InsufficientData: If no row has a complete lag history
    """
    spec = build_feature_spec(config)
    observations = prepare_observations(
        raw, config, [spec.target, *spec.source_columns], config["features"]["cleaning_policy"]
    )
    dataset = LagFeatureBuilder().build(observations, spec)
    if dataset.is_empty:
        logger.error("Lagged dataset is empty; nothing to model")
        raise InsufficientData(
            f"No complete rows after lagging {len(observations)} observations by {spec.lag_horizon}",
            available=0,
            required=1,
        )
    return observations, spec, dataset


def run_importance_pipeline(raw: pd.DataFrame, config: Dict[str, Any]) -> ImportanceRunResult:
    """
    Fit on every lagged row, rank predictors, check the last row, and forecast.
    """
    observations, spec, dataset = build_dataset(raw, config)
    logger.info(f"Running model on {len(dataset)} rows...")

    model = build_model(config)
    model.fit(dataset.features, dataset.target)

    importances = model.permutation_importance(
        dataset.features,
        dataset.target,
        n_repeats=_settings.get_value(config, "model.permutation_repeats", 10),
    )

    last = dataset.rows(len(dataset) - 1, len(dataset))
    last_predicted = float(model.predict(last.features)[0])
    last_actual = float(last.target.iloc[0])

    target_month = _settings.get_value(config, "forecast.target_month")
    point = forecast(model, observations, spec, target_month=target_month)

    return ImportanceRunResult(
        dataset=dataset,
        model=model,
        importances=importances,
        last_actual=last_actual,
        last_predicted=last_predicted,
        forecast=point,
        observations=observations,
    )


def run_overfitting_pipeline(
    raw: pd.DataFrame,
    config: Dict[str, Any],
    learning_curve: Optional[bool] = None,
) -> EvaluationReport:
    """Walk-forward evaluation of the random forest on the lagged dataset."""
    _, _, dataset = build_dataset(raw, config)
    wf = config["walk_forward"]
    evaluator = WalkForwardEvaluator(
        model_factory=lambda: build_model(config),
        train_fraction=wf["train_fraction"],
        min_train_size=wf["min_train_size"],
        step=wf["step"],
        overfit_threshold=wf.get("overfit_threshold", 2.0),
    )
    if learning_curve is None:
        learning_curve = wf.get("learning_curve", True)
    return evaluator.evaluate(dataset, learning_curve=learning_curve)


def run_causality_pipeline(raw: pd.DataFrame, config: Dict[str, Any]) -> GrangerResult:
    """Granger test of the configured cause against the configured targets."""
    cfg = config["causality"]
    renames = {resolve_column(raw, ref): name for name, ref in cfg["columns"].items()}
    logger.info(f"Causality columns: {renames}")

    observations = prepare_observations(raw, config, list(renames), cfg["cleaning_policy"])
    levels = observations[list(renames)].rename(columns=renames)

    analyzer = GrangerCausalityAnalyzer(
        max_lag=cfg["max_lag"],
        criterion=cfg.get("criterion", "aic"),
        fallback_lag=cfg.get("fallback_lag", 1),
        min_rows=cfg.get("min_rows", 10),
        significance=cfg.get("significance", 0.05),
    )
    return analyzer.run(levels, cause=cfg["cause"], caused=cfg["caused"])


def format_importance_report(result: ImportanceRunResult) -> str:
    lines = ["--- Importance Values ---"]
    for name, score in sorted(result.importances.items(), key=lambda kv: kv[1], reverse=True):
        lines.append(f"{name:<20} {score:,.2f}")
    lines += [
        "--- REALITY CHECK (Last Data Point) ---",
        f"Actual: {result.last_actual:,.0f}",
        f"Predicted: {result.last_predicted:,.0f}",
        f"Error: {result.last_error:,.0f}",
        f"--- FORECAST: {result.forecast.target_month:%b %Y} ---",
        f"Based on {result.forecast.origin_month:%b %Y} inputs, predicted: "
        f"{result.forecast.value:,.0f}",
    ]
    return "\n".join(lines)


def format_evaluation_report(report: EvaluationReport) -> str:
    lines = [
        f"Training on first {report.train_size} months. Testing on next {report.test_size} months.",
        "--- OVERFITTING REPORT ---",
        f"Training Error (RMSE): {report.error_train:,.0f}",
        f"Test/Future Error (RMSE): {report.error_test:,.0f}",
        f"Mean-baseline Error (RMSE): {report.baseline_error_test:,.0f}",
        f"Overfitting Ratio: {report.overfitting_ratio:.2f}",
        report.status,
    ]
    if report.learning_curve:
        lines.append("--- LEARNING CURVE ---")
        for point in report.learning_curve:
            lines.append(
                f"size={point.size:>4}  train={point.train_error:,.0f}  test={point.test_error:,.0f}"
            )
    return "\n".join(lines)


def format_causality_report(result: GrangerResult) -> str:
    lag_note = " (fallback)" if result.lag_order_source == "fallback" else ""
    return "\n".join([
        f"Using Lag: {result.lag_order}{lag_note}",
        "---------------- RESULTS ----------------",
        f"H0: {result.cause} do not Granger-cause {', '.join(result.caused)}",
        f"F-Test = {result.f_statistic:.4f}, df = {result.degrees_of_freedom}, "
        f"p-value = {result.p_value:.4g}",
        "-----------------------------------------",
        "INTERPRETATION:",
        result.interpretation,
    ])
