"""End-to-end runs from raw text observations to reports."""

import copy

import numpy as np
import pandas as pd
import pytest

from lagforecast.pipelines import (
    build_dataset,
    format_causality_report,
    format_evaluation_report,
    format_importance_report,
    load_observations,
    run_causality_pipeline,
    run_importance_pipeline,
    run_overfitting_pipeline,
)
from lagforecast.utils.error_handling import InsufficientData

FEATURES = ["Toyota_Lag4", "Tires_Lag4", "Oil_Lag4", "Gold_Lag4", "Rubber_Lag4"]


def test_dataset_from_raw_observations(raw_observations, pipeline_config):
    observations, spec, dataset = build_dataset(raw_observations, pipeline_config)

    # 36 months; the summary row has no year
    assert len(observations) == 36
    assert observations.index[0] == pd.Timestamp("2023-01-01")
    assert observations.index.is_monotonic_increasing

    # 4 boundary rows, plus the row whose lagged gold price is missing
    assert len(dataset) == 31
    assert dataset.metadata["incomplete_rows_dropped"] == 1
    assert pd.Timestamp("2024-03-01") not in dataset.index
    assert dataset.target_name == "Target_Violence"
    assert list(dataset.feature_names) == FEATURES

    expected = observations["GCC_Total_Imports"].shift(4).loc[dataset.index]
    np.testing.assert_allclose(dataset.features["Toyota_Lag4"], expected)


def test_importance_pipeline(raw_observations, pipeline_config):
    result = run_importance_pipeline(raw_observations, pipeline_config)

    assert set(result.importances) == set(FEATURES)
    assert max(result.importances, key=result.importances.get) == "Toyota_Lag4"
    assert result.forecast.origin_month == pd.Timestamp("2025-12-01")
    assert result.forecast.target_month == pd.Timestamp("2026-04-01")
    assert np.isfinite(result.forecast.value)
    assert result.last_actual == pytest.approx(result.dataset.target.iloc[-1])

    report = format_importance_report(result)
    assert report.startswith("--- Importance Values ---")
    assert "--- FORECAST: Apr 2026 ---" in report
    assert "Based on Dec 2025 inputs" in report


def test_importance_pipeline_skips_incomplete_latest_month(raw_observations, pipeline_config):
    raw = raw_observations.copy()
    latest = (raw["Month"] == "December") & (raw["Year"] == "2025")
    raw.loc[latest, "GCC_Total_Imports"] = "N/A"

    result = run_importance_pipeline(raw, pipeline_config)

    assert len(result.dataset) == 31
    assert set(result.importances) == set(FEATURES)
    assert result.forecast.origin_month == pd.Timestamp("2025-11-01")
    assert result.forecast.target_month == pd.Timestamp("2026-03-01")


def test_importance_pipeline_with_configured_target(raw_observations, pipeline_config):
    config = copy.deepcopy(pipeline_config)
    config["forecast"]["target_month"] = "2025-06"
    result = run_importance_pipeline(raw_observations, config)
    assert result.forecast.origin_month == pd.Timestamp("2025-02-01")


def test_overfitting_pipeline(raw_observations, pipeline_config):
    report = run_overfitting_pipeline(raw_observations, pipeline_config)

    assert report.train_size == 24  # floor(0.8 * 31)
    assert report.test_size == 7
    assert [p.size for p in report.learning_curve] == [20]
    assert report.error_train >= 0
    assert report.metadata["model_type"] == "random_forest"

    text = format_evaluation_report(report)
    assert "Training on first 24 months. Testing on next 7 months." in text
    assert report.status in text


def test_overfitting_pipeline_rejects_short_history(raw_observations, pipeline_config):
    config = copy.deepcopy(pipeline_config)
    config["walk_forward"]["min_train_size"] = 30
    with pytest.raises(InsufficientData):
        run_overfitting_pipeline(raw_observations, config, learning_curve=False)


def test_causality_pipeline(raw_observations, pipeline_config):
    result = run_causality_pipeline(raw_observations, pipeline_config)

    assert result.cause == "Imports"
    assert result.caused == ["Conflict"]
    assert 1 <= result.lag_order <= 4
    assert 0.0 <= result.p_value <= 1.0
    assert result.n_obs == 35 - result.lag_order

    text = format_causality_report(result)
    assert f"Using Lag: {result.lag_order}" in text
    assert "H0: Imports do not Granger-cause Conflict" in text


def test_pipeline_from_csv(tmp_path, raw_observations, pipeline_config):
    path = tmp_path / "observations.csv"
    raw_observations.to_csv(path, index=False)

    loaded = load_observations(pipeline_config, path)
    _, _, dataset = build_dataset(loaded, pipeline_config)
    assert len(dataset) == 31


def _alternating_history(n_months):
    """Imports alternate between two levels; fatalities echo them four months later."""
    dates = pd.date_range("2022-01-01", periods=n_months, freq="MS")
    imports = np.where(np.arange(n_months) % 2 == 0, 20_000.0, 120_000.0)
    fatalities = np.empty(n_months)
    fatalities[:4] = 700.0
    fatalities[4:] = imports[:-4] / 100
    return pd.DataFrame({
        "Month": [d.strftime("%B") for d in dates],
        "Year": [str(d.year) for d in dates],
        "GCC_Total_Imports": [f"{v:,.0f}" for v in imports],
        "Estimated_Violence_Fatalities": [f"{v:,.0f}" for v in fatalities],
    })


def test_lagged_signal_beats_mean_baseline(pipeline_config):
    config = copy.deepcopy(pipeline_config)
    config["features"]["predictors"] = {"GCC_Total_Imports": "Toyota_Lag{lag}"}
    config["walk_forward"].update({"min_train_size": 12, "step": 2})

    report = run_overfitting_pipeline(_alternating_history(24), config)

    assert report.train_size == 16
    assert report.test_size == 4
    assert report.error_test < report.baseline_error_test
    assert [p.size for p in report.learning_curve] == [12, 14, 16]


def test_doubled_lagged_predictor_with_noise_beats_mean_baseline(pipeline_config):
    rng = np.random.default_rng(0)
    n = 24
    dates = pd.date_range("2022-01-01", periods=n, freq="MS")
    predictor = rng.uniform(50, 150, n)
    target = np.empty(n)
    target[:4] = rng.uniform(100, 300, 4)
    target[4:] = 2 * predictor[:-4] + rng.normal(0, 5, n - 4)
    raw = pd.DataFrame({
        "Month": [d.strftime("%b") for d in dates],
        "Year": [str(d.year) for d in dates],
        "GCC_Total_Imports": [f"{v:,.2f}" for v in predictor],
        "Estimated_Violence_Fatalities": [f"{v:,.2f}" for v in target],
    })

    config = copy.deepcopy(pipeline_config)
    config["features"]["predictors"] = {"GCC_Total_Imports": "Toyota_Lag{lag}"}
    config["walk_forward"]["min_train_size"] = 12

    report = run_overfitting_pipeline(raw, config, learning_curve=False)

    assert report.train_size == 16
    assert report.error_test < report.baseline_error_test
