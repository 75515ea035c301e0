
# 01_importance_and_forecast.py
import marimo

__generated_with = "0.1.0"
app = marimo.App(width="medium")

@app.cell
def __():
    import marimo as mo
    from pathlib import Path
    import sys
    import matplotlib.pyplot as plt

    # Add project root to path
    project_root = Path(__file__).parent.parent.resolve()
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    from lagforecast.utils.config_manager import load_pipeline_config
    from lagforecast.utils.logging_config import setup_logging
    from lagforecast.pipelines import (
        load_observations,
        run_importance_pipeline,
        format_importance_report,
    )
    from lagforecast.evaluation.plots import plot_importance_dotchart, plot_normalized_overlay

    mo.md("# Lagged Predictors: Importance Ranking & Forecast")
    return (
        Path, format_importance_report, load_observations, load_pipeline_config, mo,
        plot_importance_dotchart, plot_normalized_overlay, plt, project_root,
        run_importance_pipeline, setup_logging, sys,
    )


@app.cell
def __(mo):
    mo.md("## 1. Configuration & Data Loading")
    return


@app.cell
def __(load_observations, load_pipeline_config, mo, project_root, setup_logging):
    CONFIG = load_pipeline_config(str(project_root / "config"))
    setup_logging(CONFIG["logging"]["level"], CONFIG["logging"]["log_dir"])

    data_path = project_root / CONFIG["data"]["path"]
    if not data_path.exists():
        mo.md(f"**Error**: Data file not found at {data_path}.")
        raise FileNotFoundError(f"Data file not found: {data_path}")

    raw = load_observations(CONFIG, data_path)
    print(f"Loaded {len(raw)} rows.")
    return CONFIG, data_path, raw


@app.cell
def __(mo):
    mo.md("## 2. Fit on all lagged rows")
    return


@app.cell
def __(CONFIG, format_importance_report, raw, run_importance_pipeline):
    result = run_importance_pipeline(raw, CONFIG)
    print(format_importance_report(result))
    return result,


@app.cell
def __(mo):
    mo.md("## 3. Diagnostics")
    return


@app.cell
def __(plot_importance_dotchart, plt, result):
    plot_importance_dotchart(result.importances)
    plt.tight_layout()
    plt.show()
    return


@app.cell
def __(plot_normalized_overlay, plt, result):
    # Target against the first configured predictor, lagged
    frame = result.dataset.to_frame()
    first_feature = result.dataset.feature_names[0]
    plot_normalized_overlay(
        frame[result.dataset.target_name],
        frame[first_feature],
        labels=("Conflict Fatalities", f"{first_feature} ({result.dataset.lag_horizon} Months Prior)"),
        title=f"{first_feature} vs. Violence",
    )
    plt.tight_layout()
    plt.show()
    return first_feature, frame


if __name__ == "__main__":
    app.run()
