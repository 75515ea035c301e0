
# 03_granger_causality.py
import marimo

__generated_with = "0.1.0"
app = marimo.App(width="medium")

@app.cell
def __():
    import marimo as mo
    from pathlib import Path
    import sys

    # Add project root to path
    project_root = Path(__file__).parent.parent.resolve()
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    from lagforecast.utils.config_manager import load_pipeline_config
    from lagforecast.utils.logging_config import setup_logging
    from lagforecast.pipelines import (
        load_observations,
        run_causality_pipeline,
        format_causality_report,
    )

    mo.md("# Granger Causality: Do Imports Predict Conflict?")
    return (
        Path, format_causality_report, load_observations, load_pipeline_config, mo,
        project_root, run_causality_pipeline, setup_logging, sys,
    )


@app.cell
def __(load_observations, load_pipeline_config, mo, project_root, setup_logging):
    CONFIG = load_pipeline_config(str(project_root / "config"))
    setup_logging(CONFIG["logging"]["level"], CONFIG["logging"]["log_dir"])

    data_path = project_root / CONFIG["data"]["path"]
    if not data_path.exists():
        mo.md(f"**Error**: Data file not found at {data_path}.")
        raise FileNotFoundError(f"Data file not found: {data_path}")

    # Columns are addressed by position: Month, Year, imports, conflict, oil
    raw = load_observations(CONFIG, data_path)
    return CONFIG, data_path, raw


@app.cell
def __(CONFIG, format_causality_report, raw, run_causality_pipeline):
    result = run_causality_pipeline(raw, CONFIG)
    print(format_causality_report(result))
    return result,


if __name__ == "__main__":
    app.run()
