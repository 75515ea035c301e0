
# 02_overfitting_check.py
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
        run_overfitting_pipeline,
        format_evaluation_report,
    )
    from lagforecast.evaluation.plots import plot_learning_curve

    mo.md("# Overfitting Check: Walk-Forward Split & Learning Curve")
    return (
        Path, format_evaluation_report, load_observations, load_pipeline_config, mo,
        plot_learning_curve, plt, project_root, run_overfitting_pipeline, setup_logging, sys,
    )


@app.cell
def __(load_observations, load_pipeline_config, mo, project_root, setup_logging):
    CONFIG = load_pipeline_config(str(project_root / "config"))
    setup_logging(CONFIG["logging"]["level"], CONFIG["logging"]["log_dir"])

    data_path = project_root / CONFIG["data"]["path"]
    if not data_path.exists():
        mo.md(f"**Error**: Data file not found at {data_path}.")
        raise FileNotFoundError(f"Data file not found: {data_path}")

    raw = load_observations(CONFIG, data_path)
    return CONFIG, data_path, raw


@app.cell
def __(mo):
    mo.md("## Train on the first 80%, test on the future 20%")
    return


@app.cell
def __(CONFIG, format_evaluation_report, raw, run_overfitting_pipeline):
    report = run_overfitting_pipeline(raw, CONFIG)
    print(format_evaluation_report(report))
    return report,


@app.cell
def __(plot_learning_curve, plt, report):
    plot_learning_curve(report)
    plt.tight_layout()
    plt.show()
    return


if __name__ == "__main__":
    app.run()
