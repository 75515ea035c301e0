"""Diagnostic charts for importance rankings, lagged overlays, and learning curves."""

from typing import Any, Mapping, Optional, Sequence
import logging

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from lagforecast.evaluation.walk_forward import EvaluationReport
from lagforecast.features.transforms import min_max_normalize

logger = logging.getLogger(__name__)


def plot_importance_dotchart(
    importances: Mapping[str, float],
    ax=None,
    title: str = "Predictive Power",
    xlabel: str = "Increase in MSE when permuted (importance)",
) -> Any:
    """
    Dot chart of feature importances, largest at the top.

    Args:
        importances: Feature name -> importance (NaN is drawn as 0)
        ax: Matplotlib axes (optional)
        title: Chart title
        xlabel: X axis label

    Returns:
        Matplotlib axes object
    """
    ranked = pd.Series(importances, dtype="float64").fillna(0.0).sort_values()

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 0.5 * len(ranked) + 2))

    ax.scatter(ranked.values, range(len(ranked)), color="blue", zorder=3)
    ax.set_yticks(range(len(ranked)))
    ax.set_yticklabels(ranked.index)
    ax.grid(axis="y", linestyle=":", color="grey")
    ax.set_title(title)
    ax.set_xlabel(xlabel)

    return ax


def plot_normalized_overlay(
    target: pd.Series,
    predictor: pd.Series,
    labels: Sequence[str] = ("Conflict Fatalities", "Lagged Predictor"),
    ax=None,
    title: str = "Lagged Predictor vs. Target",
) -> Any:
    """
    Overlay two series scaled to [0, 1] on a shared time axis.

    Args:
        target: Target series
        predictor: Lagged predictor aligned with the target
        labels: Legend labels for target and predictor
        ax: Matplotlib axes (optional)
        title: Chart title

    Returns:
        Matplotlib axes object
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 5))

    ax.plot(target.index, min_max_normalize(target), color="red", linewidth=3, label=labels[0])
    ax.plot(
        predictor.index, min_max_normalize(predictor),
        color="blue", linewidth=2, linestyle="--", label=labels[1],
    )
    ax.set_title(title)
    ax.set_xlabel("Time")
    ax.set_ylabel("Normalized Intensity (0-1)")
    ax.legend(loc="upper left")

    return ax


def plot_learning_curve(report: EvaluationReport, ax=None) -> Optional[Any]:
    """
    Train and held-out RMSE against training-set size.

    Converging lines mean more data helps; a persistent wide gap means
    overfitting.

    Args:
        report: Evaluation report with a learning curve
        ax: Matplotlib axes (optional)

    Returns:
        Matplotlib axes object, or None if the report has no curve
    """
    curve = report.learning_curve_frame()
    if curve.empty:
        logger.warning("Report has no learning curve to plot")
        return None

    long_form = curve.melt(
        id_vars="size",
        value_vars=["train_error", "test_error"],
        var_name="Metric",
        value_name="RMSE",
    )
    long_form["Metric"] = long_form["Metric"].map(
        {"train_error": "Train Error", "test_error": "Test (Future) Error"}
    )

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))

    sns.lineplot(data=long_form, x="size", y="RMSE", hue="Metric", marker="o", ax=ax)
    ax.set_title("Learning Curve: Is the model learning?")
    ax.set_xlabel("Number of Months in Training Data")
    ax.set_ylabel("Error (RMSE - Lower is Better)")

    return ax
