"""Smoke tests for diagnostic charts."""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from lagforecast.evaluation.plots import (
    plot_importance_dotchart,
    plot_learning_curve,
    plot_normalized_overlay,
)
from lagforecast.evaluation.walk_forward import EvaluationReport, LearningCurvePoint


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def make_report(curve):
    return EvaluationReport(
        train_size=30, test_size=8, error_train=1.0, error_test=3.0,
        overfitting_ratio=3.0, baseline_error_test=4.0, learning_curve=curve,
    )


def test_importance_dotchart_orders_ascending():
    ax = plot_importance_dotchart({"Oil_Lag4": 2.0, "Toyota_Lag4": 9.0, "Gold_Lag4": float("nan")})
    labels = [t.get_text() for t in ax.get_yticklabels()]
    assert labels == ["Gold_Lag4", "Oil_Lag4", "Toyota_Lag4"]


def test_normalized_overlay(monthly_index):
    index = monthly_index(12)
    target = pd.Series(np.arange(12.0), index=index)
    predictor = pd.Series(np.full(12, 7.0), index=index)
    ax = plot_normalized_overlay(target, predictor)
    lines = ax.get_lines()
    assert len(lines) == 2
    assert np.nanmax(lines[0].get_ydata()) == 1.0
    assert np.all(np.asarray(lines[1].get_ydata()) == 0.0)


def test_learning_curve_plot():
    report = make_report([
        LearningCurvePoint(20, 1.0, 4.0),
        LearningCurvePoint(25, 1.2, 3.5),
    ])
    ax = plot_learning_curve(report)
    assert ax is not None
    assert ax.get_xlabel() == "Number of Months in Training Data"


def test_learning_curve_plot_without_curve():
    assert plot_learning_curve(make_report([])) is None
