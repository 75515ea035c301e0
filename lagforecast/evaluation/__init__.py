"""Evaluation metrics, walk-forward evaluation, causality tests, and plots."""

from lagforecast.evaluation.metrics import MetricsCalculator, rmse
from lagforecast.evaluation.walk_forward import (
    WalkForwardEvaluator,
    EvaluationReport,
    LearningCurvePoint,
    overfitting_ratio,
)
from lagforecast.evaluation.causality import (
    GrangerCausalityAnalyzer,
    GrangerResult,
    LagOrderSelection,
)
from lagforecast.evaluation.plots import (
    plot_importance_dotchart,
    plot_normalized_overlay,
    plot_learning_curve,
)

__all__ = [
    "MetricsCalculator",
    "rmse",
    "WalkForwardEvaluator",
    "EvaluationReport",
    "LearningCurvePoint",
    "overfitting_ratio",
    "GrangerCausalityAnalyzer",
    "GrangerResult",
    "LagOrderSelection",
    "plot_importance_dotchart",
    "plot_normalized_overlay",
    "plot_learning_curve",
]
