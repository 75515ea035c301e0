"""Regression error metrics."""

from typing import Dict
import logging

import numpy as np
from sklearn.metrics import mean_absolute_error, r2_score

logger = logging.getLogger(__name__)


def rmse(y_true, y_pred) -> float:
    """
    Root-mean-squared error between actual and predicted values.

    Raises:
        ValueError: If the inputs are empty or differ in length
    """
    y_true = np.asarray(y_true, dtype="float64")
    y_pred = np.asarray(y_pred, dtype="float64")
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Shape mismatch: {y_true.shape} vs {y_pred.shape}")
    if y_true.size == 0:
        raise ValueError("Cannot compute RMSE over zero rows")
    return float(np.sqrt(np.mean((y_true - y_pred) ** 2)))


class MetricsCalculator:
    """Calculate evaluation metrics for regression forecasts."""

    def calculate_regression_metrics(
        self,
        y_true: np.ndarray,
        y_pred: np.ndarray,
    ) -> Dict[str, float]:
        """
        Calculate regression metrics.

        Args:
            y_true: True values
            y_pred: Predicted values

        Returns:
            Dictionary with mse, rmse, mae, r2 and mape
        """
        y_true = np.asarray(y_true, dtype="float64")
        y_pred = np.asarray(y_pred, dtype="float64")

        metrics: Dict[str, float] = {}

        metrics["rmse"] = rmse(y_true, y_pred)
        metrics["mse"] = metrics["rmse"] ** 2
        metrics["mae"] = float(mean_absolute_error(y_true, y_pred))
        # R^2 is undefined for a single sample
        metrics["r2"] = float(r2_score(y_true, y_pred)) if len(y_true) > 1 else np.nan

        # MAPE over non-zero actuals only
        mask = y_true != 0
        if mask.any():
            mape = np.mean(np.abs((y_true[mask] - y_pred[mask]) / y_true[mask])) * 100
            metrics["mape"] = float(mape)
        else:
            metrics["mape"] = np.nan

        return metrics
