"""Base model interface for regression models fitted on lagged features."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

import numpy as np
import pandas as pd

from lagforecast.utils.error_handling import FeatureMismatch

logger = logging.getLogger(__name__)


class BaseModel(ABC):
    """Abstract base class for all regression models."""

    def __init__(
        self,
        model_id: Optional[str] = None,
        hyperparameters: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize base model.

        Args:
            model_id: Unique identifier for the model
            hyperparameters: Model hyperparameters
        """
        self.model_id = model_id or self._generate_model_id()
        self.hyperparameters = dict(hyperparameters or {})
        self.model_object: Any = None
        self.is_fitted: bool = False
        self.feature_names: List[str] = []

    @property
    @abstractmethod
    def model_type(self) -> str:
        """Return the model type identifier."""

    @abstractmethod
    def fit(self, X: pd.DataFrame, y: pd.Series) -> "BaseModel":
        """
        Fit the model to training data.

        Args:
            X: Feature DataFrame
            y: Target Series

        Returns:
            Self for method chaining
        """

    @abstractmethod
    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """
        Generate predictions for input data.

        Args:
            X: Feature DataFrame with the training feature names

        Returns:
            Array of predictions
        """

    @abstractmethod
    def get_feature_importance(self) -> Dict[str, float]:
        """
        Get feature importance scores.

        Returns:
            Dictionary mapping feature names to importance scores
        """

    def _generate_model_id(self) -> str:
        """Generate a unique model ID."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{self.model_type}_{timestamp}"

    def _validate_input(self, X: pd.DataFrame) -> None:
        """Validate input DataFrame."""
        if not isinstance(X, pd.DataFrame):
            raise TypeError("X must be a pandas DataFrame")
        if X.empty:
            raise ValueError("X cannot be empty")
        if X.isnull().any().any():
            raise ValueError("X contains missing values")

    def _align_features(self, X: pd.DataFrame) -> pd.DataFrame:
        """Reorder columns to the training order; names must match exactly."""
        if set(X.columns) != set(self.feature_names):
            raise FeatureMismatch(
                f"Expected features {self.feature_names}, got {list(X.columns)}"
            )
        return X[self.feature_names]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"model_id='{self.model_id}', "
            f"is_fitted={self.is_fitted})"
        )
