"""
Random forest regression on lagged predictors, with permutation importance.
"""

from typing import Any, Dict, Optional
import logging

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestRegressor
from sklearn.inspection import permutation_importance

from lagforecast.models.base_model import BaseModel

logger = logging.getLogger(__name__)


class RandomForestModel(BaseModel):
    """
    scikit-learn random forest wrapper keyed by feature name.
    """

    def __init__(
        self,
        model_id: Optional[str] = None,
        hyperparameters: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize random forest model.

        Args:
            model_id: Unique identifier
            hyperparameters: Passed to RandomForestRegressor; defaults to
                             500 trees with seed 123
        """
        super().__init__(model_id, hyperparameters)
        self.model_object: Optional[RandomForestRegressor] = None
        self.hyperparameters.setdefault("n_estimators", 500)
        self.hyperparameters.setdefault("random_state", 123)

    @property
    def model_type(self) -> str:
        return "random_forest"

    def fit(self, X: pd.DataFrame, y: pd.Series) -> "RandomForestModel":
        """Fit the forest on the full feature frame."""
        self._validate_input(X)
        if len(X) != len(y):
            raise ValueError(f"X has {len(X)} rows but y has {len(y)}")

        self.feature_names = X.columns.tolist()
        self.model_object = RandomForestRegressor(**self.hyperparameters)
        self.model_object.fit(X, np.asarray(y, dtype="float64"))
        self.is_fitted = True

        logger.debug(f"Fitted {self.model_type} on {len(X)} rows, {len(self.feature_names)} features")
        return self

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """Generate predictions."""
        if not self.is_fitted:
            raise ValueError("Model not fitted")
        self._validate_input(X)
        return self.model_object.predict(self._align_features(X))

    def get_feature_importance(self) -> Dict[str, float]:
        """Impurity-based (mean decrease in squared error) importances."""
        if not self.is_fitted:
            return {}
        return dict(zip(self.feature_names, self.model_object.feature_importances_.tolist()))

    def permutation_importance(
        self,
        X: pd.DataFrame,
        y: pd.Series,
        n_repeats: int = 10,
        random_state: Optional[int] = None,
    ) -> Dict[str, float]:
        """
        Mean increase in mean squared error when each feature is shuffled.

        Undefined importances (NaN) are reported as 0.

        Args:
            X: Feature DataFrame
            y: Target Series
            n_repeats: Shuffles per feature
            random_state: Seed (defaults to the model's seed)

        Returns:
            Dictionary mapping feature names to importance scores
        """
        if not self.is_fitted:
            raise ValueError("Model not fitted")
        if random_state is None:
            random_state = self.hyperparameters.get("random_state")

        result = permutation_importance(
            self.model_object,
            self._align_features(X),
            np.asarray(y, dtype="float64"),
            scoring="neg_mean_squared_error",
            n_repeats=n_repeats,
            random_state=random_state,
        )
        scores = np.nan_to_num(result.importances_mean, nan=0.0)
        return dict(zip(self.feature_names, scores.tolist()))
