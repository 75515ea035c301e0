"""Walk-forward evaluation: chronological split, overfitting ratio, learning curve."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging
import math

import numpy as np
import pandas as pd

from lagforecast.data.splitters import TimeSeriesSplitter
from lagforecast.data.structs import LaggedDataset
from lagforecast.evaluation.metrics import MetricsCalculator, rmse
from lagforecast.models.base_model import BaseModel
from lagforecast.utils.error_handling import InsufficientData

logger = logging.getLogger(__name__)

ModelFactory = Callable[[], BaseModel]


@dataclass
class LearningCurvePoint:
    """Errors for one training-subset size."""
    size: int
    train_error: float
    test_error: float


@dataclass
class EvaluationReport:
    """Outcome of a walk-forward evaluation."""
    train_size: int
    test_size: int
    error_train: float
    error_test: float
    overfitting_ratio: float
    baseline_error_test: float
    overfit_threshold: float = 2.0
    test_metrics: Dict[str, float] = field(default_factory=dict)
    learning_curve: List[LearningCurvePoint] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_overfitting(self) -> bool:
        return self.overfitting_ratio > self.overfit_threshold

    @property
    def status(self) -> str:
        if self.is_overfitting:
            return (
                "WARNING: High overfitting detected. The model memorises the past "
                "but fails on the held-out future."
            )
        return "STATUS: GOOD. The model generalizes acceptably."

    def learning_curve_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(p.size, p.train_error, p.test_error) for p in self.learning_curve],
            columns=["size", "train_error", "test_error"],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "train_size": self.train_size,
            "test_size": self.test_size,
            "error_train": self.error_train,
            "error_test": self.error_test,
            "overfitting_ratio": self.overfitting_ratio,
            "baseline_error_test": self.baseline_error_test,
            "overfit_threshold": self.overfit_threshold,
            "is_overfitting": self.is_overfitting,
            "test_metrics": self.test_metrics,
            "learning_curve": [vars(p) for p in self.learning_curve],
            "metadata": self.metadata,
        }


def overfitting_ratio(error_test: float, error_train: float) -> float:
    """Held-out error over training error; a perfect fit on both is 1.0."""
    if error_train == 0:
        return math.inf if error_test > 0 else 1.0
    return error_test / error_train


class WalkForwardEvaluator:
    """
    Fits a fresh model on chronological training prefixes and scores it on
    the fixed held-out suffix that follows them.
    """

    def __init__(
        self,
        model_factory: ModelFactory,
        train_fraction: float = 0.8,
        min_train_size: int = 20,
        step: int = 5,
        overfit_threshold: float = 2.0,
    ):
        """
        Args:
            model_factory: Zero-argument callable returning an unfitted model
            train_fraction: Share of rows in the training prefix
            min_train_size: Smallest training subset, and the minimum prefix length
            step: Increment between learning-curve subset sizes
            overfit_threshold: Ratio above which overfitting is reported
        """
        if min_train_size < 1:
            raise ValueError(f"min_train_size must be positive, got {min_train_size}")
        if step < 1:
            raise ValueError(f"step must be positive, got {step}")
        self.model_factory = model_factory
        self.train_fraction = train_fraction
        self.min_train_size = min_train_size
        self.step = step
        self.overfit_threshold = overfit_threshold
        self.splitter = TimeSeriesSplitter()
        self.metrics = MetricsCalculator()

    def split(self, dataset: LaggedDataset) -> Tuple[LaggedDataset, LaggedDataset]:
        """
        Chronological split into training prefix and held-out suffix.

        Raises:
            InsufficientData: If the prefix is shorter than ``min_train_size``
                              or the held-out suffix would be empty
        """
        n = len(dataset)
        if n < self.min_train_size:
            logger.error(f"Dataset has {n} rows; at least {self.min_train_size} required")
            raise InsufficientData(
                f"Dataset has {n} rows, fewer than the minimum training size {self.min_train_size}",
                available=n,
                required=self.min_train_size,
            )

        split = self.splitter.train_test_split(n, self.train_fraction)
        n_train, n_test = split.split_index, len(split.test_indices)

        if n_train < self.min_train_size:
            logger.error(f"Training prefix has {n_train} rows; at least {self.min_train_size} required")
            raise InsufficientData(
                f"Training prefix of {n_train} rows is shorter than {self.min_train_size}",
                available=n_train,
                required=self.min_train_size,
            )
        if n_test == 0:
            logger.error(f"No held-out rows remain from {n} rows at fraction {self.train_fraction}")
            raise InsufficientData(
                f"Held-out suffix is empty for {n} rows at train fraction {self.train_fraction}",
                available=n,
                required=n + 1,
            )

        is_valid, issues = self.splitter.validate_no_leakage(dataset.index, split)
        if not is_valid:
            logger.error(f"Chronological split is invalid: {issues}")
            raise ValueError(f"Dataset is not in chronological order: {'; '.join(issues)}")

        return dataset.rows(0, n_train), dataset.rows(n_train, n)

    def evaluate(self, dataset: LaggedDataset, learning_curve: bool = True) -> EvaluationReport:
        """
        Run the walk-forward evaluation.

        Args:
            dataset: Lagged dataset in chronological order
            learning_curve: Also fit on growing training subsets

        Returns:
            EvaluationReport
        """
        train, test = self.split(dataset)
        logger.info(
            f"Training on first {len(train)} rows, testing on next {len(test)} rows"
        )

        model, error_train, error_test, test_pred = self._fit_and_score(train, test)
        ratio = overfitting_ratio(error_test, error_train)

        baseline = np.full(len(test), float(train.target.mean()))
        baseline_error = rmse(test.target.to_numpy(), baseline)

        curve = self.learning_curve(train, test) if learning_curve else []

        report = EvaluationReport(
            train_size=len(train),
            test_size=len(test),
            error_train=error_train,
            error_test=error_test,
            overfitting_ratio=ratio,
            baseline_error_test=baseline_error,
            overfit_threshold=self.overfit_threshold,
            test_metrics=self.metrics.calculate_regression_metrics(test.target.to_numpy(), test_pred),
            learning_curve=curve,
            metadata={
                "model_type": getattr(model, "model_type", type(model).__name__),
                "train_fraction": self.train_fraction,
                "train_start": str(train.index[0]),
                "train_end": str(train.index[-1]),
                "test_start": str(test.index[0]),
                "test_end": str(test.index[-1]),
            },
        )
        logger.info(
            f"RMSE train={error_train:.2f} test={error_test:.2f} "
            f"ratio={ratio:.2f} baseline={baseline_error:.2f}"
        )
        if report.is_overfitting:
            logger.warning(f"Overfitting ratio {ratio:.2f} exceeds {self.overfit_threshold}")
        return report

    def learning_curve(
        self,
        train: LaggedDataset,
        test: LaggedDataset,
    ) -> List[LearningCurvePoint]:
        """
        Errors for training subsets of increasing size against a fixed test set.

        Each subset is the first ``size`` rows of ``train``; ``test`` is the
        same for every size.
        """
        sizes = self.splitter.learning_curve_sizes(len(train), self.min_train_size, self.step)
        points = []
        for size in sizes:
            _, train_err, test_err, _ = self._fit_and_score(train.head(size), test)
            points.append(LearningCurvePoint(size=size, train_error=train_err, test_error=test_err))
            logger.debug(f"Learning curve size={size}: train={train_err:.2f} test={test_err:.2f}")
        logger.info(f"Learning curve computed for {len(points)} subset sizes")
        return points

    def _fit_and_score(
        self,
        train: LaggedDataset,
        test: LaggedDataset,
    ) -> Tuple[BaseModel, float, float, np.ndarray]:
        model = self.model_factory()
        model.fit(train.features, train.target)
        train_pred = model.predict(train.features)
        test_pred = model.predict(test.features)
        return (
            model,
            rmse(train.target.to_numpy(), train_pred),
            rmse(test.target.to_numpy(), test_pred),
            test_pred,
        )
