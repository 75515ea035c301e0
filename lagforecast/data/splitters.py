"""Chronological train/test splitting for walk-forward evaluation."""

from typing import List, Dict, Any, Tuple
from dataclasses import dataclass, field
import logging
import math

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class SplitIndices:
    """Container for train/test split positions with metadata."""
    train_indices: List[int]
    test_indices: List[int]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def split_index(self) -> int:
        return len(self.train_indices)


class TimeSeriesSplitter:
    """Time-series aware splitting; rows are never shuffled."""

    def train_test_split(self, n: int, train_fraction: float = 0.8) -> SplitIndices:
        """
        Split ``n`` ordered rows into a training prefix and a held-out suffix.

        The split position is ``floor(train_fraction * n)``.

        Args:
            n: Number of rows (already in chronological order)
            train_fraction: Proportion of rows in the training prefix

        Returns:
            SplitIndices with positional indices for each part
        """
        if not 0.0 < train_fraction < 1.0:
            raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")
        if n < 0:
            raise ValueError(f"Row count cannot be negative: {n}")

        split_index = math.floor(train_fraction * n)
        indices = list(range(n))

        return SplitIndices(
            train_indices=indices[:split_index],
            test_indices=indices[split_index:],
            metadata={
                "split_type": "chronological",
                "train_fraction": train_fraction,
                "total_samples": n,
                "train_samples": split_index,
                "test_samples": n - split_index,
            },
        )

    def learning_curve_sizes(self, n_train: int, min_size: int, step: int) -> List[int]:
        """
        Training subset sizes ``min_size, min_size + step, ...`` up to ``n_train``.

        The last size is the largest value of the sequence not exceeding
        ``n_train``; it equals ``n_train`` only when the step lands on it.
        """
        if step < 1:
            raise ValueError(f"step must be positive, got {step}")
        if min_size < 1:
            raise ValueError(f"min_size must be positive, got {min_size}")
        return list(range(min_size, n_train + 1, step))

    def validate_no_leakage(
        self,
        index: pd.Index,
        split: SplitIndices,
    ) -> Tuple[bool, List[str]]:
        """
        Validate that every training timestamp precedes every test timestamp.

        Args:
            index: DatetimeIndex of the split rows
            split: SplitIndices to validate

        Returns:
            Tuple of (is_valid, list of issues)
        """
        issues: List[str] = []

        if not isinstance(index, pd.DatetimeIndex):
            issues.append("Index is not a DatetimeIndex")
            return False, issues

        train_times = index[split.train_indices]
        test_times = index[split.test_indices]

        if len(train_times) > 0 and len(test_times) > 0:
            if train_times.max() >= test_times.min():
                issues.append(
                    f"Training data ({train_times.max()}) overlaps with "
                    f"test data ({test_times.min()})"
                )

        return len(issues) == 0, issues
