"""Core data structures for the lagged feature pipeline."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import pandas as pd


@dataclass(frozen=True, eq=False)
class LaggedDataset:
    """
    Chronologically ordered rows of one target value and named lag features.

    The frame is copied on construction and every accessor returns a copy,
    so a dataset cannot be changed once built.

    Attributes:
        frame: DataFrame on a DatetimeIndex holding the target and features
        target_name: Column holding the unshifted target
        feature_names: Lag feature columns, in model input order
        lag_horizon: Number of rows each predictor was shifted by
        metadata: Provenance (source columns, rows dropped, ...)
    """
    frame: pd.DataFrame
    target_name: str
    feature_names: Tuple[str, ...]
    lag_horizon: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate columns and take ownership of a private copy."""
        object.__setattr__(self, "feature_names", tuple(self.feature_names))
        if self.target_name in self.feature_names:
            raise ValueError(f"Target '{self.target_name}' cannot also be a feature")
        expected = [self.target_name, *self.feature_names]
        missing = [c for c in expected if c not in self.frame.columns]
        if missing:
            raise ValueError(f"Dataset frame is missing columns: {missing}")
        object.__setattr__(self, "frame", self.frame[expected].copy())

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def is_empty(self) -> bool:
        return len(self.frame) == 0

    @property
    def index(self) -> pd.Index:
        return self.frame.index.copy()

    @property
    def features(self) -> pd.DataFrame:
        return self.frame[list(self.feature_names)].copy()

    @property
    def target(self) -> pd.Series:
        return self.frame[self.target_name].copy()

    def rows(self, start: int, stop: int) -> "LaggedDataset":
        """Positional slice [start, stop) as a new dataset."""
        return LaggedDataset(
            frame=self.frame.iloc[start:stop],
            target_name=self.target_name,
            feature_names=self.feature_names,
            lag_horizon=self.lag_horizon,
            metadata=dict(self.metadata),
        )

    def head(self, n: int) -> "LaggedDataset":
        return self.rows(0, n)

    def to_frame(self) -> pd.DataFrame:
        return self.frame.copy()
