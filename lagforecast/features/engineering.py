"""Lag feature construction.

A predictor shifted by ``k`` rows is paired with the unshifted target on the
same row, so every feature value comes from exactly ``k`` observations
earlier. Feature names are owned by ``LagFeatureSpec`` and shared between
training datasets and single-row forecast inputs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union
import logging

import numpy as np
import pandas as pd

from lagforecast.data.structs import LaggedDataset
from lagforecast.utils.error_handling import ForecastOriginMissing, MissingColumn

logger = logging.getLogger(__name__)


def lag_feature_name(column: str, lag: int) -> str:
    """Default feature name; a zero lag is the series itself."""
    return column if lag == 0 else f"{column}_lag_{lag}"


@dataclass(frozen=True)
class LagFeatureSpec:
    """
    Names and horizon of a lagged feature set.

    Attributes:
        target: Source column of the target series
        predictors: Pairs of (source column, feature name)
        lag_horizon: Rows each predictor is shifted by
        target_alias: Column name of the target in the dataset (defaults to target)
    """
    target: str
    predictors: Tuple[Tuple[str, str], ...]
    lag_horizon: int
    target_alias: Optional[str] = None

    def __post_init__(self):
        if self.lag_horizon < 0:
            raise ValueError(f"lag_horizon must be non-negative, got {self.lag_horizon}")
        object.__setattr__(
            self, "predictors", tuple((str(s), str(n)) for s, n in self.predictors)
        )
        names = self.feature_names
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate feature names: {list(names)}")

    @classmethod
    def from_templates(
        cls,
        target: str,
        predictors: Union[Mapping[str, Optional[str]], Sequence[str]],
        lag_horizon: int,
        target_alias: Optional[str] = None,
    ) -> "LagFeatureSpec":
        """
        Build from feature-name templates.

        Templates may reference ``{lag}`` and ``{column}``, e.g.
        ``"Oil_Lag{lag}"``. A sequence of columns (or a None template)
        uses ``lag_feature_name``.
        """
        if not isinstance(predictors, Mapping):
            predictors = {col: None for col in predictors}

        pairs = []
        for column, template in predictors.items():
            if template is None:
                name = lag_feature_name(column, lag_horizon)
            else:
                name = template.format(lag=lag_horizon, column=column)
            pairs.append((column, name))
        return cls(
            target=target,
            predictors=tuple(pairs),
            lag_horizon=lag_horizon,
            target_alias=target_alias,
        )

    @property
    def target_name(self) -> str:
        return self.target_alias or self.target

    @property
    def source_columns(self) -> Tuple[str, ...]:
        return tuple(source for source, _ in self.predictors)

    @property
    def feature_names(self) -> Tuple[str, ...]:
        return tuple(name for _, name in self.predictors)

    def feature_row(self, observation: Union[pd.Series, Mapping[str, Any]]) -> pd.DataFrame:
        """
        Single-row model input built from one observation's predictor values.

        Args:
            observation: Values keyed by source column (the target is not needed)

        Returns:
            One-row DataFrame with columns ``feature_names``

        Raises:
            ForecastOriginMissing: If a predictor value is absent or missing
        """
        values = {}
        for source, name in self.predictors:
            value = observation.get(source) if hasattr(observation, "get") else None
            if value is None or pd.isna(value):
                raise ForecastOriginMissing(
                    f"Observation has no value for predictor '{source}'"
                )
            values[name] = float(value)
        index = [observation.name] if isinstance(observation, pd.Series) else None
        return pd.DataFrame([values], columns=list(self.feature_names), index=index)


class LagFeatureBuilder:
    """Builds lagged datasets from chronologically sorted series."""

    def build(self, df: pd.DataFrame, spec: LagFeatureSpec) -> LaggedDataset:
        """
        Build a lagged dataset from a sorted, cleaned frame.

        Row ``i`` of each feature holds the predictor value from row
        ``i - k``. Rows with a missing target or feature value are dropped,
        which always removes the first ``k`` rows. A horizon at least as long
        as the input yields an empty dataset rather than an error.

        Args:
            df: Observations in ascending date order, numeric columns cleaned
            spec: Target, predictors, feature names, and horizon

        Returns:
            LaggedDataset in the input's chronological order

        Raises:
            MissingColumn: If the target or a predictor column is absent
            TypeError: If a used column is not numeric
        """
        k = spec.lag_horizon
        for col in (spec.target, *spec.source_columns):
            if col not in df.columns:
                raise MissingColumn(f"Column '{col}' not found in input")
            if not pd.api.types.is_numeric_dtype(df[col]):
                raise TypeError(f"Column '{col}' must be numeric; clean it before building lags")

        assembled = pd.DataFrame(index=df.index)
        assembled[spec.target_name] = df[spec.target].astype("float64")
        for source, name in spec.predictors:
            assembled[name] = df[source].astype("float64").shift(k)

        complete = assembled.notna().all(axis=1).to_numpy()
        n = len(assembled)
        lag_boundary = min(k, n)
        dropped_missing = int((~complete[lag_boundary:]).sum())

        if k >= n:
            logger.warning(f"Lag horizon {k} >= input length {n}; lagged dataset is empty")

        result = assembled.loc[complete]
        logger.info(
            f"Built {len(result)} lagged rows from {n} observations "
            f"(lag {k}: {lag_boundary} boundary rows, {dropped_missing} incomplete rows dropped)"
        )

        return LaggedDataset(
            frame=result,
            target_name=spec.target_name,
            feature_names=spec.feature_names,
            lag_horizon=k,
            metadata={
                "source_target": spec.target,
                "source_predictors": dict(spec.predictors),
                "input_rows": n,
                "lag_boundary_rows": lag_boundary,
                "incomplete_rows_dropped": dropped_missing,
            },
        )

    def build_lags(
        self,
        series: Union[Mapping[str, pd.Series], pd.DataFrame, LaggedDataset],
        lag_horizon: int,
        target_name: Optional[str] = None,
        feature_names: Optional[Mapping[str, Optional[str]]] = None,
        target_alias: Optional[str] = None,
    ) -> LaggedDataset:
        """
        Lag every predictor series against the target series.

        Args:
            series: Named, equally long series in chronological order, a
                    DataFrame of them, or a previously built dataset
            lag_horizon: Rows by which predictors are shifted
            target_name: Target series name (defaults to a dataset's target)
            feature_names: Predictor column -> feature name template; defaults
                           to every non-target series with default names
            target_alias: Name of the target column in the output

        Returns:
            LaggedDataset
        """
        if isinstance(series, LaggedDataset):
            target_name = target_name or series.target_name
            df = series.to_frame()
        elif isinstance(series, pd.DataFrame):
            df = series
        else:
            lengths = {name: len(s) for name, s in series.items()}
            if len(set(lengths.values())) > 1:
                raise ValueError(f"Series lengths differ: {lengths}")
            df = pd.DataFrame(
                {name: np.asarray(s, dtype="float64") for name, s in series.items()},
                index=next(iter(series.values())).index if series else None,
            )

        if target_name is None:
            raise ValueError("target_name is required")

        if feature_names is None:
            feature_names = {col: None for col in df.columns if col != target_name}

        spec = LagFeatureSpec.from_templates(
            target=target_name,
            predictors=feature_names,
            lag_horizon=lag_horizon,
            target_alias=target_alias,
        )
        return self.build(df, spec)
