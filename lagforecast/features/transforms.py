"""Series transforms: stationarity, finiteness filtering, and scaling."""

import logging

import numpy as np
import pandas as pd

from lagforecast.utils.error_handling import NonFiniteSeriesValue

logger = logging.getLogger(__name__)


def log_difference(df: pd.DataFrame, offset: float = 1.0) -> pd.DataFrame:
    """
    First difference of ``log(x + offset)`` for every column.

    The offset keeps zero counts finite. Values at or below ``-offset``
    produce non-finite results, which are left in place for
    ``drop_non_finite`` to remove. The first row has no predecessor and is
    dropped.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        logged = np.log(df.astype("float64") + offset)
    return logged.diff().iloc[1:]


def drop_non_finite(df: pd.DataFrame) -> pd.DataFrame:
    """Remove rows containing NaN or infinite values."""
    finite = np.isfinite(df.to_numpy(dtype="float64")).all(axis=1)
    dropped = int((~finite).sum())
    if dropped:
        logger.warning(f"Removed {dropped} row(s) with non-finite values")
    return df.loc[finite]


def ensure_finite(df: pd.DataFrame) -> None:
    """
    Raises:
        NonFiniteSeriesValue: If any value is NaN or infinite
    """
    values = df.to_numpy(dtype="float64")
    if not np.isfinite(values).all():
        bad = int((~np.isfinite(values)).any(axis=1).sum())
        raise NonFiniteSeriesValue(
            f"{bad} row(s) contain non-finite values; filter them with drop_non_finite first"
        )


def min_max_normalize(series: pd.Series) -> pd.Series:
    """Scale to [0, 1]. A constant series maps to all zeros."""
    values = series.astype("float64")
    span = values.max() - values.min()
    if not span or np.isnan(span):
        return pd.Series(0.0, index=series.index, name=series.name)
    return (values - values.min()) / span
