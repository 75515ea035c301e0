"""Coercion of locale-formatted numeric text into floats."""

from enum import Enum
import logging
import math
from typing import Any, Iterable, Optional, Union

import numpy as np
import pandas as pd

from lagforecast.utils.error_handling import MissingColumn, UnparsableNumber

logger = logging.getLogger(__name__)

# Missing marker for cleaned values; pandas treats it as NA throughout.
MISSING = float("nan")

_MISSING_TOKENS = {"", "na", "n/a", "nan", "null", "none", "-"}


class CleaningPolicy(str, Enum):
    """What to do with a value that cannot be parsed as a number."""
    DROP = "drop"
    ZERO = "zero"


def is_missing(value: Any) -> bool:
    """True for the missing marker (NaN) or None."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def parse_number(raw: Any) -> float:
    """
    Parse a single value, removing thousands separators.

    Raises:
        UnparsableNumber: If the value is blank, a missing token, or not numeric
    """
    if isinstance(raw, (int, float, np.integer, np.floating)) and not isinstance(raw, bool):
        if math.isnan(raw):
            raise UnparsableNumber(raw)
        return float(raw)

    text = str(raw).strip().replace(",", "")
    if text.lower() in _MISSING_TOKENS:
        raise UnparsableNumber(raw)
    try:
        value = float(text)
    except ValueError:
        raise UnparsableNumber(raw) from None
    if math.isnan(value):
        raise UnparsableNumber(raw)
    return value


class NumericCleaner:
    """Applies a caller-selected policy to unparsable numeric values."""

    def __init__(self, policy: Union[CleaningPolicy, str] = CleaningPolicy.DROP):
        self.policy = CleaningPolicy(policy)

    def clean(self, raw: Any, policy: Optional[Union[CleaningPolicy, str]] = None) -> float:
        """
        Clean one value.

        Args:
            raw: Text or number, possibly with grouping separators
            policy: Overrides the cleaner's default policy for this call

        Returns:
            The parsed float; MISSING under DROP or 0.0 under ZERO when
            the value cannot be parsed
        """
        policy = CleaningPolicy(policy) if policy is not None else self.policy
        try:
            return parse_number(raw)
        except UnparsableNumber:
            return 0.0 if policy is CleaningPolicy.ZERO else MISSING

    def clean_series(
        self,
        series: pd.Series,
        policy: Optional[Union[CleaningPolicy, str]] = None,
    ) -> pd.Series:
        """
        Clean a whole column, preserving its index and length.

        Args:
            series: Raw column
            policy: Overrides the cleaner's default policy

        Returns:
            float64 Series with NaN as the missing marker under DROP
        """
        policy = CleaningPolicy(policy) if policy is not None else self.policy
        result = series.map(lambda raw: self.clean(raw, CleaningPolicy.DROP)).astype("float64")

        n_invalid = int(result.isna().sum())
        if n_invalid:
            action = "zero-filled" if policy is CleaningPolicy.ZERO else "marked missing"
            logger.info(f"{series.name}: {n_invalid} unparsable value(s) {action}")
        if policy is CleaningPolicy.ZERO:
            result = result.fillna(0.0)
        return result.rename(series.name)

    def clean_columns(
        self,
        df: pd.DataFrame,
        columns: Iterable[str],
        policy: Optional[Union[CleaningPolicy, str]] = None,
    ) -> pd.DataFrame:
        """
        Return a copy of ``df`` with the given columns cleaned.

        Raises:
            MissingColumn: If a column is not present
        """
        result = df.copy()
        for col in columns:
            if col not in result.columns:
                raise MissingColumn(f"Column '{col}' not found in input")
            result[col] = self.clean_series(result[col], policy)
        return result
