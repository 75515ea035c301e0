"""Calendar normalisation of (Month, Year) observations."""

import logging
from typing import Any

import numpy as np
import pandas as pd

from lagforecast.utils.error_handling import DuplicateObservation, MissingColumn, UnrecognizedMonth

logger = logging.getLogger(__name__)

# Fixed English abbreviations; calendar.month_abbr depends on the process locale.
MONTH_ABBREVIATIONS = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)


def month_number(token: Any) -> int:
    """
    Map a free-text month token to its number (1-12).

    Only the first three characters are compared, case-insensitively, so
    "Sep", "Sept" and "September" all resolve to 9.

    Raises:
        UnrecognizedMonth: If the prefix matches no month abbreviation
    """
    prefix = str(token).strip()[:3].lower()
    try:
        return MONTH_ABBREVIATIONS.index(prefix) + 1
    except ValueError:
        raise UnrecognizedMonth(token) from None


def year_number(token: Any) -> int:
    """
    Parse a year such as "2024" or "2024.0".

    Raises:
        ValueError: If the token is not a whole number
    """
    value = float(str(token).strip())
    if not value.is_integer():
        raise ValueError(f"Year is not a whole number: {token!r}")
    return int(value)


def normalize_date(month: Any, year: Any) -> pd.Timestamp:
    """Return the first day of the given month as a Timestamp."""
    return pd.Timestamp(year=year_number(year), month=month_number(month), day=1)


def index_by_calendar(
    df: pd.DataFrame,
    month_col: str = "Month",
    year_col: str = "Year",
    on_unrecognized: str = "drop",
) -> pd.DataFrame:
    """
    Attach a canonical calendar date to every row and sort chronologically.

    Every downstream component assumes this ordering; none of them re-sorts.

    Args:
        df: Raw observations with month and year columns
        month_col: Name of the free-text month column
        year_col: Name of the year column
        on_unrecognized: 'drop' to discard rows whose date cannot be
                         normalised, 'raise' to fail on the first one

    Returns:
        Copy of the frame on an ascending DatetimeIndex named 'date'

    Raises:
        UnrecognizedMonth: On a bad month when on_unrecognized='raise'
        ValueError: On a non-integral year when on_unrecognized='raise'
        DuplicateObservation: If two rows share a calendar month
    """
    if on_unrecognized not in ("drop", "raise"):
        raise ValueError(f"Unknown on_unrecognized policy: {on_unrecognized}")
    for col in (month_col, year_col):
        if col not in df.columns:
            raise MissingColumn(f"Column '{col}' not found in input")

    dates = []
    keep = []
    for month, year in zip(df[month_col], df[year_col]):
        try:
            dates.append(normalize_date(month, year))
            keep.append(True)
        except ValueError:
            if on_unrecognized == "raise":
                logger.error(f"Cannot normalise date for Month={month!r}, Year={year!r}")
                raise
            keep.append(False)

    dropped = len(keep) - sum(keep)
    if dropped:
        logger.warning(f"Dropped {dropped} rows with unrecognised month or year")

    result = df.loc[keep].copy()
    result.index = pd.DatetimeIndex(dates, name="date")

    duplicated = result.index[result.index.duplicated()]
    if len(duplicated) > 0:
        months = sorted({d.strftime("%Y-%m") for d in duplicated})
        raise DuplicateObservation(f"Multiple observations for month(s): {', '.join(months)}")

    result = result.sort_index(kind="mergesort")
    _warn_on_gaps(result.index)
    return result


def _warn_on_gaps(index: pd.DatetimeIndex) -> None:
    """Lags are positional, so missing months silently stretch the horizon."""
    if len(index) < 2:
        return
    ordinals = np.asarray(index.year) * 12 + np.asarray(index.month)
    gaps = int((np.diff(ordinals) != 1).sum())
    if gaps:
        logger.warning(
            f"{gaps} gap(s) between consecutive observations; "
            "positional lags will not equal calendar months across them"
        )
