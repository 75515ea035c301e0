"""Data loading, calendar normalisation, cleaning, and splitting utilities."""

from .loaders import DataLoader, ValidationResult, resolve_column
from .dates import month_number, year_number, normalize_date, index_by_calendar
from .cleaners import NumericCleaner, CleaningPolicy, MISSING, is_missing
from .structs import LaggedDataset
from .splitters import TimeSeriesSplitter, SplitIndices

__all__ = [
    "DataLoader",
    "ValidationResult",
    "resolve_column",
    "month_number",
    "year_number",
    "normalize_date",
    "index_by_calendar",
    "NumericCleaner",
    "CleaningPolicy",
    "MISSING",
    "is_missing",
    "LaggedDataset",
    "TimeSeriesSplitter",
    "SplitIndices",
]
