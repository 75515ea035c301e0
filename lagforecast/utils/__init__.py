"""Utility functions for logging, configuration, and error handling."""

from lagforecast.utils.config_manager import ConfigManager
from lagforecast.utils.error_handling import (
    LagForecastError,
    UnrecognizedMonth,
    UnparsableNumber,
    DuplicateObservation,
    MissingColumn,
    InsufficientData,
    NonFiniteSeriesValue,
    LagOrderSelectionFailure,
    ForecastOriginMissing,
    FeatureMismatch,
)

__all__ = [
    "ConfigManager",
    "LagForecastError",
    "UnrecognizedMonth",
    "UnparsableNumber",
    "DuplicateObservation",
    "MissingColumn",
    "InsufficientData",
    "NonFiniteSeriesValue",
    "LagOrderSelectionFailure",
    "ForecastOriginMissing",
    "FeatureMismatch",
]
