"""Error types raised across the pipeline."""

from typing import Any


class LagForecastError(Exception):
    """Base class for all pipeline errors."""


class UnrecognizedMonth(LagForecastError, ValueError):
    """Month token whose three-letter prefix is not a known month abbreviation."""

    def __init__(self, token: Any):
        self.token = token
        super().__init__(f"Unrecognized month: {token!r}")


class UnparsableNumber(LagForecastError, ValueError):
    """Numeric text that cannot be parsed after removing grouping separators.

    Resolved by the caller's cleaning policy; never propagated past the cleaner.
    """

    def __init__(self, raw: Any):
        self.raw = raw
        super().__init__(f"Unparsable number: {raw!r}")


class DuplicateObservation(LagForecastError):
    """More than one row for the same calendar month."""


class MissingColumn(LagForecastError, KeyError):
    """A configured column is not present in the input frame."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InsufficientData(LagForecastError):
    """Fewer usable rows than a component requires."""

    def __init__(self, message: str, available: int = 0, required: int = 0):
        self.available = available
        self.required = required
        super().__init__(message)


class NonFiniteSeriesValue(LagForecastError):
    """Non-finite values (from log or ratio transforms) reached a consumer."""


class LagOrderSelectionFailure(LagForecastError):
    """Automatic lag-order search failed and no fallback order was given."""


class ForecastOriginMissing(LagForecastError):
    """No complete observation exists exactly one lag horizon before the target month."""


class FeatureMismatch(LagForecastError):
    """Prediction input does not carry the feature names the model was trained on."""
