"""Lagged commodity signals versus conflict fatalities: feature pipeline and evaluation."""

__version__ = "0.1.0"
