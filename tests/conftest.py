"""Pytest configuration and shared fixtures."""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from lagforecast.models.base_model import BaseModel
from lagforecast.utils.config_manager import load_pipeline_config

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

MONTH_SPELLINGS = [
    "Jan", "February", "mar", "April", "May", "June",
    "Jul", "August", "Sept", "October", "NOV", "December",
]


def _fmt(value: float) -> str:
    """Locale-style text with thousands separators."""
    return f"{value:,.2f}"


@pytest.fixture
def raw_observations():
    """36 months of raw text data, shuffled, with one bad and one missing cell."""
    n = 36
    rng = np.random.default_rng(42)
    dates = pd.date_range("2023-01-01", periods=n, freq="MS")

    imports = rng.uniform(50_000, 150_000, n)
    tires = rng.uniform(1_000, 5_000, n)
    oil = rng.uniform(60, 110, n)
    gold = rng.uniform(1_700, 2_400, n)
    rubber = rng.uniform(140, 190, n)
    fatalities = np.empty(n)
    fatalities[:4] = rng.uniform(500, 1_500, 4)
    fatalities[4:] = imports[:-4] / 100 + rng.normal(0, 20, n - 4)

    rows = []
    for i, date in enumerate(dates):
        rows.append({
            "Month": MONTH_SPELLINGS[date.month - 1],
            "Year": str(date.year),
            "GCC_Total_Imports": _fmt(imports[i]),
            "Estimated_Violence_Fatalities": _fmt(fatalities[i]),
            "Brent_Crude_Price_USD_Barrel": _fmt(oil[i]),
            "Gold_Price_USD_oz": "N/A" if i == 10 else _fmt(gold[i]),
            "Global_Rubber_Price_Index": _fmt(rubber[i]),
            "Modeled_Tire_Imports_4011.20_Units": _fmt(tires[i]),
        })
    rows.append({
        "Month": "Total", "Year": "", "GCC_Total_Imports": "", "Estimated_Violence_Fatalities": "",
        "Brent_Crude_Price_USD_Barrel": "", "Gold_Price_USD_oz": "",
        "Global_Rubber_Price_Index": "", "Modeled_Tire_Imports_4011.20_Units": "",
    })

    df = pd.DataFrame(rows)
    return df.sample(frac=1.0, random_state=7).reset_index(drop=True)


@pytest.fixture
def pipeline_config():
    """Repository defaults with a smaller forest for speed."""
    return load_pipeline_config(
        str(CONFIG_DIR),
        overrides={"model": {"n_estimators": 50, "permutation_repeats": 3}},
    )


@pytest.fixture
def monthly_index():
    def _make(n, start="2020-01-01"):
        return pd.date_range(start, periods=n, freq="MS", name="date")
    return _make


class MeanModel(BaseModel):
    """Predicts the training mean; records every predict() input index."""

    def __init__(self):
        super().__init__(model_id="mean")
        self.predict_calls = []

    @property
    def model_type(self) -> str:
        return "mean"

    def fit(self, X, y):
        self._validate_input(X)
        self.feature_names = X.columns.tolist()
        self.mean_ = float(np.mean(y))
        self.train_index = X.index
        self.is_fitted = True
        return self

    def predict(self, X):
        X = self._align_features(X)
        self.predict_calls.append(X.index)
        return np.full(len(X), self.mean_)

    def get_feature_importance(self):
        return {name: 0.0 for name in self.feature_names}


@pytest.fixture
def mean_model_factory():
    """Factory producing MeanModel instances and remembering them."""
    created = []

    def factory():
        model = MeanModel()
        created.append(model)
        return model

    factory.created = created
    return factory
