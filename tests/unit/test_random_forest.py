"""Unit tests for the random forest wrapper."""

import numpy as np
import pandas as pd
import pytest

from lagforecast.models.random_forest import RandomForestModel
from lagforecast.utils.error_handling import FeatureMismatch


@pytest.fixture
def training_data(monthly_index):
    rng = np.random.default_rng(3)
    n = 60
    X = pd.DataFrame({
        "Toyota_Lag4": rng.uniform(0, 10, n),
        "Oil_Lag4": rng.uniform(0, 10, n),
    }, index=monthly_index(n))
    y = pd.Series(5.0 * X["Toyota_Lag4"] + rng.normal(0, 0.1, n), index=X.index)
    return X, y


def test_defaults():
    model = RandomForestModel()
    assert model.hyperparameters["n_estimators"] == 500
    assert model.hyperparameters["random_state"] == 123
    assert model.model_type == "random_forest"
    assert not model.is_fitted


def test_fit_predict(training_data):
    X, y = training_data
    model = RandomForestModel(hyperparameters={"n_estimators": 30})
    model.fit(X, y)

    preds = model.predict(X)
    assert preds.shape == (len(X),)
    assert model.feature_names == ["Toyota_Lag4", "Oil_Lag4"]
    # Column order at prediction time does not matter
    np.testing.assert_allclose(model.predict(X[["Oil_Lag4", "Toyota_Lag4"]]), preds)


def test_seeded_forest_is_deterministic(training_data):
    X, y = training_data
    first = RandomForestModel(hyperparameters={"n_estimators": 20}).fit(X, y).predict(X)
    second = RandomForestModel(hyperparameters={"n_estimators": 20}).fit(X, y).predict(X)
    np.testing.assert_array_equal(first, second)


def test_predict_rejects_renamed_features(training_data):
    X, y = training_data
    model = RandomForestModel(hyperparameters={"n_estimators": 10}).fit(X, y)
    with pytest.raises(FeatureMismatch):
        model.predict(X.rename(columns={"Oil_Lag4": "Oil_Lag3"}))


def test_predict_before_fit(training_data):
    X, _ = training_data
    with pytest.raises(ValueError, match="not fitted"):
        RandomForestModel().predict(X)


def test_fit_rejects_missing_values(training_data):
    X, y = training_data
    X = X.copy()
    X.iloc[0, 0] = np.nan
    with pytest.raises(ValueError, match="missing"):
        RandomForestModel(hyperparameters={"n_estimators": 10}).fit(X, y)


def test_importances_rank_the_informative_feature(training_data):
    X, y = training_data
    model = RandomForestModel(hyperparameters={"n_estimators": 50}).fit(X, y)

    impurity = model.get_feature_importance()
    assert set(impurity) == {"Toyota_Lag4", "Oil_Lag4"}
    assert impurity["Toyota_Lag4"] > impurity["Oil_Lag4"]

    perm = model.permutation_importance(X, y, n_repeats=3)
    assert set(perm) == {"Toyota_Lag4", "Oil_Lag4"}
    assert perm["Toyota_Lag4"] > perm["Oil_Lag4"]
    assert all(np.isfinite(v) for v in perm.values())


def test_constant_feature_has_zero_permutation_importance(training_data):
    X, y = training_data
    X = X.assign(Gold_Lag4=1.0)
    model = RandomForestModel(hyperparameters={"n_estimators": 20}).fit(X, y)
    assert model.permutation_importance(X, y, n_repeats=2)["Gold_Lag4"] == 0.0
