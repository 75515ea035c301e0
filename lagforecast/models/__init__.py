"""Model implementations for lagged-feature regression."""

from lagforecast.models.base_model import BaseModel
from lagforecast.models.random_forest import RandomForestModel
from lagforecast.models.forecasting import PointForecast, forecast

__all__ = ["BaseModel", "RandomForestModel", "PointForecast", "forecast"]
