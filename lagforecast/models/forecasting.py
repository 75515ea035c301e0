"""Single-row point forecasts from the observation one lag horizon back."""

from dataclasses import dataclass
from typing import Dict, Optional, Union
import logging

import pandas as pd

from lagforecast.features.engineering import LagFeatureSpec
from lagforecast.models.base_model import BaseModel
from lagforecast.utils.error_handling import ForecastOriginMissing

logger = logging.getLogger(__name__)


@dataclass
class PointForecast:
    """A forecast for one target month."""
    target_month: pd.Timestamp
    origin_month: pd.Timestamp
    features: Dict[str, float]
    value: float


def forecast(
    model: BaseModel,
    df: pd.DataFrame,
    spec: LagFeatureSpec,
    target_month: Optional[Union[str, pd.Timestamp]] = None,
) -> PointForecast:
    """
    Forecast the target for ``target_month`` from the observation ``k`` months earlier.

    The input row is built by ``spec.feature_row``, the same naming used to
    build the training dataset.

    Args:
        model: Fitted model trained on ``spec``'s features
        df: Cleaned observations on a monthly DatetimeIndex
        spec: Feature spec the model was trained with
        target_month: Month to forecast ('YYYY-MM' or Timestamp); defaults to
                      ``k`` months after the latest observation with every
                      predictor present; newer incomplete months are skipped

    Returns:
        PointForecast

    Raises:
        ForecastOriginMissing: If no complete observation exists at the origin
    """
    if df.empty:
        raise ForecastOriginMissing("No observations to forecast from")

    k = spec.lag_horizon
    if target_month is None:
        origin = _latest_complete_origin(df, spec)
        target = origin + pd.DateOffset(months=k)
    else:
        target = pd.Timestamp(target_month).to_period("M").to_timestamp()
        origin = target - pd.DateOffset(months=k)

    if origin not in df.index:
        raise ForecastOriginMissing(
            f"No observation for {origin:%Y-%m} ({k} months before {target:%Y-%m})"
        )

    row = spec.feature_row(df.loc[origin])
    value = float(model.predict(row)[0])
    logger.info(f"Forecast for {target:%Y-%m} from {origin:%Y-%m} inputs: {value:.2f}")

    return PointForecast(
        target_month=target,
        origin_month=origin,
        features=row.iloc[0].to_dict(),
        value=value,
    )


def _latest_complete_origin(df: pd.DataFrame, spec: LagFeatureSpec) -> pd.Timestamp:
    """Latest month whose predictor values are all present."""
    complete = df.dropna(subset=list(spec.source_columns))
    if complete.empty:
        raise ForecastOriginMissing("No observation has values for every predictor")
    origin = complete.index.max()
    skipped = df.index[df.index > origin]
    if len(skipped):
        months = ", ".join(f"{d:%Y-%m}" for d in skipped)
        logger.warning(f"Skipped incomplete month(s) {months}; forecasting from {origin:%Y-%m}")
    return origin
