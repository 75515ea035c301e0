"""Feature engineering for the lagged commodity/conflict pipeline.

- Lag features with shared, named feature sets (training and forecast input)
- Log-difference stationarity transform and non-finite filtering
- Min-max normalisation for diagnostic overlays
"""

from lagforecast.features.engineering import (
    LagFeatureBuilder,
    LagFeatureSpec,
    lag_feature_name,
)
from lagforecast.features.transforms import (
    log_difference,
    drop_non_finite,
    ensure_finite,
    min_max_normalize,
)

__all__ = [
    "LagFeatureBuilder",
    "LagFeatureSpec",
    "lag_feature_name",
    "log_difference",
    "drop_non_finite",
    "ensure_finite",
    "min_max_normalize",
]
