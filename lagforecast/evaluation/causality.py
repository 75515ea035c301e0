"""
Granger causality between log-differenced series via a vector autoregression.

The automatic lag-order search is ill-conditioned on short series. When it
fails, the analyzer falls back to a caller-supplied lag order (default 1)
and logs the fallback; with no fallback the failure is fatal.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
import logging

import numpy as np
import pandas as pd
from statsmodels.tsa.api import VAR

from lagforecast.features.transforms import drop_non_finite, ensure_finite, log_difference
from lagforecast.utils.error_handling import InsufficientData, LagOrderSelectionFailure

logger = logging.getLogger(__name__)


@dataclass
class LagOrderSelection:
    """Chosen VAR lag order and how it was obtained."""
    lag_order: int
    criterion: str
    source: str  # 'criterion' or 'fallback'
    reason: Optional[str] = None


@dataclass
class GrangerResult:
    """F-test of 'cause does not Granger-cause caused'."""
    cause: str
    caused: List[str]
    lag_order: int
    lag_order_source: str
    f_statistic: float
    p_value: float
    degrees_of_freedom: tuple
    n_obs: int
    significance: float = 0.05
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def significant(self) -> bool:
        return self.p_value < self.significance

    @property
    def interpretation(self) -> str:
        target = ", ".join(self.caused)
        if self.significant:
            return f"p-value < {self.significance}: {self.cause} PREDICTS {target} (significant)"
        return f"p-value >= {self.significance}: no evidence that {self.cause} predicts {target}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "cause": self.cause,
            "caused": self.caused,
            "lag_order": self.lag_order,
            "lag_order_source": self.lag_order_source,
            "f_statistic": self.f_statistic,
            "p_value": self.p_value,
            "degrees_of_freedom": list(self.degrees_of_freedom),
            "n_obs": self.n_obs,
            "significance": self.significance,
            "significant": self.significant,
            "metadata": self.metadata,
        }


class GrangerCausalityAnalyzer:
    """Prepares stationary series, selects a VAR lag order, and tests causality."""

    def __init__(
        self,
        max_lag: int = 4,
        criterion: str = "aic",
        fallback_lag: Optional[int] = 1,
        min_rows: int = 10,
        significance: float = 0.05,
    ):
        """
        Args:
            max_lag: Largest lag order considered by the search
            criterion: Information criterion ('aic', 'bic', 'hqic', 'fpe')
            fallback_lag: Lag order used when the search fails; None makes
                          the failure fatal
            min_rows: Minimum usable rows after transformation
            significance: Threshold for reporting a significant result
        """
        if fallback_lag is not None and fallback_lag < 1:
            raise ValueError(f"fallback_lag must be positive, got {fallback_lag}")
        self.max_lag = max_lag
        self.criterion = criterion
        self.fallback_lag = fallback_lag
        self.min_rows = min_rows
        self.significance = significance

    def prepare(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Log-difference every column and drop rows with non-finite values.

        Raises:
            InsufficientData: If fewer than ``min_rows`` rows remain
        """
        stationary = drop_non_finite(log_difference(df))
        logger.info(f"Rows of usable data: {len(stationary)}")
        if len(stationary) < self.min_rows:
            logger.error(f"Only {len(stationary)} usable rows; {self.min_rows} required")
            raise InsufficientData(
                f"{len(stationary)} usable rows after differencing; "
                f"Granger causality needs at least {self.min_rows}",
                available=len(stationary),
                required=self.min_rows,
            )
        return stationary

    def select_lag_order(self, data: pd.DataFrame) -> LagOrderSelection:
        """
        Pick the lag order minimising the information criterion.

        Raises:
            LagOrderSelectionFailure: If the search fails and no fallback is set
        """
        try:
            order = self._search_lag_order(data)
        except (LagOrderSelectionFailure, ValueError, np.linalg.LinAlgError) as e:
            if self.fallback_lag is None:
                logger.error(f"Lag order selection failed with no fallback: {e}")
                if isinstance(e, LagOrderSelectionFailure):
                    raise
                raise LagOrderSelectionFailure(str(e)) from e
            logger.warning(
                f"Lag order selection failed ({type(e).__name__}: {e}); "
                f"using fallback lag {self.fallback_lag}"
            )
            return LagOrderSelection(
                lag_order=self.fallback_lag,
                criterion=self.criterion,
                source="fallback",
                reason=str(e),
            )

        logger.info(f"Using lag {order} selected by {self.criterion.upper()}")
        return LagOrderSelection(lag_order=order, criterion=self.criterion, source="criterion")

    def _search_lag_order(self, data: pd.DataFrame) -> int:
        selection = VAR(data.reset_index(drop=True)).select_order(maxlags=self.max_lag, trend="c")
        order = selection.selected_orders.get(self.criterion)
        if order is None or not np.isfinite(order) or int(order) < 1:
            raise LagOrderSelectionFailure(
                f"{self.criterion.upper()} selected no usable lag order ({order})"
            )
        return int(order)

    def test(
        self,
        data: pd.DataFrame,
        cause: str,
        caused: Sequence[str],
        lag_order: Optional[int] = None,
    ) -> GrangerResult:
        """
        Fit a VAR with a constant and F-test whether ``cause`` Granger-causes ``caused``.

        Args:
            data: Stationary, finite multivariate series (see ``prepare``)
            cause: Column suspected of causing
            caused: Columns whose prediction is tested
            lag_order: Fixed lag order; selected automatically when None

        Returns:
            GrangerResult

        Raises:
            NonFiniteSeriesValue: If ``data`` still contains non-finite values
            KeyError: If a named column is absent
        """
        ensure_finite(data)
        caused = list(caused)
        for col in [cause, *caused]:
            if col not in data.columns:
                raise KeyError(f"Column '{col}' not in causality data")

        if lag_order is None:
            selection = self.select_lag_order(data)
        else:
            selection = LagOrderSelection(lag_order=lag_order, criterion="fixed", source="caller")

        results = VAR(data.reset_index(drop=True)).fit(maxlags=selection.lag_order, trend="c")
        test = results.test_causality(caused=caused, causing=[cause], kind="f")

        result = GrangerResult(
            cause=cause,
            caused=caused,
            lag_order=selection.lag_order,
            lag_order_source=selection.source,
            f_statistic=float(test.test_statistic),
            p_value=float(test.pvalue),
            degrees_of_freedom=tuple(int(d) for d in np.atleast_1d(test.df)),
            n_obs=int(results.nobs),
            significance=self.significance,
            metadata={"criterion": selection.criterion, "fallback_reason": selection.reason},
        )
        logger.info(
            f"Granger F-test {cause} -> {caused}: F={result.f_statistic:.3f}, p={result.p_value:.4f}"
        )
        return result

    def run(self, df: pd.DataFrame, cause: str, caused: Sequence[str]) -> GrangerResult:
        """Prepare raw level series and run the test."""
        return self.test(self.prepare(df), cause, caused)
