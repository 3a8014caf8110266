"""
Holt-Winters Baseline

Additive exponential smoothing (statsmodels ExponentialSmoothing):
- trend only:           level + additive trend (no seasonality)
- trend + seasonality:  additive seasonal component of period m
                        (m = 52 for weekly data with an annual cycle)

Smoothing parameters (alpha, beta, gamma) are estimated by minimising the
in-sample squared one-step-ahead errors. The one-step-ahead fits are the
baseline for surge detection; residuals against them are what the weekly
diarrhoea surveillance exercise thresholds.

Warm-up periods are reported as undefined so the residual rule only sees
fits that already had data to learn from:
- trend only:  first 2 periods
- seasonal:    first m periods (one full cycle)
"""
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
from statsmodels.tsa.holtwinters import ExponentialSmoothing

from outbreak_signal.common.errors import ConfigurationError, InputError
from outbreak_signal.data.series import AlignedSeries, TimeSeries

from ..base import BaseBaseline

MIN_NONSEASONAL_OBS = 4


class HoltWintersBaseline(BaseBaseline):
    """Holt-Winters one-step-ahead fits used as baseline."""

    def __init__(self, config: Optional[Dict] = None):
        super().__init__(name="holt_winters", config=config)

        self.trend = config.get('trend', True) if config else True
        self.seasonal = config.get('seasonal', False) if config else False
        self.seasonal_periods = config.get('seasonal_periods', 52) if config else 52

        if self.seasonal:
            m = self.seasonal_periods
            if isinstance(m, bool) or not isinstance(m, int) or m < 2:
                raise ConfigurationError("seasonal_periods", m, "must be an integer >= 2")

        # Fitted objects
        self.result_ = None

    @property
    def warmup(self) -> int:
        if self.seasonal:
            return int(self.seasonal_periods)
        return 2 if self.trend else 1

    def _min_obs(self) -> int:
        if self.seasonal:
            return 2 * int(self.seasonal_periods)
        return MIN_NONSEASONAL_OBS

    def fit(self, series: TimeSeries) -> 'HoltWintersBaseline':
        """
        Estimate smoothing parameters on the observed counts.

        Raises:
            InputError: series shorter than two full seasons (seasonal model)
                or than MIN_NONSEASONAL_OBS periods
        """
        if len(series) < self._min_obs():
            raise InputError(
                f"{self.name}: needs at least {self._min_obs()} periods, got {len(series)}"
            )

        endog = np.asarray(series.counts, dtype=float)
        model = ExponentialSmoothing(
            endog,
            trend="add" if self.trend else None,
            seasonal="add" if self.seasonal else None,
            seasonal_periods=int(self.seasonal_periods) if self.seasonal else None,
            initialization_method="estimated",
        )
        self.result_ = model.fit(optimized=True)
        self.series_ = series
        self.is_fitted = True
        return self

    def fitted(self) -> AlignedSeries:
        self._check_fitted()
        values = np.asarray(self.result_.fittedvalues, dtype=float).copy()
        values[: self.warmup] = np.nan
        return AlignedSeries.from_array(self.series_.periods, values, name=self.name)

    def forecast(self, horizon: int) -> pd.DataFrame:
        """
        Out-of-sample forecast for the next `horizon` periods.

        Output columns:
          horizon, period, y_forecast   (y_forecast clipped at zero)
        """
        self._check_fitted()
        if isinstance(horizon, bool) or not isinstance(horizon, int) or horizon <= 0:
            raise ConfigurationError("horizon", horizon, "must be a positive integer")

        y_fc = np.maximum(np.asarray(self.result_.forecast(horizon), dtype=float), 0.0)

        periods = self.series_.periods
        last = periods[-1]
        step = periods[-1] - periods[-2] if len(periods) > 1 else 1

        rows = []
        for h in range(1, horizon + 1):
            rows.append({
                "horizon": h,
                "period": last + h * step,
                "y_forecast": float(y_fc[h - 1]),
            })
        return pd.DataFrame(rows)

    def get_params(self) -> Dict[str, Any]:
        """Estimated smoothing parameters (None where the component is off)."""
        self._check_fitted()
        params = self.result_.params

        def _get(key: str) -> Optional[float]:
            value = params.get(key)
            if value is None or pd.isna(value):
                return None
            return float(value)

        return {
            'alpha': _get('smoothing_level'),
            'beta': _get('smoothing_trend') if self.trend else None,
            'gamma': _get('smoothing_seasonal') if self.seasonal else None,
            'seasonal_periods': int(self.seasonal_periods) if self.seasonal else None,
            'sse': float(self.result_.sse),
        }
