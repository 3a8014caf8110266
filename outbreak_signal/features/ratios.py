"""
Simplified Rt (lag ratio)

rt(t) = count(t) / count(t - L)

A coarse transmission-trend signal: > 1 means counts grew over the last L
periods, < 1 means they fell. It is NOT a renewal-equation estimate of the
effective reproduction number; use it only as a surge signal.

Degenerate denominators are resolved explicitly instead of leaking
infinities or NaN:
- 0 / 0  -> 1.0   (no change in an all-zero regime)
- x / 0  -> None  (undefined ratio, x > 0)
"""
import logging
import math
from typing import List, Optional

from outbreak_signal.config import check_lag
from outbreak_signal.data.series import AlignedSeries, RatioSeries, TimeSeries

logger = logging.getLogger(__name__)


def _ratio(current: float, lagged: float) -> Optional[float]:
    if lagged == 0:
        return 1.0 if current == 0 else None
    value = current / lagged
    return value if math.isfinite(value) else None


def lag_ratio(series: TimeSeries, lag: int) -> RatioSeries:
    """
    Compute the lag ratio count[i] / count[i-lag].

    Args:
        series: Validated TimeSeries
        lag: Lag L in periods (1 week for weekly data, 7 days for daily data)

    Returns:
        AlignedSeries named 'ratio' with `lag` leading undefined entries and
        None wherever a non-zero count is divided by a zero lagged count

    Raises:
        ConfigurationError: if lag is not a positive integer
    """
    lag = check_lag(lag)

    counts = series.to_pandas()
    lagged = counts.shift(lag)

    values: List[Optional[float]] = []
    undefined_ratios = 0
    for i, (current, previous) in enumerate(zip(counts.to_numpy(), lagged.to_numpy())):
        if i < lag:
            values.append(None)
            continue
        value = _ratio(float(current), float(previous))
        if value is None:
            undefined_ratios += 1
        values.append(value)

    if undefined_ratios:
        logger.debug("lag_ratio(lag=%d): %d undefined ratio(s) over a zero count",
                     lag, undefined_ratios)

    return AlignedSeries(series.periods, tuple(values), name="ratio")
