"""
Trailing Moving Average

Smooths a raw weekly (or daily) case-count series with a right-aligned
window: the value at period t is the mean of counts at [t-k+1, t].
The first k-1 periods have no full window and stay undefined.

Typical windows: 3 weeks for weekly surveillance, 7 days for daily counts.
"""
import logging

from outbreak_signal.config import check_window
from outbreak_signal.data.series import AlignedSeries, SmoothedSeries, TimeSeries

logger = logging.getLogger(__name__)


def moving_average(series: TimeSeries, window: int) -> SmoothedSeries:
    """
    Compute the trailing moving average of a series.

    Formula: ma_k(t) = mean(count[t-k+1 .. t]) for t >= k-1

    A window longer than the series is not an error; it simply yields an
    all-undefined result.

    Args:
        series: Validated TimeSeries
        window: Window size k (positive integer)

    Returns:
        AlignedSeries named 'smoothed' with k-1 leading undefined entries

    Raises:
        ConfigurationError: if window is not a positive integer
    """
    window = check_window(window)

    counts = series.to_pandas()
    smoothed = counts.rolling(window=window, min_periods=window).mean()

    result = AlignedSeries.from_array(series.periods, smoothed.to_numpy(), name="smoothed")
    logger.debug(
        "moving_average(window=%d): %d/%d periods defined",
        window, result.defined_count, len(result),
    )
    return result
