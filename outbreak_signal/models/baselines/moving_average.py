"""
Moving-Average Baseline

The default surge baseline: the trailing moving average of the observed
series itself. No parameters are estimated; `fit` only validates the window
and stores the series.
"""
from typing import Any, Dict, Optional

from outbreak_signal.config import check_window
from outbreak_signal.data.series import AlignedSeries, TimeSeries
from outbreak_signal.features.smoothing import moving_average

from ..base import BaseBaseline


class MovingAverageBaseline(BaseBaseline):
    """Trailing moving average used as baseline."""

    def __init__(self, config: Optional[Dict] = None):
        super().__init__(name="moving_average", config=config)

        if not config or 'window' not in config:
            raise ValueError("window must be provided via config")
        self.window = check_window(config['window'])

        self.smoothed_: Optional[AlignedSeries] = None

    def fit(self, series: TimeSeries) -> 'MovingAverageBaseline':
        self.series_ = series
        self.smoothed_ = moving_average(series, self.window)
        self.is_fitted = True
        return self

    def fitted(self) -> AlignedSeries:
        self._check_fitted()
        return AlignedSeries(self.smoothed_.periods, self.smoothed_.values, name=self.name)

    def get_params(self) -> Dict[str, Any]:
        return {'window': self.window}
