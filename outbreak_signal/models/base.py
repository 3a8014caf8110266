"""
Base Baseline Interface for the Outbreak Signal Engine

Abstract base class that every surge baseline implements, so the pipeline
and the experiments can swap the moving average for a fitted forecast
without changing the residual rule.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from outbreak_signal.data.series import AlignedSeries, TimeSeries


class BaseBaseline(ABC):
    """Abstract base class for all baselines."""

    def __init__(self, name: str, config: Optional[Dict] = None):
        """
        Initialize baseline.

        Args:
            name: Baseline identifier
            config: Baseline-specific configuration
        """
        self.name = name
        self.config = config or {}
        self.is_fitted = False
        self.series_: Optional[TimeSeries] = None

    @abstractmethod
    def fit(self, series: TimeSeries) -> 'BaseBaseline':
        """
        Fit the baseline to an observed series.

        Args:
            series: Validated TimeSeries

        Returns:
            self
        """
        pass

    @abstractmethod
    def fitted(self) -> AlignedSeries:
        """
        In-sample baseline aligned with the fitted series.

        Returns:
            AlignedSeries named after the baseline (None where no baseline
            exists yet)
        """
        pass

    def fit_baseline(self, series: TimeSeries) -> AlignedSeries:
        """Fit and return the in-sample baseline in one call."""
        return self.fit(series).fitted()

    def _check_fitted(self) -> None:
        if not self.is_fitted:
            raise ValueError("Baseline not fitted. Call fit() first.")

    def get_params(self) -> Dict[str, Any]:
        return {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', fitted={self.is_fitted})"
