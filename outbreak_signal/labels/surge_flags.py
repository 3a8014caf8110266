"""
Residual-Based Surge Labelling

One-sided control-chart rule on residuals against a baseline:

    residual(t) = observed(t) - baseline(t)
    upper       = mean(residual) + z * sd(residual)
    SURGE       if residual(t) > upper, NORMAL otherwise

The baseline is either the trailing moving average or a separately fitted
forecast (e.g. Holt-Winters one-step-ahead fits). Mean and sample standard
deviation are taken over all periods where the baseline is defined; periods
without a baseline are never flagged.

Not a CUSUM or EWMA chart; residuals are pooled over the whole series.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from outbreak_signal.common.errors import InputError
from outbreak_signal.config import DEFAULT_Z, check_z
from outbreak_signal.data.series import AlignedSeries, TimeSeries

logger = logging.getLogger(__name__)


class AnomalyFlag(Enum):
    """Per-period classification."""
    NORMAL = "normal"
    SURGE = "surge"


@dataclass(frozen=True)
class SurgeThresholds:
    """Residual statistics behind the flags (None when undefined)."""
    z: float
    n_residuals: int
    mean: Optional[float]
    std: Optional[float]
    upper: Optional[float]
    lower: Optional[float]


@dataclass(frozen=True)
class SurgeLabels:
    residuals: AlignedSeries
    flags: Tuple[AnomalyFlag, ...]
    thresholds: SurgeThresholds

    @property
    def surge_periods(self) -> Tuple:
        return tuple(
            p for p, f in zip(self.residuals.periods, self.flags)
            if f is AnomalyFlag.SURGE
        )


def check_alignment(observed: TimeSeries, baseline: AlignedSeries) -> None:
    """Raise InputError unless `baseline` has exactly the observed periods."""
    if len(baseline) != len(observed):
        raise InputError(
            f"baseline has {len(baseline)} periods, observed series has {len(observed)}"
        )
    for i, (p_obs, p_base) in enumerate(zip(observed.periods, baseline.periods)):
        if p_obs != p_base:
            raise InputError(
                f"baseline period {p_base!r} does not match observed period", i, p_obs
            )


def compute_residuals(observed: TimeSeries, baseline: AlignedSeries) -> AlignedSeries:
    """
    Residuals observed - baseline, undefined where the baseline is.

    Raises:
        InputError: if the baseline is not aligned with the observed series
    """
    check_alignment(observed, baseline)
    values = tuple(
        None if b is None else count - b
        for count, b in zip(observed.counts, baseline.values)
    )
    return AlignedSeries(observed.periods, values, name="residual")


def residual_thresholds(residuals: AlignedSeries, z: float = DEFAULT_Z) -> SurgeThresholds:
    """
    Mean +/- z * sample standard deviation of the defined residuals.

    With fewer than two defined residuals the standard deviation (and hence
    both limits) is undefined.
    """
    z = check_z(z)
    defined = np.array([r for r in residuals.values if r is not None], dtype=float)
    n = int(defined.size)

    if n == 0:
        return SurgeThresholds(z=z, n_residuals=0, mean=None, std=None, upper=None, lower=None)

    mean = float(np.mean(defined))
    if n < 2:
        return SurgeThresholds(z=z, n_residuals=n, mean=mean, std=None, upper=None, lower=None)

    std = float(np.std(defined, ddof=1))
    return SurgeThresholds(
        z=z,
        n_residuals=n,
        mean=mean,
        std=std,
        upper=mean + z * std,
        lower=mean - z * std,
    )


def detect_surges(
    observed: TimeSeries,
    baseline: AlignedSeries,
    z: float = DEFAULT_Z,
) -> SurgeLabels:
    """
    Flag periods whose residual exceeds the upper control limit.

    Args:
        observed: Validated TimeSeries
        baseline: AlignedSeries aligned 1:1 with `observed`
        z: Number of residual standard deviations (default 2, must be > 0)

    Returns:
        SurgeLabels with residuals, one AnomalyFlag per period and the
        thresholds used

    Raises:
        ConfigurationError: invalid z
        InputError: misaligned baseline
    """
    z = check_z(z)
    residuals = compute_residuals(observed, baseline)
    thresholds = residual_thresholds(residuals, z)

    upper = thresholds.upper
    flags = tuple(
        AnomalyFlag.SURGE
        if upper is not None and r is not None and r > upper
        else AnomalyFlag.NORMAL
        for r in residuals.values
    )

    n_surges = sum(f is AnomalyFlag.SURGE for f in flags)
    logger.debug(
        "detect_surges(z=%.2f): %d residuals, upper=%s, %d surge(s)",
        z, thresholds.n_residuals, upper, n_surges,
    )
    return SurgeLabels(residuals=residuals, flags=flags, thresholds=thresholds)
