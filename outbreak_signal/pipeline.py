"""
Outbreak Signal Pipeline

raw counts -> moving average ---------------------> residual/threshold -> flags
           +-> lag ratio (independent branch)

All parameters are validated before the input, and the input before any
stage runs. A failing call raises and returns no partial table.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import pandas as pd

from outbreak_signal.common.errors import InputError
from outbreak_signal.config import DEFAULT_Z, PipelineConfig
from outbreak_signal.data.loader import frame_to_series
from outbreak_signal.data.series import AlignedSeries, TimeSeries
from outbreak_signal.features.feature_sets import ColumnSetName, select_result_columns
from outbreak_signal.features.ratios import lag_ratio
from outbreak_signal.features.smoothing import moving_average
from outbreak_signal.labels.surge_flags import (
    AnomalyFlag,
    SurgeThresholds,
    check_alignment,
    detect_surges,
)
from outbreak_signal.models.baselines import make_baseline

logger = logging.getLogger(__name__)

SeriesLike = Union[TimeSeries, Iterable[Tuple[Any, float]]]


@dataclass(frozen=True)
class ResultRow:
    period: Any
    observed: float
    smoothed: Optional[float]
    ratio: Optional[float]
    baseline: Optional[float]
    residual: Optional[float]
    anomaly: AnomalyFlag


@dataclass(frozen=True)
class SurgeReport:
    """Aligned result table of one pipeline run."""
    rows: Tuple[ResultRow, ...]
    thresholds: SurgeThresholds
    config: PipelineConfig
    baseline_name: str

    @property
    def surge_periods(self) -> Tuple[Any, ...]:
        return tuple(r.period for r in self.rows if r.anomaly is AnomalyFlag.SURGE)

    def to_frame(self, column_set: ColumnSetName = "full") -> pd.DataFrame:
        """
        Result table as a DataFrame.

        Undefined entries are pd.NA in nullable Float64 columns; `anomaly`
        holds 'normal'/'surge'.
        """
        def _col(name: str):
            return pd.array([getattr(r, name) for r in self.rows], dtype="Float64")

        df = pd.DataFrame({
            "period": [r.period for r in self.rows],
            "observed": [r.observed for r in self.rows],
            "smoothed": _col("smoothed"),
            "ratio": _col("ratio"),
            "baseline": _col("baseline"),
            "residual": _col("residual"),
            "anomaly": [r.anomaly.value for r in self.rows],
        })
        return df[select_result_columns(df.columns, column_set)]

    def summary(self) -> Dict[str, Any]:
        t = self.thresholds
        return {
            "n_periods": len(self.rows),
            "n_surges": len(self.surge_periods),
            "surge_periods": [str(p) for p in self.surge_periods],
            "baseline": self.baseline_name,
            "config": self.config.to_dict(),
            "residual_mean": t.mean,
            "residual_std": t.std,
            "upper_limit": t.upper,
            "lower_limit": t.lower,
        }


def as_time_series(series: SeriesLike) -> TimeSeries:
    """Accept a TimeSeries or (period, count) pairs; validate either way."""
    if isinstance(series, TimeSeries):
        return series
    if isinstance(series, (str, bytes)) or series is None:
        raise InputError(f"expected a TimeSeries or (period, count) pairs, got {type(series).__name__}")
    try:
        pairs = [tuple(p) for p in series]
    except TypeError as exc:
        raise InputError(f"expected (period, count) pairs: {exc}") from exc
    if any(len(p) != 2 for p in pairs):
        raise InputError("expected (period, count) pairs")
    return TimeSeries.from_pairs(pairs)


def run_pipeline(
    series: SeriesLike,
    window: int,
    lag: int,
    z: float = DEFAULT_Z,
    baseline: Optional[AlignedSeries] = None,
) -> SurgeReport:
    """
    Run smoothing, lag ratio and surge detection on one series.

    Args:
        series: TimeSeries (or (period, count) pairs, validated first)
        window: Trailing moving-average window (>= 1)
        lag: Lag for the simplified Rt ratio (>= 1)
        z: Residual standard deviations for the upper limit (> 0, default 2)
        baseline: Optional aligned baseline (e.g. Holt-Winters fits); the
            moving average is used when omitted

    Returns:
        SurgeReport with one row per period

    Raises:
        ConfigurationError: invalid window, lag or z (checked first)
        InputError: invalid series or misaligned baseline
    """
    cfg = PipelineConfig(window=window, lag=lag, z=z).validate()
    observed = as_time_series(series)
    if baseline is not None:
        check_alignment(observed, baseline)

    smoothed = moving_average(observed, cfg.window)
    ratios = lag_ratio(observed, cfg.lag)

    if baseline is None:
        baseline_used, baseline_name = smoothed, "moving_average"
    else:
        baseline_used, baseline_name = baseline, baseline.name
    labels = detect_surges(observed, baseline_used, cfg.z)

    rows = tuple(
        ResultRow(
            period=point.period,
            observed=point.count,
            smoothed=smoothed[i],
            ratio=ratios[i],
            baseline=baseline_used[i],
            residual=labels.residuals[i],
            anomaly=labels.flags[i],
        )
        for i, point in enumerate(observed)
    )

    report = SurgeReport(
        rows=rows,
        thresholds=labels.thresholds,
        config=cfg,
        baseline_name=baseline_name,
    )
    logger.info(
        "Pipeline: %d periods, window=%d, lag=%d, z=%.2f, baseline=%s -> %d surge(s)",
        len(rows), cfg.window, cfg.lag, cfg.z, baseline_name, len(report.surge_periods),
    )
    return report


def run_configured(
    series: SeriesLike,
    config: PipelineConfig,
    baseline_method: str = "moving_average",
    baseline_config: Optional[Mapping[str, Any]] = None,
) -> SurgeReport:
    """
    Run the pipeline with a named baseline.

    `moving_average` uses the smoothed series; any other method is fitted on
    the observed series and its in-sample fits become the baseline.
    """
    config = config.validate()
    observed = as_time_series(series)

    baseline = None
    if baseline_method != "moving_average":
        model = make_baseline(baseline_method, dict(baseline_config or {}))
        baseline = model.fit_baseline(observed)

    return run_pipeline(observed, config.window, config.lag, config.z, baseline=baseline)


def run_panel(
    df: pd.DataFrame,
    config: PipelineConfig,
    unit_col: str = "unit",
    period_col: str = "week",
    count_col: str = "cases",
    baseline_method: str = "moving_average",
    baseline_config: Optional[Mapping[str, Any]] = None,
    column_set: ColumnSetName = "full",
) -> pd.DataFrame:
    """
    Run the pipeline once per unit (e.g. municipality) and stack the tables.

    Units share nothing; if any unit fails validation the whole call fails
    and the error names the unit.
    """
    config = config.validate()
    if unit_col not in df.columns:
        raise InputError(f"Missing unit column: {unit_col}")

    tables = []
    for unit, g in df.groupby(unit_col, sort=True):
        try:
            series = frame_to_series(g, period_col, count_col)
            report = run_configured(series, config, baseline_method, baseline_config)
        except InputError as exc:
            raise InputError(f"unit {unit!r}: {exc.reason}", exc.index, exc.period) from exc
        table = report.to_frame(column_set)
        table.insert(0, unit_col, unit)
        tables.append(table)

    if not tables:
        raise InputError("panel is empty")
    return pd.concat(tables, ignore_index=True)
