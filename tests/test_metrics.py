"""
Tests for baseline fit metrics and surge detection metrics.
"""
import pytest

from outbreak_signal.common.errors import InputError
from outbreak_signal.data.series import AlignedSeries, TimeSeries
from outbreak_signal.evaluation.metrics import compute_detection_metrics, compute_fit_metrics
from outbreak_signal.pipeline import run_pipeline


def test_fit_metrics_over_defined_baseline():
    observed = TimeSeries.from_counts([10, 12, 14])
    baseline = AlignedSeries(observed.periods, (None, 10.0, 16.0))
    metrics = compute_fit_metrics(observed, baseline)
    assert metrics["n_pairs"] == 2
    assert metrics["mae"] == pytest.approx(2.0)
    assert metrics["rmse"] == pytest.approx(2.0)
    assert metrics["mape_pct"] == pytest.approx(100 * (2 / 12 + 2 / 14) / 2)


def test_fit_metrics_without_baseline():
    observed = TimeSeries.from_counts([10, 12])
    metrics = compute_fit_metrics(observed, AlignedSeries.undefined(observed.periods))
    assert metrics == {"n_pairs": 0, "mae": None, "rmse": None, "mape_pct": None}


def test_mape_undefined_for_zero_observations():
    observed = TimeSeries.from_counts([0, 0, 4])
    baseline = AlignedSeries(observed.periods, (1.0, 1.0, None))
    metrics = compute_fit_metrics(observed, baseline)
    assert metrics["mae"] == pytest.approx(1.0)
    assert metrics["mape_pct"] is None


def test_fit_metrics_misaligned():
    observed = TimeSeries.from_counts([1, 2, 3])
    with pytest.raises(InputError):
        compute_fit_metrics(observed, AlignedSeries((0, 1), (1.0, 2.0)))


def test_detection_metrics(long_spike_series):
    report = run_pipeline(long_spike_series, window=3, lag=1)
    metrics = compute_detection_metrics(report, [8, 9])
    assert metrics["true_positives"] == 1
    assert metrics["false_negatives"] == 1
    assert metrics["false_positives"] == 0
    assert metrics["true_negatives"] == 10
    assert metrics["sensitivity"] == pytest.approx(0.5)
    assert metrics["specificity"] == pytest.approx(1.0)
    assert metrics["precision"] == pytest.approx(1.0)
    assert metrics["false_alarm_rate"] == pytest.approx(0.0)


def test_detection_metrics_without_flags(spike_series):
    report = run_pipeline(spike_series, window=3, lag=1)
    metrics = compute_detection_metrics(report, [])
    assert metrics["true_negatives"] == 5
    assert metrics["sensitivity"] == 0.0
    assert metrics["precision"] == 0.0


def test_detection_metrics_warns_on_unknown_periods(spike_series):
    report = run_pipeline(spike_series, window=3, lag=1, z=1.0)
    with pytest.warns(UserWarning, match="not in the report"):
        metrics = compute_detection_metrics(report, [3, 99])
    assert metrics["true_positives"] == 1


def test_detection_metrics_takes_a_surge_report():
    import inspect

    annotation = inspect.signature(compute_detection_metrics).parameters["report"].annotation
    assert annotation == "SurgeReport"
