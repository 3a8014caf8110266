"""
Unit tests for residual-based surge labelling.
"""
import statistics

import pytest
from hypothesis import given, settings, strategies as st

from outbreak_signal.common.errors import ConfigurationError, InputError
from outbreak_signal.data.series import AlignedSeries, TimeSeries
from outbreak_signal.features.smoothing import moving_average
from outbreak_signal.labels.surge_flags import (
    AnomalyFlag,
    compute_residuals,
    detect_surges,
    residual_thresholds,
)

NORMAL, SURGE = AnomalyFlag.NORMAL, AnomalyFlag.SURGE


class TestSpikeScenario:
    """[10, 10, 10, 50, 10] against its 3-period trailing mean."""

    def test_residuals_and_thresholds_match_hand_computation(self, spike_series):
        labels = detect_surges(spike_series, moving_average(spike_series, 3), z=1.0)

        residuals = [0.0, 80 / 3, -40 / 3]
        assert labels.residuals.values[:2] == (None, None)
        assert labels.residuals.values[2:] == pytest.approx(tuple(residuals))

        t = labels.thresholds
        assert t.n_residuals == 3
        assert t.mean == pytest.approx(statistics.mean(residuals))
        assert t.std == pytest.approx(statistics.stdev(residuals))
        assert t.upper == pytest.approx(t.mean + t.std)
        assert t.lower == pytest.approx(t.mean - t.std)

    def test_spike_is_the_only_surge_at_one_sd(self, spike_series):
        labels = detect_surges(spike_series, moving_average(spike_series, 3), z=1.0)
        assert labels.flags == (NORMAL, NORMAL, NORMAL, SURGE, NORMAL)
        assert labels.surge_periods == (3,)

    def test_three_residuals_cannot_exceed_two_sd(self, spike_series):
        # max z-score of n values with sample sd is (n-1)/sqrt(n) ~ 1.155 for n=3
        labels = detect_surges(spike_series, moving_average(spike_series, 3))
        assert labels.flags == (NORMAL,) * 5

    def test_longer_series_flags_spike_at_default_z(self, long_spike_series):
        labels = detect_surges(long_spike_series, moving_average(long_spike_series, 3))
        assert labels.thresholds.z == 2.0
        assert labels.surge_periods == (8,)
        assert labels.thresholds.mean == pytest.approx(0.0, abs=1e-9)


def test_undefined_baseline_is_never_flagged():
    observed = TimeSeries.from_counts([1000, 10, 11, 10, 12, 10, 11, 10, 90])
    baseline = AlignedSeries.from_array(observed.periods, [None, 10, 11, 10, 12, 10, 11, 10, 10])
    labels = detect_surges(observed, baseline, z=1.0)
    assert labels.flags[0] is NORMAL
    assert labels.residuals.values[0] is None
    assert labels.flags[-1] is SURGE


def test_fewer_than_two_residuals_flags_nothing():
    observed = TimeSeries.from_counts([5, 100])
    baseline = AlignedSeries.from_array(observed.periods, [None, 5.0])
    labels = detect_surges(observed, baseline)
    assert labels.flags == (NORMAL, NORMAL)
    assert labels.thresholds.n_residuals == 1
    assert labels.thresholds.std is None
    assert labels.thresholds.upper is None


def test_all_undefined_baseline_flags_nothing():
    observed = TimeSeries.from_counts([5, 100, 3])
    labels = detect_surges(observed, AlignedSeries.undefined(observed.periods))
    assert labels.flags == (NORMAL,) * 3
    assert labels.thresholds.mean is None


def test_identical_residuals_flag_nothing():
    observed = TimeSeries.from_counts([10, 10, 10, 10])
    labels = detect_surges(observed, moving_average(observed, 2))
    assert labels.thresholds.std == pytest.approx(0.0)
    assert labels.flags == (NORMAL,) * 4


def test_misaligned_baseline_raises_input_error():
    observed = TimeSeries.from_counts([1, 2, 3])
    with pytest.raises(InputError):
        compute_residuals(observed, AlignedSeries((0, 1), (1.0, 2.0)))
    with pytest.raises(InputError):
        compute_residuals(observed, AlignedSeries((0, 1, 5), (1.0, 2.0, 3.0)))


@pytest.mark.parametrize("z", [0, -1.0, float("inf"), float("nan"), "2"])
def test_invalid_z_raises_configuration_error(z, spike_series):
    with pytest.raises(ConfigurationError) as excinfo:
        detect_surges(spike_series, moving_average(spike_series, 3), z=z)
    assert excinfo.value.parameter == "z"


def test_residual_thresholds_rejects_invalid_z():
    with pytest.raises(ConfigurationError):
        residual_thresholds(AlignedSeries((0,), (1.0,)), z=0)


@settings(max_examples=50, deadline=None)
@given(
    counts=st.lists(st.integers(min_value=0, max_value=1_000), min_size=1, max_size=30),
    window=st.integers(min_value=1, max_value=8),
    z=st.floats(min_value=0.1, max_value=4.0),
)
def test_flags_only_where_baseline_defined(counts, window, z):
    observed = TimeSeries.from_counts(counts)
    smoothed = moving_average(observed, window)
    labels = detect_surges(observed, smoothed, z)

    assert len(labels.flags) == len(counts)
    for value, flag in zip(smoothed.values, labels.flags):
        if value is None:
            assert flag is NORMAL
    again = detect_surges(observed, smoothed, z)
    assert again == labels
