"""
Unit and property tests for the simplified Rt lag ratio.
"""
import math

import pytest
from hypothesis import given, settings, strategies as st

from outbreak_signal.common.errors import ConfigurationError
from outbreak_signal.data.series import TimeSeries
from outbreak_signal.features.ratios import lag_ratio


def test_alternating_series_lag_one():
    ratio = lag_ratio(TimeSeries.from_counts([10, 20, 10, 20]), 1)
    assert ratio.values[0] is None
    assert ratio.values[1:] == pytest.approx((2.0, 0.5, 2.0))


def test_weekly_lag_on_daily_counts():
    counts = [1, 2, 3, 4, 5, 6, 7, 2, 4, 6, 8, 10, 12, 14]
    ratio = lag_ratio(TimeSeries.from_counts(counts), 7)
    assert ratio.values[:7] == (None,) * 7
    assert ratio.values[7:] == pytest.approx((2.0,) * 7)


def test_zero_over_zero_is_one():
    ratio = lag_ratio(TimeSeries.from_counts([0, 0, 0]), 1)
    assert ratio.values == (None, 1.0, 1.0)


def test_nonzero_over_zero_is_undefined_not_infinite():
    ratio = lag_ratio(TimeSeries.from_counts([0, 5, 0, 3]), 1)
    assert ratio.values[1] is None
    assert ratio.values[2] == 0.0
    assert ratio.values[3] is None
    assert all(v is None or math.isfinite(v) for v in ratio.values)


def test_lag_longer_than_series_is_all_undefined():
    ratio = lag_ratio(TimeSeries.from_counts([1, 2, 3]), 4)
    assert ratio.values == (None, None, None)


@pytest.mark.parametrize("lag", [0, -1, 1.5, False])
def test_invalid_lag_raises_configuration_error(lag):
    with pytest.raises(ConfigurationError) as excinfo:
        lag_ratio(TimeSeries.from_counts([1, 2, 3]), lag)
    assert excinfo.value.parameter == "lag"


@settings(max_examples=60, deadline=None)
@given(
    counts=st.lists(st.integers(min_value=0, max_value=5_000), min_size=1, max_size=40),
    lag=st.integers(min_value=1, max_value=10),
)
def test_ratio_property(counts, lag):
    ratio = lag_ratio(TimeSeries.from_counts(counts), lag)

    assert len(ratio) == len(counts)
    assert ratio.values[:min(lag, len(counts))] == (None,) * min(lag, len(counts))
    for i in range(lag, len(counts)):
        current, previous = counts[i], counts[i - lag]
        value = ratio.values[i]
        if previous != 0:
            assert value * previous == pytest.approx(current)
        elif current == 0:
            assert value == 1.0
        else:
            assert value is None
