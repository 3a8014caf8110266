"""Shared fixtures for the outbreak signal test suite."""
import pandas as pd
import pytest

from outbreak_signal.data.series import TimeSeries


@pytest.fixture
def spike_series():
    """Five weeks with one isolated spike."""
    return TimeSeries.from_counts([10, 10, 10, 50, 10])


@pytest.fixture
def long_spike_series():
    """Flat series long enough for a 2-sd rule to isolate the spike at index 8."""
    return TimeSeries.from_counts([10] * 8 + [50] + [10] * 3)


@pytest.fixture
def weekly_series():
    weeks = pd.date_range("2023-01-01", periods=8, freq="7D")
    counts = [12, 15, 14, 18, 40, 17, 16, 15]
    return TimeSeries.from_pairs(zip(weeks, counts))


@pytest.fixture
def panel_frame():
    weeks = list(range(1, 7))
    return pd.DataFrame({
        "unit": ["A"] * 6 + ["B"] * 6,
        "week": weeks + weeks,
        "cases": [5, 6, 5, 7, 6, 5, 20, 22, 0, 0, 21, 23],
    })
