"""
Toy surveillance series for exercises and experiments.

Weekly counts are built as:

    cases(t) = base + trend * t + amplitude * sin(2*pi*t / cycle) + noise(t)

with artificial surges added at chosen weeks, then rounded and clipped at
zero. Randomness comes only from an explicit seed; the engine itself never
generates data.
"""
from typing import Dict, Sequence, Union

import numpy as np
import pandas as pd


def simulate_weekly_cases(
    start: str = "2023-01-01",
    end: str = "2023-06-30",
    seed: int = 123,
    base: float = 15.0,
    trend: float = 0.3,
    amplitude: float = 5.0,
    cycle: float = 12.0,
    noise_sd: float = 2.0,
    surge_weeks: Sequence[int] = (10, 15),
    surge_size: float = 20.0,
    freq: str = "7D",
) -> pd.DataFrame:
    """
    Simulate a weekly case-count series.

    Args:
        start, end: Date range (inclusive), one row per `freq` step
        seed: Seed for numpy's Generator
        base, trend, amplitude, cycle, noise_sd: Shape of the series
        surge_weeks: 1-based week numbers that receive an artificial surge
        surge_size: Cases added at each surge week
        freq: Step between periods ('7D' weekly, 'D' daily)

    Returns:
        DataFrame with columns: week, cases, is_injected_surge
    """
    rng = np.random.default_rng(seed)
    weeks = pd.date_range(start=start, end=end, freq=freq)
    n = len(weeks)
    t = np.arange(1, n + 1)

    cases = (
        base
        + trend * t
        + amplitude * np.sin(2 * np.pi * t / cycle)
        + rng.normal(0.0, noise_sd, size=n)
    )

    injected = np.zeros(n, dtype=bool)
    for week in surge_weeks:
        if 1 <= week <= n:
            cases[week - 1] += surge_size
            injected[week - 1] = True

    return pd.DataFrame({
        "week": weeks,
        "cases": np.clip(np.round(cases), 0, None).astype(int),
        "is_injected_surge": injected,
    })


def simulate_panel(
    units: Sequence[str],
    seed: int = 123,
    surge_weeks: Union[Sequence[int], Dict[str, Sequence[int]], None] = None,
    **kwargs,
) -> pd.DataFrame:
    """
    One simulated series per unit (municipality), seeded per unit so adding
    a unit does not change the others.

    `surge_weeks` is either one list of weeks used for every unit or a
    {unit: weeks} mapping; units missing from the mapping get the default
    weeks of simulate_weekly_cases.
    """
    frames = []
    for i, unit in enumerate(units):
        unit_kwargs = dict(kwargs)
        if isinstance(surge_weeks, dict):
            if unit in surge_weeks:
                unit_kwargs["surge_weeks"] = surge_weeks[unit]
        elif surge_weeks is not None:
            unit_kwargs["surge_weeks"] = surge_weeks
        df = simulate_weekly_cases(seed=seed + i, **unit_kwargs)
        df.insert(0, "unit", unit)
        frames.append(df)
    return pd.concat(frames, ignore_index=True)
