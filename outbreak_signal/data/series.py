"""
Time-series value types for the Outbreak Signal Engine.

- TimePoint: one (period, count) observation
- TimeSeries: validated, chronologically ordered observations
- AlignedSeries: a derived column aligned 1:1 with a TimeSeries, where
  every position is either a finite float or ``None`` (undefined)

Undefined positions are never encoded as NaN or infinity, so comparisons
downstream cannot be silently corrupted. Conversion to pandas maps ``None``
to ``pd.NA`` in a nullable ``Float64`` column.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from outbreak_signal.common.errors import InputError


def _normalise_period(period: Any) -> Any:
    if isinstance(period, bool):
        raise TypeError("boolean periods are not supported")
    if isinstance(period, str):
        raise TypeError("string periods must be parsed to dates first")
    if period is None or period is pd.NaT:
        raise TypeError("missing period")
    if isinstance(period, numbers.Integral):
        return int(period)
    if isinstance(period, numbers.Real):
        raise TypeError("periods must be integers or dates, not floats")
    if isinstance(period, np.datetime64):
        if np.isnat(period):
            raise TypeError("missing period")
        return pd.Timestamp(period)
    return period


@dataclass(frozen=True)
class TimePoint:
    period: Any
    count: float


@dataclass(frozen=True)
class TimeSeries:
    """
    Ordered sequence of TimePoint.

    Invariants (checked on construction, InputError otherwise):
    - at least one point
    - periods strictly increasing, hence unique, and mutually comparable
    - counts finite and non-negative

    No gap filling is done here; see ``data.loader.complete_periods``.
    """
    points: Tuple[TimePoint, ...]

    def __post_init__(self):
        points = tuple(self.points)
        if not points:
            raise InputError("time series is empty")

        normalised = []
        previous = None
        for i, point in enumerate(points):
            try:
                period = _normalise_period(point.period)
            except TypeError as exc:
                raise InputError(f"unsupported period type: {exc}", i, point.period) from exc

            count = point.count
            if isinstance(count, bool) or not isinstance(count, numbers.Real):
                raise InputError(f"count {count!r} is not a number", i, period)
            count = float(count)
            if not math.isfinite(count):
                raise InputError(f"count {count!r} is not finite", i, period)
            if count < 0:
                raise InputError(f"count {count!r} is negative", i, period)

            if previous is not None:
                try:
                    increasing = period > previous
                except TypeError as exc:
                    raise InputError(
                        f"period is not comparable with {previous!r}", i, period
                    ) from exc
                if period == previous:
                    raise InputError("duplicate period", i, period)
                if not increasing:
                    raise InputError(
                        f"periods are not strictly increasing (previous {previous!r})", i, period
                    )
            previous = period
            normalised.append(TimePoint(period=period, count=count))

        object.__setattr__(self, "points", tuple(normalised))

    @classmethod
    def from_counts(cls, counts: Iterable[float], start: int = 0) -> 'TimeSeries':
        """Series with integer periods start, start+1, ..."""
        return cls(tuple(TimePoint(start + i, c) for i, c in enumerate(counts)))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[Any, float]]) -> 'TimeSeries':
        return cls(tuple(TimePoint(p, c) for p, c in pairs))

    @property
    def periods(self) -> Tuple[Any, ...]:
        return tuple(p.period for p in self.points)

    @property
    def counts(self) -> Tuple[float, ...]:
        return tuple(p.count for p in self.points)

    def to_pandas(self) -> pd.Series:
        """Counts as a float Series indexed by period."""
        return pd.Series(self.counts, index=list(self.periods), dtype=float, name="observed")

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TimePoint]:
        return iter(self.points)

    def __getitem__(self, i: int) -> TimePoint:
        return self.points[i]


@dataclass(frozen=True)
class AlignedSeries:
    """
    Derived column aligned with a TimeSeries.

    ``values[i]`` is a finite float, or ``None`` when undefined
    (warm-up window, lag not yet available, undefined ratio...).
    """
    periods: Tuple[Any, ...]
    values: Tuple[Optional[float], ...]
    name: str = "value"

    def __post_init__(self):
        periods = tuple(self.periods)
        values = tuple(self.values)
        if len(periods) != len(values):
            raise InputError(
                f"{self.name}: {len(values)} values for {len(periods)} periods"
            )
        cleaned = []
        for i, v in enumerate(values):
            if v is None:
                cleaned.append(None)
                continue
            v = float(v)
            if not math.isfinite(v):
                raise InputError(f"{self.name}: non-finite value {v!r}", i, periods[i])
            cleaned.append(v)
        object.__setattr__(self, "periods", periods)
        object.__setattr__(self, "values", tuple(cleaned))

    @classmethod
    def from_array(
        cls,
        periods: Sequence[Any],
        array: Sequence[float],
        name: str = "value",
    ) -> 'AlignedSeries':
        """Build from a float array where NaN marks undefined positions."""
        values = tuple(
            None if v is None or pd.isna(v) else float(v) for v in array
        )
        return cls(tuple(periods), values, name)

    @classmethod
    def undefined(cls, periods: Sequence[Any], name: str = "value") -> 'AlignedSeries':
        return cls(tuple(periods), (None,) * len(periods), name)

    def is_defined(self, i: int) -> bool:
        return self.values[i] is not None

    @property
    def defined_count(self) -> int:
        return sum(v is not None for v in self.values)

    @property
    def leading_undefined(self) -> int:
        """Number of undefined entries before the first defined one."""
        for i, v in enumerate(self.values):
            if v is not None:
                return i
        return len(self.values)

    def to_pandas(self) -> pd.Series:
        """Nullable Float64 Series (undefined -> pd.NA) indexed by period."""
        return pd.Series(
            pd.array(list(self.values), dtype="Float64"),
            index=list(self.periods),
            name=self.name,
        )

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Optional[float]]:
        return iter(self.values)

    def __getitem__(self, i: int) -> Optional[float]:
        return self.values[i]


SmoothedSeries = AlignedSeries
RatioSeries = AlignedSeries
