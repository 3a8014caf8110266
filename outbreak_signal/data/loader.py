"""
Data Loader for the Outbreak Signal Engine

This module handles the ingestion boundary:
1. Loading a minimal case-count CSV (period, count, optional unit)
2. Explicit zero-filling of missing periods
3. Converting a (single-unit) frame into a validated TimeSeries

The engine never reads files; only experiments and callers use this module.
"""
import logging
from typing import List, Optional

import pandas as pd

from outbreak_signal.common.errors import InputError
from outbreak_signal.data.series import TimeSeries

logger = logging.getLogger(__name__)

# Step used when completing date periods; weekly series keep their own
# weekday instead of being re-anchored to pandas' Sunday-based "W".
FREQ_ALIASES = {
    "W": "7D",
    "D": "D",
}


def _parse_periods(values: pd.Series, period_col: str) -> pd.Series:
    if pd.api.types.is_integer_dtype(values):
        return values.astype("int64")
    # whole-number weeks read as floats when the column had blanks
    if pd.api.types.is_float_dtype(values) and (values.dropna() % 1 == 0).all():
        return values.astype("int64")
    parsed = pd.to_datetime(values, errors="coerce")
    bad = parsed.isna() & values.notna()
    if bad.any():
        i = int(bad.to_numpy().argmax())
        raise InputError(
            f"column '{period_col}' has an unparseable period", i, values.iloc[i]
        )
    return parsed


def load_case_counts(
    path: str,
    period_col: str = "week",
    count_col: str = "cases",
    unit_col: Optional[str] = None,
    imputation_strategy: str = "zero_fill",
) -> pd.DataFrame:
    """
    Load a case-count CSV.

    Args:
        path: CSV file path
        period_col: Column with integer periods or dates
        count_col: Column with case counts
        unit_col: Optional column identifying the municipality/unit
        imputation_strategy: Strategy for missing counts ('zero_fill', 'drop')

    Returns:
        DataFrame with columns [unit_col,] period_col, count_col sorted
        chronologically (per unit). Duplicated periods are kept as-is so
        validation can report them.
    """
    df = pd.read_csv(path)

    required = [period_col, count_col] + ([unit_col] if unit_col else [])
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise InputError(f"Missing required columns in {path}: {missing}")

    df = df[required].copy()
    df = df.dropna(subset=[period_col]).reset_index(drop=True)
    df[period_col] = _parse_periods(df[period_col], period_col)

    # Convert counts to numeric (handle any non-numeric values)
    df[count_col] = pd.to_numeric(df[count_col], errors="coerce")

    # Apply imputation strategy (config-driven)
    if imputation_strategy == "zero_fill":
        df[count_col] = df[count_col].fillna(0)
    elif imputation_strategy == "drop":
        df = df.dropna(subset=[count_col])
    else:
        raise ValueError(f"Unknown imputation_strategy: {imputation_strategy}")

    sort_cols = ([unit_col] if unit_col else []) + [period_col]
    df = df.sort_values(sort_cols, kind="stable").reset_index(drop=True)

    logger.info("Loaded %d rows from %s", len(df), path)
    return df


def _complete_group(g: pd.DataFrame, period_col: str, count_col: str, freq: str) -> pd.DataFrame:
    periods = g[period_col]
    if pd.api.types.is_integer_dtype(periods):
        grid = pd.Index(range(int(periods.min()), int(periods.max()) + 1))
    else:
        step = FREQ_ALIASES.get(freq, freq)
        grid = pd.date_range(periods.min(), periods.max(), freq=step)

    full = grid.union(pd.Index(periods.unique()))
    out = (
        g.set_index(period_col)[[count_col]]
        .reindex(full, fill_value=0)
        .rename_axis(period_col)
        .reset_index()
    )
    return out


def complete_periods(
    df: pd.DataFrame,
    period_col: str = "week",
    count_col: str = "cases",
    freq: str = "W",
    unit_col: Optional[str] = None,
) -> pd.DataFrame:
    """
    Zero-fill missing periods between the first and last observation.

    Integer periods are completed with step 1; date periods with `freq`
    ('W' = every 7 days from the first date, 'D' = daily, or any pandas
    frequency string). Existing periods off the grid are kept.

    Duplicated periods are not tolerated here (reindexing would be
    ambiguous) and raise InputError.
    """
    groups: List[pd.DataFrame] = []
    if unit_col:
        grouped = df.groupby(unit_col, sort=True)
    else:
        grouped = [(None, df)]

    for unit, g in grouped:
        dup = g[period_col].duplicated()
        if dup.any():
            i = int(dup.to_numpy().argmax())
            raise InputError("duplicate period", i, g[period_col].iloc[i])
        before = len(g)
        out = _complete_group(g, period_col, count_col, freq)
        if len(out) > before:
            logger.info("Zero-filled %d missing period(s)%s", len(out) - before,
                        f" for {unit}" if unit is not None else "")
        if unit_col:
            out.insert(0, unit_col, unit)
        groups.append(out)

    return pd.concat(groups, ignore_index=True)


def frame_to_series(
    df: pd.DataFrame,
    period_col: str = "week",
    count_col: str = "cases",
) -> TimeSeries:
    """Build a validated TimeSeries from one unit's rows (in file order)."""
    missing = [c for c in (period_col, count_col) if c not in df.columns]
    if missing:
        raise InputError(f"Missing required columns: {missing}")
    return TimeSeries.from_pairs(zip(df[period_col], df[count_col]))
