"""Result-table column sets.

The surge table always carries the core columns; the full set adds the
baseline actually used for residuals and the residual itself, which is what
the reporting layer needs to draw control bands.
"""

from __future__ import annotations

from typing import Iterable, List, Literal, Sequence


ColumnSetName = Literal["full", "core"]


CORE_COLUMNS: Sequence[str] = (
    "period",
    "observed",
    "smoothed",
    "ratio",
    "anomaly",
)

FULL_COLUMNS: Sequence[str] = (
    "period",
    "observed",
    "smoothed",
    "ratio",
    "baseline",
    "residual",
    "anomaly",
)


def select_result_columns(
    all_columns: Iterable[str],
    column_set: ColumnSetName = "full",
) -> List[str]:
    columns = list(all_columns)

    if column_set == "full":
        wanted = FULL_COLUMNS
    elif column_set == "core":
        wanted = CORE_COLUMNS
    else:
        raise ValueError(f"Unknown column_set: {column_set}")

    present = set(columns)
    # extra leading columns (e.g. the unit of a panel run) are preserved
    extras = [c for c in columns if c not in FULL_COLUMNS]
    return extras + [c for c in wanted if c in present]
