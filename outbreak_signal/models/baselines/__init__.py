"""Baselines that surge residuals are computed against."""
from typing import Dict, Optional

from ..base import BaseBaseline
from .holt_winters import HoltWintersBaseline
from .moving_average import MovingAverageBaseline

BASELINES = {
    "moving_average": MovingAverageBaseline,
    "holt_winters": HoltWintersBaseline,
}


def make_baseline(method: str, config: Optional[Dict] = None) -> BaseBaseline:
    """Instantiate a baseline by its config name."""
    if method not in BASELINES:
        raise ValueError(f"Unknown baseline method: {method}. Use one of {sorted(BASELINES)}.")
    return BASELINES[method](config)


__all__ = ["BASELINES", "HoltWintersBaseline", "MovingAverageBaseline", "make_baseline"]
