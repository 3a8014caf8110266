# Outbreak Signal Engine
"""
Outbreak Signal Engine
Weekly/daily case-count surge detection for surveillance exercises.

Project Structure:
    outbreak_signal/
    ├── common/      - Error taxonomy and path helpers
    ├── data/        - Time-series containers, CSV ingestion, toy simulation
    ├── features/    - Trailing moving average and simplified Rt (lag ratio)
    ├── labels/      - Residual-based surge flags
    ├── models/      - Baselines (moving average, Holt-Winters)
    ├── evaluation/  - Fit and detection metrics
    └── pipeline.py  - Orchestration: raw counts -> aligned result table
"""

from outbreak_signal.common.errors import ConfigurationError, InputError, SignalError
from outbreak_signal.config import PipelineConfig
from outbreak_signal.data.series import AlignedSeries, TimePoint, TimeSeries
from outbreak_signal.features.ratios import lag_ratio
from outbreak_signal.features.smoothing import moving_average
from outbreak_signal.labels.surge_flags import AnomalyFlag, detect_surges
from outbreak_signal.pipeline import SurgeReport, run_configured, run_panel, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "AlignedSeries",
    "AnomalyFlag",
    "ConfigurationError",
    "InputError",
    "PipelineConfig",
    "SignalError",
    "SurgeReport",
    "TimePoint",
    "TimeSeries",
    "detect_surges",
    "lag_ratio",
    "moving_average",
    "run_configured",
    "run_panel",
    "run_pipeline",
]
