"""
Evaluation Metrics for the Outbreak Signal Engine

Two families:
- Baseline fit: MAE, RMSE, MAPE of the baseline against observed counts
  (how well a moving average or Holt-Winters model tracks the series)
- Surge detection: sensitivity, specificity, precision and false alarm
  rate of the SURGE flags against known surge periods (e.g. the surges
  injected into a simulated series)
"""
import warnings
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

import numpy as np
from sklearn.metrics import (
    confusion_matrix,
    mean_absolute_error,
    mean_absolute_percentage_error,
    mean_squared_error,
)

from outbreak_signal.data.series import AlignedSeries, TimeSeries
from outbreak_signal.labels.surge_flags import AnomalyFlag, check_alignment

if TYPE_CHECKING:
    from outbreak_signal.pipeline import SurgeReport


def compute_fit_metrics(observed: TimeSeries, baseline: AlignedSeries) -> Dict[str, Optional[float]]:
    """
    Compute fit metrics over periods where the baseline is defined.

    MAPE is computed over non-zero observations only and reported in
    percent; it is None when every paired observation is zero.

    Args:
        observed: Observed TimeSeries
        baseline: Aligned baseline

    Returns:
        Dictionary with n_pairs, mae, rmse, mape_pct (None when undefined)
    """
    check_alignment(observed, baseline)

    pairs = [
        (y, b) for y, b in zip(observed.counts, baseline.values) if b is not None
    ]
    if not pairs:
        return {'n_pairs': 0, 'mae': None, 'rmse': None, 'mape_pct': None}

    y_true = np.array([p[0] for p in pairs], dtype=float)
    y_pred = np.array([p[1] for p in pairs], dtype=float)

    nonzero = y_true != 0
    mape = None
    if nonzero.any():
        mape = 100.0 * float(mean_absolute_percentage_error(y_true[nonzero], y_pred[nonzero]))

    return {
        'n_pairs': int(len(pairs)),
        'mae': float(mean_absolute_error(y_true, y_pred)),
        'rmse': float(np.sqrt(mean_squared_error(y_true, y_pred))),
        'mape_pct': mape,
    }


def compute_detection_metrics(report: 'SurgeReport', true_surge_periods: Iterable[Any]) -> Dict[str, float]:
    """
    Compare SURGE flags with known surge periods.

    Args:
        report: SurgeReport from the pipeline
        true_surge_periods: Periods that really are surges

    Returns:
        Dictionary with metrics and confusion counts
    """
    periods = [r.period for r in report.rows]
    truth = set(true_surge_periods)
    unknown = truth - set(periods)
    if unknown:
        warnings.warn(f"{len(unknown)} true surge period(s) not in the report: {sorted(map(str, unknown))}")

    y_true = np.array([int(p in truth) for p in periods])
    y_pred = np.array([int(r.anomaly is AnomalyFlag.SURGE) for r in report.rows])

    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()

    metrics = {
        'sensitivity': tp / (tp + fn) if (tp + fn) > 0 else 0.0,
        'specificity': tn / (tn + fp) if (tn + fp) > 0 else 0.0,
        'precision': tp / (tp + fp) if (tp + fp) > 0 else 0.0,
        'false_alarm_rate': fp / (fp + tp) if (fp + tp) > 0 else 0.0,
        'true_positives': int(tp),
        'false_positives': int(fp),
        'true_negatives': int(tn),
        'false_negatives': int(fn)
    }

    return {k: (float(v) if not isinstance(v, int) else v) for k, v in metrics.items()}
