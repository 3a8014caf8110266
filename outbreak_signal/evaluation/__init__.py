"""Baseline fit metrics and surge-detection metrics."""
from .metrics import compute_detection_metrics, compute_fit_metrics  # noqa: F401
