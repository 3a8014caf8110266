"""Baseline models (moving average, Holt-Winters)."""
