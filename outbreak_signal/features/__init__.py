"""Derived signal columns: trailing moving average and lag ratio."""
