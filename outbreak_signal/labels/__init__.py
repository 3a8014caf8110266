"""Surge labelling from residuals against a baseline."""
