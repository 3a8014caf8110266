"""Shared utilities: error taxonomy and path helpers."""
