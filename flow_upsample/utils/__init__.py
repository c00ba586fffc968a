"""Resampling helpers."""
