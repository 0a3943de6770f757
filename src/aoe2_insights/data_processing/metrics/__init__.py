"""Metric computation interface for match dashboards."""

from . import series, summary

__all__ = ["series", "summary"]
