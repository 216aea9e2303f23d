"""Minimal HTTP service with Prometheus request counters and duration metrics."""

__version__ = "0.1.0"
