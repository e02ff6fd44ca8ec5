"""
Monitoring package for metrics collection.
"""

from .metrics import MetricsCollector

__all__ = ["MetricsCollector"]
