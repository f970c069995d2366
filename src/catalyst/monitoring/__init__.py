"""
Performance Monitoring
Prometheus-based metrics for generation passes
"""

from .metrics import MetricsCollector

__all__ = ["MetricsCollector"]
