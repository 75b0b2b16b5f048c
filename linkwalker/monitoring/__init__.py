"""
Monitoring and observability modules
"""

from .metrics_collector import MetricsCollector, CheckMetrics
from .log_manager import LogManager

__all__ = [
    'MetricsCollector',
    'CheckMetrics',
    'LogManager'
]
