"""Core protocols for dependency injection."""

from routeprom.core.protocols.http_metrics import HttpMetrics
from routeprom.core.protocols.metrics_renderer import MetricsRenderer

__all__ = [
    "HttpMetrics",
    "MetricsRenderer",
]
