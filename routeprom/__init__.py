"""Prometheus request metrics for Starlette and FastAPI with bounded label cardinality."""

from routeprom.adapters.http_metrics import (
    DEFAULT_DURATION_BUCKETS,
    DEFAULT_SIZE_BUCKETS,
    PrometheusHttpMetrics,
    exponential_buckets,
)
from routeprom.adapters.metrics_renderer import PrometheusMetricsRenderer
from routeprom.api import MetricsServer, PrometheusMiddleware, instrument_app, metrics_endpoint
from routeprom.core.defaults import get_default_http_metrics
from routeprom.core.exceptions import ConfigurationError, RoutePromError, SizeEstimationError
from routeprom.core.labels import LabelTuple
from routeprom.core.policy import PolicyBuilder, PolicyConfig

__all__ = [
    "ConfigurationError",
    "DEFAULT_DURATION_BUCKETS",
    "DEFAULT_SIZE_BUCKETS",
    "LabelTuple",
    "MetricsServer",
    "PolicyBuilder",
    "PolicyConfig",
    "PrometheusHttpMetrics",
    "PrometheusMetricsRenderer",
    "PrometheusMiddleware",
    "RoutePromError",
    "SizeEstimationError",
    "exponential_buckets",
    "get_default_http_metrics",
    "instrument_app",
    "metrics_endpoint",
]
