"""HTTP metrics adapters."""

from routeprom.adapters.http_metrics.fake import FakeHttpMetrics
from routeprom.adapters.http_metrics.prometheus import (
    DEFAULT_DURATION_BUCKETS,
    DEFAULT_SIZE_BUCKETS,
    PrometheusHttpMetrics,
    exponential_buckets,
)

__all__ = [
    "DEFAULT_DURATION_BUCKETS",
    "DEFAULT_SIZE_BUCKETS",
    "FakeHttpMetrics",
    "PrometheusHttpMetrics",
    "exponential_buckets",
]
