"""Metrics renderer adapters."""

from routeprom.adapters.metrics_renderer.fake import FakeMetricsRenderer
from routeprom.adapters.metrics_renderer.prometheus import PrometheusMetricsRenderer

__all__ = ["PrometheusMetricsRenderer", "FakeMetricsRenderer"]
