"""Prometheus implementation of the MetricsRenderer protocol.

Wraps a CollectorRegistry so the exposition endpoint can serialize every
registered collector into Prometheus text exposition format.
"""

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest

from routeprom.core.protocols.metrics_renderer import MetricsRenderer


class PrometheusMetricsRenderer(MetricsRenderer):
    """Render all metrics in a CollectorRegistry (the global one by default)."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self._registry = registry

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def generate(self) -> bytes:
        return generate_latest(self._registry)
