"""Starlette/FastAPI integration: middleware, route matching, exposition."""

from typing import Any

from prometheus_client import REGISTRY

from routeprom.adapters.http_metrics.prometheus import PrometheusHttpMetrics
from routeprom.adapters.metrics_renderer.prometheus import PrometheusMetricsRenderer
from routeprom.api.metrics import MetricsServer, metrics_endpoint
from routeprom.api.middleware import PrometheusMiddleware, RequestObservation
from routeprom.core.config import settings
from routeprom.core.defaults import get_default_http_metrics
from routeprom.core.logging import logger
from routeprom.core.policy import PolicyConfig
from routeprom.core.protocols.http_metrics import HttpMetrics
from routeprom.core.protocols.metrics_renderer import MetricsRenderer


def instrument_app(
    app: Any,
    *,
    metrics: HttpMetrics | None = None,
    policy: PolicyConfig | None = None,
    renderer: MetricsRenderer | None = None,
    metrics_path: str | None = None,
    username: str | None = None,
    password: str | None = None,
) -> HttpMetrics:
    """Install ``PrometheusMiddleware`` and a metrics route on a Starlette app.

    Unset arguments fall back to ``core.config.settings``.  When no renderer
    is given, the registry of ``metrics`` is rendered.  Returns the metrics
    instance in use.
    """
    if metrics is None:
        metrics = get_default_http_metrics()
    if renderer is None:
        registry = metrics.registry if isinstance(metrics, PrometheusHttpMetrics) else REGISTRY
        renderer = PrometheusMetricsRenderer(registry)
    path = metrics_path or settings.METRICS_PATH
    if username is None:
        username = settings.METRICS_USERNAME
    if password is None:
        password = settings.METRICS_PASSWORD.get_secret_value()

    app.add_middleware(PrometheusMiddleware, metrics=metrics, policy=policy)
    app.router.add_route(path, metrics_endpoint(renderer, username=username, password=password))
    logger.with_context(path=path, auth=bool(username and password)).info(
        "Instrumented app with Prometheus metrics"
    )
    return metrics


__all__ = [
    "MetricsServer",
    "PrometheusMiddleware",
    "RequestObservation",
    "instrument_app",
    "metrics_endpoint",
]
