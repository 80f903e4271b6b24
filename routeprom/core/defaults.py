"""Process-wide default HTTP metrics.

Nothing is created or registered at import time.  The first call to
``get_default_http_metrics()`` builds a ``PrometheusHttpMetrics`` on the
global ``prometheus_client.REGISTRY``; later calls return the same object.
"""

import threading

from prometheus_client import REGISTRY

from routeprom.adapters.http_metrics.prometheus import PrometheusHttpMetrics
from routeprom.core.config import settings
from routeprom.core.logging import logger

_lock = threading.Lock()
_default_metrics: PrometheusHttpMetrics | None = None


def get_default_http_metrics() -> PrometheusHttpMetrics:
    """Return the shared default metrics, creating them on first use."""
    global _default_metrics
    if _default_metrics is None:
        with _lock:
            if _default_metrics is None:
                _default_metrics = PrometheusHttpMetrics(REGISTRY, prefix=settings.METRICS_PREFIX)
                logger.with_context(prefix=settings.METRICS_PREFIX or None).debug(
                    "Registered default HTTP metrics on the global registry"
                )
    return _default_metrics


def reset_default_http_metrics() -> None:
    """Unregister and drop the default metrics (mainly for tests)."""
    global _default_metrics
    with _lock:
        if _default_metrics is not None:
            _default_metrics.unregister()
            _default_metrics = None
