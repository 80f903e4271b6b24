"""Prometheus implementation of the HttpMetrics protocol.

Creates a dedicated CollectorRegistry unless one is passed in, so several
instances (one per tenant, one per test) can live in the same process
without name collisions.
"""

import re
from collections.abc import Sequence

from prometheus_client import CollectorRegistry, Counter, Histogram
from prometheus_client.metrics import MetricWrapperBase

from routeprom.core.exceptions import ConfigurationError
from routeprom.core.labels import LABEL_NAMES, LabelTuple
from routeprom.core.protocols.http_metrics import HttpMetrics


def exponential_buckets(start: float, factor: float, count: int) -> tuple[float, ...]:
    """Return ``count`` bucket bounds starting at ``start``, each ``factor`` times the last."""
    if count < 1:
        raise ConfigurationError(f"bucket count must be positive, got {count}")
    if start <= 0:
        raise ConfigurationError(f"bucket start must be positive, got {start}")
    if factor <= 1:
        raise ConfigurationError(f"bucket factor must be greater than 1, got {factor}")
    return tuple(start * factor**i for i in range(count))


# 1 ms to ~16 s.
DEFAULT_DURATION_BUCKETS = exponential_buckets(0.001, 2, 15)
# 100 B to ~51 KB.
DEFAULT_SIZE_BUCKETS = exponential_buckets(100, 2, 10)


_PREFIX_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")


def _metric_name(prefix: str, name: str) -> str:
    if not prefix:
        return name
    if not _PREFIX_RE.match(prefix) or prefix.endswith("_"):
        raise ConfigurationError(f"invalid metric prefix: {prefix!r}")
    return f"{prefix}_{name}"


def _check_collector(collector: MetricWrapperBase, expected: type, role: str) -> None:
    if not isinstance(collector, expected):
        raise ConfigurationError(
            f"{role} must be a prometheus_client {expected.__name__}, "
            f"got {type(collector).__name__}"
        )
    # prometheus_client has no public accessor for label names; _labelnames
    # is an internal attribute of MetricWrapperBase.
    labelnames = tuple(getattr(collector, "_labelnames", ()))
    if labelnames != LABEL_NAMES:
        raise ConfigurationError(
            f"{role} must use labels {list(LABEL_NAMES)}, got {list(labelnames)}"
        )


class PrometheusHttpMetrics(HttpMetrics):
    """Prometheus-backed HTTP metrics: one counter and three histograms.

    Pre-built collectors may be passed in to replace any of the four
    defaults.  They must carry exactly the labels
    ``status_code, method, path`` and must not already be registered
    (create them with ``registry=None``); they are registered here.
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        *,
        prefix: str = "",
        duration_buckets: Sequence[float] = DEFAULT_DURATION_BUCKETS,
        size_buckets: Sequence[float] = DEFAULT_SIZE_BUCKETS,
        requests_total: Counter | None = None,
        request_duration: Histogram | None = None,
        request_size: Histogram | None = None,
        response_size: Histogram | None = None,
    ) -> None:
        self._registry = registry if registry is not None else CollectorRegistry()
        self.prefix = prefix

        if requests_total is None:
            requests_total = Counter(
                _metric_name(prefix, "http_requests_total"),
                "Number of requests.",
                LABEL_NAMES,
                registry=None,
            )
        if request_duration is None:
            request_duration = Histogram(
                _metric_name(prefix, "http_request_duration_seconds"),
                "Duration of HTTP requests in seconds.",
                LABEL_NAMES,
                buckets=tuple(duration_buckets),
                registry=None,
            )
        if request_size is None:
            request_size = Histogram(
                _metric_name(prefix, "http_request_size_bytes"),
                "Size of HTTP request in bytes.",
                LABEL_NAMES,
                buckets=tuple(size_buckets),
                registry=None,
            )
        if response_size is None:
            response_size = Histogram(
                _metric_name(prefix, "http_response_size_bytes"),
                "Size of HTTP response in bytes.",
                LABEL_NAMES,
                buckets=tuple(size_buckets),
                registry=None,
            )

        _check_collector(requests_total, Counter, "requests_total")
        _check_collector(request_duration, Histogram, "request_duration")
        _check_collector(request_size, Histogram, "request_size")
        _check_collector(response_size, Histogram, "response_size")

        self._requests_total = requests_total
        self._request_duration = request_duration
        self._request_size = request_size
        self._response_size = response_size

        self._register()

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def _collectors(self) -> tuple[MetricWrapperBase, ...]:
        return (
            self._requests_total,
            self._response_size,
            self._request_size,
            self._request_duration,
        )

    def _register(self) -> None:
        registered: list[MetricWrapperBase] = []
        for collector in self._collectors():
            try:
                self._registry.register(collector)
            except ValueError as exc:
                # Leave the registry as it was before this instance.
                for done in registered:
                    self._registry.unregister(done)
                raise ConfigurationError(f"cannot register HTTP metrics: {exc}") from exc
            registered.append(collector)

    def unregister(self) -> None:
        """Remove all four collectors from the registry."""
        for collector in self._collectors():
            self._registry.unregister(collector)

    # -- HttpMetrics protocol methods --

    def inc_requests(self, labels: LabelTuple) -> None:
        self._requests_total.labels(*labels).inc()

    def observe_duration(self, labels: LabelTuple, duration: float) -> None:
        self._request_duration.labels(*labels).observe(duration)

    def observe_request_size(self, labels: LabelTuple, size: int) -> None:
        self._request_size.labels(*labels).observe(size)

    def observe_response_size(self, labels: LabelTuple, size: int) -> None:
        self._response_size.labels(*labels).observe(size)
