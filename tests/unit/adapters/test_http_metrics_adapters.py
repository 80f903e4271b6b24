"""Unit tests for the HTTP metrics and renderer adapters."""

import pytest
from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from routeprom.adapters.http_metrics import (
    DEFAULT_DURATION_BUCKETS,
    DEFAULT_SIZE_BUCKETS,
    FakeHttpMetrics,
    PrometheusHttpMetrics,
    exponential_buckets,
)
from routeprom.adapters.metrics_renderer import FakeMetricsRenderer, PrometheusMetricsRenderer
from routeprom.core.exceptions import ConfigurationError
from routeprom.core.labels import LabelTuple
from routeprom.core.protocols import HttpMetrics, MetricsRenderer

LABELS = LabelTuple("200", "GET", "/items")
LABEL_DICT = {"status_code": "200", "method": "GET", "path": "/items"}


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------


class TestBuckets:
    def test_exponential_buckets(self):
        assert exponential_buckets(100, 2, 4) == (100, 200, 400, 800)

    def test_default_duration_buckets(self):
        assert len(DEFAULT_DURATION_BUCKETS) == 15
        assert DEFAULT_DURATION_BUCKETS[0] == pytest.approx(0.001)
        assert DEFAULT_DURATION_BUCKETS[-1] == pytest.approx(16.384)

    def test_default_size_buckets(self):
        assert len(DEFAULT_SIZE_BUCKETS) == 10
        assert DEFAULT_SIZE_BUCKETS[0] == 100
        assert DEFAULT_SIZE_BUCKETS[-1] == 51200

    @pytest.mark.parametrize("start, factor, count", [(0, 2, 3), (1, 1, 3), (1, 2, 0)])
    def test_invalid_arguments(self, start, factor, count):
        with pytest.raises(ConfigurationError):
            exponential_buckets(start, factor, count)


# ---------------------------------------------------------------------------
# FakeHttpMetrics
# ---------------------------------------------------------------------------


class TestFakeHttpMetrics:
    def test_satisfies_protocol(self):
        assert isinstance(FakeHttpMetrics(), HttpMetrics)

    def test_clear_resets_all_state(self):
        fake = FakeHttpMetrics()
        fake.inc_requests(LABELS)
        fake.observe_duration(LABELS, 0.01)
        fake.observe_request_size(LABELS, 10)
        fake.observe_response_size(LABELS, 512)

        fake.clear()

        assert fake.observation_count == 0


# ---------------------------------------------------------------------------
# PrometheusHttpMetrics
# ---------------------------------------------------------------------------


class TestPrometheusHttpMetrics:
    def test_registry_is_separate_from_default(self):
        adapter = PrometheusHttpMetrics()
        assert adapter.registry is not REGISTRY

    def test_metric_families_exposed(self):
        adapter = PrometheusHttpMetrics()
        adapter.inc_requests(LABELS)
        adapter.observe_duration(LABELS, 0.01)
        adapter.observe_request_size(LABELS, 10)
        adapter.observe_response_size(LABELS, 11)

        output = PrometheusMetricsRenderer(adapter.registry).generate().decode()
        assert "http_requests_total" in output
        assert "http_request_duration_seconds" in output
        assert "http_request_size_bytes" in output
        assert "http_response_size_bytes" in output

    def test_counter_keyed_by_label_tuple(self):
        adapter = PrometheusHttpMetrics()
        adapter.inc_requests(LABELS)
        adapter.inc_requests(LABELS)

        assert adapter.registry.get_sample_value("http_requests_total", LABEL_DICT) == 2.0

    def test_response_size_observed(self):
        adapter = PrometheusHttpMetrics()
        adapter.observe_response_size(LABELS, 11)

        registry = adapter.registry
        assert registry.get_sample_value("http_response_size_bytes_count", LABEL_DICT) == 1.0
        assert registry.get_sample_value("http_response_size_bytes_sum", LABEL_DICT) == 11.0

    def test_prefix_applies_to_all_four(self):
        adapter = PrometheusHttpMetrics(prefix="shop")
        adapter.inc_requests(LABELS)
        adapter.observe_duration(LABELS, 0.5)
        adapter.observe_request_size(LABELS, 1)
        adapter.observe_response_size(LABELS, 1)

        registry = adapter.registry
        assert registry.get_sample_value("shop_http_requests_total", LABEL_DICT) == 1.0
        assert registry.get_sample_value("shop_http_request_duration_seconds_count", LABEL_DICT) == 1.0
        assert registry.get_sample_value("shop_http_request_size_bytes_count", LABEL_DICT) == 1.0
        assert registry.get_sample_value("shop_http_response_size_bytes_count", LABEL_DICT) == 1.0

    @pytest.mark.parametrize("prefix", ["shop_", "my-app", "1shop"])
    def test_invalid_prefix_rejected(self, prefix):
        with pytest.raises(ConfigurationError, match="prefix"):
            PrometheusHttpMetrics(prefix=prefix)

    def test_custom_buckets(self):
        adapter = PrometheusHttpMetrics(duration_buckets=(0.1, 1.0), size_buckets=(10, 100))
        adapter.observe_duration(LABELS, 0.5)
        adapter.observe_request_size(LABELS, 50)

        registry = adapter.registry
        assert registry.get_sample_value(
            "http_request_duration_seconds_bucket", {**LABEL_DICT, "le": "1.0"}
        ) == 1.0
        assert registry.get_sample_value(
            "http_request_duration_seconds_bucket", {**LABEL_DICT, "le": "0.1"}
        ) == 0.0
        assert registry.get_sample_value(
            "http_request_size_bytes_bucket", {**LABEL_DICT, "le": "100.0"}
        ) == 1.0

    def test_two_instances_on_separate_registries(self):
        first = PrometheusHttpMetrics()
        second = PrometheusHttpMetrics()
        first.inc_requests(LABELS)

        assert first.registry.get_sample_value("http_requests_total", LABEL_DICT) == 1.0
        assert second.registry.get_sample_value("http_requests_total", LABEL_DICT) is None

    def test_duplicate_registration_fails_fast(self):
        registry = CollectorRegistry()
        PrometheusHttpMetrics(registry)

        with pytest.raises(ConfigurationError):
            PrometheusHttpMetrics(registry)

    def test_unregister_allows_rebuilding(self):
        registry = CollectorRegistry()
        PrometheusHttpMetrics(registry).unregister()

        PrometheusHttpMetrics(registry).inc_requests(LABELS)
        assert registry.get_sample_value("http_requests_total", LABEL_DICT) == 1.0


class TestInjectedCollectors:
    """Pre-built collectors replace the defaults but must keep the label set."""

    def test_custom_counter_used(self):
        counter = Counter(
            "custom_requests_total", "Custom.", ["status_code", "method", "path"], registry=None
        )
        adapter = PrometheusHttpMetrics(requests_total=counter)
        adapter.inc_requests(LABELS)

        assert adapter.registry.get_sample_value("custom_requests_total", LABEL_DICT) == 1.0
        assert adapter.registry.get_sample_value("http_requests_total", LABEL_DICT) is None

    def test_custom_histograms_used(self):
        duration = Histogram(
            "custom_duration_seconds", "Custom.", ["status_code", "method", "path"], registry=None
        )
        adapter = PrometheusHttpMetrics(request_duration=duration)
        adapter.observe_duration(LABELS, 0.2)

        assert adapter.registry.get_sample_value("custom_duration_seconds_count", LABEL_DICT) == 1.0

    def test_wrong_labels_rejected(self):
        counter = Counter("bad_requests_total", "Bad.", ["method", "endpoint"], registry=None)

        with pytest.raises(ConfigurationError, match="labels"):
            PrometheusHttpMetrics(requests_total=counter)

    def test_wrong_label_order_rejected(self):
        histogram = Histogram(
            "bad_size_bytes", "Bad.", ["method", "status_code", "path"], registry=None
        )

        with pytest.raises(ConfigurationError):
            PrometheusHttpMetrics(response_size=histogram)

    def test_wrong_type_rejected(self):
        counter = Counter("oops_total", "Oops.", ["status_code", "method", "path"], registry=None)

        with pytest.raises(ConfigurationError, match="Histogram"):
            PrometheusHttpMetrics(request_size=counter)

    def test_failed_construction_leaves_registry_clean(self):
        registry = CollectorRegistry()
        taken = Histogram(
            "http_request_size_bytes", "Taken.", ["status_code", "method", "path"], registry=registry
        )

        with pytest.raises(ConfigurationError):
            PrometheusHttpMetrics(registry)

        registry.unregister(taken)
        PrometheusHttpMetrics(registry)


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


class TestRenderers:
    def test_prometheus_content_type(self):
        renderer = PrometheusMetricsRenderer(CollectorRegistry())
        assert renderer.content_type.startswith("text/plain")
        assert isinstance(renderer.generate(), bytes)

    def test_fake_counts_calls(self):
        fake = FakeMetricsRenderer()
        assert isinstance(fake, MetricsRenderer)
        assert fake.generate() == b"# fake metrics\n"
        assert fake.generate_calls == 1
