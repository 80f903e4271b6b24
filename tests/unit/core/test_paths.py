"""Unit tests for path label resolution."""

import pytest

from routeprom.core.paths import (
    UNKNOWN_PATH,
    UNMATCHED_SENTINEL,
    get_path_with_fallback,
    resolve_path,
)
from routeprom.core.policy import PolicyBuilder, PolicyConfig, default_path_aggregator


class TestGetPathWithFallback:
    def test_uses_scope_path(self):
        assert get_path_with_fallback({"path": "/users/42"}) == "/users/42"

    @pytest.mark.parametrize("scope", [{}, {"path": ""}, {"path": None}])
    def test_missing_path_uses_placeholder(self, scope):
        assert get_path_with_fallback(scope) == UNKNOWN_PATH


class TestResolvePath:
    def test_matched_route_is_authoritative(self):
        route, path = resolve_path("/users/{user_id}", "/users/42", PolicyConfig())
        assert route == "/users/{user_id}"
        assert path == "/users/42"

    def test_matched_route_untouched_even_when_grouping(self):
        policy = PolicyConfig(handle_unmatched_routes=True, group_unmatched_routes=True)
        assert resolve_path("/api/v1", "/api/v1", policy) == ("/api/v1", "/api/v1")

    def test_handling_disabled_leaves_request_unchanged(self):
        policy = PolicyConfig(handle_unmatched_routes=False)
        assert resolve_path("", "/some/path", policy) == ("", "/some/path")

    def test_grouped_unmatched_uses_sentinel_for_every_path(self):
        policy = PolicyConfig()
        routes = {resolve_path("", f"/bot/{i}", policy)[0] for i in range(50)}
        assert routes == {UNMATCHED_SENTINEL}

    def test_ungrouped_unmatched_is_marked(self):
        policy = PolicyConfig(group_unmatched_routes=False)
        assert resolve_path("", "/random/url", policy) == ("/unmatched/random/url", "/random/url")

    def test_grouping_takes_precedence_over_marking(self):
        policy = (
            PolicyBuilder()
            .with_unmatched_route_marking(True)
            .with_unmatched_route_grouping(True)
            .build()
        )
        assert resolve_path("", "/random/url", policy)[0] == UNMATCHED_SENTINEL


class TestGroupingThenAggregation:
    """Unmatched grouping runs before the path aggregator."""

    def test_grouped_route_reaches_aggregator_as_sentinel(self):
        route, path = resolve_path("", "/ghost", PolicyConfig())
        assert default_path_aggregator(route, path, 404) == UNMATCHED_SENTINEL

    def test_unhandled_route_falls_back_to_status_class(self):
        policy = PolicyConfig(handle_unmatched_routes=False)
        route, path = resolve_path("", "/ghost", policy)
        assert default_path_aggregator(route, path, 404) == "path_4xx"
        assert default_path_aggregator(route, path, 502) == "path_5xx"
        assert default_path_aggregator(route, path, 200) == "missing_route"
