"""Request policy: what the middleware records and how it labels it.

``PolicyConfig`` is a frozen snapshot built once per middleware and shared
by every request.  Build it either as a literal::

    PolicyConfig(aggregate_status_code=True, record_request_size=False)

or through ``PolicyBuilder`` when toggles are collected in order::

    policy = (
        PolicyBuilder()
        .with_filter_routes(["/health", "/metrics"])
        .with_aggregate_status_code(True)
        .build()
    )

With the builder, a later call overrides an earlier one on the same field.
"""

from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

FilterPath = Callable[[str, str], bool]
PathAggregator = Callable[[str, str, int], str]

MISSING_ROUTE_LABEL = "missing_route"
CLIENT_ERROR_LABEL = "path_4xx"
SERVER_ERROR_LABEL = "path_5xx"


def never_filter(route: str, path: str) -> bool:
    """Default filter: every request is recorded."""
    return False


def default_path_aggregator(route: str, path: str, status_code: int) -> str:
    """Use the route pattern, or classify a route-less request by status."""
    if route:
        return route
    if 400 <= status_code < 500:
        return CLIENT_ERROR_LABEL
    if status_code >= 500:
        return SERVER_ERROR_LABEL
    return MISSING_ROUTE_LABEL


def filter_routes(routes: Iterable[str]) -> FilterPath:
    """Build a filter that skips requests whose route pattern is in ``routes``.

    The match is against the route pattern (e.g. ``/items/{item_id}``),
    never the raw URL.
    """
    excluded = frozenset(routes)

    def _filter(route: str, path: str) -> bool:
        return route in excluded

    return _filter


class PolicyConfig(BaseModel):
    """Immutable per-middleware request policy."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    record_request_size: bool = True
    record_response_size: bool = True
    record_duration: bool = True
    aggregate_status_code: bool = False
    filter_path: FilterPath = never_filter
    path_aggregator: PathAggregator = default_path_aggregator
    handle_unmatched_routes: bool = True
    group_unmatched_routes: bool = True

    @field_validator("filter_path", mode="before")
    @classmethod
    def default_filter(cls, v: Any) -> Any:
        return never_filter if v is None else v

    @field_validator("path_aggregator", mode="before")
    @classmethod
    def default_aggregator(cls, v: Any) -> Any:
        return default_path_aggregator if v is None else v


class PolicyBuilder:
    """Collects named toggles in call order and builds a ``PolicyConfig``.

    Every ``with_*`` method returns the builder so calls can be chained.
    """

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}

    def _set(self, **fields: Any) -> "PolicyBuilder":
        self._fields.update(fields)
        return self

    def with_record_request_size(self, record: bool) -> "PolicyBuilder":
        return self._set(record_request_size=record)

    def with_record_response_size(self, record: bool) -> "PolicyBuilder":
        return self._set(record_response_size=record)

    def with_record_duration(self, record: bool) -> "PolicyBuilder":
        return self._set(record_duration=record)

    def with_aggregate_status_code(self, aggregate: bool) -> "PolicyBuilder":
        """Label status codes by class ("2xx", "4xx", ...) instead of value."""
        return self._set(aggregate_status_code=aggregate)

    def with_filter_path(self, predicate: FilterPath) -> "PolicyBuilder":
        """Skip requests for which ``predicate(route, path)`` is true.

        Replaces any filter installed earlier, including one from
        ``with_filter_routes``.
        """
        return self._set(filter_path=predicate)

    def with_filter_routes(self, routes: Iterable[str]) -> "PolicyBuilder":
        """Skip requests whose route pattern is one of ``routes``.

        Replaces any filter installed earlier.
        """
        return self._set(filter_path=filter_routes(routes))

    def with_path_aggregator(self, aggregator: PathAggregator) -> "PolicyBuilder":
        return self._set(path_aggregator=aggregator)

    def with_unmatched_route_handling(self, enabled: bool) -> "PolicyBuilder":
        """Relabel requests that matched no route (see ``core.paths``)."""
        return self._set(handle_unmatched_routes=enabled)

    def with_unmatched_route_grouping(self, enabled: bool) -> "PolicyBuilder":
        """Collapse all unmatched requests into a single path label."""
        return self._set(group_unmatched_routes=enabled)

    def with_unmatched_route_marking(self, enabled: bool) -> "PolicyBuilder":
        """Older name for ``with_unmatched_route_handling``.

        Marking prefixes unmatched paths with ``/unmatched``; it only shows
        up in labels while grouping is off, since grouping wins.
        """
        return self.with_unmatched_route_handling(enabled)

    def build(self) -> PolicyConfig:
        return PolicyConfig(**self._fields)
