"""HttpMetrics protocol for HTTP request/response instrumentation.

Abstracts metric collection so the middleware depends on a protocol rather
than a concrete library.  Production uses Prometheus; tests inject a fake
that records calls in memory.

Every method takes the same ``LabelTuple`` so the four series of one
request can never disagree on their labels.
"""

from typing import Protocol, runtime_checkable

from routeprom.core.labels import LabelTuple


@runtime_checkable
class HttpMetrics(Protocol):
    """Protocol for HTTP request/response metrics collection."""

    def inc_requests(self, labels: LabelTuple) -> None:
        """Count one completed request."""
        ...

    def observe_duration(self, labels: LabelTuple, duration: float) -> None:
        """Record request latency in seconds."""
        ...

    def observe_request_size(self, labels: LabelTuple, size: int) -> None:
        """Record the request size in bytes."""
        ...

    def observe_response_size(self, labels: LabelTuple, size: int) -> None:
        """Record the response body size in bytes."""
        ...
