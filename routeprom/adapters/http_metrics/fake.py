"""Fake HttpMetrics for testing.

Records all calls in memory so tests can assert on metrics behaviour
without reaching into prometheus-client internals.
"""

from dataclasses import dataclass

from routeprom.core.labels import LabelTuple
from routeprom.core.protocols.http_metrics import HttpMetrics


@dataclass
class Observation:
    """Single histogram observation."""

    labels: LabelTuple
    value: float


class FakeHttpMetrics(HttpMetrics):
    """In-memory spy implementing the HttpMetrics protocol.

    Usage:
        fake = FakeHttpMetrics()
        # ... inject into PrometheusMiddleware ...
        assert fake.requests == [LabelTuple("200", "GET", "/items")]
        assert fake.response_sizes[0].value == 11
    """

    def __init__(self) -> None:
        self.requests: list[LabelTuple] = []
        self.durations: list[Observation] = []
        self.request_sizes: list[Observation] = []
        self.response_sizes: list[Observation] = []

    def inc_requests(self, labels: LabelTuple) -> None:
        self.requests.append(labels)

    def observe_duration(self, labels: LabelTuple, duration: float) -> None:
        self.durations.append(Observation(labels, duration))

    def observe_request_size(self, labels: LabelTuple, size: int) -> None:
        self.request_sizes.append(Observation(labels, size))

    def observe_response_size(self, labels: LabelTuple, size: int) -> None:
        self.response_sizes.append(Observation(labels, size))

    # -- test helpers --

    @property
    def observation_count(self) -> int:
        """Total number of calls of any kind."""
        return (
            len(self.requests)
            + len(self.durations)
            + len(self.request_sizes)
            + len(self.response_sizes)
        )

    def clear(self) -> None:
        """Reset all recorded state."""
        self.requests.clear()
        self.durations.clear()
        self.request_sizes.clear()
        self.response_sizes.clear()
