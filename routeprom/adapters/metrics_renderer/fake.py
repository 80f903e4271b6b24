"""Fake MetricsRenderer for testing.

Returns a canned page and counts generate() calls so endpoint tests can
check whether metrics were rendered (e.g. not after a failed auth check).
"""

from routeprom.core.protocols.metrics_renderer import MetricsRenderer


class FakeMetricsRenderer(MetricsRenderer):
    """In-memory spy implementing the MetricsRenderer protocol."""

    def __init__(self, body: bytes = b"# fake metrics\n", content_type: str = "text/plain") -> None:
        self.body = body
        self._content_type = content_type
        self.generate_calls: int = 0

    @property
    def content_type(self) -> str:
        return self._content_type

    def generate(self) -> bytes:
        self.generate_calls += 1
        return self.body
