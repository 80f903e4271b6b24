"""MetricsRenderer protocol for the exposition endpoint.

The middleware only collects; serving ``/metrics`` goes through this
protocol so the Starlette endpoint and the aiohttp sidecar never touch
prometheus-client directly.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsRenderer(Protocol):
    """Serializes collected metrics for a scraper."""

    @property
    def content_type(self) -> str:
        """Value for the Content-Type header of the metrics page."""
        ...

    def generate(self) -> bytes:
        """Return the current state of every collector as a page body."""
        ...
