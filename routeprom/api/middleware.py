"""ASGI middleware that records Prometheus metrics for every HTTP request.

Usage::

    app = FastAPI()
    app.add_middleware(
        PrometheusMiddleware,
        policy=PolicyBuilder().with_filter_routes(["/health"]).build(),
    )

Per request:

1. Resolve the route label and consult ``policy.filter_path``.  A
   filtered request is handed to the app untouched and never recorded;
   so is one whose resolution or filter raised (the error is logged).
2. Otherwise measure the request, wrap ``send`` to capture the status code
   and response bytes, and run the app.
3. When the app returns, raises or is cancelled, build the label tuple
   once and record all four series.
"""

import time
from dataclasses import dataclass

from starlette.types import ASGIApp, Receive, Scope, Send

from routeprom.api.routing import get_route_pattern
from routeprom.core.defaults import get_default_http_metrics
from routeprom.core.labels import LabelTuple, status_label
from routeprom.core.logging import logger
from routeprom.core.paths import get_path_with_fallback, resolve_path
from routeprom.core.policy import PolicyConfig
from routeprom.core.protocols.http_metrics import HttpMetrics
from routeprom.core.recorder import record
from routeprom.core.sizes import CountingSend, estimate_request_size, estimate_response_size


@dataclass
class RequestObservation:
    """What is known about one request by the time it is recorded."""

    start: float
    route: str
    path: str
    method: str
    status_code: int = 200
    request_size: int = 0
    response_size: int = 0


class PrometheusMiddleware:
    """Pure ASGI middleware recording count, latency and sizes per request."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        metrics: HttpMetrics | None = None,
        policy: PolicyConfig | None = None,
    ) -> None:
        self.app = app
        self.metrics = metrics if metrics is not None else get_default_http_metrics()
        self.policy = policy if policy is not None else PolicyConfig()
        self.logger = logger.with_context(component="prometheus_middleware")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        try:
            route, path = resolve_path(
                get_route_pattern(scope), get_path_with_fallback(scope), self.policy
            )
            filtered = self.policy.filter_path(route, path)
        except Exception as exc:
            self.logger.with_context(
                path=scope.get("path", ""), method=scope.get("method", "")
            ).error(f"Failed to resolve request route, not recording: {exc}", exc_info=True)
            filtered = True

        if filtered:
            await self.app(scope, receive, send)
            return

        observation = RequestObservation(
            start=start, route=route, path=path, method=scope.get("method", "")
        )
        writer = CountingSend(send)
        try:
            if self.policy.record_request_size:
                observation.request_size, receive = await estimate_request_size(scope, receive)
            await self.app(scope, receive, writer)
        except Exception:
            if not writer.started:
                # ServerErrorMiddleware further out will answer with a 500.
                observation.status_code = 500
            raise
        finally:
            if writer.started:
                observation.status_code = writer.status_code
            observation.response_size = estimate_response_size(writer)
            self._finalize(observation)

    def _finalize(self, observation: RequestObservation) -> None:
        duration = time.perf_counter() - observation.start
        try:
            labels = LabelTuple(
                status_label(observation.status_code, aggregate=self.policy.aggregate_status_code),
                observation.method,
                self.policy.path_aggregator(
                    observation.route, observation.path, observation.status_code
                ),
            )
            record(
                self.metrics,
                labels,
                duration=duration,
                request_size=observation.request_size,
                response_size=observation.response_size,
                policy=self.policy,
            )
        except Exception as exc:
            # Telemetry never changes the response the client gets.
            self.logger.with_context(route=observation.route, method=observation.method).error(
                f"Failed to record request metrics: {exc}", exc_info=True
            )
