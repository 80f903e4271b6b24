"""Metrics exposition: a Starlette endpoint and an aiohttp sidecar server.

Both serve whatever the ``MetricsRenderer`` produces and can be gated by
HTTP Basic auth.  Auth is only enforced when both a username and a
password are configured.
"""

from collections.abc import Awaitable, Callable
from typing import Optional

from aiohttp import web
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from routeprom.core.auth import BASIC_CHALLENGE, check_basic_auth
from routeprom.core.config import settings
from routeprom.core.logging import logger
from routeprom.core.protocols.metrics_renderer import MetricsRenderer


def _auth_enabled(username: str | None, password: str | None) -> bool:
    return bool(username) and bool(password)


def metrics_endpoint(
    renderer: MetricsRenderer,
    *,
    username: str | None = None,
    password: str | None = None,
) -> Callable[[Request], Awaitable[Response]]:
    """Build a Starlette endpoint serving ``renderer`` output.

    Example:
        Route("/metrics", metrics_endpoint(renderer, username="prom", password="s3cr3t"))
    """
    protected = _auth_enabled(username, password)

    async def endpoint(request: Request) -> Response:
        if protected and not check_basic_auth(
            request.headers.get("authorization"), username or "", password or ""
        ):
            return PlainTextResponse(
                "Unauthorized",
                status_code=401,
                headers={"WWW-Authenticate": BASIC_CHALLENGE},
            )
        return Response(renderer.generate(), media_type=renderer.content_type)

    return endpoint


class MetricsServer:
    """Standalone aiohttp server exposing ``/metrics`` on its own port.

    Useful when the application port must not expose metrics.  Call
    ``start()`` during application startup and ``stop()`` on shutdown.
    """

    def __init__(
        self,
        renderer: MetricsRenderer,
        port: int,
        host: str = "0.0.0.0",
        *,
        path: str = "/metrics",
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        """Initialize the metrics server.

        Args:
            renderer: Serializes the collected metrics.
            port: The port to listen on; 0 lets the OS choose.
            host: The host to listen on.
            path: Route that serves the metrics page.
            username: Basic auth username (auth is off unless both are set).
            password: Basic auth password.
        """
        self._renderer = renderer
        self._host = host
        self._port = port
        self._path = path
        self._username = username or ""
        self._password = password or ""
        self._app = web.Application()
        self._app.add_routes([web.get(path, self._handle_metrics)])
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self.logger = logger.with_context(component="metrics_server", port=port)

    @classmethod
    def from_settings(cls, renderer: MetricsRenderer) -> "MetricsServer":
        """Build a server from the ``ROUTEPROM_METRICS_*`` settings."""
        return cls(
            renderer,
            settings.METRICS_PORT,
            settings.METRICS_HOST,
            path=settings.METRICS_PATH,
            username=settings.METRICS_USERNAME,
            password=settings.METRICS_PASSWORD.get_secret_value(),
        )

    async def _handle_metrics(self, request: web.Request) -> web.Response:
        """Serve the metrics page, or a 401 challenge when auth fails."""
        if _auth_enabled(self._username, self._password) and not check_basic_auth(
            request.headers.get("Authorization"), self._username, self._password
        ):
            return web.Response(
                text="Unauthorized",
                status=401,
                headers={"WWW-Authenticate": BASIC_CHALLENGE},
            )
        # aiohttp rejects a charset inside content_type=, so pass the raw header.
        return web.Response(
            body=self._renderer.generate(),
            headers={"Content-Type": self._renderer.content_type},
        )

    async def start(self) -> None:
        """Start serving in the background of the running event loop."""
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, host=self._host, port=self._port)
        await self._site.start()
        self.logger.info(f"Metrics server listening on http://{self._host}:{self._port}{self._path}")

    async def stop(self) -> None:
        """Stop the server gracefully; a no-op if it was never started."""
        if self._site:
            await self._site.stop()
        if self._runner:
            await self._runner.cleanup()
        self._site = None
        self._runner = None
