"""Request and response size measurement for ASGI apps.

Request size prefers the declared ``content-length``; only when the length
is unknown (chunked upload, HTTP/2 without a length) is the body drained
into memory, and ``receive`` is then replaced so the downstream app still
sees the whole body exactly once.

Response size is counted from the body messages that actually went out.
"""

from collections.abc import Mapping
from typing import Any

from starlette.types import Message, Receive, Scope, Send

from routeprom.core.exceptions import SizeEstimationError
from routeprom.core.logging import logger


class ReplayReceive:
    """ASGI ``receive`` that replays a buffered body, then delegates.

    ``more_body`` is left set when the buffer is only the start of the body
    (the read was cut short), so the app keeps reading from ``pending`` or
    the original ``receive`` and sees the same failure it would have seen.
    """

    def __init__(
        self,
        receive: Receive,
        body: bytes,
        *,
        more_body: bool = False,
        pending: Message | None = None,
    ) -> None:
        self._receive = receive
        self._body = body
        self._more_body = more_body
        self._pending = pending
        self._replayed = False

    async def __call__(self) -> Message:
        if not self._replayed:
            self._replayed = True
            return {"type": "http.request", "body": self._body, "more_body": self._more_body}
        if self._pending is not None:
            message, self._pending = self._pending, None
            return message
        return await self._receive()


class CountingSend:
    """ASGI ``send`` wrapper that records the status code and body bytes sent."""

    def __init__(self, send: Send) -> None:
        self._send = send
        self.status_code: int | None = None
        self.size = 0

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status_code = message["status"]
        await self._send(message)
        if message["type"] == "http.response.body":
            self.size += len(message.get("body", b""))

    @property
    def started(self) -> bool:
        return self.status_code is not None


BODILESS_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def _header(scope: Mapping[str, Any], name: bytes) -> bytes | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value
    return None


def declared_content_length(scope: Scope) -> int | None:
    """Return the body length the protocol declares, or ``None`` if unknown.

    A request with neither ``content-length`` nor ``transfer-encoding``
    has no body when it is HTTP/1.x or uses a bodiless method, so its
    declared length is 0.
    """
    raw = _header(scope, b"content-length")
    if raw is not None:
        try:
            length = int(raw)
        except ValueError:
            return None
        return length if length >= 0 else None

    if _header(scope, b"transfer-encoding") is None and (
        str(scope.get("http_version", "1.1")).startswith("1")
        or scope.get("method", "").upper() in BODILESS_METHODS
    ):
        return 0

    return None


def request_head_size(scope: Scope) -> int:
    """Approximate wire size of the request line and headers."""
    target = scope.get("raw_path") or scope.get("path", "").encode("utf-8")
    query = scope.get("query_string", b"")
    if query:
        target = target + b"?" + query

    size = len(scope.get("method", "")) + 1  # method + space
    size += len(target) + 1  # target + space
    size += len("HTTP/" + str(scope.get("http_version", "1.1"))) + 2  # version + CRLF
    for name, value in scope.get("headers", []):
        size += len(name) + 2  # name + ": "
        size += len(value) + 2  # value + CRLF
    size += 2  # blank line
    return size


async def buffer_request_body(receive: Receive) -> tuple[int, ReplayReceive]:
    """Drain the request body from ``receive``.

    Returns the body length and a replacement ``receive``.

    Raises:
        SizeEstimationError: if reading fails or the client disconnects
            before the last body chunk.  ``exc.receive`` still replays
            the bytes that were read.
    """
    buffer = bytearray()
    while True:
        try:
            message = await receive()
        except Exception as exc:
            raise SizeEstimationError(
                f"failed to read request body: {exc}",
                bytes_read=len(buffer),
                receive=ReplayReceive(receive, bytes(buffer), more_body=True),
            ) from exc

        if message["type"] == "http.disconnect":
            raise SizeEstimationError(
                "client disconnected before the request body was complete",
                bytes_read=len(buffer),
                receive=ReplayReceive(receive, bytes(buffer), more_body=True, pending=message),
            )

        if message["type"] == "http.request":
            buffer.extend(message.get("body", b""))
            if not message.get("more_body", False):
                break

    return len(buffer), ReplayReceive(receive, bytes(buffer))


async def estimate_request_size(scope: Scope, receive: Receive) -> tuple[int, Receive]:
    """Return ``(size_in_bytes, receive)`` for an HTTP request.

    The returned ``receive`` must be passed downstream in place of the
    original.  A declared length is returned as is and the original
    ``receive`` comes back untouched.  Measurement failures yield size 0.
    """
    declared = declared_content_length(scope)
    if declared is not None:
        return declared, receive

    try:
        body_size, replay = await buffer_request_body(receive)
    except SizeEstimationError as exc:
        logger.with_context(path=scope.get("path", ""), bytes_read=exc.bytes_read).warning(
            f"Request size estimation failed, recording 0: {exc}"
        )
        return 0, exc.receive

    return request_head_size(scope) + body_size, replay


def estimate_response_size(writer: CountingSend | None) -> int:
    """Bytes of response body sent so far; 0 when there is no writer."""
    if writer is None:
        return 0
    return writer.size
