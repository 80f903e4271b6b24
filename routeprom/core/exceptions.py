"""Exceptions raised by routeprom.

Only setup-time misuse is surfaced to callers.  Measurement failures are
caught where they happen and degrade to a zero-valued observation.
"""

from typing import Any


class RoutePromError(Exception):
    """Base class for all routeprom errors."""


class ConfigurationError(RoutePromError):
    """Raised when metrics or middleware are wired up incorrectly.

    Examples: an injected collector with the wrong label set, or two
    collectors registered under the same name in one registry.
    """


class SizeEstimationError(RoutePromError):
    """Raised when the request body could not be buffered for measurement."""

    def __init__(self, message: str, bytes_read: int = 0, receive: Any = None):
        super().__init__(message)
        self.bytes_read = bytes_read
        # Replacement receive callable that still yields what was read.
        self.receive = receive
