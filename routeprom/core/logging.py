"""Logging for routeprom.

A thin wrapper around the standard library logger that carries structured
context.  Use ``logger.with_context(...)`` to derive a child logger whose
records include the given fields.
"""

import logging
import sys
from typing import Any

from routeprom.core.config import settings


class ContextualLogger(logging.LoggerAdapter):
    """LoggerAdapter that renders its context dimensions into every message."""

    def __init__(self, logger: logging.Logger, dimensions: dict[str, Any] | None = None):
        super().__init__(logger, dimensions or {})
        self.dimensions: dict[str, Any] = dict(dimensions or {})

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = kwargs.get("extra") or {}
        kwargs["extra"] = {**self.dimensions, **extra}
        if self.dimensions:
            context = " ".join(f"{k}={v}" for k, v in self.dimensions.items())
            msg = f"{msg} [{context}]"
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a child logger with ``dimensions`` merged into the context."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


def _configure_root(name: str) -> logging.Logger:
    base = logging.getLogger(name)
    if not base.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        base.addHandler(handler)
    base.setLevel(settings.LOG_LEVEL)
    return base


logger = ContextualLogger(_configure_root("routeprom"))
