"""Label tuple shared by every HTTP collector."""

from typing import NamedTuple

LABEL_NAMES = ("status_code", "method", "path")


class LabelTuple(NamedTuple):
    """One time series key: ``(status_code, method, path)``."""

    status_code: str
    method: str
    path: str


def status_label(status_code: int, *, aggregate: bool) -> str:
    """Return ``"404"``, or its class ``"4xx"`` when ``aggregate`` is set."""
    if aggregate:
        return f"{status_code // 100}xx"
    return str(status_code)
