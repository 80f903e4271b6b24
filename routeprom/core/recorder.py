"""Records one finished request into an HttpMetrics backend."""

from routeprom.core.labels import LabelTuple
from routeprom.core.policy import PolicyConfig
from routeprom.core.protocols.http_metrics import HttpMetrics


def record(
    metrics: HttpMetrics,
    labels: LabelTuple,
    *,
    duration: float,
    request_size: int,
    response_size: int,
    policy: PolicyConfig,
) -> None:
    """Count the request and observe each enabled histogram.

    The counter is always incremented; a histogram is skipped when its
    ``record_*`` flag is off.
    """
    metrics.inc_requests(labels)

    if policy.record_response_size:
        metrics.observe_response_size(labels, response_size)

    if policy.record_request_size:
        metrics.observe_request_size(labels, request_size)

    if policy.record_duration:
        metrics.observe_duration(labels, duration)
