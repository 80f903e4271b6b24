"""Path label resolution.

The ``path`` label must stay low-cardinality.  A matched route pattern
(``/users/{user_id}``) already is; a raw URL from a request that matched
no route is not, so those are relabelled according to the policy.
"""

from collections.abc import Mapping
from typing import Any

from routeprom.core.policy import PolicyConfig

UNKNOWN_PATH = "/unknown"
UNMATCHED_PREFIX = "/unmatched"
UNMATCHED_SENTINEL = "/unmatched/*"


def get_path_with_fallback(scope: Mapping[str, Any]) -> str:
    """Return the raw request path, or a placeholder if the server gave none."""
    return scope.get("path") or UNKNOWN_PATH


def resolve_path(matched_route: str, raw_path: str, policy: PolicyConfig) -> tuple[str, str]:
    """Return ``(label_route, label_path)`` for a request.

    Grouping takes precedence over marking: with both
    ``handle_unmatched_routes`` and ``group_unmatched_routes`` set, every
    unmatched request gets the same sentinel route.
    """
    if matched_route:
        return matched_route, raw_path

    if not policy.handle_unmatched_routes:
        return matched_route, raw_path

    if policy.group_unmatched_routes:
        return UNMATCHED_SENTINEL, raw_path

    return UNMATCHED_PREFIX + raw_path, raw_path
