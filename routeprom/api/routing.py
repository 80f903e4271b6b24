"""Find the route pattern a request will be dispatched to.

The middleware runs before the router, so it asks the app's routes
directly, the same way ``starlette.routing.Router`` does.
"""

from collections.abc import Sequence
from typing import Any

from starlette.routing import BaseRoute, Match
from starlette.types import Scope


def _routes_of(app: Any) -> Sequence[BaseRoute]:
    router = getattr(app, "router", None)
    routes = getattr(router, "routes", None)
    if routes is None:
        routes = getattr(app, "routes", None)
    return routes or []


def _match(routes: Sequence[BaseRoute], scope: Scope) -> str:
    partial = ""
    for route in routes:
        match, child_scope = route.matches(scope)
        if match == Match.NONE:
            continue

        pattern = getattr(route, "path", "")
        children = getattr(route, "routes", None)
        if children:
            # Mount: the child routes see the remaining path.
            inner = _match(children, {**scope, **child_scope})
            if not inner:
                if match == Match.FULL:
                    # The router dispatches into the mount, which answers 404.
                    return ""
                continue
            pattern = pattern.rstrip("/") + inner

        if match == Match.FULL:
            return pattern
        if not partial:
            partial = pattern
    return partial


def get_route_pattern(scope: Scope) -> str:
    """Return the matched route pattern, or ``""`` if no route matches.

    A full match wins; otherwise the first partial match (path matched, but
    not the method) is used, so 405s are still labelled by route.
    """
    return _match(_routes_of(scope.get("app")), scope)
