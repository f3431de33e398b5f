"""Route table with method-aware lookup.

Static routes live in a dict keyed by exact path. Dynamic routes are
grouped by pattern string, one compiled matcher per group, and groups are
tried in the order their pattern was first registered.

Lookup policy:

1. A static path with any routes is authoritative for that path. The first
   route accepting the method wins; otherwise ``MethodNotAllowed`` is
   raised and dynamic routes are never consulted.
2. Otherwise the first pattern group whose matcher accepts the path is
   authoritative in the same way. Later groups are not tried, even if one
   of them would accept the method.
3. Nothing matched the path: ``NotFound``.
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from waypoint.errors import ConfigurationError, MethodNotAllowed, NotFound
from waypoint.routing.params import EMPTY_PARAMS, PathParams
from waypoint.routing.pattern import compile_pattern, is_pattern
from waypoint.routing.route import ANY_METHOD, Route, RouteMatch

logger = logging.getLogger("waypoint.routing")

# RFC 9110 token characters
_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


@dataclass(slots=True)
class _PatternGroup:
    """All dynamic routes sharing one pattern string."""

    matcher: re.Pattern[str]
    routes: list[Route] = field(default_factory=list)


class RouteTable:
    """Static and dynamic routes with registration-ordered dispatch.

    Usage::

        table = RouteTable()
        table.add("GET", "/users", list_users)
        table.add("GET", "/users/{id}", get_user)
        match = table.match("GET", "/users/42")
        match.params["id"]  # "42"

    ``match`` expects a path already normalized by
    :func:`~waypoint.routing.path.clean_path`.
    """

    __slots__ = ("_dynamic", "_routes", "_static")

    def __init__(self) -> None:
        self._static: dict[str, list[Route]] = {}
        self._dynamic: dict[str, _PatternGroup] = {}
        self._routes: list[Route] = []

    def add(self, method: str, pattern: str, handler: Callable[..., Any]) -> Route:
        """Register *handler* for *method* on *pattern*.

        *method* is an HTTP method name (case-insensitive) or ``"*"`` for
        any method. Raises ``ConfigurationError`` for an invalid method or
        a malformed pattern.
        """
        method = normalize_method(method)
        if not callable(handler):
            msg = f"Handler for {method} {pattern!r} is not callable: {handler!r}"
            raise ConfigurationError(msg)

        if not is_pattern(pattern):
            route = Route(method=method, pattern=pattern, handler=handler)
            self._static.setdefault(pattern, []).append(route)
        else:
            group = self._dynamic.get(pattern)
            if group is None:
                group = _PatternGroup(matcher=compile_pattern(pattern))
                self._dynamic[pattern] = group
            route = Route(method=method, pattern=pattern, handler=handler, matcher=group.matcher)
            group.routes.append(route)

        self._routes.append(route)
        logger.debug("registered %s %s", method, pattern)
        return route

    @property
    def routes(self) -> list[Route]:
        """All registered routes in registration order."""
        return list(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, method: str, path: str) -> RouteMatch:
        """Select the route for *method* on the normalized *path*.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        method = method.upper()

        candidates = self._static.get(path)
        if candidates:
            return RouteMatch(route=_select(candidates, method), params=EMPTY_PARAMS)

        for group in self._dynamic.values():
            m = group.matcher.fullmatch(path)
            if m is None:
                continue
            route = _select(group.routes, method)
            params = {
                name: value for name, value in m.groupdict().items() if name and value is not None
            }
            return RouteMatch(route=route, params=PathParams(params) if params else EMPTY_PARAMS)

        raise NotFound(f"No route matches {method} {path!r}")


def _select(routes: Iterable[Route], method: str) -> Route:
    allowed: dict[str, None] = {}
    for route in routes:
        if route.accepts(method):
            return route
        allowed[route.method] = None
    raise MethodNotAllowed(tuple(allowed))


def normalize_method(method: str) -> str:
    """Upper-case *method*, rejecting anything that is not an HTTP token."""
    if method == ANY_METHOD:
        return method
    if not isinstance(method, str) or not _METHOD_RE.fullmatch(method):
        msg = f"Invalid HTTP method {method!r}. Use a method name such as 'GET' or '*' for any."
        raise ConfigurationError(msg)
    return method.upper()
