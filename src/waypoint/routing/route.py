"""Route and RouteMatch frozen dataclasses."""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from waypoint.routing.params import PathParams

ANY_METHOD = "*"
"""Method marker for routes that accept every HTTP method."""


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    ``matcher`` is the compiled pattern for dynamic routes and ``None``
    for static ones, which are looked up by exact path.
    """

    method: str
    pattern: str
    handler: Callable[..., Any]
    matcher: re.Pattern[str] | None = None

    @property
    def is_static(self) -> bool:
        return self.matcher is None

    def accepts(self, method: str) -> bool:
        """True if this route serves *method* (or any method)."""
        return self.method == ANY_METHOD or self.method == method


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    route: Route
    params: PathParams
