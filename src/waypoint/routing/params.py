"""Path parameters — the immutable per-request parameter set.

A ``PathParams`` is created fresh for every matched request and attached
to that request's :class:`~waypoint.http.request.Request`. Handlers read
it through :func:`param_value` or ``request.path_params``; nothing can
write to it once built.
"""

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waypoint.http.request import Request


class PathParams(Mapping[str, str]):
    """Read-only mapping of capture name to captured path text.

    Values are the raw captured substrings of the normalized path; no
    percent-decoding happens beyond what the ASGI server already did.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        object.__setattr__(self, "_data", dict(data or {}))

    def __setattr__(self, name: str, value: object) -> None:
        msg = "PathParams is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        return hash(frozenset(self._data.items()))

    def __repr__(self) -> str:
        return f"PathParams({self._data!r})"


EMPTY_PARAMS = PathParams()


def param_value(request: "Request", name: str, default: str = "") -> str:
    """Return the path parameter *name* captured for *request*.

    Returns *default* (the empty string unless given) when the route had
    no capture by that name, or when the request was not routed through
    a dynamic pattern at all. Never raises for a missing name.
    """
    params = getattr(request, "path_params", None)
    if params is None:
        return default
    return params.get(name, default)
