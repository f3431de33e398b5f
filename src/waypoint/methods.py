"""Per-route method dispatch.

``MethodHandler`` answers one pattern for several methods without
table-level method routing. Register it on an any-method route and it
picks the handler for ``request.method`` itself::

    users = MethodHandler({"GET": list_users, "POST": create_user})
    mux.handle("*", "/users", users)

A method it does not know gets a 405 whose ``Allow`` header lists its
methods in insertion order.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Handler
from waypoint.http.request import Request
from waypoint.routing.route import ANY_METHOD
from waypoint.routing.table import normalize_method
from waypoint.server.fallbacks import default_method_not_allowed
from waypoint.server.negotiation import negotiate


class MethodHandler(Mapping[str, Handler]):
    """An immutable method → handler mapping that is itself a handler.

    Handlers receive the request as their only argument.
    """

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Mapping[str, Handler] | None = None, **by_method: Handler) -> None:
        merged = {**(handlers or {}), **by_method}
        self._handlers: dict[str, Handler] = {
            normalize_method(method): handler for method, handler in merged.items()
        }

    def __getitem__(self, method: str) -> Handler:
        return self._handlers[method.upper()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"MethodHandler({list(self._handlers)!r})"

    @property
    def allowed(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    async def __call__(self, request: Request, *, offload: bool = True) -> Any:
        """Answer *request* with the handler registered for its method.

        A ``"*"`` entry answers methods that have no entry of their own.
        With *offload* set, sync handlers run in a worker thread.
        """
        handler = self._handlers.get(request.method)
        if handler is None:
            handler = self._handlers.get(ANY_METHOD)
        if handler is None:
            return default_method_not_allowed(request, self.allowed)
        return negotiate(await invoke(handler, request, offload=offload))
