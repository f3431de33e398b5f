"""The waypoint request multiplexer.

Mutable during setup (route and fallback registration).
Frozen at runtime when the first request is dispatched.
"""

import logging
import threading
from collections.abc import Callable

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint._internal.types import FallbackHandler, Handler
from waypoint.config import MuxConfig
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.path import clean_path
from waypoint.routing.route import ANY_METHOD, Route, RouteMatch
from waypoint.routing.table import RouteTable
from waypoint.server.handler import dispatch, handle_request

logger = logging.getLogger("waypoint.server")


class Mux:
    """An HTTP request router and ASGI application.

    Usage::

        mux = Mux()

        @mux.get("/users/{id}")
        def get_user(request):
            return f"user {param_value(request, 'id')}"

        mux.handle("POST", "/users", create_user)

    Then serve ``mux`` with any ASGI server.

    Thread safety:
        Registration is expected to happen during a single-threaded setup
        phase. The first dispatch freezes the mux under a Lock with a
        double check, so the freeze runs exactly once even when the first
        requests race. Registering anything after the freeze raises
        ``RuntimeError``.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_method_not_allowed_handler",
        "_not_found_handler",
        "_table",
        "config",
    )

    def __init__(
        self,
        config: MuxConfig | None = None,
        *,
        not_found_handler: FallbackHandler | None = None,
        method_not_allowed_handler: FallbackHandler | None = None,
    ) -> None:
        self.config: MuxConfig = config or MuxConfig()
        self._table = RouteTable()
        self._not_found_handler = not_found_handler
        self._method_not_allowed_handler = method_not_allowed_handler
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    def handle(self, method: str, pattern: str, handler: Handler) -> Route:
        """Register *handler* for *method* (or ``"*"``) on *pattern*.

        Raises ``ConfigurationError`` for a malformed pattern or method,
        and ``RuntimeError`` once the mux has started serving.
        """
        self._check_not_frozen()
        return self._table.add(method, pattern, handler)

    def handle_func(self, method: str, pattern: str, func: Callable[..., object]) -> Route:
        """Register a plain function. Same as :meth:`handle`."""
        return self.handle(method, pattern, func)

    def route(self, pattern: str, *, method: str = ANY_METHOD) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            pattern: URL pattern. Use ``{name}`` for a segment capture and
                ``*`` for a wildcard.
            method: HTTP method. Defaults to ``"*"`` (any method).
        """

        def decorator(func: Handler) -> Handler:
            self.handle(method, pattern, func)
            return func

        return decorator

    def get(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.route(pattern, method="GET")

    def post(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.route(pattern, method="POST")

    def put(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.route(pattern, method="PUT")

    def patch(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.route(pattern, method="PATCH")

    def delete(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.route(pattern, method="DELETE")

    def head(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.route(pattern, method="HEAD")

    def options(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.route(pattern, method="OPTIONS")

    # -- Fallbacks --

    def not_found(self, func: FallbackHandler) -> FallbackHandler:
        """Register the handler for requests no route matches.

        May take no arguments or the request.
        """
        self._check_not_frozen()
        self._not_found_handler = func
        return func

    def method_not_allowed(self, func: FallbackHandler) -> FallbackHandler:
        """Register the handler for a matched path with no matching method.

        May take no arguments, the request, or the request and the tuple
        of allowed methods.
        """
        self._check_not_frozen()
        self._method_not_allowed_handler = func
        return func

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """All registered routes in registration order."""
        return self._table.routes

    def resolve(self, method: str, path: str) -> RouteMatch:
        """Look up the route for *method* on *path* without invoking it.

        The path is normalized first. Raises ``NotFound`` or
        ``MethodNotAllowed`` exactly as dispatch would see them.
        """
        return self._table.match(method, clean_path(path))

    # -- Dispatch --

    async def dispatch(self, request: Request) -> Response:
        """Route *request* to one handler (or fallback) and return its Response."""
        self._ensure_frozen()
        return await dispatch(
            request,
            table=self._table,
            config=self.config,
            not_found_handler=self._not_found_handler,
            method_not_allowed_handler=self._method_not_allowed_handler,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Freezes on lifespan startup when the server runs the lifespan
        protocol, otherwise on the first HTTP request.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            table=self._table,
            config=self.config,
            not_found_handler=self._not_found_handler,
            method_not_allowed_handler=self._method_not_allowed_handler,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self._ensure_frozen()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._frozen = True
            logger.debug("serving %d route(s)", len(self._table))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the mux after it has started serving requests. "
                "Register routes and fallbacks before the first request."
            )
            raise RuntimeError(msg)
