"""ASGI handler — translates ASGI scope/messages to waypoint types.

The only component that touches raw ASGI directly. Converts the scope to
a typed Request, normalizes the path, looks the route up, invokes exactly
one handler (or exactly one fallback), and sends the Response back
through ASGI ``send()``.
"""

import inspect
from collections.abc import Callable
from typing import Any

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint._internal.invoke import invoke
from waypoint._internal.types import FallbackHandler
from waypoint.config import MuxConfig
from waypoint.errors import HTTPError, MethodNotAllowed, NotFound
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.methods import MethodHandler
from waypoint.routing.params import PathParams
from waypoint.routing.path import clean_path
from waypoint.routing.route import RouteMatch
from waypoint.routing.table import RouteTable
from waypoint.server.fallbacks import (
    handle_internal_error,
    handle_method_not_allowed,
    handle_not_found,
)
from waypoint.server.negotiation import negotiate
from waypoint.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    table: RouteTable,
    config: MuxConfig,
    not_found_handler: FallbackHandler | None = None,
    method_not_allowed_handler: FallbackHandler | None = None,
) -> None:
    """Process a single HTTP request through routing and dispatch."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = await dispatch(
        request,
        table=table,
        config=config,
        not_found_handler=not_found_handler,
        method_not_allowed_handler=method_not_allowed_handler,
    )
    await send_response(response, send, head=request.method == "HEAD")


async def dispatch(
    request: Request,
    *,
    table: RouteTable,
    config: MuxConfig,
    not_found_handler: FallbackHandler | None = None,
    method_not_allowed_handler: FallbackHandler | None = None,
) -> Response:
    """Route *request* and return the Response of whichever handler ran.

    Only a lookup miss reaches a fallback. Errors raised by the route
    handler or by a fallback are answered from the error itself.
    """
    route_path = clean_path(request.path)
    miss: HTTPError | None = None
    try:
        match = table.match(request.method, route_path)
    except (NotFound, MethodNotAllowed) as exc:
        miss = exc

    try:
        if isinstance(miss, MethodNotAllowed):
            return await handle_method_not_allowed(
                miss, request, method_not_allowed_handler, config
            )
        if isinstance(miss, NotFound):
            return await handle_not_found(miss, request, not_found_handler, config)
        routed = request.with_path_params(match.params, route_path)
        return await _invoke_handler(match, routed, config)
    except HTTPError as exc:
        return _error_response(exc)
    except Exception as exc:
        return handle_internal_error(exc, request, config)


def _error_response(exc: HTTPError) -> Response:
    response = Response(body=exc.detail or str(exc.status), status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def _invoke_handler(match: RouteMatch, request: Request, config: MuxConfig) -> Response:
    """Call the matched route handler and convert its return value."""
    handler = match.route.handler
    if isinstance(handler, MethodHandler):
        result = await handler(request, offload=config.sync_handlers_in_thread)
    else:
        kwargs = _build_handler_kwargs(handler, request, match.params)
        result = await invoke(handler, offload=config.sync_handlers_in_thread, **kwargs)
    return negotiate(result)


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: PathParams,
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs from request + path params.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, converted to the annotated type when possible)
    3. The first remaining positional parameter, if nothing took the request yet
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}
    unbound: list[str] = []

    for name, param in sig.parameters.items():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            value = path_params[name]
            if param.annotation is not inspect.Parameter.empty and param.annotation is not str:
                try:
                    kwargs[name] = param.annotation(value)
                except (ValueError, TypeError):
                    kwargs[name] = value
            else:
                kwargs[name] = value
        elif (
            param.default is inspect.Parameter.empty
            and param.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD
        ):
            unbound.append(name)

    if unbound and not any(value is request for value in kwargs.values()):
        kwargs[unbound[0]] = request

    return kwargs
