"""Fallback handlers for requests the route table cannot serve.

Maps ``NotFound`` / ``MethodNotAllowed`` raised by the route table, and
unexpected handler failures, to Responses. Configured fallbacks are used
when present, otherwise the defaults below.
"""

import inspect
import logging
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint._internal.types import FallbackHandler
from waypoint.config import MuxConfig
from waypoint.errors import MethodNotAllowed, NotFound
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.server.negotiation import negotiate

logger = logging.getLogger("waypoint.server")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def default_not_found(request: Request, *, body: str = "Not Found") -> Response:
    """404 with a plain-text body."""
    return Response(body=body, status=404)


def default_method_not_allowed(
    request: Request,
    allowed: tuple[str, ...],
    *,
    body: str = "Method Not Allowed",
) -> Response:
    """405 with an ``Allow`` header listing *allowed* in order."""
    return Response(body=body, status=405).with_header("Allow", ", ".join(allowed))


async def call_fallback(
    handler: FallbackHandler,
    *args: Any,
    offload: bool = False,
) -> Response:
    """Invoke a user-supplied fallback with as many positional args as it takes.

    Fallbacks may accept zero, one (request), or two (request, allowed)
    arguments, and may be sync or async.
    """
    try:
        params = list(inspect.signature(handler).parameters.values())
    except (TypeError, ValueError):
        params = []
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        count = len(args)
    else:
        positional = [p for p in params if p.kind in _POSITIONAL]
        count = min(len(args), len(positional))
    result = await invoke(handler, *args[:count], offload=offload)
    return negotiate(result)


async def handle_not_found(
    exc: NotFound,
    request: Request,
    handler: FallbackHandler | None,
    config: MuxConfig,
) -> Response:
    """Answer a request no route structurally matched."""
    logger.debug("404 %s %s", request.method, request.path)
    if handler is None:
        return default_not_found(request, body=config.not_found_body)
    response = await call_fallback(handler, request, offload=config.sync_handlers_in_thread)
    if response.status == 200:
        response = response.with_status(exc.status)
    return response


async def handle_method_not_allowed(
    exc: MethodNotAllowed,
    request: Request,
    handler: FallbackHandler | None,
    config: MuxConfig,
) -> Response:
    """Answer a request whose path matched but whose method did not."""
    logger.debug(
        "405 %s %s (allowed: %s)", request.method, request.path, ", ".join(exc.allowed)
    )
    if handler is None:
        return default_method_not_allowed(
            request, exc.allowed, body=config.method_not_allowed_body
        )
    response = await call_fallback(
        handler, request, exc.allowed, offload=config.sync_handlers_in_thread
    )
    if response.status == 200:
        response = response.with_status(exc.status)
    return response


def handle_internal_error(exc: Exception, request: Request, config: MuxConfig) -> Response:
    """Handle an unexpected handler failure as a 500."""
    logger.exception("500 %s %s", request.method, request.path)
    if config.debug:
        return Response(body=f"{type(exc).__name__}: {exc}", status=500)
    return Response(body="Internal Server Error", status=500)
