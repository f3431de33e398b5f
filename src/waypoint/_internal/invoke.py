"""Invoke helpers — call sync or async handlers uniformly.

Waypoint handlers can be ``def`` or ``async def``. Any code that calls
a user-provided handler goes through :func:`invoke` so the sync/async
check lives in exactly one place.

Usage::

    from waypoint._internal.invoke import invoke

    result = await invoke(handler, request, offload=True)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(
    handler: Any, /, *args: Any, offload: bool = False, **kwargs: Any
) -> Any:
    """Call a handler and await the result if it's awaitable.

    With *offload* set, a synchronous handler runs in anyio's worker
    thread pool instead of on the event loop thread. Context variables
    are copied into the worker thread by anyio.
    """
    if offload and not _is_async_callable(handler):
        result = await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))
    else:
        result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def _is_async_callable(obj: Any) -> bool:
    while isinstance(obj, functools.partial):
        obj = obj.func
    return inspect.iscoroutinefunction(obj) or (
        callable(obj) and inspect.iscoroutinefunction(getattr(obj, "__call__", None))
    )
