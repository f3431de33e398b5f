"""Tests for waypoint._internal.invoke — uniform sync/async calls."""

import functools
import threading

from waypoint._internal.invoke import _is_async_callable, invoke


class _AsyncCallable:
    async def __call__(self, value: int) -> int:
        return value * 2


class TestInvoke:
    async def test_sync(self) -> None:
        assert await invoke(lambda x: x + 1, 1) == 2

    async def test_async(self) -> None:
        async def double(x: int) -> int:
            return x * 2

        assert await invoke(double, 4) == 8

    async def test_kwargs(self) -> None:
        def greet(name: str, punctuation: str = "!") -> str:
            return f"hi {name}{punctuation}"

        assert await invoke(greet, name="bob", punctuation="?") == "hi bob?"

    async def test_handler_kwarg_does_not_clash(self) -> None:
        def takes_handler(handler: str) -> str:
            return handler

        assert await invoke(takes_handler, handler="h") == "h"

    async def test_offload_runs_sync_in_worker_thread(self) -> None:
        main = threading.get_ident()
        ident = await invoke(threading.get_ident, offload=True)
        assert ident != main

    async def test_without_offload_runs_inline(self) -> None:
        main = threading.get_ident()
        assert await invoke(threading.get_ident) == main

    async def test_offload_leaves_async_on_loop(self) -> None:
        main = threading.get_ident()

        async def ident() -> int:
            return threading.get_ident()

        assert await invoke(ident, offload=True) == main


class TestIsAsyncCallable:
    def test_function(self) -> None:
        async def f() -> None:
            pass

        assert _is_async_callable(f) is True
        assert _is_async_callable(lambda: None) is False

    def test_partial(self) -> None:
        async def f(x: int) -> int:
            return x

        assert _is_async_callable(functools.partial(f, 1)) is True

    def test_callable_instance(self) -> None:
        assert _is_async_callable(_AsyncCallable()) is True
