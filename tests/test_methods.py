"""Tests for waypoint.methods — MethodHandler per-route method dispatch."""

import threading

import pytest

from waypoint import MethodHandler, Mux, MuxConfig, Request
from waypoint.errors import ConfigurationError
from waypoint.testing import TestClient


def _list(request: Request) -> str:
    return "list"


async def _create(request: Request) -> tuple[str, int]:
    return "created", 201


class TestMethodHandlerMapping:
    def test_from_mapping(self) -> None:
        handler = MethodHandler({"get": _list, "POST": _create})
        assert list(handler) == ["GET", "POST"]
        assert handler["get"] is _list
        assert handler.allowed == ("GET", "POST")
        assert len(handler) == 2

    def test_from_keywords(self) -> None:
        handler = MethodHandler(GET=_list, post=_create)
        assert handler.allowed == ("GET", "POST")

    def test_keywords_extend_mapping(self) -> None:
        handler = MethodHandler({"GET": _list}, DELETE=_create)
        assert handler.allowed == ("GET", "DELETE")

    def test_invalid_method(self) -> None:
        with pytest.raises(ConfigurationError):
            MethodHandler({"NOT A METHOD": _list})

    def test_repr(self) -> None:
        assert repr(MethodHandler(GET=_list)) == "MethodHandler(['GET'])"


class TestMethodHandlerDispatch:
    async def test_selects_by_method(self) -> None:
        mux = Mux()
        mux.handle("*", "/items", MethodHandler(GET=_list, POST=_create))

        async with TestClient(mux) as client:
            listed = await client.get("/items")
            created = await client.post("/items")
        assert listed.text == "list"
        assert created.status == 201
        assert created.text == "created"

    async def test_unknown_method_is_405(self) -> None:
        mux = Mux()
        mux.handle("*", "/items", MethodHandler(POST=_create, GET=_list))

        async with TestClient(mux) as client:
            response = await client.delete("/items")
        assert response.status == 405
        assert response.header("Allow") == "POST, GET"

    async def test_on_dynamic_pattern(self) -> None:
        mux = Mux()

        def show(request: Request) -> str:
            return request.path_params["id"]

        mux.handle("*", "/items/{id}", MethodHandler(GET=show))

        async with TestClient(mux) as client:
            response = await client.get("/items/9")
        assert response.text == "9"

    async def test_any_method_entry(self) -> None:
        mux = Mux()
        mux.handle("*", "/items", MethodHandler({"POST": _create, "*": _list}))

        async with TestClient(mux) as client:
            fallback = await client.get("/items")
            created = await client.post("/items")
        assert fallback.status == 200
        assert fallback.text == "list"
        assert created.status == 201


class TestMethodHandlerThreads:
    async def test_sync_handler_offloaded_by_default(self) -> None:
        seen: list[int] = []

        def show(request: Request) -> str:
            seen.append(threading.get_ident())
            return "ok"

        mux = Mux()
        mux.handle("*", "/x", MethodHandler({"GET": show}))

        async with TestClient(mux) as client:
            response = await client.get("/x")
        assert response.text == "ok"
        assert len(seen) == 1
        assert seen[0] != threading.get_ident()

    async def test_sync_handler_inline_when_disabled(self) -> None:
        seen: list[int] = []

        def show(request: Request) -> str:
            seen.append(threading.get_ident())
            return "ok"

        mux = Mux(MuxConfig(sync_handlers_in_thread=False))
        mux.handle("*", "/x", MethodHandler({"GET": show}))

        async with TestClient(mux) as client:
            await client.get("/x")
        assert seen == [threading.get_ident()]
