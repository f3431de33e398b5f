"""Tests for waypoint.server.negotiation — return values to Responses."""

import json

import pytest

from waypoint.errors import ConfigurationError
from waypoint.http.response import Response
from waypoint.server.negotiation import negotiate


class TestNegotiate:
    def test_response_passthrough(self) -> None:
        response = Response("x", status=202)
        assert negotiate(response) is response

    def test_str(self) -> None:
        response = negotiate("hello")
        assert response.text == "hello"
        assert response.status == 200
        assert response.content_type.startswith("text/plain")

    def test_bytes(self) -> None:
        response = negotiate(b"\x00\x01")
        assert response.body == b"\x00\x01"
        assert response.content_type == "application/octet-stream"

    def test_dict(self) -> None:
        response = negotiate({"id": 1})
        assert response.content_type == "application/json"
        assert json.loads(response.text) == {"id": 1}

    def test_list(self) -> None:
        assert json.loads(negotiate([1, 2]).text) == [1, 2]

    def test_status_tuple(self) -> None:
        response = negotiate(("created", 201))
        assert response.status == 201
        assert response.text == "created"

    def test_status_and_headers_tuple(self) -> None:
        response = negotiate(({"ok": True}, 202, {"Location": "/jobs/1"}))
        assert response.status == 202
        assert response.header("location") == "/jobs/1"
        assert response.content_type == "application/json"

    def test_unsupported(self) -> None:
        with pytest.raises(ConfigurationError, match="cannot be turned into"):
            negotiate(42)

    def test_none_unsupported(self) -> None:
        with pytest.raises(ConfigurationError):
            negotiate(None)
