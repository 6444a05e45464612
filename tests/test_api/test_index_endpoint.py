"""Tests for the serverless entry point wrapping HomeSpaceApi."""

import json
import pytest
from io import BytesIO
from unittest.mock import Mock, patch
from api import index
from tests.utils.helpers import ANON_KEY


class MockSocket:
    def __init__(self, request: bytes):
        self.request = request

    def makefile(self, *args, **kwargs):
        return BytesIO(self.request)

    def sendall(self, data):
        pass

    def close(self):
        pass


def _raw_request(method: str, path: str, body: bytes = b"", token: str = ANON_KEY) -> bytes:
    lines = [f"{method} {path} HTTP/1.1", f"Authorization: Bearer {token}", f"Content-Length: {len(body)}"]
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8") + body


def _call(method: str, path: str, body: bytes = b""):
    """Build a handler, then replay the request against captured output."""
    raw = _raw_request(method, path, body)
    h = index.handler(MockSocket(raw), ("127.0.0.1", 8000), None)
    h.rfile = BytesIO(body)
    h.wfile = BytesIO()
    h.send_response = Mock()
    h.send_header = Mock()
    h.end_headers = Mock()
    getattr(h, f"do_{method}")()
    h.wfile.seek(0)
    payload = h.wfile.read().decode("utf-8")
    return h, json.loads(payload) if payload else None


@pytest.fixture
def installed_api(server):
    with patch.object(index, "_api", server):
        yield server


@pytest.mark.unit
def test_get_lists_entities(installed_api):
    h, body = _call("GET", "/api/make-server/properties")

    assert h.send_response.call_args[0][0] == 200
    assert body == {"success": True, "data": []}
    h.send_header.assert_any_call("Access-Control-Allow-Origin", "*")


@pytest.mark.unit
def test_post_creates_entity(installed_api, kv_store):
    payload = json.dumps({"name": "Loft", "location": "Austin, TX", "price": "$500,000"}).encode("utf-8")

    h, body = _call("POST", "/api/make-server/properties", payload)

    assert h.send_response.call_args[0][0] == 200
    assert body["data"]["priceNum"] == 500000
    assert any(key.startswith("property:") for key in kv_store.data)


@pytest.mark.unit
def test_options_has_no_body(installed_api):
    h, body = _call("OPTIONS", "/api/make-server/properties")

    assert h.send_response.call_args[0][0] == 204
    assert body is None


@pytest.mark.unit
def test_initialization_failure_returns_500():
    with patch.object(index, "_api", None), patch(
        "src.services.http_api.HomeSpaceApi.default", side_effect=RuntimeError("SUPABASE_URL missing")
    ):
        h, body = _call("GET", "/api/make-server/properties")

    assert h.send_response.call_args[0][0] == 500
    assert body == {"success": False, "error": "service initialization failed"}
