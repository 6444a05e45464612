"""Test helper functions."""

import json
from typing import Any, Dict, Optional

import httpx

from src.models.session import AuthSession, AuthUser
from src.utils.errors import AuthenticationError, TransportError

BASE_URL = "https://test.supabase.co/functions/v1/make-server"
ANON_KEY = "test-anon-key"
USER_TOKEN = "user-access-token"


def make_mock_transport(server) -> httpx.MockTransport:
    """Route httpx requests straight into ``HomeSpaceApi.handle``."""
    async def handle(request: httpx.Request) -> httpx.Response:
        result = await server.handle(
            request.method,
            request.url.path,
            dict(request.headers),
            request.content,
        )
        if result.body is None:
            return httpx.Response(result.status_code, headers=result.headers)
        return httpx.Response(result.status_code, json=result.body, headers=result.headers)

    return httpx.MockTransport(handle)


def create_request(
    method: str = "GET",
    path: str = "/make-server/properties",
    body: Optional[Any] = None,
    token: Optional[str] = "test-anon-key",
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Keyword arguments for ``HomeSpaceApi.handle``."""
    request_headers = {"Content-Type": "application/json"}
    if token is not None:
        request_headers["Authorization"] = f"Bearer {token}"
    request_headers.update(headers or {})

    if body is None:
        raw_body = b""
    elif isinstance(body, (bytes, str)):
        raw_body = body.encode("utf-8") if isinstance(body, str) else body
    else:
        raw_body = json.dumps(body).encode("utf-8")

    return {"method": method, "path": path, "headers": request_headers, "raw_body": raw_body}


class FakeIdentityProvider:
    """In-memory identity provider recording every call."""

    def __init__(self, valid_sessions: Optional[Dict[str, tuple]] = None, reachable: bool = True):
        self.valid_sessions = valid_sessions or {}
        self.reachable = reachable
        self.revoked_tokens: set[str] = set()
        self.sign_out_error: Optional[Exception] = None
        self.calls: list[tuple] = []

    def _tokens(self) -> Dict[str, AuthUser]:
        return {
            session.access_token: session.user
            for _, session in self.valid_sessions.values()
            if session.access_token not in self.revoked_tokens
        }

    async def sign_in(self, email: str, password: str) -> AuthSession:
        self.calls.append(("sign_in", email))
        expected = self.valid_sessions.get(email)
        if expected is None or expected[0] != password:
            raise AuthenticationError("Invalid login credentials")
        return expected[1]

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        self.calls.append(("get_user", access_token))
        if not self.reachable:
            raise TransportError("Identity provider unreachable")
        return self._tokens().get(access_token)

    async def sign_out(self, access_token: str) -> None:
        self.calls.append(("sign_out", access_token))
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.revoked_tokens.add(access_token)

    async def sign_up(self, email: str, password: str, name: str) -> AuthUser:
        self.calls.append(("sign_up", email))
        return AuthUser(id=f"new-{email}", email=email, name=name)
