"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SERVICE_ROOT", "make-server")
os.environ.setdefault("LOG_FORMAT", "text")

from src.models.session import AuthSession, AuthUser
from src.services.api_client import ApiClient
from src.services.http_api import HomeSpaceApi
from src.services.kv_store import InMemoryKVStore
from src.services.session_gate import InMemorySessionStorage, SessionGate
from tests.utils.helpers import ANON_KEY, BASE_URL, USER_TOKEN, FakeIdentityProvider, make_mock_transport


@pytest.fixture
def kv_store():
    """Empty in-memory KV store."""
    return InMemoryKVStore()


@pytest.fixture
def verified_tokens():
    """Tokens the fake identity backend accepts, mapped to their user."""
    return {USER_TOKEN: {"id": "user-1", "email": "admin@homespace.com", "user_metadata": {"name": "Admin"}}}


@pytest.fixture
def server(kv_store, verified_tokens):
    """API server over the in-memory store with a fake Supabase Auth."""
    async def verify_token(token):
        return verified_tokens.get(token)

    async def sign_up(email, password, name):
        return {"id": f"user-{len(verified_tokens) + 1}", "email": email, "user_metadata": {"name": name}}

    return HomeSpaceApi(
        store=kv_store,
        verify_token=verify_token,
        sign_up=sign_up,
        service_root="make-server",
        allow_anonymous=True,
        reject_id_collisions=False,
    )


@pytest.fixture
def api_client(server):
    """ApiClient wired to the server through httpx.MockTransport."""
    return ApiClient(base_url=BASE_URL, anon_key=ANON_KEY, transport=make_mock_transport(server))


@pytest.fixture
def admin_session():
    return AuthSession(
        user=AuthUser(id="user-1", email="admin@homespace.com", name="Admin"),
        access_token=USER_TOKEN,
    )


@pytest.fixture
def identity_provider(admin_session):
    return FakeIdentityProvider(valid_sessions={"admin@homespace.com": ("secret123", admin_session)})


@pytest.fixture
def session_storage():
    return InMemorySessionStorage()


@pytest.fixture
def session_gate(identity_provider, session_storage):
    return SessionGate(identity=identity_provider, storage=session_storage)


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time
