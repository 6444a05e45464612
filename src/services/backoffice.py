"""Wires the API client, identity provider and session gate together."""

from dataclasses import dataclass
from typing import Optional
import httpx
from src.services.api_client import ApiClient
from src.services.identity_provider import IdentityProvider, SupabaseIdentityProvider
from src.services.list_view import EntityListView
from src.services.session_gate import FileSessionStorage, SessionGate, SessionStorage


@dataclass
class Backoffice:
    api: ApiClient
    gate: SessionGate

    def properties_view(self) -> EntityListView:
        return EntityListView(self.api.properties)

    def agents_view(self) -> EntityListView:
        return EntityListView(self.api.agents)

    def clients_view(self) -> EntityListView:
        return EntityListView(self.api.clients)

    def transactions_view(self) -> EntityListView:
        return EntityListView(self.api.transactions)

    async def aclose(self) -> None:
        await self.api.aclose()


def create_backoffice(
    base_url: Optional[str] = None,
    anon_key: Optional[str] = None,
    storage: Optional[SessionStorage] = None,
    identity: Optional[IdentityProvider] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Backoffice:
    """
    Build a client-side back-office.

    The gate is handed to the API client as its token source, so every call
    uses the current session token or the anonymous key.
    """
    api = ApiClient(base_url=base_url, anon_key=anon_key, transport=transport)
    gate = SessionGate(
        identity=identity or SupabaseIdentityProvider(api),
        storage=storage or FileSessionStorage(),
    )
    api.bind_session(gate.access_token)
    return Backoffice(api=api, gate=gate)
