"""Typed HTTP client for the back-office REST API."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Optional, TypeVar, Union

import httpx

from src.models.entities import (
    AGENT,
    CLIENT,
    PROPERTY,
    TRANSACTION,
    Agent,
    Client,
    EntityKind,
    EntityModel,
    Property,
    Transaction,
)
from src.utils.config import AppConfig
from src.utils.errors import (
    NotFoundError,
    RemoteOperationError,
    TransportError,
    UnsupportedOperationError,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "API request failed"
TRANSPORT_FAILURE = "Could not reach the server, please try again"

E = TypeVar("E", bound=EntityModel)
TokenProvider = Callable[[], Optional[str]]


class ApiClient:
    """Authenticated client for every route of the API.

    The bearer token is the current session token from ``token_provider``,
    falling back to the anonymous key when there is no session.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or AppConfig.api_base_url()).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else AppConfig.anon_key()
        self.token_provider = token_provider
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else AppConfig.request_timeout_seconds(),
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

        self.properties: EntityStore[Property] = EntityStore(self, PROPERTY)
        self.agents: EntityStore[Agent] = EntityStore(self, AGENT)
        self.clients: EntityStore[Client] = EntityStore(self, CLIENT)
        self.transactions: EntityStore[Transaction] = EntityStore(self, TRANSACTION)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        await self._http.aclose()

    def bind_session(self, token_provider: TokenProvider) -> None:
        """Use ``token_provider`` (usually ``SessionGate.access_token``) for future calls."""
        self.token_provider = token_provider

    def _auth_token(self, anonymous: bool) -> str:
        if not anonymous and self.token_provider is not None:
            token = self.token_provider()
            if token:
                return token
        return self.anon_key

    async def _send(self, method: str, endpoint: str, payload: Any = None, anonymous: bool = False) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._auth_token(anonymous)}"}
        try:
            return await self._http.request(method, endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"API transport error ({method} {endpoint}): {e}")
            raise TransportError(TRANSPORT_FAILURE) from e

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Any = None,
        anonymous: bool = False,
        not_found: Optional[str] = None,
    ) -> Any:
        """
        Send one request and unwrap the ``{success, data, error}`` envelope.

        Raises RemoteOperationError with the server message when ``success``
        is false (NotFoundError for a 404 when ``not_found`` is given), and
        TransportError when the server cannot be reached or the body is not
        an envelope.
        """
        response = await self._send(method, endpoint, payload, anonymous)

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"API returned a non-JSON body ({method} {endpoint}, status {response.status_code})")
            raise TransportError(TRANSPORT_FAILURE) from e

        if not isinstance(body, dict) or "success" not in body:
            logger.error(f"API returned a malformed envelope ({method} {endpoint})")
            raise TransportError(TRANSPORT_FAILURE)

        if not body["success"]:
            message = body.get("error") or GENERIC_FAILURE
            logger.error(f"API Error ({endpoint}): {message}")
            if not_found is not None and response.status_code == 404:
                raise NotFoundError(message, response.status_code)
            raise RemoteOperationError(message, response.status_code)

        return body.get("data")

    async def sign_up(self, email: str, password: str, name: str) -> dict:
        """Create a user; always sent with the anonymous key."""
        data = await self.request(
            "POST",
            "/auth/signup",
            {"email": email, "password": password, "name": name},
            anonymous=True,
        )
        return (data or {}).get("user", {})

    async def init_data(self) -> dict:
        """Seed the demo records."""
        return await self.request("POST", "/init-data") or {}

    async def health(self) -> dict:
        """Health route; its body is not enveloped."""
        response = await self._send("GET", "/health")
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(TRANSPORT_FAILURE) from e


class EntityStore(Generic[E]):
    """CRUD for one entity kind. All filtering happens client-side."""

    def __init__(self, api: ApiClient, kind: EntityKind):
        self.api = api
        self.kind = kind

    @property
    def endpoint(self) -> str:
        return f"/{self.kind.plural}"

    def _parse(self, record: dict) -> E:
        return self.kind.model.model_validate(record)

    @staticmethod
    def _payload(entity: Union[E, dict]) -> dict:
        if isinstance(entity, EntityModel):
            return entity.to_wire()
        return dict(entity)

    async def list(self) -> list[E]:
        records = await self.api.request("GET", self.endpoint)
        return [self._parse(record) for record in records or []]

    async def get(self, entity_id: Union[int, str]) -> E:
        if not self.kind.supports_get:
            raise UnsupportedOperationError(f"{self.kind.plural} cannot be fetched individually")
        record = await self.api.request("GET", f"{self.endpoint}/{entity_id}", not_found=self.kind.label)
        return self._parse(record)

    async def create(self, entity: Union[E, dict]) -> E:
        """Create; without an id the server assigns a time-based one."""
        record = await self.api.request("POST", self.endpoint, self._payload(entity))
        return self._parse(record)

    async def update(self, entity_id: Union[int, str], entity: Union[E, dict]) -> E:
        """Full replace; send the whole record, the path id wins."""
        if not self.kind.supports_update:
            raise UnsupportedOperationError(f"{self.kind.plural} cannot be updated")
        record = await self.api.request("PUT", f"{self.endpoint}/{entity_id}", self._payload(entity))
        return self._parse(record)

    async def delete(self, entity_id: Union[int, str]) -> None:
        """Idempotent: deleting a missing id still succeeds."""
        await self.api.request("DELETE", f"{self.endpoint}/{entity_id}")
