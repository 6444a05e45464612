"""Route dispatch for the back-office REST API.

Framework-free: ``HomeSpaceApi.handle`` takes method, path, headers and raw
body and returns an ``ApiResponse``. The serverless handler in ``api/`` and
the tests both drive it directly.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional
from pydantic import ValidationError as ModelValidationError
from src.models.entities import ENTITY_KINDS
from src.models.envelope import Envelope
from src.services import auth_service
from src.services.entity_service import build_repositories, seed_sample_data
from src.services.kv_store import KVStore, get_kv_store
from src.utils.config import AppConfig
from src.utils.errors import IdCollisionError, SupabaseError
from src.utils.logging import (
    correlation_context,
    get_structured_logger,
    log_timing,
    mask_sensitive_data,
)
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Authorization, Content-Type, X-Correlation-ID",
}

INTERNAL_ERROR = "Internal server error"

TokenVerifier = Callable[[Optional[str]], Awaitable[Optional[dict]]]
SignUp = Callable[[str, str, str], Awaitable[dict]]


@dataclass
class ApiResponse:
    status_code: int
    body: Optional[dict]
    headers: dict[str, str] = field(default_factory=dict)


def _json_response(status_code: int, body: Optional[dict]) -> ApiResponse:
    headers = {**CORS_HEADERS}
    if body is not None:
        headers["Content-Type"] = "application/json"
    return ApiResponse(status_code=status_code, body=body, headers=headers)


def _envelope(status_code: int, envelope: Envelope) -> ApiResponse:
    return _json_response(status_code, envelope.to_wire())


def _error(status_code: int, message: str) -> ApiResponse:
    return _envelope(status_code, Envelope.fail(message))


def _validation_message(error: ModelValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def health_payload() -> dict:
    """Body of the health routes; not enveloped."""
    return {
        "status": "ok",
        "service": LoggingConfig.SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def route_segments(path: str, service_root: str) -> list[str]:
    """Path segments after the service root, query string dropped."""
    path = path.split("?", 1)[0]
    segments = [segment for segment in path.split("/") if segment]
    if service_root in segments:
        segments = segments[segments.index(service_root) + 1:]
    return segments


def bearer_token(headers: dict[str, str]) -> Optional[str]:
    value = headers.get("authorization", "")
    scheme, _, token = value.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class HomeSpaceApi:
    """REST API over the KV store."""

    def __init__(
        self,
        store: KVStore,
        verify_token: TokenVerifier = auth_service.verify_access_token,
        sign_up: SignUp = auth_service.sign_up_user,
        service_root: Optional[str] = None,
        allow_anonymous: Optional[bool] = None,
        reject_id_collisions: Optional[bool] = None,
    ):
        self.store = store
        self.verify_token = verify_token
        self.sign_up = sign_up
        self.service_root = service_root or AppConfig.service_root()
        self.allow_anonymous = AppConfig.allow_anonymous_access() if allow_anonymous is None else allow_anonymous
        if reject_id_collisions is None:
            reject_id_collisions = AppConfig.reject_id_collisions()
        self.repositories = build_repositories(store, reject_id_collisions)

    @classmethod
    def default(cls) -> "HomeSpaceApi":
        return cls(store=get_kv_store())

    async def handle(self, method: str, path: str, headers: dict[str, str], raw_body: bytes = b"") -> ApiResponse:
        """Dispatch one request; never raises."""
        headers = {key.lower(): value for key, value in headers.items()}
        method = method.upper()
        correlation_id = headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER.lower())

        with correlation_context(correlation_id):
            with log_timing("http_request", logger, method=method, path=path.split("?", 1)[0]):
                response = await self._dispatch(method, path, headers, raw_body)
            logger.info("Request handled", method=method, status_code=response.status_code)
            return response

    async def _dispatch(self, method: str, path: str, headers: dict[str, str], raw_body: bytes) -> ApiResponse:
        if method == "OPTIONS":
            return _json_response(204, None)

        token = bearer_token(headers)
        if token is None:
            return _error(401, "Missing authorization header")

        segments = route_segments(path, self.service_root)

        try:
            if segments == ["health"]:
                if method != "GET":
                    return _error(405, "Method not allowed")
                return _json_response(200, health_payload())

            if segments == ["auth", "signup"]:
                if method != "POST":
                    return _error(405, "Method not allowed")
                return await self._signup(self._parse_body(raw_body))

            if (segments and segments[0] in ENTITY_KINDS) or segments == ["init-data"]:
                if not self.allow_anonymous and await self.verify_token(token) is None:
                    return _error(401, "Unauthorized")

            if segments == ["init-data"]:
                if method != "POST":
                    return _error(405, "Method not allowed")
                counts = await seed_sample_data(self.store)
                return _envelope(200, Envelope.ok(data=counts, message="Sample data initialized"))

            if segments and segments[0] in ENTITY_KINDS and len(segments) <= 2:
                entity_id = segments[1] if len(segments) == 2 else None
                return await self._entity_route(method, segments[0], entity_id, raw_body)

            return _error(404, "Route not found")

        except json.JSONDecodeError:
            return _error(400, "Invalid JSON body")
        except ModelValidationError as e:
            return _error(400, _validation_message(e))
        except IdCollisionError as e:
            return _error(409, str(e))
        except SupabaseError as e:
            logger.error("Store operation failed", error=mask_sensitive_data(str(e)))
            return _error(500, str(e))
        except Exception as e:
            logger.exception("Unhandled error while processing request", error=mask_sensitive_data(str(e)))
            return _error(500, INTERNAL_ERROR)

    @staticmethod
    def _parse_body(raw_body: bytes) -> dict:
        body = json.loads(raw_body or b"{}")
        if not isinstance(body, dict):
            raise json.JSONDecodeError("Expected a JSON object", str(body), 0)
        return body

    async def _signup(self, body: dict) -> ApiResponse:
        email = body.get("email")
        password = body.get("password")
        if not email or not password:
            return _error(400, "Email and password are required")
        try:
            user = await self.sign_up(email, password, body.get("name") or "")
        except SupabaseError as e:
            return _error(400, str(e))
        return _envelope(200, Envelope.ok(data={"user": user}))

    async def _entity_route(self, method: str, plural: str, entity_id: Optional[str], raw_body: bytes) -> ApiResponse:
        repository = self.repositories[plural]
        kind = repository.kind

        if entity_id is None:
            if method == "GET":
                return _envelope(200, Envelope.ok(data=await repository.list_all()))
            if method == "POST":
                record = await repository.create(self._parse_body(raw_body))
                return _envelope(200, Envelope.ok(data=record))
            return _error(405, "Method not allowed")

        if method == "GET" and kind.supports_get:
            record = await repository.get(entity_id)
            if record is None:
                return _error(404, f"{kind.label} not found")
            return _envelope(200, Envelope.ok(data=record))
        if method == "PUT" and kind.supports_update:
            record = await repository.update(entity_id, self._parse_body(raw_body))
            return _envelope(200, Envelope.ok(data=record))
        if method == "DELETE":
            await repository.delete(entity_id)
            return _envelope(200, Envelope.ok())
        return _error(405, "Method not allowed")
