"""Identity provider used by the session gate: Supabase Auth for password
sign-in and token checks, the API's signup route for account creation."""

import logging
import httpx
from typing import Optional, Protocol
from supabase import Client
from supabase_auth.errors import AuthRetryableError
from src.models.session import AuthSession, AuthUser
from src.services.api_client import ApiClient
from src.services.supabase_client import get_supabase_anon_client
from src.utils.errors import AuthenticationError, TransportError
from src.utils.logging import mask_email

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    async def sign_in(self, email: str, password: str) -> AuthSession: ...

    async def get_user(self, access_token: str) -> Optional[AuthUser]: ...

    async def sign_out(self, access_token: str) -> None: ...

    async def sign_up(self, email: str, password: str, name: str) -> AuthUser: ...


def _to_auth_user(user) -> AuthUser:
    metadata = getattr(user, "user_metadata", None) or {}
    return AuthUser(id=str(user.id), email=user.email or "", name=metadata.get("name"))


class SupabaseIdentityProvider:
    """Supabase Auth via the anon-key client."""

    def __init__(self, api: ApiClient, auth_client: Optional[Client] = None):
        self.api = api
        self._auth_client = auth_client

    @property
    def auth_client(self) -> Client:
        if self._auth_client is None:
            self._auth_client = get_supabase_anon_client()
        return self._auth_client

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Password sign-in; raises AuthenticationError with the provider's message."""
        try:
            response = self.auth_client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.error(f"Sign in error: {e}", extra={"email": mask_email(email)})
            raise AuthenticationError(str(e)) from e

        if response is None or response.session is None or response.user is None:
            raise AuthenticationError("No session returned")

        return AuthSession(user=_to_auth_user(response.user), access_token=response.session.access_token)

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """
        User owning ``access_token``, or None when the token is rejected.

        Network failures raise TransportError so a still-valid persisted
        session is not thrown away.
        """
        try:
            response = self.auth_client.auth.get_user(access_token)
        except Exception as e:
            if _is_network_error(e):
                raise TransportError("Identity provider unreachable") from e
            logger.info(f"Access token rejected: {e}")
            return None

        if response is None or response.user is None:
            return None
        return _to_auth_user(response.user)

    async def sign_out(self, access_token: str) -> None:
        self.auth_client.auth.sign_out()

    async def sign_up(self, email: str, password: str, name: str) -> AuthUser:
        user = await self.api.sign_up(email, password, name)
        metadata = user.get("user_metadata") or {}
        return AuthUser(id=str(user.get("id", "")), email=user.get("email") or email, name=metadata.get("name") or name)


def _is_network_error(error: Exception) -> bool:
    return isinstance(error, (httpx.TransportError, AuthRetryableError))
