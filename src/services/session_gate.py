"""Session/auth gate: sign-in, sign-up, sign-out and session persistence."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol
from pydantic import ValidationError as ModelValidationError
from src.models.session import AuthSession
from src.services.identity_provider import IdentityProvider
from src.utils.config import AppConfig
from src.utils.errors import AuthenticationError, HomeSpaceError, ValidationError
from src.utils.logging import mask_email

logger = logging.getLogger(__name__)

SESSION_KEY = "auth_session"
MIN_PASSWORD_LENGTH = 6


class AuthState(str, Enum):
    CHECKING = "CHECKING"
    AUTHENTICATED = "AUTHENTICATED"
    UNAUTHENTICATED = "UNAUTHENTICATED"


class SessionStorage(Protocol):
    """Durable home of the one persisted session record."""

    def load(self) -> Optional[dict]: ...

    def save(self, record: dict) -> None: ...

    def clear(self) -> None: ...


class InMemorySessionStorage:
    def __init__(self, record: Optional[dict] = None):
        self.record = record

    def load(self) -> Optional[dict]:
        return self.record

    def save(self, record: dict) -> None:
        self.record = record

    def clear(self) -> None:
        self.record = None


class FileSessionStorage:
    """JSON file holding ``{"auth_session": {user, accessToken}}``."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else AppConfig.session_file()

    def load(self) -> Optional[dict]:
        try:
            content = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable session file {self.path}: {e}")
            return None
        record = content.get(SESSION_KEY) if isinstance(content, dict) else None
        return record if isinstance(record, dict) else None

    def save(self, record: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({SESSION_KEY: record}), encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class SessionGate:
    """
    Tracks whether the operator is signed in.

    CHECKING until ``resolve_session`` runs, then AUTHENTICATED with a
    session or UNAUTHENTICATED. Pass ``access_token`` to the API client as
    its token provider.
    """

    def __init__(self, identity: IdentityProvider, storage: SessionStorage):
        self.identity = identity
        self.storage = storage
        self.state = AuthState.CHECKING
        self.session: Optional[AuthSession] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    def access_token(self) -> Optional[str]:
        return self.session.access_token if self.session else None

    def _authenticate(self, session: AuthSession) -> AuthSession:
        self.storage.save(session.to_record())
        self.session = session
        self.state = AuthState.AUTHENTICATED
        return session

    def _unauthenticate(self, discard: bool) -> None:
        if discard:
            self.storage.clear()
        self.session = None
        self.state = AuthState.UNAUTHENTICATED

    async def resolve_session(self) -> Optional[AuthSession]:
        """
        Restore the persisted session if its token is still accepted.

        A rejected, expired or corrupt record is removed. When the identity
        provider cannot be reached the record is kept for the next attempt
        but the gate still reports UNAUTHENTICATED.
        """
        self.state = AuthState.CHECKING
        record = self.storage.load()
        if record is None:
            self._unauthenticate(discard=False)
            return None

        try:
            stored = AuthSession.model_validate(record)
        except ModelValidationError:
            logger.warning("Discarding malformed persisted session")
            self._unauthenticate(discard=True)
            return None

        try:
            user = await self.identity.get_user(stored.access_token)
        except HomeSpaceError as e:
            logger.error(f"Get session error: {e}")
            self._unauthenticate(discard=False)
            return None

        if user is None:
            logger.info("Persisted session expired", extra={"user_id": stored.user.id})
            self._unauthenticate(discard=True)
            return None

        # refresh-on-read
        return self._authenticate(AuthSession(user=user, access_token=stored.access_token))

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Raises ValidationError for empty fields, AuthenticationError when rejected."""
        if not email or not password:
            raise ValidationError("Please fill in all fields")

        try:
            session = await self.identity.sign_in(email, password)
        except AuthenticationError:
            if self.state == AuthState.CHECKING:
                self.state = AuthState.UNAUTHENTICATED
            raise

        logger.info("Signed in", extra={"email": mask_email(email)})
        return self._authenticate(session)

    async def sign_out(self) -> None:
        """Always ends signed out locally, whatever the remote call does."""
        token = self.access_token()
        try:
            if token:
                await self.identity.sign_out(token)
        except Exception as e:
            logger.error(f"Sign out error: {e}")
        finally:
            self._unauthenticate(discard=True)

    async def sign_up(self, email: str, password: str, name: str, confirm_password: str):
        """
        Create an account. Does not sign in; call ``sign_in`` afterwards.

        Field checks run before any request is sent.
        """
        if not name or not email or not password or not confirm_password:
            raise ValidationError("Please fill in all fields")
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        user = await self.identity.sign_up(email, password, name)
        logger.info("Account created", extra={"email": mask_email(email)})
        return user
