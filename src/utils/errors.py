"""Error handling utilities."""

from typing import Optional


class HomeSpaceError(Exception):
    """Base exception for the HomeSpace back-office."""
    pass


class ValidationError(HomeSpaceError):
    """Client-side validation failed before any request was sent."""
    pass


class RemoteOperationError(HomeSpaceError):
    """Server answered with an unsuccessful envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(RemoteOperationError):
    """Single-entity lookup returned the 404 envelope."""
    pass


class TransportError(HomeSpaceError):
    """Network or response decoding failure."""
    pass


class AuthenticationError(HomeSpaceError):
    """Identity provider rejected the credentials."""
    pass


class UnsupportedOperationError(HomeSpaceError):
    """Operation is not offered for this entity kind."""
    pass


class SupabaseError(HomeSpaceError):
    """Supabase operation error."""
    pass


class IdCollisionError(HomeSpaceError):
    """Create was given an id that is already stored."""
    pass
