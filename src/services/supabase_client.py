"""Supabase client wrapper with async context manager support."""

from typing import Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.utils.config import AppConfig
from src.utils.errors import SupabaseError
import logging

logger = logging.getLogger(__name__)

# Global client instances (singleton pattern)
_service_client: Optional[Client] = None
_anon_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create the service-role Supabase client (KV table, admin auth)."""
    global _service_client

    if _service_client is None:
        url = AppConfig.supabase_url()
        key = AppConfig.service_role_key()

        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _service_client = create_client(url, key, options)
        logger.info("Supabase service client initialized", extra={"url": url})

    return _service_client


def get_supabase_anon_client() -> Client:
    """Get or create the anon-key Supabase client used for password sign-in and token checks."""
    global _anon_client

    if _anon_client is None:
        url = AppConfig.supabase_url()
        key = AppConfig.anon_key()

        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

        # Sessions are persisted by the auth gate, not by supabase-py
        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _anon_client = create_client(url, key, options)
        logger.info("Supabase anon client initialized", extra={"url": url})

    return _anon_client


class SupabaseClient:
    """Async context manager for the service-role Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False
