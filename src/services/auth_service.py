"""Server-side identity operations backed by Supabase Auth."""

import logging
from typing import Optional
from src.services.supabase_client import SupabaseClient, get_supabase_anon_client
from src.utils.config import AppConfig
from src.utils.errors import SupabaseError
from src.utils.logging import mask_email, mask_sensitive_data

logger = logging.getLogger(__name__)


async def sign_up_user(email: str, password: str, name: str = "") -> dict:
    """
    Create a confirmed user with the service-role admin API.

    Email is confirmed automatically since no mail server is configured.
    Raises SupabaseError with the provider's message on failure.
    """
    async with SupabaseClient() as client:
        try:
            response = client.auth.admin.create_user({
                "email": email,
                "password": password,
                "user_metadata": {"name": name or ""},
                "email_confirm": True,
            })
        except Exception as e:
            logger.warning(f"Signup rejected: {e}", extra={"email": mask_email(email)})
            raise SupabaseError(str(e))

    if response is None or response.user is None:
        raise SupabaseError("Signup returned no user")

    logger.info("User signed up", extra={"email": mask_email(email), "user_id": response.user.id})
    return response.user.model_dump(mode="json")


async def verify_access_token(access_token: Optional[str]) -> Optional[dict]:
    """
    Resolve a bearer token to a user.

    Returns None for a missing token, the anonymous key, or any token
    Supabase Auth does not accept.
    """
    if not access_token or access_token == AppConfig.anon_key():
        return None

    try:
        response = get_supabase_anon_client().auth.get_user(access_token)
    except Exception as e:
        logger.info(f"Auth verification failed: {mask_sensitive_data(str(e))}")
        return None

    if response is None or response.user is None:
        return None
    return response.user.model_dump(mode="json")
