"""Centralized application configuration with environment variable support."""

import os
from pathlib import Path


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() == "true"


class AppConfig:
    """Application settings read from the environment.

    Values are resolved on each access so tests can adjust the environment
    with ``monkeypatch`` without reloading modules.
    """

    @staticmethod
    def supabase_url() -> str:
        return os.environ.get("SUPABASE_URL", "").strip()

    @staticmethod
    def service_role_key() -> str:
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "").strip()

    @staticmethod
    def anon_key() -> str:
        return os.environ.get("SUPABASE_ANON_KEY", "").strip()

    @staticmethod
    def kv_table_name() -> str:
        return os.environ.get("KV_TABLE_NAME", "kv_store")

    @staticmethod
    def service_root() -> str:
        return os.environ.get("SERVICE_ROOT", "make-server").strip("/")

    @staticmethod
    def api_base_url() -> str:
        base = os.environ.get("API_BASE_URL", "").rstrip("/")
        if base:
            return base
        return f"{AppConfig.supabase_url().rstrip('/')}/functions/v1/{AppConfig.service_root()}"

    @staticmethod
    def request_timeout_seconds() -> float:
        return float(os.environ.get("REQUEST_TIMEOUT_SECONDS", "10"))

    @staticmethod
    def session_file() -> Path:
        default = Path.home() / ".homespace" / "auth_session.json"
        return Path(os.environ.get("SESSION_FILE", str(default))).expanduser()

    @staticmethod
    def allow_anonymous_access() -> bool:
        return _env_flag("ALLOW_ANONYMOUS_ACCESS", "true")

    @staticmethod
    def reject_id_collisions() -> bool:
        return _env_flag("REJECT_ID_COLLISIONS", "false")
