"""Key-value store backing the entity routes.

Records live in a single Supabase table with ``key text primary key`` and
``value jsonb`` columns. Writes are upserts, so the last write wins.
"""

import copy
import logging
from typing import Any, Optional, Protocol
from src.services.supabase_client import SupabaseClient
from src.utils.config import AppConfig
from src.utils.errors import SupabaseError

logger = logging.getLogger(__name__)


class KVStore(Protocol):
    """Operations the entity routes need from a key-value store."""

    async def get(self, key: str) -> Optional[Any]: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def get_by_prefix(self, prefix: str) -> list[Any]: ...


class SupabaseKVStore:
    """KV store on a Supabase table."""

    def __init__(self, table_name: Optional[str] = None):
        self.table_name = table_name or AppConfig.kv_table_name()

    async def get(self, key: str) -> Optional[Any]:
        """Get a value by key, None if absent."""
        async with SupabaseClient() as client:
            try:
                result = client.table(self.table_name).select("value").eq("key", key).limit(1).execute()
                return result.data[0]["value"] if result.data and len(result.data) > 0 else None
            except Exception as e:
                raise SupabaseError(f"Failed to get {key}: {e}")

    async def set(self, key: str, value: Any) -> None:
        """Insert or overwrite a value."""
        async with SupabaseClient() as client:
            try:
                client.table(self.table_name).upsert({"key": key, "value": value}).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to set {key}: {e}")

    async def delete(self, key: str) -> None:
        """Delete a key; deleting a missing key is not an error."""
        async with SupabaseClient() as client:
            try:
                client.table(self.table_name).delete().eq("key", key).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to delete {key}: {e}")

    async def get_by_prefix(self, prefix: str) -> list[Any]:
        """All values whose key starts with ``prefix``."""
        async with SupabaseClient() as client:
            try:
                result = client.table(self.table_name).select("key, value").like("key", f"{prefix}%").execute()
                return [row["value"] for row in result.data] if result.data else []
            except Exception as e:
                raise SupabaseError(f"Failed to get keys with prefix {prefix}: {e}")


class InMemoryKVStore:
    """Process-local KV store for tests and offline development.

    Values are deep-copied on the way in and out, like a JSON column.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self.data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Optional[Any]:
        value = self.data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)

    async def get_by_prefix(self, prefix: str) -> list[Any]:
        return [copy.deepcopy(value) for key, value in self.data.items() if key.startswith(prefix)]


_store: Optional[KVStore] = None


def get_kv_store() -> KVStore:
    """Get or create the default (Supabase) KV store."""
    global _store
    if _store is None:
        _store = SupabaseKVStore()
        logger.info("KV store initialized", extra={"table": _store.table_name})
    return _store
