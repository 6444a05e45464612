"""Server-side entity repositories over the key-value store."""

import time
from typing import Any, Optional, Union
from src.models.entities import AGENT, CLIENT, ENTITY_KINDS, PROPERTY, TRANSACTION, EntityKind
from src.services.kv_store import KVStore
from src.services.sample_data import (
    SAMPLE_AGENTS,
    SAMPLE_CLIENTS,
    SAMPLE_PROPERTIES,
    SAMPLE_TRANSACTIONS,
)
from src.utils.errors import IdCollisionError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

EntityId = Union[int, str]


def generate_id(kind: EntityKind) -> EntityId:
    """Time-based id: epoch milliseconds, prefixed for transactions."""
    millis = int(time.time() * 1000)
    if kind.integer_ids:
        return millis
    return f"{kind.id_prefix}{millis}"


def coerce_id(kind: EntityKind, raw_id: Any) -> EntityId:
    """Path ids arrive as strings; integer kinds store numeric ids as ints."""
    if kind.integer_ids and isinstance(raw_id, str) and raw_id.isdigit():
        return int(raw_id)
    return raw_id


class EntityRepository:
    """CRUD for one entity kind, keyed ``<kind>:<id>``."""

    def __init__(self, kind: EntityKind, store: KVStore, reject_id_collisions: bool = False):
        self.kind = kind
        self.store = store
        self.reject_id_collisions = reject_id_collisions

    def key(self, entity_id: EntityId) -> str:
        return f"{self.kind.key_prefix}{entity_id}"

    def normalize(self, body: dict, entity_id: EntityId) -> dict:
        """Validate a record and recompute derived numeric fields."""
        record = self.kind.model.model_validate({**body, "id": entity_id})
        return record.to_wire()

    async def list_all(self) -> list[dict]:
        return await self.store.get_by_prefix(self.kind.key_prefix)

    async def get(self, raw_id: Any) -> Optional[dict]:
        return await self.store.get(self.key(coerce_id(self.kind, raw_id)))

    async def create(self, body: dict) -> dict:
        """Store a new record; a caller-supplied id is kept verbatim."""
        entity_id = body.get("id")
        if entity_id is None or entity_id == "":
            entity_id = generate_id(self.kind)
        record = self.normalize(body, entity_id)

        if self.reject_id_collisions and await self.store.get(self.key(entity_id)) is not None:
            raise IdCollisionError(f"{self.kind.label} {entity_id} already exists")

        await self.store.set(self.key(entity_id), record)
        logger.info("Entity created", entity_kind=self.kind.name, entity_id=str(entity_id))
        return record

    async def update(self, raw_id: Any, body: dict) -> dict:
        """Full replace; the path id wins over any id in the body."""
        entity_id = coerce_id(self.kind, raw_id)
        record = self.normalize(body, entity_id)
        await self.store.set(self.key(entity_id), record)
        logger.info("Entity updated", entity_kind=self.kind.name, entity_id=str(entity_id))
        return record

    async def delete(self, raw_id: Any) -> None:
        entity_id = coerce_id(self.kind, raw_id)
        await self.store.delete(self.key(entity_id))
        logger.info("Entity deleted", entity_kind=self.kind.name, entity_id=str(entity_id))


def build_repositories(store: KVStore, reject_id_collisions: bool = False) -> dict[str, EntityRepository]:
    """One repository per entity kind, keyed by plural route name."""
    return {
        plural: EntityRepository(kind, store, reject_id_collisions)
        for plural, kind in ENTITY_KINDS.items()
    }


async def seed_sample_data(store: KVStore) -> dict[str, int]:
    """
    Write the demo records.

    Each ``set`` is atomic on its own; there is no rollback if a later write
    fails, so a failure can leave the store partially seeded.
    """
    counts = {}
    for kind, records in (
        (PROPERTY, SAMPLE_PROPERTIES),
        (AGENT, SAMPLE_AGENTS),
        (CLIENT, SAMPLE_CLIENTS),
        (TRANSACTION, SAMPLE_TRANSACTIONS),
    ):
        repository = EntityRepository(kind, store)
        for record in records:
            await store.set(repository.key(record["id"]), repository.normalize(record, record["id"]))
        counts[kind.plural] = len(records)

    logger.info("Sample data initialized", **counts)
    return counts
