"""Working set of one list screen: the loaded entities plus the query state."""

from typing import Generic, Optional, TypeVar, Union
from src.models.entities import EntityModel
from src.models.query import QueryResult, QueryState
from src.services.api_client import EntityStore
from src.services.entity_service import coerce_id
from src.services.query_engine import QuerySpec, run_query, spec_for
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

E = TypeVar("E", bound=EntityModel)


class EntityListView(Generic[E]):
    """
    Holds the list fetched from an ``EntityStore`` and recomputes the
    visible rows from scratch on every change.

    Store errors propagate to the caller, which decides how to notify the
    user. Local state only changes after the server call succeeded.
    """

    def __init__(self, store: EntityStore[E], spec: Optional[QuerySpec] = None, state: Optional[QueryState] = None):
        self.store = store
        self.spec = spec or spec_for(store.kind)
        self.state = state or self.spec.default_state()
        self.entities: list[E] = []

    @property
    def result(self) -> QueryResult:
        return run_query(self.entities, self.state, self.spec)

    @property
    def rows(self) -> list[E]:
        return self.result.items

    async def refresh(self) -> list[E]:
        self.entities = await self.store.list()
        logger.debug("List refreshed", entity_kind=self.store.kind.name, count=len(self.entities))
        return self.entities

    def search(self, text: str) -> QueryResult:
        self.state = self.state.with_search(text)
        return self.result

    def filter(self, name: str, value: str) -> QueryResult:
        self.state = self.state.with_filter(name, value)
        return self.result

    def sort(self, field: str) -> QueryResult:
        self.state = self.state.toggle_sort(field)
        return self.result

    def _same_id(self, left, right) -> bool:
        """Path ids may arrive as strings for integer-id kinds."""
        kind = self.store.kind
        return coerce_id(kind, left) == coerce_id(kind, right)

    async def save(self, entity: E) -> E:
        """Update an entity already in the list, create anything else."""
        entity_id = getattr(entity, "id", None)
        if entity_id is None or not any(self._same_id(e.id, entity_id) for e in self.entities):
            stored = await self.store.create(entity)
            self.entities = [*self.entities, stored]
            return stored

        stored = await self.store.update(entity_id, entity)
        self.entities = [stored if self._same_id(e.id, stored.id) else e for e in self.entities]
        return stored

    async def remove(self, entity_id: Union[int, str]) -> None:
        await self.store.delete(entity_id)
        self.entities = [e for e in self.entities if not self._same_id(e.id, entity_id)]
