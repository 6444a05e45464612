"""Client-side filter, sort and paginate pipeline shared by the list screens.

Everything here is a pure function of (entities, query state): nothing is
cached or mutated, so the pipeline can be re-run on every change.
"""

import math
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from src.models.entities import AGENT, CLIENT, PROPERTY, TRANSACTION, EntityKind
from src.models.query import QueryResult, QueryState, SortOrder
from src.utils.errors import ValidationError


class FieldKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class SortField:
    attribute: str
    kind: FieldKind = FieldKind.TEXT


@dataclass(frozen=True)
class QuerySpec:
    """Which fields a list screen searches, filters and sorts on."""
    searchable: tuple[str, ...]
    filters: Mapping[str, str]
    sort_fields: Mapping[str, SortField]
    default_sort: str
    default_order: SortOrder = SortOrder.ASC

    def default_state(self) -> QueryState:
        return QueryState(
            sort_field=self.default_sort,
            sort_order=self.default_order,
            field_filters={name: "all" for name in self.filters},
        )


QUERY_SPECS: dict[str, QuerySpec] = {
    PROPERTY.name: QuerySpec(
        searchable=("name", "location"),
        filters={"status": "status", "agent": "agent"},
        sort_fields={
            "name": SortField("name"),
            "location": SortField("location"),
            "status": SortField("status"),
            "price": SortField("price_num", FieldKind.NUMBER),
        },
        default_sort="name",
    ),
    AGENT.name: QuerySpec(
        searchable=("name", "email", "location"),
        filters={"status": "status"},
        sort_fields={
            "name": SortField("name"),
            "properties": SortField("properties", FieldKind.NUMBER),
            "rating": SortField("rating", FieldKind.NUMBER),
        },
        default_sort="name",
    ),
    CLIENT.name: QuerySpec(
        searchable=("name", "email"),
        filters={"type": "type", "status": "status"},
        sort_fields={
            "name": SortField("name"),
            "type": SortField("type"),
            "properties": SortField("properties", FieldKind.NUMBER),
        },
        default_sort="name",
    ),
    TRANSACTION.name: QuerySpec(
        searchable=("id", "property", "client", "agent"),
        filters={"status": "status"},
        sort_fields={
            "id": SortField("id"),
            "date": SortField("date", FieldKind.DATE),
            "property": SortField("property"),
            "amount": SortField("amount_num", FieldKind.NUMBER),
            "status": SortField("status"),
        },
        default_sort="date",
        default_order=SortOrder.DESC,
    ),
}


def spec_for(kind: EntityKind) -> QuerySpec:
    return QUERY_SPECS[kind.name]


def wire_name(attribute: str) -> str:
    """``price_num`` -> ``priceNum``."""
    head, *rest = attribute.split("_")
    return head + "".join(part.capitalize() for part in rest)


def field_value(entity: Any, attribute: str) -> Any:
    """
    Read an attribute from a model or a plain mapping, unwrapping enums.

    Mappings are usually wire or store records, so a missing snake_case key
    falls back to its camelCase name.
    """
    if isinstance(entity, Mapping):
        value = entity.get(attribute) if attribute in entity else entity.get(wire_name(attribute))
    else:
        value = getattr(entity, attribute, None)
    if isinstance(value, Enum):
        return value.value
    return value


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_timestamp(value: Any) -> float:
    """Parse an ISO date/datetime; unparseable values sort before everything."""
    try:
        parsed = datetime.fromisoformat(_as_text(value))
    except ValueError:
        return float("-inf")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def matches(entity: Any, state: QueryState, spec: QuerySpec) -> bool:
    """True if the entity passes the search text and every active field filter."""
    needle = state.search_text.lower()
    if needle:
        haystacks = (_as_text(field_value(entity, attr)).lower() for attr in spec.searchable)
        if not any(needle in haystack for haystack in haystacks):
            return False

    for name, selected in state.active_filters().items():
        attribute = spec.filters.get(name)
        if attribute is None:
            raise ValidationError(f"Unknown filter: {name}")
        if _as_text(field_value(entity, attribute)).lower() != selected.lower():
            return False
    return True


def filter_entities(entities: Iterable[Any], state: QueryState, spec: QuerySpec) -> list[Any]:
    return [entity for entity in entities if matches(entity, state, spec)]


def collation_key(text: str) -> tuple[str, str, str]:
    """
    Locale-style text ordering: base letters first, ignoring accents and
    case, then accents, then lowercase before uppercase.
    """
    folded = text.casefold()
    base = "".join(
        char for char in unicodedata.normalize("NFKD", folded)
        if not unicodedata.combining(char)
    )
    return (base, folded, text.swapcase())


def sort_key(sort_field: SortField):
    """Key function for one sort field."""
    attribute = sort_field.attribute
    if sort_field.kind == FieldKind.NUMBER:
        return lambda entity: _as_number(field_value(entity, attribute))
    if sort_field.kind == FieldKind.DATE:
        return lambda entity: _as_timestamp(field_value(entity, attribute))
    return lambda entity: collation_key(_as_text(field_value(entity, attribute)))


def sort_entities(entities: Sequence[Any], state: QueryState, spec: QuerySpec) -> list[Any]:
    """Stable sort; descending keeps the input order of ties."""
    sort_field = spec.sort_fields.get(state.sort_field)
    if sort_field is None:
        raise ValidationError(f"Unknown sort field: {state.sort_field}")
    return sorted(entities, key=sort_key(sort_field), reverse=state.sort_order == SortOrder.DESC)


def paginate(entities: Sequence[Any], page: int, page_size: int) -> list[Any]:
    start = (page - 1) * page_size
    return list(entities[start:start + page_size])


def run_query(entities: Sequence[Any], state: QueryState, spec: QuerySpec) -> QueryResult:
    """Filter, then sort, then (when ``page_size`` is set) paginate."""
    filtered = filter_entities(entities, state, spec)
    ordered = sort_entities(filtered, state, spec)

    if state.page_size is None:
        return QueryResult(items=ordered, total=len(ordered), source_total=len(entities))

    page = state.page or 1
    return QueryResult(
        items=paginate(ordered, page, state.page_size),
        total=len(ordered),
        source_total=len(entities),
        page=page,
        page_size=state.page_size,
        page_count=math.ceil(len(ordered) / state.page_size),
    )
