"""Query state driving the list screens."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

# Field filter value meaning "no constraint"
ALL = "all"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class QueryState(BaseModel):
    """User-editable search, filter and sort settings for one list screen."""
    search_text: str = Field(default="", description="Case-insensitive substring search")
    field_filters: dict[str, str] = Field(default_factory=dict, description="Filter name -> selected value")
    sort_field: str = Field(..., description="Sort field name for the entity kind")
    sort_order: SortOrder = Field(default=SortOrder.ASC)
    page: Optional[int] = Field(None, ge=1, description="1-based page, requires page_size")
    page_size: Optional[int] = Field(None, ge=1)

    def active_filters(self) -> dict[str, str]:
        """Filters that actually constrain the result."""
        return {
            name: value
            for name, value in self.field_filters.items()
            if value and value.lower() != ALL
        }

    def toggle_sort(self, field: str) -> "QueryState":
        """Clicking the current sort column flips the order, a new column sorts ascending."""
        if field == self.sort_field:
            order = SortOrder.DESC if self.sort_order == SortOrder.ASC else SortOrder.ASC
            return self.model_copy(update={"sort_order": order})
        return self.model_copy(update={"sort_field": field, "sort_order": SortOrder.ASC})

    def with_search(self, text: str) -> "QueryState":
        return self.model_copy(update={"search_text": text, "page": 1 if self.page else None})

    def with_filter(self, name: str, value: str) -> "QueryState":
        filters = {**self.field_filters, name: value}
        return self.model_copy(update={"field_filters": filters, "page": 1 if self.page else None})


class QueryResult(BaseModel):
    """Filtered, sorted and optionally paginated view of a list."""
    items: list[Any] = Field(default_factory=list)
    total: int = Field(..., description="Number of entities passing the filters")
    source_total: int = Field(..., description="Number of entities before filtering")
    page: Optional[int] = None
    page_size: Optional[int] = None
    page_count: Optional[int] = None
