"""Aggregates shown on the overview and transactions screens."""

from collections import Counter
from typing import Any, Iterable, Sequence
from pydantic import BaseModel, Field
from src.models.entities import (
    AgentStatus,
    ClientStatus,
    PropertyStatus,
    TransactionStatus,
)
from src.services.query_engine import collation_key, field_value


def format_millions(amount: float) -> str:
    """``2500000`` -> ``"$2.50M"``."""
    return f"${amount / 1_000_000:.2f}M"


class TransactionSummary(BaseModel):
    total: int
    total_volume: float
    average_value: float
    total_volume_display: str
    average_value_display: str


class DashboardOverview(BaseModel):
    total_properties: int
    properties_by_status: dict[str, int] = Field(default_factory=dict)
    total_agents: int
    active_agents: int
    total_clients: int
    active_clients: int
    total_transactions: int
    completed_sales_volume: float
    completed_sales_volume_display: str


def transaction_summary(transactions: Sequence[Any]) -> TransactionSummary:
    """Count, volume and average of the (usually already filtered) transactions."""
    total = len(transactions)
    volume = sum(float(field_value(t, "amount_num") or 0) for t in transactions)
    average = volume / total if total > 0 else 0.0
    return TransactionSummary(
        total=total,
        total_volume=volume,
        average_value=average,
        total_volume_display=format_millions(volume),
        average_value_display=format_millions(average),
    )


def _count_status(entities: Iterable[Any], status: str) -> int:
    return sum(1 for entity in entities if field_value(entity, "status") == status)


def dashboard_overview(
    properties: Sequence[Any],
    agents: Sequence[Any],
    clients: Sequence[Any],
    transactions: Sequence[Any],
) -> DashboardOverview:
    by_status = Counter(field_value(p, "status") for p in properties)
    completed_volume = sum(
        float(field_value(t, "amount_num") or 0)
        for t in transactions
        if field_value(t, "status") == TransactionStatus.COMPLETED.value
    )
    return DashboardOverview(
        total_properties=len(properties),
        properties_by_status={status.value: by_status.get(status.value, 0) for status in PropertyStatus},
        total_agents=len(agents),
        active_agents=_count_status(agents, AgentStatus.ACTIVE.value),
        total_clients=len(clients),
        active_clients=_count_status(clients, ClientStatus.ACTIVE.value),
        total_transactions=len(transactions),
        completed_sales_volume=completed_volume,
        completed_sales_volume_display=format_millions(completed_volume),
    )


def distinct_values(entities: Iterable[Any], attribute: str) -> list[str]:
    """Sorted unique non-empty values, e.g. the agent filter options."""
    values = {str(value) for value in (field_value(e, attribute) for e in entities) if value}
    return sorted(values, key=collation_key)
